from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from .media import MediaType


@dataclass(frozen=True)
class OperationKey:
    path: str
    method: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


@dataclass(frozen=True)
class Operation:
    key: OperationKey
    body_required: bool = False
    accepted_media_types: tuple[MediaType, ...] = ()
    required_headers: tuple[str, ...] = ()
    required_query: tuple[str, ...] = ()
    operation_id: str | None = None
    summary: str | None = None

    @property
    def path(self) -> str:
        return self.key.path

    @property
    def method(self) -> str:
        return self.key.method


@dataclass(frozen=True)
class DocumentMeta:
    source: str
    openapi_version: str | None
    title: str | None
    version: str | None
    is_valid: bool
    validation_error: str | None


@dataclass(frozen=True, eq=False)
class Document:
    meta: DocumentMeta
    operations: tuple[Operation, ...]
    _by_key: Mapping[OperationKey, Operation] = field(init=False, repr=False)
    _by_path: Mapping[str, tuple[Operation, ...]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        by_key: dict[OperationKey, Operation] = {}
        by_path: dict[str, list[Operation]] = {}
        for op in self.operations:
            if op.key in by_key:
                raise ValueError(f"Duplicate operation {op.key}")
            by_key[op.key] = op
            by_path.setdefault(op.path, []).append(op)
        object.__setattr__(self, "_by_key", MappingProxyType(by_key))
        object.__setattr__(
            self, "_by_path", MappingProxyType({path: tuple(ops) for path, ops in by_path.items()})
        )

    def get(self, key: OperationKey) -> Operation | None:
        return self._by_key.get(key)

    def operations_for_path(self, path: str) -> tuple[Operation, ...]:
        return self._by_path.get(path, ())

    def __len__(self) -> int:
        return len(self.operations)


@dataclass(frozen=True)
class Accepted:
    operation: Operation
    media_type: MediaType | None = None

    accepted = True


@dataclass(frozen=True)
class Rejected:
    error_kind: str
    message: str
    http_status: int

    accepted = False


Decision = Union[Accepted, Rejected]
