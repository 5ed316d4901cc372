from __future__ import annotations

import logging
import os
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any, Iterable, cast

import yaml
from openapi_spec_validator import validate
from openapi_spec_validator.validation.exceptions import OpenAPIValidationError

from .errors import ParseError
from .media import MediaType, parse_media_type
from .model import Document, DocumentMeta, Operation, OperationKey
from .resolve import resolve_local_ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpecFingerprint:
    path: str
    size: int
    mtime: float


class _StrictLoader(yaml.SafeLoader):
    """SafeLoader that refuses mappings with repeated keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def list_http_methods() -> Iterable[str]:
    return (
        "get",
        "post",
        "put",
        "patch",
        "delete",
        "options",
        "head",
        "trace",
    )


def fingerprint_spec_file(path: str) -> SpecFingerprint | None:
    try:
        stat = os.stat(path)
    except OSError:
        return None
    return SpecFingerprint(path=path, size=stat.st_size, mtime=stat.st_mtime)


def load_file(path: str) -> Document:
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise ParseError(f"Cannot read spec at {path}: {exc}") from exc
    return load(raw, source=path)


def load(raw: bytes | str, source: str = "<memory>") -> Document:
    """Build a Document from raw OpenAPI YAML or JSON.

    Only the structural subset needed for request validation is read:
    paths, their operations, and each operation's requestBody ``required``
    flag and ``content`` keys. Everything else is ignored. Anything in that
    subset which cannot be interpreted raises ``ParseError``; a partial
    Document is never returned.
    """
    spec = parse_raw_spec(raw)
    operations = extract_operations(spec)
    is_valid, validation_error = check_openapi(spec)
    if not is_valid:
        logger.warning("OpenAPI document %s is not strictly valid: %s", source, validation_error)

    info = spec.get("info")
    info = info if isinstance(info, dict) else {}
    openapi_version = spec.get("openapi")
    meta = DocumentMeta(
        source=source,
        openapi_version=str(openapi_version) if openapi_version is not None else None,
        title=_optional_str(info.get("title")),
        version=_optional_str(info.get("version")),
        is_valid=is_valid,
        validation_error=validation_error,
    )
    logger.debug("Loaded %d operations from %s", len(operations), source)
    return Document(meta=meta, operations=tuple(operations))


def parse_raw_spec(raw: bytes | str) -> dict[str, Any]:
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Spec is not valid UTF-8: {exc}") from exc
    else:
        text = raw

    try:
        spec = yaml.load(text, Loader=_StrictLoader)  # nosec B506 - SafeLoader subclass
    except yaml.YAMLError as exc:
        raise ParseError(f"Spec is not well-formed YAML/JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Spec is nested too deeply to parse") from exc

    if not isinstance(spec, dict):
        raise ParseError("Spec top level must be a mapping")
    return spec


def extract_operations(spec: dict[str, Any]) -> list[Operation]:
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        raise ParseError("Spec has no 'paths' mapping")

    operations: list[Operation] = []
    for path, path_item in paths.items():
        if isinstance(path, str) and path.startswith("x-"):
            continue
        if not isinstance(path, str) or not path.startswith("/"):
            raise ParseError(f"Path {path!r} must be a string starting with '/'")
        path_item = resolve_local_ref(path_item, spec)
        if not isinstance(path_item, dict):
            raise ParseError(f"Path item for {path} must be a mapping")

        seen: set[str] = set()
        for key, operation in path_item.items():
            if not isinstance(key, str):
                continue
            method = key.lower()
            if method not in list_http_methods():
                continue
            if method in seen:
                raise ParseError(f"Duplicate operation {method.upper()} {path}")
            seen.add(method)
            if not isinstance(operation, dict):
                raise ParseError(f"Operation {method.upper()} {path} must be a mapping")

            body_required, media_types = _extract_request_body(operation, spec, path, method)
            required_headers, required_query = _extract_required_parameters(
                path_item.get("parameters"), operation.get("parameters"), spec, path, method
            )
            operations.append(
                Operation(
                    key=OperationKey(path=path, method=method.upper()),
                    body_required=body_required,
                    accepted_media_types=media_types,
                    required_headers=required_headers,
                    required_query=required_query,
                    operation_id=_optional_str(operation.get("operationId")),
                    summary=_optional_str(operation.get("summary")),
                )
            )
    return operations


def _extract_request_body(
    operation: dict[str, Any], spec: dict[str, Any], path: str, method: str
) -> tuple[bool, tuple[MediaType, ...]]:
    where = f"{method.upper()} {path}"
    request_body = operation.get("requestBody")
    if request_body is None:
        return False, ()
    request_body = resolve_local_ref(request_body, spec)
    if not isinstance(request_body, dict):
        raise ParseError(f"requestBody of {where} must be a mapping")

    required = request_body.get("required", False)
    if not isinstance(required, bool):
        raise ParseError(f"requestBody.required of {where} must be a boolean, got {required!r}")

    content = request_body.get("content")
    if content is None:
        return required, ()
    if not isinstance(content, dict):
        raise ParseError(f"requestBody.content of {where} must be a mapping")

    media_types: list[MediaType] = []
    for key in content:
        try:
            media_type = parse_media_type(key)
        except ValueError as exc:
            raise ParseError(f"requestBody.content of {where}: {exc}") from exc
        if media_type not in media_types:
            media_types.append(media_type)
    return required, tuple(media_types)


def _extract_required_parameters(
    path_params: Any, op_params: Any, spec: dict[str, Any], path: str, method: str
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Names of the required header and query parameters of one operation.

    Path-level parameters apply first; an operation-level parameter with the
    same name and location overrides them.
    """
    where = f"{method.upper()} {path}"
    merged: dict[tuple[str, str], bool] = {}

    def ingest(params: Any) -> None:
        if params is None:
            return
        if not isinstance(params, list):
            raise ParseError(f"parameters of {where} must be a list")
        for param in params:
            param = resolve_local_ref(param, spec)
            if not isinstance(param, dict):
                raise ParseError(f"Parameter of {where} must be a mapping")
            name = param.get("name")
            location = param.get("in")
            if not isinstance(name, str) or not isinstance(location, str):
                raise ParseError(f"Parameter of {where} needs string 'name' and 'in'")
            required = param.get("required", False)
            if not isinstance(required, bool):
                raise ParseError(f"Parameter {name!r} of {where}: required must be a boolean")
            key = (location.lower(), name.lower() if location.lower() == "header" else name)
            merged[key] = required

    ingest(path_params)
    ingest(op_params)

    required_names = [key for key, required in merged.items() if required]
    headers = tuple(name for location, name in required_names if location == "header")
    query = tuple(name for location, name in required_names if location == "query")
    return headers, query


def check_openapi(spec: dict[str, Any]) -> tuple[bool, str | None]:
    try:
        validate(cast(Mapping[Hashable, Any], spec))
    except OpenAPIValidationError as exc:
        return False, _validation_error_message(exc)
    except Exception as exc:
        return False, _validation_error_message(exc)
    return True, None


def _validation_error_message(error: Exception) -> str:
    message = str(error).strip()
    return message if message else error.__class__.__name__


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
