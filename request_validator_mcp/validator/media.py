from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class MediaType:
    essence: str
    parameters: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if not self.parameters:
            return self.essence
        params = "; ".join(f"{name}={value}" for name, value in self.parameters)
        return f"{self.essence}; {params}"

    def parameter(self, name: str) -> str | None:
        for key, value in self.parameters:
            if key == name:
                return value
        return None

    def parameter_values(self, name: str) -> list[str]:
        return [value for key, value in self.parameters if key == name]

    def accepts(self, candidate: MediaType) -> bool:
        """Whether a request's content type satisfies this declared entry.

        type/subtype compare case-insensitively (both are stored lowercased);
        every parameter declared here must appear verbatim, and exactly once,
        on the candidate. Extra parameters on the candidate are allowed.
        Declared ranges such as ``application/*`` and ``*/*`` match any
        subtype or type.
        """
        if not self._covers(candidate.essence):
            return False
        return all(candidate.parameter_values(name) == [value] for name, value in self.parameters)

    def _covers(self, essence: str) -> bool:
        if self.essence == essence:
            return True
        main, _, sub = self.essence.partition("/")
        if main == "*":
            return sub == "*"
        return sub == "*" and essence.startswith(f"{main}/")

    @property
    def is_json(self) -> bool:
        return self.essence == "application/json" or self.essence.endswith("+json")


def parse_media_type(value: str) -> MediaType:
    if not isinstance(value, str):
        raise ValueError(f"Media type must be a string, got {type(value).__name__}")
    essence_raw, _, rest = value.partition(";")
    essence = essence_raw.strip().lower()
    main, sep, sub = essence.partition("/")
    if not sep or not main or not sub or "/" in sub or any(ch.isspace() for ch in essence):
        raise ValueError(f"Invalid media type: {value!r}")

    parameters: list[tuple[str, str]] = []
    for chunk in rest.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, eq, param_value = chunk.partition("=")
        name = name.strip()
        if not eq or not name:
            raise ValueError(f"Invalid media type parameter {chunk!r} in {value!r}")
        parameters.append((name, param_value.strip()))
    return MediaType(essence=essence, parameters=tuple(parameters))


def find_match(accepted: Iterable[MediaType], candidate: MediaType) -> MediaType | None:
    for declared in accepted:
        if declared.accepts(candidate):
            return declared
    return None
