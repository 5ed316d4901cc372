from __future__ import annotations

from typing import Any

from .errors import ParseError


def resolve_local_ref(value: Any, spec: dict[str, Any], seen: set[str] | None = None) -> Any:
    """Follow a chain of local ``$ref`` objects until a concrete node is reached."""
    if not isinstance(value, dict):
        return value
    ref = value.get("$ref")
    if not isinstance(ref, str):
        return value

    if seen is None:
        seen = set()
    if ref in seen:
        raise ParseError(f"Circular $ref: {ref}")
    target = _resolve_ref_pointer(spec, ref)
    if target is None:
        raise ParseError(f"Unresolvable $ref: {ref}")
    seen.add(ref)
    return resolve_local_ref(target, spec, seen)


def _resolve_ref_pointer(spec: dict[str, Any], ref: str) -> Any | None:
    if not ref.startswith("#/"):
        return None
    pointer = ref[2:]
    if not pointer:
        return spec

    current: Any = spec
    for part in pointer.split("/"):
        if not isinstance(current, dict):
            return None
        part = part.replace("~1", "/").replace("~0", "~")
        current = current.get(part)
        if current is None:
            return None
    return current
