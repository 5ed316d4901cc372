from __future__ import annotations

from .errors import MethodNotAllowedError, NotFoundError
from .model import Document, Operation, OperationKey


def resolve(document: Document, method: str, path: str) -> Operation:
    """Find the operation declared for ``method`` on ``path``.

    Paths are matched literally against the declared templates. Raises
    ``NotFoundError`` when the path is unknown and ``MethodNotAllowedError``
    when the path is known under other methods only.
    """
    verb = method.strip().upper()
    operation = document.get(OperationKey(path=path, method=verb))
    if operation is not None:
        return operation

    allowed = allowed_methods(document, path)
    if allowed:
        raise MethodNotAllowedError(verb, path, allowed)
    raise NotFoundError(path)


def allowed_methods(document: Document, path: str) -> list[str]:
    return [op.method for op in document.operations_for_path(path)]
