from __future__ import annotations


class ParseError(ValueError):
    """The OpenAPI document could not be turned into a Document."""


class RequestError(Exception):
    """A request was rejected against the loaded Document.

    Attributes:
        code: Stable error kind, the class name of the concrete error.
        message: Human-readable explanation.
        http_status: Status code a transport layer should answer with.
    """

    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__


class NotFoundError(RequestError):
    http_status = 404

    def __init__(self, path: str) -> None:
        super().__init__(f"No operation is declared for path {path!r}")
        self.path = path


class MethodNotAllowedError(RequestError):
    http_status = 405

    def __init__(self, method: str, path: str, allowed: list[str]) -> None:
        super().__init__(
            f"Method {method} is not declared for path {path!r}; allowed: {', '.join(allowed)}"
        )
        self.method = method
        self.path = path
        self.allowed = allowed


class MissingBodyError(RequestError):
    def __init__(self) -> None:
        super().__init__("Request body is required")


class MissingContentTypeError(RequestError):
    def __init__(self) -> None:
        super().__init__("Request body has no Content-Type")


class UnsupportedMediaTypeError(RequestError):
    http_status = 415

    def __init__(self, content_type: str, accepted: list[str]) -> None:
        super().__init__(
            f"Content-Type {content_type!r} is not one of: {', '.join(accepted)}"
        )
        self.content_type = content_type
        self.accepted = accepted


class MissingParameterError(RequestError):
    def __init__(self, location: str, name: str) -> None:
        super().__init__(f"Required {location} parameter {name!r} is missing")
        self.location = location
        self.name = name


class MalformedBodyError(RequestError):
    pass


class InvalidUrlError(RequestError):
    pass


class MalformedHeadersError(RequestError):
    pass
