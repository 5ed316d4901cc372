from .body import check_body, evaluate
from .engine import ValidatorEngine, validate, validate_httpx_request, validate_request
from .errors import (
    InvalidUrlError,
    MalformedBodyError,
    MalformedHeadersError,
    MethodNotAllowedError,
    MissingBodyError,
    MissingContentTypeError,
    MissingParameterError,
    NotFoundError,
    ParseError,
    RequestError,
    UnsupportedMediaTypeError,
)
from .ingest import load, load_file
from .media import MediaType, parse_media_type
from .model import Accepted, Decision, Document, DocumentMeta, Operation, OperationKey, Rejected
from .parameters import check_parameters
from .routes import allowed_methods, resolve

__all__ = [
    "Accepted",
    "Decision",
    "Document",
    "DocumentMeta",
    "InvalidUrlError",
    "MalformedBodyError",
    "MalformedHeadersError",
    "MediaType",
    "MethodNotAllowedError",
    "MissingBodyError",
    "MissingContentTypeError",
    "MissingParameterError",
    "NotFoundError",
    "Operation",
    "OperationKey",
    "ParseError",
    "Rejected",
    "RequestError",
    "UnsupportedMediaTypeError",
    "ValidatorEngine",
    "allowed_methods",
    "check_body",
    "check_parameters",
    "evaluate",
    "load",
    "load_file",
    "parse_media_type",
    "resolve",
    "validate",
    "validate_httpx_request",
    "validate_request",
]
