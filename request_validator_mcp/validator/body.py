from __future__ import annotations

import codecs
import json

from .errors import (
    MalformedBodyError,
    MissingBodyError,
    MissingContentTypeError,
    RequestError,
    UnsupportedMediaTypeError,
)
from .media import MediaType, find_match, parse_media_type
from .model import Accepted, Decision, Operation, Rejected


def evaluate(operation: Operation, body_present: bool, content_type: str | None) -> Decision:
    try:
        media_type = match_body(operation, body_present, content_type)
    except RequestError as exc:
        return rejection(exc)
    return Accepted(operation=operation, media_type=media_type)


def match_body(operation: Operation, body_present: bool, content_type: str | None) -> MediaType | None:
    """Apply the body rules for ``operation``; return the matched declared media type.

    Raises a ``RequestError`` subclass when the body is missing, untyped, or
    of a type the operation does not declare.
    """
    if operation.body_required and not body_present:
        raise MissingBodyError()

    if not operation.body_required:
        # Optional bodies are never rejected; a match is only recorded.
        if body_present and content_type:
            return _try_match(operation.accepted_media_types, content_type)
        return None

    if not operation.accepted_media_types:
        return None

    if not content_type or not content_type.strip():
        raise MissingContentTypeError()

    matched = _try_match(operation.accepted_media_types, content_type)
    if matched is None:
        raise UnsupportedMediaTypeError(
            content_type, [str(media) for media in operation.accepted_media_types]
        )
    return matched


def check_body(media_type: MediaType | None, body: bytes) -> None:
    """Check the body bytes are well formed for the matched media type."""
    if media_type is None or not body:
        return

    charset = media_type.parameter("charset")
    if charset:
        charset = charset.strip('"')
        try:
            codecs.lookup(charset)
        except LookupError:
            charset = None
    if charset:
        try:
            body.decode(charset)
        except UnicodeDecodeError as exc:
            raise MalformedBodyError(f"Body is not valid {charset}: {exc.reason}") from exc

    if media_type.is_json:
        try:
            json.loads(body)
        except ValueError as exc:
            raise MalformedBodyError(f"Body is not valid JSON: {exc}") from exc


def rejection(error: RequestError) -> Rejected:
    return Rejected(error_kind=error.code, message=error.message, http_status=error.http_status)


def _try_match(accepted: tuple[MediaType, ...], content_type: str) -> MediaType | None:
    try:
        candidate = parse_media_type(content_type)
    except ValueError:
        return None
    return find_match(accepted, candidate)
