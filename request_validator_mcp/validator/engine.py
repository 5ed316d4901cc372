from __future__ import annotations

import logging
import os
import threading
from typing import Any, Mapping
from urllib.parse import urlsplit

import httpx

from .body import check_body, evaluate, rejection
from .errors import InvalidUrlError, MalformedHeadersError, ParseError, RequestError
from .ingest import load_file
from .model import Accepted, Decision, Document
from .parameters import check_parameters
from .render import render_decision, render_document, render_operations
from .routes import resolve

logger = logging.getLogger(__name__)


def validate(
    document: Document,
    method: str,
    path: str,
    body_present: bool,
    content_type: str | None,
) -> Decision:
    """Decide whether a request may pass, given only its routing and body facts.

    Touches nothing but its arguments, so it is safe to call from any number
    of threads against the same Document.
    """
    try:
        operation = resolve(document, method, path)
    except RequestError as exc:
        return rejection(exc)
    return evaluate(operation, body_present, content_type)


def validate_request(
    document: Document,
    method: str,
    url: str,
    headers: Mapping[str, str] | httpx.Headers | None = None,
    body: bytes | str | None = None,
) -> Decision:
    """Validate a full request: absolute URL, raw headers and body bytes.

    On top of ``validate`` this checks the URL is absolute, that required
    header and query parameters are present, and that an accepted body is
    well formed for the media type it matched.
    """
    payload = body.encode("utf-8") if isinstance(body, str) else (body or b"")
    try:
        path, query = _split_url(url)
        request_headers = _request_headers(headers)
        operation = resolve(document, method, path)
        check_parameters(operation, request_headers, query)
    except RequestError as exc:
        return rejection(exc)

    decision = evaluate(operation, bool(payload), request_headers.get("content-type"))
    if not isinstance(decision, Accepted):
        return decision
    try:
        check_body(decision.media_type, payload)
    except RequestError as exc:
        return rejection(exc)
    return decision


def validate_httpx_request(document: Document, request: httpx.Request) -> Decision:
    return validate_request(
        document,
        request.method,
        str(request.url),
        request.headers,
        request.read(),
    )


def _split_url(url: str) -> tuple[str, str]:
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid URL {url!r}: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise InvalidUrlError(f"URL {url!r} must be absolute with a scheme and host")
    return parts.path or "/", parts.query


def _request_headers(headers: Mapping[str, str] | httpx.Headers | None) -> httpx.Headers:
    if isinstance(headers, httpx.Headers):
        return headers
    # Callers hand over decoded text; non-ASCII values are kept as UTF-8.
    try:
        return httpx.Headers(headers or {}, encoding="utf-8")
    except TypeError as exc:
        raise MalformedHeadersError(f"Header names and values must be strings: {exc}") from exc


class ValidatorEngine:
    """Holds the process-wide Document and answers validation calls against it.

    Reloads build a complete new Document first and then replace the
    reference in one assignment; readers never lock and always see either the
    old or the new Document.
    """

    def __init__(self, spec_path: str, document: Document | None = None) -> None:
        self.spec_path = os.path.abspath(spec_path)
        self._document = document
        self._lock = threading.RLock()

    @property
    def document(self) -> Document:
        document = self._document
        if document is None:
            raise RuntimeError("No OpenAPI document loaded; call refresh() first")
        return document

    def refresh(self) -> Document:
        with self._lock:
            document = load_file(self.spec_path)
            self._document = document
        logger.info("Loaded %d operations from %s", len(document), self.spec_path)
        return document

    def validate(
        self,
        method: str,
        path: str,
        body_present: bool = False,
        content_type: str | None = None,
    ) -> Decision:
        decision = validate(self.document, method, path, body_present, content_type)
        _log_decision(method, path, decision)
        return decision

    def validate_request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> Decision:
        decision = validate_request(self.document, method, url, headers, body)
        _log_decision(method, url, decision)
        return decision

    def operation_check(
        self,
        method: str,
        path: str,
        body_present: bool = False,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        return render_decision(self.validate(method, path, body_present, content_type))

    def request_validate(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: str | None = None,
    ) -> dict[str, Any]:
        return render_decision(self.validate_request(method, url, headers, body))

    def operations_list(self) -> dict[str, Any]:
        return render_operations(self.document)

    def document_describe(self) -> dict[str, Any]:
        document = self.document
        return render_document(document.meta, len(document))

    def document_reload(self) -> dict[str, Any]:
        try:
            document = self.refresh()
        except ParseError as exc:
            logger.exception("Reload of %s failed; keeping previous document", self.spec_path)
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "document": render_document(document.meta, len(document))}


def _log_decision(method: str, target: str, decision: Decision) -> None:
    if isinstance(decision, Accepted):
        logger.debug("Accepted %s %s as %s", method, target, decision.operation.key)
    else:
        logger.debug("Rejected %s %s: %s", method, target, decision.message)
