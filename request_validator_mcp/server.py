from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any

from fastmcp import FastMCP

from .logging_config import configure_logging
from .validator import ValidatorEngine
from .validator.ingest import SpecFingerprint, fingerprint_spec_file

logger = logging.getLogger(__name__)

mcp = FastMCP("request-validator-mcp")
engine = ValidatorEngine(spec_path=os.getenv("OPENAPI_SPEC_PATH", "./specs/openapi.yaml"))


@mcp.tool(name="api_validate_request")
def api_validate_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: str | None = None,
) -> dict[str, Any]:
    """Validate a full HTTP request (absolute URL, headers, body) against the OpenAPI document."""
    return engine.request_validate(method, url, headers=headers, body=body)


@mcp.tool(name="api_check_operation")
def api_check_operation(
    method: str,
    path: str,
    body_present: bool = False,
    content_type: str | None = None,
) -> dict[str, Any]:
    """Check a method/path pair plus body facts without sending any payload."""
    return engine.operation_check(method, path, body_present=body_present, content_type=content_type)


@mcp.tool(name="api_list_operations")
def api_list_operations() -> dict[str, Any]:
    """List every declared operation with its body requirements."""
    return engine.operations_list()


@mcp.tool(name="api_describe_document")
def api_describe_document() -> dict[str, Any]:
    """Describe the loaded OpenAPI document."""
    return engine.document_describe()


@mcp.tool(name="api_reload_document")
def api_reload_document() -> dict[str, Any]:
    """Reload the OpenAPI document from disk; the previous one is kept on failure."""
    return engine.document_reload()


def _start_watch_thread() -> None:
    watch = os.getenv("OPENAPI_WATCH", "0")
    if watch != "1":
        return

    interval = float(os.getenv("OPENAPI_WATCH_INTERVAL", "2"))
    last = fingerprint_spec_file(engine.spec_path)

    def loop() -> None:
        nonlocal last
        while True:
            time.sleep(interval)
            last = _poll_spec(last)

    thread = threading.Thread(target=loop, daemon=True)
    thread.start()


def _poll_spec(last: SpecFingerprint | None) -> SpecFingerprint | None:
    current = fingerprint_spec_file(engine.spec_path)
    if not _fingerprint_changed(last, current):
        return last
    logger.info("Spec %s changed; reloading", engine.spec_path)
    try:
        engine.document_reload()
    except Exception:
        # The watch thread must outlive any single bad edit of the file.
        logger.exception("Unexpected error reloading %s", engine.spec_path)
    return current


def _fingerprint_changed(prev: SpecFingerprint | None, current: SpecFingerprint | None) -> bool:
    if current is None:
        return False
    if prev is None:
        return True
    return prev.size != current.size or prev.mtime != current.mtime


if __name__ == "__main__":
    configure_logging(os.getenv("LOG_LEVEL", "INFO"), os.getenv("LOG_FORMAT", "text"))
    # A document that fails to load stops the process before it serves anything.
    engine.refresh()
    _start_watch_thread()
    mode = os.getenv("MCP_TRANSPORT", "stdio")
    if mode == "http":
        mcp.run(
            transport="http",
            host=os.getenv("MCP_HOST", "0.0.0.0"),  # nosec B104
            port=int(os.getenv("PORT", "8000")),
        )
    else:
        mcp.run()
