from __future__ import annotations

from typing import Any

from .model import Accepted, Decision, Document, DocumentMeta, Operation


def render_document(meta: DocumentMeta, operation_count: int) -> dict[str, Any]:
    return {
        "source": meta.source,
        "openapi": meta.openapi_version,
        "title": meta.title,
        "version": meta.version,
        "operationCount": operation_count,
        "isValid": meta.is_valid,
        "validationError": meta.validation_error,
    }


def render_operation(operation: Operation) -> dict[str, Any]:
    return {
        "method": operation.method,
        "path": operation.path,
        "operationId": operation.operation_id,
        "summary": operation.summary,
        "bodyRequired": operation.body_required,
        "acceptedMediaTypes": [str(media) for media in operation.accepted_media_types],
        "requiredHeaders": list(operation.required_headers),
        "requiredQuery": list(operation.required_query),
    }


def render_operations(document: Document) -> dict[str, Any]:
    return {"operations": [render_operation(op) for op in document.operations]}


def render_decision(decision: Decision) -> dict[str, Any]:
    if isinstance(decision, Accepted):
        return {
            "ok": True,
            "operation": render_operation(decision.operation),
            "mediaType": str(decision.media_type) if decision.media_type else None,
        }
    return {
        "ok": False,
        "error": {
            "kind": decision.error_kind,
            "message": decision.message,
            "status": decision.http_status,
        },
    }
