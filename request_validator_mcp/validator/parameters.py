from __future__ import annotations

from urllib.parse import parse_qs

import httpx

from .errors import MissingParameterError
from .model import Operation


def check_parameters(operation: Operation, headers: httpx.Headers, query: str) -> None:
    """Raise ``MissingParameterError`` for the first required parameter not sent.

    Only presence is checked; an empty value (``?flag=`` or ``?flag``) counts
    as present.
    """
    for name in operation.required_headers:
        if name not in headers:
            raise MissingParameterError("header", name)

    if not operation.required_query:
        return
    sent = parse_qs(query, keep_blank_values=True)
    for name in operation.required_query:
        if name not in sent:
            raise MissingParameterError("query", name)
