from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from request_validator_mcp.validator import Document, load, load_file

ROOT = Path(__file__).resolve().parent
SPECS = ROOT / "specs"
FIXTURE_SPEC = SPECS / "openapi.yaml"

HEADER = """\
openapi: 3.0.0
info:
  description: API to handle generic two-way HTTP requests
  version: "1.0.0"
  title: Swagger ReST Article
"""


def build_document(paths_yaml: str) -> Document:
    return load((HEADER + textwrap.dedent(paths_yaml)).encode("utf-8"))


@pytest.fixture(scope="session")
def fixture_document() -> Document:
    return load_file(str(FIXTURE_SPEC))


@pytest.fixture
def make_document() -> Callable[[str], Document]:
    return build_document
