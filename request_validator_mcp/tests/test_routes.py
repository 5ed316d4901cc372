import pytest

from request_validator_mcp.validator import MethodNotAllowedError, NotFoundError, allowed_methods, resolve


def test_every_operation_resolves_to_itself(fixture_document):
    for operation in fixture_document.operations:
        assert resolve(fixture_document, operation.method, operation.path) is operation


def test_method_is_case_insensitive(fixture_document):
    lower = resolve(fixture_document, "put", "/multiple/allowed/operations")
    upper = resolve(fixture_document, "PUT", "/multiple/allowed/operations")
    assert lower is upper
    assert lower.method == "PUT"


@pytest.mark.parametrize("method", ["put", "post", "delete"])
def test_each_declared_verb_resolves(fixture_document, method):
    operation = resolve(fixture_document, method, "/multiple/allowed/operations")
    assert operation.method == method.upper()


def test_undeclared_verb_on_known_path_is_not_allowed(fixture_document):
    with pytest.raises(MethodNotAllowedError) as exc_info:
        resolve(fixture_document, "GET", "/multiple/allowed/operations")
    assert exc_info.value.http_status == 405
    assert exc_info.value.allowed == ["PUT", "DELETE", "POST"]


def test_unknown_path_is_not_found(fixture_document):
    with pytest.raises(NotFoundError) as exc_info:
        resolve(fixture_document, "GET", "/invalid/path")
    assert exc_info.value.http_status == 404


def test_path_matching_is_exact(fixture_document):
    with pytest.raises(NotFoundError):
        resolve(fixture_document, "GET", "/ping/")
    with pytest.raises(NotFoundError):
        resolve(fixture_document, "GET", "/PING")


def test_allowed_methods(fixture_document):
    assert allowed_methods(fixture_document, "/ping") == ["GET"]
    assert allowed_methods(fixture_document, "/nowhere") == []
