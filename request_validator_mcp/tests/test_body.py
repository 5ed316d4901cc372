import pytest

from request_validator_mcp.validator import (
    Accepted,
    MalformedBodyError,
    OperationKey,
    Rejected,
    check_body,
    evaluate,
    parse_media_type,
)


def _operation(document, path):
    return document.get(OperationKey(path, "POST"))


@pytest.mark.parametrize("body_present", [True, False])
@pytest.mark.parametrize("content_type", [None, "application/json", "image/png", "not a media type"])
def test_optional_body_always_accepted(fixture_document, body_present, content_type):
    decision = evaluate(_operation(fixture_document, "/not/required/body"), body_present, content_type)
    assert isinstance(decision, Accepted)


def test_required_body_missing(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/body"), False, None)
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "MissingBodyError"
    assert decision.http_status == 400


@pytest.mark.parametrize("content_type", [None, "text/plain; charset=utf-8", "application/octet-stream"])
def test_required_untyped_body_accepts_any_content_type(fixture_document, content_type):
    decision = evaluate(_operation(fixture_document, "/required/body"), True, content_type)
    assert isinstance(decision, Accepted)
    assert decision.media_type is None


def test_required_json_body_accepts_json(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/json/body"), True, "application/json")
    assert isinstance(decision, Accepted)
    assert decision.media_type == parse_media_type("application/json")


def test_required_json_body_rejects_text(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/json/body"), True, "text/plain")
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "UnsupportedMediaTypeError"
    assert decision.http_status == 415


def test_required_json_body_without_content_type(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/json/body"), True, None)
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "MissingContentTypeError"
    assert decision.http_status == 400


def test_required_json_body_missing_body_wins_over_content_type(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/json/body"), False, "application/json")
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "MissingBodyError"


@pytest.mark.parametrize("content_type", ["text/plain; charset=utf-8", "application/json"])
def test_utf8_or_json_accepts_either(fixture_document, content_type):
    decision = evaluate(_operation(fixture_document, "/allows/utf8/or/json/body"), True, content_type)
    assert isinstance(decision, Accepted)
    assert decision.media_type == parse_media_type(content_type)


def test_utf8_or_json_rejects_text_without_charset(fixture_document):
    decision = evaluate(_operation(fixture_document, "/allows/utf8/or/json/body"), True, "text/plain")
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "UnsupportedMediaTypeError"


def test_unparseable_content_type_is_unsupported(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/utf8/body"), True, "utf8 please")
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "UnsupportedMediaTypeError"


def test_blank_content_type_counts_as_missing(fixture_document):
    decision = evaluate(_operation(fixture_document, "/required/utf8/body"), True, "   ")
    assert isinstance(decision, Rejected)
    assert decision.error_kind == "MissingContentTypeError"


def test_check_body_accepts_well_formed():
    check_body(parse_media_type("application/json"), b'{"a": 1}')
    check_body(parse_media_type("text/plain; charset=utf-8"), "héllo".encode("utf-8"))
    check_body(None, b"\xff")
    check_body(parse_media_type("application/json"), b"")


def test_check_body_rejects_bad_json():
    with pytest.raises(MalformedBodyError, match="JSON"):
        check_body(parse_media_type("application/json"), b"ab")


def test_check_body_rejects_bad_utf8():
    with pytest.raises(MalformedBodyError, match="utf-8"):
        check_body(parse_media_type("text/plain; charset=utf-8"), b"\xff\xfe\xfd")


def test_check_body_skips_unknown_charset():
    check_body(parse_media_type("text/plain; charset=x-made-up"), b"\xff")
