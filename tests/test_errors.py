"""Tests for mapping Postmark error envelopes onto exceptions."""

import pytest

from core.errors import (
    PostmarkApiError,
    PostmarkError,
    PostmarkNotFoundError,
    PostmarkRejectionError,
    PostmarkTransportError,
    PostmarkValidationError,
    error_from_envelope,
)


@pytest.mark.parametrize("status_code,error_code,expected", [
    (422, 1101, PostmarkNotFoundError),
    (404, 0, PostmarkNotFoundError),
    (422, 300, PostmarkValidationError),
    (422, 402, PostmarkValidationError),
    (422, 1120, PostmarkValidationError),
    (401, 10, PostmarkRejectionError),
    (422, 406, PostmarkRejectionError),
    (500, 0, PostmarkRejectionError),
])
def test_error_from_envelope(status_code, error_code, expected):
    error = error_from_envelope(status_code, error_code, "message")

    assert type(error) is expected
    assert isinstance(error, PostmarkApiError)
    assert error.status_code == status_code
    assert error.error_code == error_code
    assert error.message == "message"


def test_error_str_includes_code():
    assert str(PostmarkRejectionError("Bad token", error_code=10)) == "[10] Bad token"
    assert str(PostmarkTransportError("Timed out")) == "Timed out"


def test_transport_error_is_not_api_error():
    error = PostmarkTransportError("boom")

    assert isinstance(error, PostmarkError)
    assert not isinstance(error, PostmarkApiError)
