"""Tests for settings bounds."""

import pytest
from pydantic import ValidationError

from config import Settings


@pytest.mark.parametrize("page_size", [0, 501])
def test_page_size_outside_postmark_limits_is_rejected(page_size):
    with pytest.raises(ValidationError):
        Settings(postmark_page_size=page_size)


def test_page_size_at_postmark_limit_is_accepted():
    assert Settings(postmark_page_size=500).postmark_page_size == 500
