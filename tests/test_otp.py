from datetime import datetime, timedelta, timezone

import pytest

from deliverykit.otp import (
    OTP_LIFETIME,
    generate_token,
    is_token_expired,
    is_token_valid,
    token_expires_at,
)


def test_generated_tokens_are_six_digits():
    for _ in range(500):
        token = generate_token()
        assert len(token) == 6
        assert token.isdigit()
        assert 100000 <= int(token) <= 999999


def test_tokens_vary():
    assert len({generate_token() for _ in range(200)}) > 1


def test_expiry_is_five_minutes_ahead():
    before = datetime.now(timezone.utc)
    expires = token_expires_at()
    after = datetime.now(timezone.utc)
    assert before + OTP_LIFETIME <= expires <= after + OTP_LIFETIME
    assert OTP_LIFETIME == timedelta(minutes=5)


def test_fresh_expiry_is_not_expired():
    assert is_token_expired(token_expires_at()) is False


@pytest.mark.parametrize("tz", [timezone.utc, None])
def test_past_and_future(tz):
    now = datetime.now(tz)
    assert is_token_expired(now - timedelta(seconds=1)) is True
    assert is_token_expired(now + timedelta(minutes=1)) is False


def test_token_validity():
    assert is_token_valid(None, "123456") is False
    assert is_token_valid("123456", "123456") is True
    assert is_token_valid("654321", "123456") is False
    assert is_token_valid("", "123456") is False