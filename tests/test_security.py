from datetime import datetime, timedelta, timezone

import pytest

from docbook.core.exceptions import AuthenticationError, AuthorizationError
from docbook.core.security import (
    AuthContext, UserRole, create_access_token, ensure_owner,
    get_password_hash, verify_password, verify_token
)
from docbook.schemas.common import PageMeta, page_offset, parse_datetime
from docbook.services.appointment_service import day_window


def test_password_hashing():
    hashed = get_password_hash("password123")
    assert hashed != "password123"
    assert hashed.startswith("$2")
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_token_round_trip():
    token = create_access_token("user-1", "a@example.com", UserRole.DOCTOR)
    assert verify_token(token) == AuthContext(user_id="user-1", email="a@example.com", role=UserRole.DOCTOR)


def test_empty_token():
    with pytest.raises(AuthenticationError) as exc_info:
        verify_token("")
    assert exc_info.value.detail == "Please Login First"


def test_expired_token_is_reported_separately():
    token = create_access_token("user-1", "a@example.com", UserRole.PATIENT, expires_delta=timedelta(seconds=-1))
    with pytest.raises(AuthenticationError) as exc_info:
        verify_token(token)
    assert exc_info.value.detail == "Token has expired"


def test_ensure_owner():
    actor = AuthContext(user_id="u1", email="a@example.com", role=UserRole.PATIENT)
    ensure_owner("u1", actor)

    with pytest.raises(AuthorizationError) as exc_info:
        ensure_owner("u2", actor)
    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "You can only access your own resources"

    with pytest.raises(AuthorizationError):
        ensure_owner(None, actor)


def test_day_window_is_inclusive():
    start, end = day_window(datetime(2025, 8, 31, 14, 30))
    assert start == datetime(2025, 8, 31, 0, 0, 0, 0)
    assert end == datetime(2025, 8, 31, 23, 59, 59, 999999)


def test_parse_datetime():
    assert parse_datetime("2025-08-31") == datetime(2025, 8, 31)
    assert parse_datetime("2025-08-31T09:15:00") == datetime(2025, 8, 31, 9, 15)

    utc = parse_datetime("2025-08-31T09:15:00.000Z")
    expected = datetime(2025, 8, 31, 9, 15, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert utc == expected
    assert utc.tzinfo is None

    with pytest.raises(ValueError):
        parse_datetime("31/08/2025")


def test_page_meta():
    assert page_offset(1, 10) == 0
    assert page_offset(3, 10) == 20
    assert PageMeta.build(2, 10, 21).totalPages == 3
    assert PageMeta.build(1, 10, 0).totalPages == 0
