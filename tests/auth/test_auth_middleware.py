"""Tests for the authentication helpers."""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from pika_docs.auth.middleware import get_user, require_authenticated_user, require_role


def _request(session: dict | None) -> MagicMock:
    request = MagicMock()
    if session is None:
        del request.session  # Simulate no session attribute
    else:
        request.session = session
    return request


def test_get_user_returns_none_without_session():
    assert get_user(_request(None)) is None


def test_get_user_returns_none_for_empty_session():
    assert get_user(_request({})) is None


def test_get_user_returns_user_from_session():
    user = {"id": "s-1", "role": "student"}
    assert get_user(_request({"user": user})) == user


def test_require_authenticated_user_raises_401():
    with pytest.raises(HTTPException) as exc_info:
        require_authenticated_user(_request({}))
    assert exc_info.value.status_code == 401


def test_require_authenticated_user_rejects_user_without_id():
    with pytest.raises(HTTPException) as exc_info:
        require_authenticated_user(_request({"user": {"role": "student"}}))
    assert exc_info.value.status_code == 401


def test_require_role_admits_matching_role():
    user = {"id": "t-1", "role": "teacher"}
    assert require_role("teacher")(_request({"user": user})) == user


def test_require_role_rejects_other_roles():
    with pytest.raises(HTTPException) as exc_info:
        require_role("teacher")(_request({"user": {"id": "s-1", "role": "student"}}))
    assert exc_info.value.status_code == 403
