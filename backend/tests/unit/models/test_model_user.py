"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from biblio.models.user import Role, Status, User


def _user(**kwargs) -> User:
    u = User(**kwargs)
    u.password = "secret123"
    return u


class TestUser:
    def test_password_hashing(self, session):
        u = _user(email="Test@Example.com", username="tester")
        session.add(u)
        session.commit()
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False
        assert "secret123" not in u.password_hash

    def test_password_is_write_only(self):
        u = _user(email="a@example.com", username="u1")
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(email="a@example.com", username="u1")
        with pytest.raises(ValueError):
            u.password = ""

    def test_defaults(self, session):
        u = _user(email="d@example.com", username="defaults")
        session.add(u)
        session.commit()
        assert u.role is Role.MEMBER
        assert u.status is Status.ACTIVE
        assert u.token_version == 1
        assert u.is_active is True

    @pytest.mark.parametrize("status", [Status.BLOCKED, Status.INACTIVE, Status.PENDING])
    def test_only_active_status_is_active(self, status):
        assert _user(email="s@example.com", username="s", status=status).is_active is False

    def test_email_normalized_and_unique(self, session):
        u1 = _user(email="  Alice@Example.com ", username="alice")
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        session.add(_user(email="alice@example.com", username="alice2"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_username_unique(self, session):
        session.add(_user(email="b1@example.com", username="bob"))
        session.commit()

        session.add(_user(email="b2@example.com", username="bob"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    @pytest.mark.parametrize("email", ["", "no-at-sign", "user@nodot"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email, username="x")

    def test_blank_username_rejected(self):
        with pytest.raises(ValueError):
            User(email="x@example.com", username="   ")
