"""Tests for the read-write and read-only units of work."""

from __future__ import annotations

import pytest
from sqlalchemy import select, text

from biblio.models.user import User
from biblio.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from biblio.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


def _new_user(name: str) -> User:
    u = User(username=name, email=f"{name}@example.com")
    u.password = "secret123"
    return u


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_success(self, session):
        with RWuow() as uow:
            uow.users.add(_new_user("committed"))

        assert session.execute(select(User).where(User.username == "committed")).scalar()

    def test_rolls_back_on_error(self, session):
        with pytest.raises(RuntimeError), RWuow() as uow:
            uow.users.add(_new_user("discarded"))
            raise RuntimeError("boom")

        assert session.execute(select(User).where(User.username == "discarded")).first() is None


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, session):
        user = UserFactory()
        with ROuow() as uow:
            assert uow.users.get(user.id) is not None

    def test_blocks_orm_flush_writes(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(_new_user("blocked"))
            uow.session.flush()

    def test_blocks_core_dml(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM users"))

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError):
            uow.commit()
