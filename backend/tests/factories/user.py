"""Factory Boy definition for :class:`biblio.models.user.User`."""

from __future__ import annotations

import factory

from biblio.models.user import Role, Status, User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`biblio.models.user.User` instances.

    ``password`` is applied through the model setter after creation, so the
    stored hash always matches ``DEFAULT_PASSWORD`` unless one is passed.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    username = factory.Sequence(lambda n: f"reader{n}")
    email = factory.Sequence(lambda n: f"reader{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    role = Role.MEMBER
    status = Status.ACTIVE
    token_version = 1
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD
        if create:
            UserFactory._meta.sqlalchemy_session_factory().commit()


class AdminFactory(UserFactory):
    username = factory.Sequence(lambda n: f"admin{n}")
    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = Role.ADMIN
