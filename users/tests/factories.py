import factory
from common.choices import Role
from factory.django import DjangoModelFactory, Password
from users.models import User


class UserFactory(DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    role = Role.STAFF
    password = Password("StrongPass123!")


class OwnerFactory(UserFactory):
    role = Role.OWNER
