import pytest
from common.choices import Role
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory
from users.models import User
from users.permissions import HasInventoryRole, IsOwner
from users.tests.factories import OwnerFactory, UserFactory


def request_for(user):
    request = APIRequestFactory().get("/")
    request.user = user
    return request


@pytest.mark.django_db
def test_new_users_default_to_staff():
    user = User.objects.create_user(username="clerk", email="clerk@example.com", password="StrongPass123!")
    assert user.role == Role.STAFF
    assert not IsOwner().has_permission(request_for(user), None)


@pytest.mark.django_db
def test_email_is_normalized():
    user = UserFactory(email="  Clerk@Shop.EXAMPLE ")
    assert user.email == "clerk@shop.example"


@pytest.mark.django_db
def test_role_permissions():
    staff, owner = UserFactory(), OwnerFactory()

    assert HasInventoryRole().has_permission(request_for(staff), None)
    assert HasInventoryRole().has_permission(request_for(owner), None)
    assert not IsOwner().has_permission(request_for(staff), None)
    assert IsOwner().has_permission(request_for(owner), None)


@pytest.mark.django_db
def test_unknown_role_has_no_inventory_access():
    user = UserFactory(role="GUEST")
    assert not HasInventoryRole().has_permission(request_for(user), None)


def test_anonymous_has_no_inventory_access():
    assert not HasInventoryRole().has_permission(request_for(AnonymousUser()), None)


# EOF
