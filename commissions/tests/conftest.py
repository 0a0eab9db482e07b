"""
Fixtures for commissions module tests.
"""
import pytest
from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.utils import timezone

ADMIN_EMAIL = 'admin@example.com'
PASSWORD = 'secret-pass-123'


@pytest.fixture(autouse=True)
def clear_cache():
    """Each test starts with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def commissions_settings(settings):
    """Configure the admin notification address."""
    settings.COMMISSIONS = {'ADMIN_EMAIL': ADMIN_EMAIL}
    return settings


@pytest.fixture
def no_admin_email(settings):
    settings.COMMISSIONS = {'ADMIN_EMAIL': ''}
    return settings


@pytest.fixture
def seller(db):
    """Create a seller."""
    from commissions.models import Seller

    return Seller.objects.create(name='John Doe', email='john@example.com')


@pytest.fixture
def other_seller(db):
    """Create a second seller."""
    from commissions.models import Seller

    return Seller.objects.create(name='Jane Roe', email='jane@example.com')


@pytest.fixture
def make_sale(db):
    """Factory storing a sale with its commission already computed."""
    from commissions.models import Sale
    from commissions.services import CommissionCalculator, quantize_money

    def _make_sale(seller, amount, sold_at=None):
        amount = Decimal(str(amount))
        return Sale.objects.create(
            seller=seller,
            amount=amount,
            commission_amount=quantize_money(CommissionCalculator().calculate_commission(amount)),
            sold_at=sold_at or timezone.now(),
        )

    return _make_sale


@pytest.fixture
def sale(seller, make_sale):
    """Create a sale of 1000.00 made now."""
    return make_sale(seller, '1000.00')


@pytest.fixture
def yesterday_sale(seller, make_sale):
    """Create a sale made yesterday."""
    return make_sale(seller, '200.00', timezone.now() - timedelta(days=1))


@pytest.fixture
def roles(db):
    """Seed the admin, manager and viewer roles."""
    call_command('seed_roles', stdout=StringIO())


@pytest.fixture
def make_user(db, roles):
    """Factory creating a user that belongs to a role."""
    from django.contrib.auth.models import Group, User

    def _make_user(role=None, email=None, password=PASSWORD):
        username = role or 'nobody'
        user = User.objects.create_user(
            username=username,
            email=email or f'{username}@example.com',
            password=password,
            first_name=username.title(),
        )
        if role:
            user.groups.add(Group.objects.get(name=role))
        return user

    return _make_user


@pytest.fixture
def admin_member(make_user):
    return make_user('admin')


@pytest.fixture
def manager_user(make_user):
    return make_user('manager')


@pytest.fixture
def viewer_user(make_user):
    return make_user('viewer')


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def client_for(api_client):
    """Authenticate the API client as the given user."""
    def _client_for(user):
        api_client.force_authenticate(user=user)
        return api_client

    return _client_for


@pytest.fixture
def password():
    """Password given to users built by make_user."""
    return PASSWORD
