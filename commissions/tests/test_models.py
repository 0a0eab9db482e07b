"""
Tests for commissions models.
"""
import pytest
from decimal import Decimal

from django.db import IntegrityError
from django.utils import timezone

from commissions.models import QueuedJob, Sale, Seller


@pytest.mark.django_db
class TestSeller:
    """Tests for Seller model."""

    def test_create_seller(self, seller):
        """Test creating seller."""
        assert seller.name == 'John Doe'
        assert seller.email == 'john@example.com'
        assert seller.created_at is not None

    def test_email_normalized_on_save(self, db):
        """Test email is trimmed and lowercased."""
        seller = Seller.objects.create(name='Mixed', email='  Mixed.Case@Example.COM ')
        assert seller.email == 'mixed.case@example.com'

    def test_email_unique(self, seller):
        """Test duplicate email is rejected by the database."""
        with pytest.raises(IntegrityError):
            Seller.objects.create(name='Copy', email='JOHN@example.com')

    def test_seller_str(self, seller):
        assert str(seller) == 'John Doe <john@example.com>'

    def test_ordering_newest_first(self, seller, other_seller):
        assert list(Seller.objects.all()) == [other_seller, seller]


@pytest.mark.django_db
class TestSale:
    """Tests for Sale model."""

    def test_create_sale(self, sale, seller):
        """Test creating sale."""
        assert sale.seller == seller
        assert sale.amount == Decimal('1000.00')
        assert sale.commission_amount == Decimal('85.00')

    def test_sales_relation(self, seller, make_sale):
        make_sale(seller, '10.00')
        make_sale(seller, '20.00')
        assert seller.sales.count() == 2

    def test_commission_default(self, seller):
        """Test commission defaults to zero when not provided."""
        sale = Sale.objects.create(seller=seller, amount=Decimal('5.00'), sold_at=timezone.now())
        assert sale.commission_amount == Decimal('0.00')

    def test_delete_seller_cascades(self, sale, seller):
        seller.delete()
        assert not Sale.objects.filter(pk=sale.pk).exists()

    def test_custom_permissions_declared(self, db):
        from django.contrib.auth.models import Permission

        codenames = set(
            Permission.objects.filter(content_type__app_label='commissions')
            .values_list('codename', flat=True)
        )
        assert {
            'view_sales', 'create_sales', 'view_sellers', 'create_sellers',
            'manage_admin_functions', 'resend_commissions', 'run_daily_mails',
        } <= codenames


@pytest.mark.django_db
class TestQueuedJob:
    """Tests for QueuedJob model."""

    def test_defaults(self, db):
        job = QueuedJob.objects.create(job='send_sale_commission', payload={'sale_id': 1})
        assert job.status == QueuedJob.STATUS_PENDING
        assert job.attempts == 0
        assert job.available_at is not None
        assert job.is_finished is False

    def test_is_finished(self, db):
        job = QueuedJob(job='x', status=QueuedJob.STATUS_DISCARDED)
        assert job.is_finished is True

    def test_str(self, db):
        job = QueuedJob.objects.create(job='send_sale_commission')
        assert str(job) == f'send_sale_commission #{job.pk} (pending)'
