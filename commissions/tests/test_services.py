"""
Tests for commissions service layer.
"""
import pytest
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from commissions.cache import TaggedCache
from commissions.dto import CreateSaleData, CreateSellerData
from commissions.exceptions import (
    DuplicateSellerEmail,
    InvalidSaleAmount,
    SaleNotFound,
    SellerNotFound,
)
from commissions.models import QueuedJob, Sale, Seller
from commissions.services import (
    CommissionCalculator,
    SaleService,
    SellerService,
    quantize_money,
)


def sale_data(seller_id, amount, sold_at=None):
    return CreateSaleData(
        seller_id=seller_id,
        amount=Decimal(str(amount)),
        sold_at=sold_at or timezone.now(),
    )


class TestCommissionCalculator:
    """Tests for the fixed-rate calculator."""

    def test_default_rate(self):
        assert CommissionCalculator().rate == Decimal('0.085')

    def test_calculate_commission(self):
        """Test commission is amount times rate."""
        calculator = CommissionCalculator()
        assert calculator.calculate_commission(Decimal('1000.00')) == Decimal('85.00')
        assert calculator.calculate_commission(Decimal('123.45')) == Decimal('10.49325')

    def test_no_clamping(self):
        """Test zero and negative amounts are computed, not rejected."""
        calculator = CommissionCalculator()
        assert calculator.calculate_commission(0) == 0
        assert calculator.calculate_commission(-100) == Decimal('-8.5')

    def test_injected_rate(self):
        calculator = CommissionCalculator(rate=Decimal('0.10'))
        assert calculator.calculate_commission(Decimal('50')) == Decimal('5.0')

    def test_rate_from_settings(self, settings):
        settings.COMMISSIONS = {'DEFAULT_RATE': Decimal('0.05')}
        assert CommissionCalculator().calculate_commission(100) == Decimal('5.00')

    def test_total_commission_empty(self):
        assert CommissionCalculator().total_commission([]) == 0

    def test_total_commission_mixed(self):
        """Test stored commission wins, missing one is calculated."""
        total = CommissionCalculator().total_commission([
            {'commission_amount': 10},
            {'amount': 100},
        ])
        assert total == Decimal('18.5')

    def test_total_commission_ignores_zero_stored(self):
        total = CommissionCalculator().total_commission([
            {'amount': 200, 'commission_amount': 0},
        ])
        assert total == Decimal('17.0')

    def test_total_commission_models(self, sale, yesterday_sale):
        total = CommissionCalculator().total_commission([sale, yesterday_sale])
        assert total == Decimal('102.00')

    def test_quantize_money_half_up(self):
        assert quantize_money(Decimal('10.005')) == Decimal('10.01')
        assert quantize_money(Decimal('10.004')) == Decimal('10.00')


@pytest.mark.django_db
class TestSaleServiceCreate:
    """Tests for sale creation."""

    def test_create_sale(self, seller):
        """Test commission is computed and stored."""
        sale = SaleService().create(sale_data(seller.id, '1000.00'))
        assert sale.pk is not None
        assert sale.commission_amount == Decimal('85.00')
        sale.refresh_from_db()
        assert sale.commission_amount == Decimal('85.00')

    def test_commission_rounded_half_up(self, seller):
        sale = SaleService().create(sale_data(seller.id, '123.45'))
        sale.refresh_from_db()
        assert sale.commission_amount == Decimal('10.49')

    @pytest.mark.parametrize('amount', ['0', '-10.00'])
    def test_non_positive_amount(self, seller, amount):
        """Test amounts <= 0 are rejected and nothing is stored."""
        with pytest.raises(InvalidSaleAmount):
            SaleService().create(sale_data(seller.id, amount))
        assert Sale.objects.count() == 0

    def test_amount_rounding_to_zero_rejected(self, seller):
        """Test an amount that rounds to 0.00 at cent precision is rejected."""
        with pytest.raises(InvalidSaleAmount):
            SaleService().create(CreateSaleData(seller.id, Decimal('0.004'), timezone.now()))
        assert Sale.objects.count() == 0

    def test_amount_stored_at_cent_precision(self, seller):
        sale = SaleService().create(CreateSaleData(seller.id, Decimal('0.005'), timezone.now()))
        sale.refresh_from_db()
        assert sale.amount == Decimal('0.01')
        assert sale.commission_amount == Decimal('0.00')

    def test_unknown_seller(self, db):
        with pytest.raises(SellerNotFound):
            SaleService().create(sale_data(99999, '10.00'))
        assert Sale.objects.count() == 0

    def test_no_dedup(self, seller):
        """Test the same data twice makes two sales."""
        now = timezone.now()
        first = SaleService().create(sale_data(seller.id, '50.00', now))
        second = SaleService().create(sale_data(seller.id, '50.00', now))
        assert first.pk != second.pk
        assert first.commission_amount == second.commission_amount == Decimal('4.25')

    def test_queues_commission_email(self, seller):
        sale = SaleService().create(sale_data(seller.id, '10.00'))
        jobs = QueuedJob.objects.filter(job='send_sale_commission')
        assert jobs.count() == 1
        assert jobs.get().payload == {'sale_id': sale.pk}


@pytest.mark.django_db
class TestSaleServiceQueries:
    """Tests for sale listings and summaries."""

    def test_find_all_newest_first(self, seller, make_sale):
        first = make_sale(seller, '10.00')
        second = make_sale(seller, '20.00')
        page = SaleService().find_all()
        assert [s.pk for s in page.items] == [second.pk, first.pk]
        assert page.total == 2

    def test_find_all_is_cached(self, seller, make_sale):
        """Test a direct insert is not seen until the tag is flushed."""
        make_sale(seller, '10.00')
        service = SaleService()
        assert service.find_all().total == 1

        make_sale(seller, '20.00')
        assert service.find_all().total == 1

        service.create(sale_data(seller.id, '30.00'))
        assert service.find_all().total == 3

    def test_find_all_loads_seller(self, sale):
        page = SaleService().find_all()
        assert Sale._meta.get_field('seller').is_cached(page.items[0])

    def test_find_all_by_seller(self, seller, other_seller, make_sale):
        make_sale(seller, '10.00')
        make_sale(other_seller, '20.00')
        page = SaleService().find_all_by_seller(seller.id)
        assert page.total == 1
        assert page.items[0].seller_id == seller.id

    def test_find_all_by_seller_date(self, sale, yesterday_sale, seller):
        today = timezone.localdate()
        page = SaleService().find_all_by_seller(seller.id, today.isoformat())
        assert [s.pk for s in page.items] == [sale.pk]

        page = SaleService().find_all_by_seller(seller.id, today - timedelta(days=1))
        assert [s.pk for s in page.items] == [yesterday_sale.pk]

    def test_find_all_by_seller_not_found(self, db):
        with pytest.raises(SellerNotFound):
            SaleService().find_all_by_seller(99999)

    def test_find_all_by_seller_flushed_on_create(self, seller):
        service = SaleService()
        assert service.find_all_by_seller(seller.id).total == 0
        service.create(sale_data(seller.id, '10.00'))
        assert service.find_all_by_seller(seller.id).total == 1

    def test_daily_summary_for_seller(self, seller, sale, yesterday_sale, make_sale):
        make_sale(seller, '100.00')
        summary = SaleService().daily_summary_for_seller(seller.id, timezone.localdate())
        assert summary['seller'] == seller
        assert summary['count'] == 2
        assert summary['total_amount'] == Decimal('1100.00')
        assert summary['commission'] == Decimal('93.50')

    def test_daily_summary_for_unknown_seller(self, db):
        with pytest.raises(SellerNotFound):
            SaleService().daily_summary_for_seller(99999, '2024-01-01')

    def test_resend_sale_commission(self, sale):
        before = QueuedJob.objects.filter(job='send_sale_commission').count()
        SaleService().resend_sale_commission(sale.pk)
        assert QueuedJob.objects.filter(job='send_sale_commission').count() == before + 1

    def test_resend_sale_commission_not_found(self, db):
        with pytest.raises(SaleNotFound):
            SaleService().resend_sale_commission(99999)


@pytest.mark.django_db
class TestSellerService:
    """Tests for seller operations."""

    def test_create_seller_normalizes(self, db):
        seller = SellerService().create(CreateSellerData(name='  Ana  ', email='  ANA@Example.com '))
        assert seller.name == 'Ana'
        assert seller.email == 'ana@example.com'

    def test_duplicate_email_case_insensitive(self, seller):
        with pytest.raises(DuplicateSellerEmail):
            SellerService().create(CreateSellerData(name='Other', email='John@Example.com'))
        assert Seller.objects.count() == 1

    def test_find_all_prefetches_sales(self, seller, sale):
        page = SellerService().find_all()
        assert page.total == 1
        assert 'sales' in page.items[0]._prefetched_objects_cache

    def test_find_all_flushed_on_create(self, seller):
        service = SellerService()
        assert service.find_all().total == 1
        service.create(CreateSellerData(name='New', email='new@example.com'))
        assert service.find_all().total == 2

    def test_resend_commission(self, seller):
        result = SellerService().resend_commission(seller.id, '2024-03-15')
        assert result['seller_id'] == seller.id
        assert result['seller_name'] == 'John Doe'
        assert result['date'] == '2024-03-15'
        job = QueuedJob.objects.get(job='send_daily_seller_commission')
        assert job.payload == {'seller_id': seller.id, 'date': '2024-03-15'}

    def test_resend_commission_defaults_to_today(self, seller):
        result = SellerService().resend_commission(seller.id)
        assert result['date'] == timezone.localdate().isoformat()

    def test_resend_commission_not_found(self, db):
        with pytest.raises(SellerNotFound):
            SellerService().resend_commission(99999)

    def test_run_daily_mails(self, seller, other_seller):
        """Test one job per seller plus one admin job."""
        result = SellerService().run_daily_mails('2024-03-15')
        assert result['sellers_count'] == 2
        assert result['admin_email'] == 'admin@example.com'
        assert QueuedJob.objects.filter(job='send_daily_seller_commission').count() == 2
        assert QueuedJob.objects.filter(job='send_daily_admin_summary').count() == 1

    def test_run_daily_mails_without_admin_email(self, seller, other_seller, no_admin_email):
        result = SellerService().run_daily_mails()
        assert result['admin_email'] is None
        assert QueuedJob.objects.filter(job='send_daily_seller_commission').count() == 2
        assert QueuedJob.objects.filter(job='send_daily_admin_summary').count() == 0

    def test_run_daily_mails_no_sellers(self, db):
        result = SellerService().run_daily_mails()
        assert result['sellers_count'] == 0
        assert QueuedJob.objects.filter(job='send_daily_admin_summary').count() == 1


class TestTaggedCache:
    """Tests for tag-based invalidation."""

    def test_remember_computes_once(self):
        cache = TaggedCache()
        calls = []

        def compute():
            calls.append(1)
            return 'value'

        assert cache.remember(['a'], 'k', 60, compute) == 'value'
        assert cache.remember(['a'], 'k', 60, compute) == 'value'
        assert len(calls) == 1

    def test_remember_caches_falsy_values(self):
        cache = TaggedCache()
        cache.remember(['a'], 'k', 60, lambda: 0)
        assert cache.remember(['a'], 'k', 60, lambda: 1) == 0

    def test_flush_only_tagged_keys(self):
        cache = TaggedCache()
        cache.put(['a'], 'k1', 1, 60)
        cache.put(['b'], 'k2', 2, 60)
        cache.put(['a', 'b'], 'k3', 3, 60)

        cache.flush('a')

        assert cache.get(['a'], 'k1') is None
        assert cache.get(['b'], 'k2') == 2
        assert cache.get(['a', 'b'], 'k3') is None

    def test_flush_sees_keys_written_by_other_clients(self):
        """Test interleaved writers sharing one backend both get invalidated."""
        worker_a = TaggedCache()
        worker_b = TaggedCache()
        key_a = worker_a._tagged_key(['sales'], 'page:1')
        worker_b.put(['sales'], 'page:2', 'stale-B', 60)
        worker_a.backend.set(key_a, 'stale-A', 60)

        worker_a.flush('sales')

        assert worker_b.get(['sales'], 'page:1') is None
        assert worker_a.get(['sales'], 'page:2') is None

    def test_tag_version_kept_in_backend(self):
        """Test a tag is tracked by one version entry however many keys it covers."""
        from django.core.cache import cache as backend

        cache = TaggedCache(backend)
        cache.put(['seller:1'], 'page:0', 0, 60)
        version = backend.get('cache-tag-version:seller:1')
        for page in range(1, 5):
            cache.put(['seller:1'], f'page:{page}', page, 60)
        assert backend.get('cache-tag-version:seller:1') == version

        cache.flush('seller:1')
        assert backend.get('cache-tag-version:seller:1') == version + 1

    def test_flush_unused_tag(self):
        cache = TaggedCache()
        cache.flush('never-used')
        cache.put(['never-used'], 'k', 1, 60)
        assert cache.get(['never-used'], 'k') == 1
