"""
Sale Service - sale creation, listings and per-sale commission resend.
"""
import logging
from decimal import Decimal

from django.db import transaction

from ..cache import tagged_cache
from ..dates import parse_day
from ..dto import CreateSaleData
from ..exceptions import InvalidSaleAmount, SaleNotFound, SellerNotFound
from ..jobs import SendSaleCommissionJob
from ..module import get_setting
from ..queue import dispatch
from ..repositories import SaleRepository, SellerRepository
from .commission_service import CommissionCalculator, quantize_money

logger = logging.getLogger(__name__)


def seller_tag(seller_id):
    return f"seller:{seller_id}"


class SaleService:

    def __init__(self, sale_repository=None, seller_repository=None, calculator=None, cache=None):
        self.sales = sale_repository or SaleRepository()
        self.sellers = seller_repository or SellerRepository()
        self.calculator = calculator or CommissionCalculator()
        self.cache = cache or tagged_cache

    def create(self, data: CreateSaleData):
        """
        Register a sale and compute its commission.

        The amount is rounded to cents first, as stored. Raises
        InvalidSaleAmount when that is <= 0 and SellerNotFound for an unknown
        seller; nothing is stored in either case.
        """
        amount = quantize_money(data.amount)
        if amount <= 0:
            raise InvalidSaleAmount(amount)

        if self.sellers.find_by_id(data.seller_id) is None:
            raise SellerNotFound(data.seller_id)

        commission = quantize_money(self.calculator.calculate_commission(amount))
        with transaction.atomic():
            sale = self.sales.create(
                seller_id=data.seller_id,
                amount=amount,
                commission_amount=commission,
                sold_at=data.sold_at,
            )

        self.cache.flush('sales', 'sellers', seller_tag(sale.seller_id))
        logger.info(
            "Sale created sale_id=%s seller_id=%s amount=%s commission=%s",
            sale.pk, sale.seller_id, sale.amount, sale.commission_amount,
        )
        return sale

    def find_all(self, per_page=20, page=1):
        key = f"sales:all:page:{page}:perPage:{per_page}"
        return self.cache.remember(
            ['sales'], key, get_setting('CACHE_TTL_SALES'),
            lambda: self.sales.find_all(per_page, page, relations=['seller']),
        )

    def find_all_by_seller(self, seller_id, date=None, per_page=20, page=1):
        if self.sellers.find_by_id(seller_id) is None:
            raise SellerNotFound(seller_id)

        day = parse_day(date) if date else None
        key = f"sales:seller:{seller_id}"
        key += f":date:{day.isoformat()}" if day else ":all"
        key += f":page:{page}:perPage:{per_page}"
        return self.cache.remember(
            [seller_tag(seller_id)], key, get_setting('CACHE_TTL_SALES'),
            lambda: self.sales.find_all_by_seller(
                seller_id, day, per_page, page, relations=['seller']
            ),
        )

    def daily_summary_for_seller(self, seller_id, date):
        seller = self.sellers.find_by_id(seller_id)
        if seller is None:
            raise SellerNotFound(seller_id)

        sales = self.sales.find_by_seller(seller_id, date)
        return {
            'seller': seller,
            'date': parse_day(date).isoformat(),
            'count': len(sales),
            'total_amount': sum((sale.amount for sale in sales), Decimal('0')),
            'commission': self.calculator.total_commission(sales),
        }

    def resend_sale_commission(self, sale_id):
        sale = self.sales.find_by_id(sale_id, relations=['seller'])
        if sale is None:
            raise SaleNotFound(sale_id)

        dispatch(SendSaleCommissionJob(sale.pk))
        logger.info("Sale commission email requeued sale_id=%s seller_id=%s", sale.pk, sale.seller_id)
        return sale
