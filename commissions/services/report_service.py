"""
Report Service - daily rollups consumed by the email jobs.
"""
import logging
from decimal import Decimal

from ..dates import end_of_day, parse_day, start_of_day
from ..exceptions import SellerNotFound
from ..repositories import SaleRepository, SellerRepository
from .commission_service import CommissionCalculator

logger = logging.getLogger(__name__)


class ReportService:

    def __init__(self, sale_repository=None, seller_repository=None, calculator=None):
        self.sales = sale_repository or SaleRepository()
        self.sellers = seller_repository or SellerRepository()
        self.calculator = calculator or CommissionCalculator()

    def daily_sales_summary(self, date):
        """All sales of one calendar day, with count, total and average amount."""
        try:
            day = parse_day(date)
            sales = self.sales.get_sales_by_date_range(start_of_day(day), end_of_day(day))
        except Exception as exc:
            logger.error("Failed to calculate daily sales summary date=%s error=%s", date, exc)
            raise

        total_sales = len(sales)
        total_amount = sum((sale.amount for sale in sales), Decimal('0'))
        average_sale = total_amount / total_sales if total_sales else Decimal('0')

        logger.info(
            "Daily sales summary calculated date=%s total_sales=%d total_amount=%s",
            day.isoformat(), total_sales, total_amount,
        )
        return {
            'date': day.isoformat(),
            'total_sales': total_sales,
            'total_amount': total_amount,
            'average_sale': average_sale,
            'sales': sales,
        }

    def seller_daily_summary(self, seller_id, date):
        """One seller's sales of a calendar day with the commission owed on them."""
        seller = self.sellers.find_by_id(seller_id)
        if seller is None:
            logger.error(
                "Failed to calculate seller daily summary seller_id=%s date=%s error=not found",
                seller_id, date,
            )
            raise SellerNotFound(seller_id)

        try:
            day = parse_day(date)
            sales = self.sales.get_seller_sales_by_date_range(
                seller_id, start_of_day(day), end_of_day(day)
            )
        except Exception as exc:
            logger.error(
                "Failed to calculate seller daily summary seller_id=%s date=%s error=%s",
                seller_id, date, exc,
            )
            raise

        total_amount = sum((sale.amount for sale in sales), Decimal('0'))
        commission = self.calculator.total_commission(sales)

        logger.info(
            "Seller daily summary calculated seller_id=%s date=%s count=%d total_amount=%s commission=%s",
            seller_id, day.isoformat(), len(sales), total_amount, commission,
        )
        return {
            'seller': seller,
            'date': day.isoformat(),
            'count': len(sales),
            'total_amount': total_amount,
            'commission': commission,
            'sales': sales,
        }
