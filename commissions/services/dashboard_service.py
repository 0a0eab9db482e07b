"""
Dashboard Service - aggregate statistics for the dashboard endpoint.
"""
from decimal import Decimal

from django.utils import dateformat

from ..dates import end_of_day, end_of_month, shift_months, start_of_day, start_of_month, today
from ..repositories import SaleRepository, SellerRepository
from .commission_service import quantize_money

CURRENCY_PREFIX = 'R$ '


def format_currency(value) -> str:
    """
    Format a money value the Brazilian way.

    >>> format_currency(Decimal('1234.56'))
    'R$ 1.234,56'
    """
    amount = quantize_money(value or 0)
    text = f"{amount:,.2f}"
    return CURRENCY_PREFIX + text.replace(',', '_').replace('.', ',').replace('_', '.')


class DashboardService:

    def __init__(self, sale_repository=None, seller_repository=None):
        self.sales = sale_repository or SaleRepository()
        self.sellers = seller_repository or SellerRepository()

    def general_stats(self):
        total_sellers = self.sellers.count()
        total_sales = self.sales.count()
        total_amount = self.sales.sum_amount()
        total_commissions = self.sales.sum_commissions()
        average = total_amount / total_sales if total_sales else Decimal('0')

        return {
            'total_sellers': total_sellers,
            'total_sales': total_sales,
            'total_sales_amount': total_amount,
            'formatted_total_sales_amount': format_currency(total_amount),
            'total_commissions': total_commissions,
            'formatted_total_commissions': format_currency(total_commissions),
            'average_sale_amount': average,
            'formatted_average_sale_amount': format_currency(average),
        }

    def today_stats(self):
        day = today()
        amount = self.sales.sum_amount_by_date(day)
        return {
            'sales_count': self.sales.count_by_date(day),
            'sales_amount': amount,
            'formatted_sales_amount': format_currency(amount),
        }

    def this_month_stats(self):
        month_start = start_of_day(start_of_month(today()))
        amount = self.sales.sum_amount_from_date(month_start)
        return {
            'sales_count': self.sales.count_from_date(month_start),
            'sales_amount': amount,
            'formatted_sales_amount': format_currency(amount),
        }

    def top_sellers(self, limit=5):
        return [
            {
                'id': seller.id,
                'name': seller.name,
                'email': seller.email,
                'sales_count': seller.sales_count,
                'total_amount': seller.total_amount,
                'formatted_total_amount': format_currency(seller.total_amount),
                'total_commission': seller.total_commission,
                'formatted_total_commission': format_currency(seller.total_commission),
            }
            for seller in self.sellers.top_sellers_by_sales_amount(limit)
        ]

    def sales_by_month(self, months=6):
        """One entry per calendar month, oldest first, ending with the current month."""
        current = today()
        result = []
        for offset in range(months - 1, -1, -1):
            month_start = shift_months(current, -offset)
            start = start_of_day(month_start)
            end = end_of_day(end_of_month(month_start))
            amount = self.sales.sum_amount_between_dates(start, end)
            result.append({
                'month': month_start.strftime('%Y-%m'),
                'month_name': dateformat.format(month_start, 'M Y'),
                'sales_count': self.sales.count_between_dates(start, end),
                'sales_amount': amount,
                'formatted_amount': format_currency(amount),
            })
        return result

    def all_stats(self):
        return {
            'general': self.general_stats(),
            'today': self.today_stats(),
            'this_month': self.this_month_stats(),
            'top_sellers': self.top_sellers(),
            'sales_by_month': self.sales_by_month(),
        }
