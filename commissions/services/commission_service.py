"""
Commission Service - fixed-rate commission calculation.
"""
from collections.abc import Mapping
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from ..module import get_setting

CENTS = Decimal('0.01')


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def quantize_money(value) -> Decimal:
    """Round a money value to cents, half away from zero."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class CommissionCalculator:
    """Calculates commissions at a single fixed rate."""

    def __init__(self, rate: Optional[Decimal] = None):
        if rate is None:
            rate = get_setting('DEFAULT_RATE')
        self.rate = Decimal(str(rate))

    def calculate_commission(self, amount) -> Decimal:
        """Commission owed for a sale amount. No clamping: callers reject bad amounts."""
        return Decimal(str(amount)) * self.rate

    def total_commission(self, sales: Iterable[Any]) -> Decimal:
        """
        Sum commissions over sale-like records.

        A record's stored commission_amount is used when present and positive;
        otherwise the commission is calculated from its amount.
        """
        total = Decimal('0')
        for sale in sales:
            stored = _field(sale, 'commission_amount')
            if stored is not None and Decimal(str(stored)) > 0:
                total += Decimal(str(stored))
            else:
                total += self.calculate_commission(_field(sale, 'amount') or 0)
        return total
