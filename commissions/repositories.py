"""
Repositories - query and persistence helpers over the ORM.

Services talk to these instead of building querysets themselves, so the
aggregate queries used by reports and the dashboard live in one place.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, F, Sum, Value
from django.db.models.functions import Coalesce

from .dates import end_of_day, parse_day, start_of_day
from .models import Sale, Seller

ZERO = Decimal('0')


@dataclass
class Page:
    """One page of a paginated listing."""
    items: List[Any]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1

    @property
    def first_item(self) -> Optional[int]:
        if not self.items:
            return None
        return (self.page - 1) * self.per_page + 1

    @property
    def last_item(self) -> Optional[int]:
        if not self.items:
            return None
        return self.first_item + len(self.items) - 1


class BaseRepository:
    model = None

    def get_queryset(self, relations: Sequence[str] = ()):
        qs = self.model.objects.all()
        forward = [name for name in relations if self._is_forward(name)]
        reverse = [name for name in relations if not self._is_forward(name)]
        if forward:
            qs = qs.select_related(*forward)
        if reverse:
            qs = qs.prefetch_related(*reverse)
        return qs

    def _is_forward(self, name):
        field_obj = self.model._meta.get_field(name)
        return field_obj.many_to_one or field_obj.one_to_one and field_obj.concrete

    def paginate(self, queryset, per_page: int = 20, page: int = 1) -> Page:
        per_page = max(1, int(per_page))
        page = max(1, int(page))
        total = queryset.count()
        offset = (page - 1) * per_page
        items = list(queryset[offset:offset + per_page])
        return Page(items=items, total=total, page=page, per_page=per_page)

    def find_all(self, per_page: int = 20, page: int = 1, relations: Sequence[str] = ()) -> Page:
        return self.paginate(self.get_queryset(relations).order_by('-id'), per_page, page)

    def find_by_id(self, pk, relations: Sequence[str] = ()):
        return self.get_queryset(relations).filter(pk=pk).first()

    def create(self, **data):
        return self.model.objects.create(**data)

    def count(self) -> int:
        return self.model.objects.count()


# =============================================================================
# Sellers
# =============================================================================

class SellerRepository(BaseRepository):
    model = Seller

    def find_by_email(self, email: str) -> Optional[Seller]:
        return Seller.objects.filter(email__iexact=email.strip()).first()

    def get_all_ids(self) -> List[int]:
        return list(Seller.objects.order_by('id').values_list('id', flat=True))

    def top_sellers_by_sales_amount(self, limit: int = 5):
        """Sellers ranked by total sale amount, highest first; ties by id."""
        money = DecimalField(max_digits=14, decimal_places=2)
        return list(
            Seller.objects.annotate(
                sales_count=Count('sales'),
                total_amount=Coalesce(Sum('sales__amount'), Value(ZERO), output_field=money),
                total_commission=Coalesce(
                    Sum('sales__commission_amount'), Value(ZERO), output_field=money
                ),
            ).order_by(F('total_amount').desc(), 'id')[:limit]
        )


# =============================================================================
# Sales
# =============================================================================

class SaleRepository(BaseRepository):
    model = Sale

    def _filter_day(self, queryset, day):
        if day:
            day = parse_day(day)
            queryset = queryset.filter(sold_at__range=(start_of_day(day), end_of_day(day)))
        return queryset

    def find_by_seller(self, seller_id, day=None) -> List[Sale]:
        return list(self._filter_day(Sale.objects.filter(seller_id=seller_id), day))

    def find_all_by_seller(self, seller_id, day=None, per_page: int = 20, page: int = 1,
                           relations: Sequence[str] = ()) -> Page:
        queryset = self._filter_day(
            self.get_queryset(relations).filter(seller_id=seller_id), day
        )
        return self.paginate(queryset.order_by('-id'), per_page, page)

    def get_sales_by_date_range(self, start: datetime, end: datetime) -> List[Sale]:
        return list(
            Sale.objects.filter(sold_at__range=(start, end))
            .select_related('seller').order_by('sold_at', 'id')
        )

    def get_seller_sales_by_date_range(self, seller_id, start: datetime, end: datetime) -> List[Sale]:
        return list(
            Sale.objects.filter(seller_id=seller_id, sold_at__range=(start, end))
            .select_related('seller').order_by('sold_at', 'id')
        )

    # ==================== Aggregates ====================

    def _sum(self, queryset, field_name='amount') -> Decimal:
        return queryset.aggregate(total=Sum(field_name))['total'] or ZERO

    def sum_amount(self) -> Decimal:
        return self._sum(Sale.objects.all())

    def sum_commissions(self) -> Decimal:
        return self._sum(Sale.objects.all(), 'commission_amount')

    def _on_day(self, day: date):
        return Sale.objects.filter(sold_at__range=(start_of_day(day), end_of_day(day)))

    def count_by_date(self, day: date) -> int:
        return self._on_day(day).count()

    def sum_amount_by_date(self, day: date) -> Decimal:
        return self._sum(self._on_day(day))

    def count_from_date(self, start: datetime) -> int:
        return Sale.objects.filter(sold_at__gte=start).count()

    def sum_amount_from_date(self, start: datetime) -> Decimal:
        return self._sum(Sale.objects.filter(sold_at__gte=start))

    def count_between_dates(self, start: datetime, end: datetime) -> int:
        return Sale.objects.filter(sold_at__range=(start, end)).count()

    def sum_amount_between_dates(self, start: datetime, end: datetime) -> Decimal:
        return self._sum(Sale.objects.filter(sold_at__range=(start, end)))


# =============================================================================
# Users
# =============================================================================

class UserRepository(BaseRepository):

    @property
    def model(self):
        return get_user_model()

    def find_by_email(self, email: str):
        return self.model.objects.filter(email__iexact=email.strip(), is_active=True).first()

    def get_roles(self, user) -> List[str]:
        return sorted(user.groups.values_list('name', flat=True))

    def get_permissions(self, user) -> List[str]:
        """Codenames of the user's commissions permissions, direct or via roles."""
        prefix = 'commissions.'
        return sorted(
            perm[len(prefix):] for perm in user.get_all_permissions() if perm.startswith(prefix)
        )
