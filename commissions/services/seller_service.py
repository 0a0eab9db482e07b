"""
Seller Service - seller registration and the daily commission mails.
"""
import logging

from django.utils.translation import gettext as _

from ..cache import tagged_cache
from ..dates import parse_day, today
from ..dto import CreateSellerData
from ..exceptions import DuplicateSellerEmail, SellerNotFound
from ..jobs import SendDailyAdminSummaryJob, SendDailySellerCommissionJob
from ..module import get_setting
from ..queue import dispatch
from ..repositories import SellerRepository

logger = logging.getLogger(__name__)


class SellerService:

    def __init__(self, seller_repository=None, cache=None):
        self.sellers = seller_repository or SellerRepository()
        self.cache = cache or tagged_cache

    def create(self, data: CreateSellerData):
        name = data.name.strip()
        email = data.email.strip().lower()
        if self.sellers.find_by_email(email) is not None:
            raise DuplicateSellerEmail(email)

        seller = self.sellers.create(name=name, email=email)
        self.cache.flush('sellers')
        logger.info("Seller created seller_id=%s email=%s", seller.pk, seller.email)
        return seller

    def find_all(self, per_page=20, page=1):
        key = f"sellers:all:page:{page}:perPage:{per_page}"
        return self.cache.remember(
            ['sellers'], key, get_setting('CACHE_TTL_SELLERS'),
            lambda: self.sellers.find_all(per_page, page, relations=['sales']),
        )

    def resend_commission(self, seller_id, date=None):
        """Queue the daily commission email of one seller (today by default)."""
        seller = self.sellers.find_by_id(seller_id)
        if seller is None:
            raise SellerNotFound(seller_id)

        day = (parse_day(date) if date else today()).isoformat()
        dispatch(SendDailySellerCommissionJob(seller.pk, day))
        logger.info("Daily commission email requeued seller_id=%s date=%s", seller.pk, day)

        return {
            'seller_id': seller.pk,
            'seller_name': seller.name,
            'date': day,
            'message': _("Commission email queued successfully"),
        }

    def run_daily_mails(self, date=None):
        """
        Fan out the daily mails: one job per seller plus the admin summary.

        The admin job is skipped when no admin email is configured.
        """
        day = (parse_day(date) if date else today()).isoformat()
        seller_ids = self.sellers.get_all_ids()
        for seller_id in seller_ids:
            dispatch(SendDailySellerCommissionJob(seller_id, day))

        admin_email = get_setting('ADMIN_EMAIL')
        if admin_email:
            dispatch(SendDailyAdminSummaryJob(day, admin_email))

        logger.info(
            "Daily mails queued date=%s sellers_count=%d admin_email=%s",
            day, len(seller_ids), admin_email or '-',
        )
        return {
            'date': day,
            'sellers_count': len(seller_ids),
            'admin_email': admin_email or None,
            'message': _("Daily emails queued successfully"),
        }
