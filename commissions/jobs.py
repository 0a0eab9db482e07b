"""
Email dispatch jobs.

A job is a small serializable unit of work: its constructor arguments are
the payload stored by the queue, `handle()` does the work and raises to ask
for a retry, and `failed()` runs once the queue gives up on it. Raising
DiscardJob stops a job for good without calling `failed()`.
"""
import hashlib
import logging

from .exceptions import DiscardJob, EmailNotSent, SellerNotFound
from .module import get_setting
from .repositories import SaleRepository
from .services.email_service import EmailService
from .services.report_service import ReportService

logger = logging.getLogger(__name__)

JOB_REGISTRY = {}


def register(cls):
    JOB_REGISTRY[cls.name] = cls
    return cls


def get_job_class(name):
    try:
        return JOB_REGISTRY[name]
    except KeyError:
        raise LookupError(f"Unknown job: {name}") from None


class Job:
    name = None
    tries = 1
    timeout = 60
    backoff = None

    def __init__(self, **payload):
        self.payload = payload
        self.attempt = 1

    @property
    def queue(self):
        return get_setting('EMAIL_QUEUE')

    def unique_id(self):
        """Identity used to collapse duplicate enqueues; empty means no dedup."""
        return ''

    def retry_delay(self, attempt):
        """Seconds to wait before the retry that follows `attempt`."""
        if not self.backoff:
            return get_setting('JOB_RETRY_DELAY')
        return self.backoff[min(attempt, len(self.backoff)) - 1]

    def handle(self):
        raise NotImplementedError

    def failed(self, exc):
        logger.error(
            "Job %s failed permanently payload=%s attempts=%s error=%s",
            self.name, self.payload, self.attempt, exc,
        )

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.payload}>"


# =============================================================================
# Jobs
# =============================================================================

@register
class SendSaleCommissionJob(Job):
    name = 'send_sale_commission'
    tries = 3
    timeout = 60

    def __init__(self, sale_id):
        super().__init__(sale_id=sale_id)
        self.sale_id = sale_id

    def handle(self):
        logger.info("Starting sale commission email job sale_id=%s attempt=%s", self.sale_id, self.attempt)
        try:
            sale = SaleRepository().find_by_id(self.sale_id, relations=['seller'])
            if sale is None:
                logger.warning("Sale not found for commission email sale_id=%s", self.sale_id)
                raise DiscardJob(f"Sale {self.sale_id} not found")

            if not EmailService().send_sale_commission_to_seller(sale):
                raise EmailNotSent("Failed to send sale commission email")
        except DiscardJob:
            raise
        except Exception as exc:
            logger.error(
                "Sale commission email job failed sale_id=%s attempt=%s error=%s",
                self.sale_id, self.attempt, exc,
            )
            raise

        logger.info(
            "Sale commission email job completed sale_id=%s seller_id=%s",
            self.sale_id, sale.seller_id,
        )

    def failed(self, exc):
        logger.error(
            "Sale commission email job failed permanently sale_id=%s attempts=%s error=%s",
            self.sale_id, self.attempt, exc,
        )


@register
class SendDailySellerCommissionJob(Job):
    name = 'send_daily_seller_commission'
    tries = 3
    timeout = 120
    backoff = [1, 5, 10]

    def __init__(self, seller_id, date):
        super().__init__(seller_id=seller_id, date=date)
        self.seller_id = seller_id
        self.date = date

    def handle(self):
        logger.info(
            "Starting daily seller commission job seller_id=%s date=%s attempt=%s",
            self.seller_id, self.date, self.attempt,
        )
        try:
            try:
                summary = ReportService().seller_daily_summary(self.seller_id, self.date)
            except SellerNotFound:
                logger.warning(
                    "Seller not found for daily commission email seller_id=%s date=%s",
                    self.seller_id, self.date,
                )
                raise DiscardJob(f"Seller {self.seller_id} not found") from None

            if not EmailService().send_daily_commission_to_seller(summary['seller'], summary):
                raise EmailNotSent("Failed to send daily commission email")
        except DiscardJob:
            raise
        except Exception as exc:
            logger.error(
                "Daily seller commission job failed seller_id=%s date=%s attempt=%s error=%s",
                self.seller_id, self.date, self.attempt, exc,
            )
            raise

        logger.info(
            "Daily seller commission job completed seller_id=%s date=%s commission=%s",
            self.seller_id, self.date, summary['commission'],
        )

    def failed(self, exc):
        logger.error(
            "Daily seller commission job failed permanently seller_id=%s date=%s attempts=%s error=%s",
            self.seller_id, self.date, self.attempt, exc,
        )


@register
class SendDailyAdminSummaryJob(Job):
    name = 'send_daily_admin_summary'
    tries = 3
    timeout = 60
    backoff = [1, 5, 10]

    def __init__(self, date, admin_email):
        super().__init__(date=date, admin_email=admin_email)
        self.date = date
        self.admin_email = admin_email

    def unique_id(self):
        digest = hashlib.md5(self.admin_email.encode('utf-8')).hexdigest()
        return f"{self.date}_{digest}"

    def handle(self):
        logger.info(
            "Starting daily admin summary job date=%s admin_email=%s attempt=%s",
            self.date, self.admin_email, self.attempt,
        )
        try:
            summary = ReportService().daily_sales_summary(self.date)
            if not EmailService().send_daily_summary_to_admin(self.date, summary, self.admin_email):
                raise EmailNotSent("Failed to send daily admin summary email")
        except Exception as exc:
            logger.error(
                "Daily admin summary job failed date=%s admin_email=%s attempt=%s error=%s",
                self.date, self.admin_email, self.attempt, exc,
            )
            raise

        logger.info(
            "Daily admin summary job completed date=%s admin_email=%s total_sales=%s total_amount=%s",
            self.date, self.admin_email, summary['total_sales'], summary['total_amount'],
        )

    def failed(self, exc):
        logger.error(
            "Daily admin summary job failed permanently date=%s admin_email=%s attempts=%s error=%s",
            self.date, self.admin_email, self.attempt, exc,
        )
