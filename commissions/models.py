"""Commissions module models."""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# Sellers
# =============================================================================

class Seller(TimestampedModel):
    """A person who records sales and earns commission on them."""

    name = models.CharField(_("Name"), max_length=255)
    email = models.EmailField(_("Email"), max_length=255, unique=True)

    class Meta:
        db_table = 'commissions_seller'
        verbose_name = _("Seller")
        verbose_name_plural = _("Sellers")
        ordering = ['-id']
        permissions = [
            ('view_sellers', _("Can view sellers")),
            ('create_sellers', _("Can create sellers")),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)


# =============================================================================
# Sales
# =============================================================================

class Sale(TimestampedModel):
    """A sale recorded by a seller, with its commission fixed at creation."""

    seller = models.ForeignKey(
        Seller, on_delete=models.CASCADE,
        related_name='sales', verbose_name=_("Seller")
    )
    amount = models.DecimalField(
        _("Amount"), max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    commission_amount = models.DecimalField(
        _("Commission Amount"), max_digits=12, decimal_places=2,
        default=Decimal('0.00')
    )
    sold_at = models.DateTimeField(_("Sold At"), db_index=True)

    class Meta:
        db_table = 'commissions_sale'
        verbose_name = _("Sale")
        verbose_name_plural = _("Sales")
        ordering = ['-id']
        indexes = [
            models.Index(fields=['seller', 'sold_at'], name='sale_seller_sold_at_idx'),
        ]
        permissions = [
            ('view_sales', _("Can view sales")),
            ('create_sales', _("Can create sales")),
            ('manage_admin_functions', _("Can manage admin functions")),
            ('resend_commissions', _("Can resend commission emails")),
            ('run_daily_mails', _("Can run the daily commission mails")),
        ]

    def __str__(self):
        return f"Sale #{self.pk}: {self.amount} ({self.sold_at:%Y-%m-%d})"


# =============================================================================
# Job queue
# =============================================================================

class QueuedJob(TimestampedModel):
    """A background job waiting for (or done with) a worker."""

    STATUS_PENDING = 'pending'
    STATUS_RUNNING = 'running'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'
    STATUS_DISCARDED = 'discarded'

    STATUS_CHOICES = [
        (STATUS_PENDING, _("Pending")),
        (STATUS_RUNNING, _("Running")),
        (STATUS_COMPLETED, _("Completed")),
        (STATUS_FAILED, _("Failed")),
        (STATUS_DISCARDED, _("Discarded")),
    ]

    UNFINISHED_STATUSES = (STATUS_PENDING, STATUS_RUNNING)

    queue = models.CharField(_("Queue"), max_length=50, default='default')
    job = models.CharField(_("Job"), max_length=100)
    payload = models.JSONField(_("Payload"), default=dict, blank=True)

    status = models.CharField(
        _("Status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )
    attempts = models.PositiveIntegerField(_("Attempts"), default=0)
    max_tries = models.PositiveIntegerField(_("Max Tries"), default=1)
    timeout = models.PositiveIntegerField(
        _("Timeout (seconds)"), default=60,
        help_text=_("A running job older than this is considered abandoned")
    )

    available_at = models.DateTimeField(_("Available At"), default=timezone.now)
    reserved_at = models.DateTimeField(_("Reserved At"), null=True, blank=True)
    finished_at = models.DateTimeField(_("Finished At"), null=True, blank=True)

    unique_id = models.CharField(_("Unique ID"), max_length=255, blank=True, db_index=True)
    last_error = models.TextField(_("Last Error"), blank=True)

    class Meta:
        db_table = 'commissions_queued_job'
        verbose_name = _("Queued Job")
        verbose_name_plural = _("Queued Jobs")
        ordering = ['available_at', 'id']
        indexes = [
            models.Index(fields=['queue', 'status', 'available_at'], name='queued_job_queue_status_idx'),
        ]

    def __str__(self):
        return f"{self.job} #{self.pk} ({self.status})"

    @property
    def is_finished(self):
        return self.status not in self.UNFINISHED_STATUSES
