import logging

from django.apps import apps
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Sale

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Sale)
def queue_sale_commission_email(sender, instance, created, **kwargs):
    """
    When a new Sale is stored, queue the commission email for its seller.

    Errors are logged and swallowed: the sale itself must stay saved.
    """
    if not created:
        return  # Only run on creation

    try:
        with transaction.atomic():
            apps.get_app_config('commissions').do_after_sale_create(instance)
    except Exception as exc:
        logger.error(
            "Failed to dispatch sale commission job sale_id=%s seller_id=%s error=%s",
            instance.pk, instance.seller_id, exc,
        )
