from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class CommissionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "commissions"
    verbose_name = _("Commissions")

    def ready(self):
        from . import signals  # noqa: F401

    # =========================================================================
    # HOOK HELPER METHODS
    # =========================================================================

    @staticmethod
    def do_after_sale_create(sale) -> None:
        """Called after a sale is stored to queue its commission email."""
        from .jobs import SendSaleCommissionJob
        from .queue import dispatch

        dispatch(SendSaleCommissionJob(sale.pk))
