"""
Email Service - renders and sends the commission emails.

Every send method returns True when the backend accepted the message and
False otherwise. Failures are logged here and never raised, so the calling
job decides whether a False result is worth a retry.
"""
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.translation import gettext as _

from ..dates import parse_day
from ..module import get_setting
from .dashboard_service import format_currency

logger = logging.getLogger(__name__)

TEMPLATE_DIR = 'commissions/emails'


class EmailService:

    def _send(self, subject, to, template, context):
        text_body = render_to_string(f"{TEMPLATE_DIR}/{template}.txt", context)
        html_body = render_to_string(f"{TEMPLATE_DIR}/{template}.html", context)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to],
        )
        message.attach_alternative(html_body, 'text/html')
        return message.send() > 0

    # ==================== Sale ====================

    def send_sale_commission_to_seller(self, sale) -> bool:
        seller = getattr(sale, 'seller', None)
        if seller is None:
            logger.warning("Sale has no valid seller, skipping commission email sale_id=%s", sale.pk)
            return False

        commission = sale.commission_amount
        context = {
            'seller': seller,
            'sale': sale,
            'commission': commission,
            'formatted_amount': format_currency(sale.amount),
            'formatted_commission': format_currency(commission),
        }
        try:
            sent = self._send(
                _("New sale registered - commission available"),
                seller.email, 'sale_commission', context,
            )
        except Exception as exc:
            logger.error("Failed to send sale commission email sale_id=%s error=%s", sale.pk, exc)
            return False

        if sent:
            logger.info(
                "Sale commission email sent sale_id=%s seller_id=%s seller_email=%s amount=%s",
                sale.pk, seller.pk, seller.email, sale.amount,
            )
        else:
            logger.error("Mail backend rejected sale commission email sale_id=%s", sale.pk)
        return sent

    # ==================== Daily ====================

    def send_daily_commission_to_seller(self, seller, summary) -> bool:
        day = parse_day(summary['date'])
        context = {
            'seller': seller,
            'date': day,
            'count': summary['count'],
            'formatted_total_amount': format_currency(summary['total_amount']),
            'formatted_commission': format_currency(summary['commission']),
        }
        try:
            sent = self._send(
                _("Daily commission summary - %(date)s") % {'date': day.strftime('%d/%m/%Y')},
                seller.email, 'daily_seller_commission', context,
            )
        except Exception as exc:
            logger.error(
                "Failed to send daily commission email seller_id=%s seller_email=%s error=%s",
                seller.pk, seller.email, exc,
            )
            return False

        if sent:
            logger.info(
                "Daily commission email sent seller_id=%s seller_email=%s date=%s commission=%s",
                seller.pk, seller.email, summary['date'], summary['commission'],
            )
        return sent

    def send_daily_summary_to_admin(self, date, summary, admin_email=None) -> bool:
        admin_email = admin_email or get_setting('ADMIN_EMAIL')
        if not admin_email:
            logger.warning("Admin email not configured, skipping daily summary email date=%s", date)
            return False

        day = parse_day(date)
        context = {
            'date': day,
            'total_sales': summary['total_sales'],
            'formatted_total_amount': format_currency(summary['total_amount']),
            'formatted_average_sale': format_currency(summary['average_sale']),
        }
        try:
            sent = self._send(
                _("Daily sales summary - %(date)s") % {'date': day.strftime('%d/%m/%Y')},
                admin_email, 'daily_admin_summary', context,
            )
        except Exception as exc:
            logger.error("Failed to send daily admin summary email date=%s error=%s", date, exc)
            return False

        if sent:
            logger.info(
                "Daily admin summary email sent admin_email=%s date=%s total_sales=%s total_amount=%s",
                admin_email, date, summary['total_sales'], summary['total_amount'],
            )
        return sent
