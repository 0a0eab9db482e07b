"""
Queue the daily commission mails.

Meant to run from cron once a day at 23:59 local time:

    59 23 * * * python manage.py run_daily_mails
"""
from django.core.management.base import BaseCommand, CommandError

from commissions.dates import parse_day
from commissions.services.seller_service import SellerService


class Command(BaseCommand):
    help = "Queue one commission summary per seller plus the admin daily summary"

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            help="Day to summarize (YYYY-MM-DD). Defaults to today.",
        )

    def handle(self, *args, **options):
        day = options.get("date")
        if day:
            try:
                day = parse_day(day)
            except ValueError as exc:
                raise CommandError(str(exc)) from exc

        result = SellerService().run_daily_mails(day)
        self.stdout.write(self.style.SUCCESS(
            f"Queued daily mails for {result['date']}: "
            f"{result['sellers_count']} seller(s), admin: {result['admin_email'] or 'not configured'}"
        ))
