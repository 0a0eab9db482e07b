from django.core.management.base import BaseCommand

from commissions import queue


class Command(BaseCommand):
    help = "Process queued background jobs"

    def add_arguments(self, parser):
        parser.add_argument("--queue", help="Only process jobs from this queue")
        parser.add_argument("--once", action="store_true", help="Stop when the queue is empty")
        parser.add_argument("--sleep", type=float, default=3, help="Seconds to wait when idle")
        parser.add_argument("--max-jobs", type=int, help="Stop after this many jobs")

    def handle(self, *args, **options):
        processed = queue.work(
            queue=options.get("queue"),
            sleep=options["sleep"],
            once=options["once"],
            max_jobs=options.get("max_jobs"),
        )
        self.stdout.write(self.style.SUCCESS(f"Processed {processed} job(s)"))
