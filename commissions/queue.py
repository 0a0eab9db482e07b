"""
Database-backed job queue.

At-least-once delivery: a job stays on the table until it completes, is
discarded, or runs out of tries. A running job whose reservation is older
than its timeout is treated as abandoned and can be reserved again.
"""
import logging
import time
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from .exceptions import DiscardJob
from .jobs import get_job_class
from .models import QueuedJob

logger = logging.getLogger(__name__)


def dispatch(job, delay=0):
    """
    Store `job` for a worker to pick up.

    When the job has a unique id and an unfinished row with the same id is
    already queued, nothing new is stored and that row is returned.
    """
    unique_id = job.unique_id()
    with transaction.atomic():
        if unique_id:
            existing = QueuedJob.objects.filter(
                job=job.name, unique_id=unique_id, status__in=QueuedJob.UNFINISHED_STATUSES,
            ).first()
            if existing is not None:
                logger.info("Skipped duplicate job %s unique_id=%s", job.name, unique_id)
                return existing

        queued = QueuedJob.objects.create(
            queue=job.queue,
            job=job.name,
            payload=job.payload,
            max_tries=job.tries,
            timeout=job.timeout,
            unique_id=unique_id,
            available_at=timezone.now() + timedelta(seconds=delay),
        )
    logger.info("Dispatched job %s id=%s queue=%s payload=%s", job.name, queued.pk, queued.queue, job.payload)
    return queued


def _candidates(queue, now):
    qs = QueuedJob.objects.all()
    if queue:
        qs = qs.filter(queue=queue)

    pending = qs.filter(status=QueuedJob.STATUS_PENDING, available_at__lte=now).order_by('available_at', 'id')
    yield from pending[:10]

    for row in qs.filter(status=QueuedJob.STATUS_RUNNING).order_by('reserved_at', 'id'):
        if row.reserved_at is None or row.reserved_at + timedelta(seconds=row.timeout) <= now:
            yield row


def reserve(queue=None):
    """Claim the next runnable job, or return None when there is nothing to do."""
    now = timezone.now()
    for row in _candidates(queue, now):
        claimed = QueuedJob.objects.filter(
            pk=row.pk, status=row.status, reserved_at=row.reserved_at,
        ).update(status=QueuedJob.STATUS_RUNNING, reserved_at=now, attempts=row.attempts + 1)
        if claimed:
            row.refresh_from_db()
            return row
    return None


def _finish(row, status, error=''):
    row.status = status
    row.finished_at = timezone.now()
    row.last_error = error
    row.save(update_fields=['status', 'finished_at', 'last_error', 'updated_at'])


def _fail(row, job, exc):
    _finish(row, QueuedJob.STATUS_FAILED, str(exc))
    if job is None:
        return
    try:
        job.failed(exc)
    except Exception:
        logger.exception("Failure hook raised for job %s id=%s", row.job, row.pk)


def run(row):
    """Execute a reserved job and record the outcome on its row."""
    try:
        job = get_job_class(row.job)(**row.payload)
    except Exception as exc:
        logger.error("Could not build job %s id=%s error=%s", row.job, row.pk, exc)
        _fail(row, None, exc)
        return

    job.attempt = row.attempts
    if row.attempts > row.max_tries:
        _fail(row, job, RuntimeError(f"{row.job} has been attempted too many times or run too long"))
        return

    try:
        job.handle()
    except DiscardJob as exc:
        logger.info("Discarded job %s id=%s reason=%s", row.job, row.pk, exc)
        _finish(row, QueuedJob.STATUS_DISCARDED, str(exc))
    except Exception as exc:
        if row.attempts >= row.max_tries:
            _fail(row, job, exc)
            return
        delay = job.retry_delay(row.attempts)
        row.status = QueuedJob.STATUS_PENDING
        row.reserved_at = None
        row.available_at = timezone.now() + timedelta(seconds=delay)
        row.last_error = str(exc)
        row.save(update_fields=['status', 'reserved_at', 'available_at', 'last_error', 'updated_at'])
        logger.warning(
            "Job %s id=%s attempt=%s failed, retrying in %ss error=%s",
            row.job, row.pk, row.attempts, delay, exc,
        )
    else:
        _finish(row, QueuedJob.STATUS_COMPLETED)


def work_next(queue=None):
    """Run one job. Returns False when no job was available."""
    row = reserve(queue)
    if row is None:
        return False
    run(row)
    return True


def work(queue=None, sleep=3, once=False, max_jobs=None):
    """Worker loop used by the run_jobs command."""
    processed = 0
    while True:
        if work_next(queue):
            processed += 1
            if max_jobs is not None and processed >= max_jobs:
                return processed
            continue
        if once:
            return processed
        time.sleep(sleep)
