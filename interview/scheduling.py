# interview/scheduling.py
"""
Batch interview scheduling.

schedule_interviews() walks the application ids in input order and, for each
application that exists, creates an Interview, moves the application to
"Interview Scheduled" and emails the candidate. Missing applications are
skipped; every item ends up in the BatchReport with its outcome.

Database errors are not caught here: they fail the whole batch, and items
committed before the failure stay committed.
"""
import enum
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from jobs.models import Application, STATUS_INTERVIEW_SCHEDULED
from jobs.utils import parse_uuid

from .email_utils import send_interview_invitation
from .models import Interview

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    CREATED = 'created'
    SKIPPED_NOT_FOUND = 'skipped_not_found'
    FAILED = 'failed'


@dataclass
class ItemOutcome:
    application_id: str
    status: Outcome
    interview: Optional[Interview] = None
    reason: str = ''
    notified: bool = False


@dataclass
class BatchReport:
    outcomes: list = field(default_factory=list)

    @property
    def interviews(self):
        return [o.interview for o in self.outcomes if o.status is Outcome.CREATED]

    def count(self, status):
        return sum(1 for o in self.outcomes if o.status is status)


class EmailInterviewNotifier:

    def notify(self, interview):
        send_interview_invitation(interview)
        logger.info(
            "Invitation sent to %s with meeting link %s", interview.candidate.email, interview.meeting_url,
        )


def generate_meeting_url():
    # TODO: create a real Google Meet event through the Calendar API instead of a random token
    base = settings.INTERVIEW_MEETING_BASE_URL.rstrip('/')
    return f"{base}/fake-meeting-{uuid.uuid4().hex[:10]}"


def _unique_ids(application_ids):
    seen = set()
    out = []
    for raw in application_ids:
        key = str(raw).strip()
        if key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


def _find_application(application_id):
    pk = parse_uuid(application_id)
    if pk is None:
        return None
    return Application.objects.select_related('candidate', 'job').filter(pk=pk).first()


def _create_interview(application, actor, scheduled_for, duration, notes, meeting_url):
    interview = Interview.objects.create(
        application=application,
        candidate=application.candidate,
        scheduler=actor,
        scheduled_for=scheduled_for,
        duration=duration,
        meeting_url=meeting_url,
        notes=notes or '',
    )
    if application.status != STATUS_INTERVIEW_SCHEDULED:
        application.status = STATUS_INTERVIEW_SCHEDULED
        application.save(update_fields=['status', 'updated_at'])
    return interview


def _schedule_one(application, actor, scheduled_for, duration, notes, notifier, meeting_url, rollback_on_notify_failure):
    app_id = str(application.id)
    previous_status = application.status

    if rollback_on_notify_failure:
        with transaction.atomic():
            interview = _create_interview(application, actor, scheduled_for, duration, notes, meeting_url)
            try:
                notifier.notify(interview)
            except Exception as exc:
                logger.exception("Notification failed for application %s; rolling the item back", app_id)
                transaction.set_rollback(True)
                application.status = previous_status
                return ItemOutcome(app_id, Outcome.FAILED, reason=f"notification failed: {exc}")
        return ItemOutcome(app_id, Outcome.CREATED, interview=interview, notified=True)

    with transaction.atomic():
        interview = _create_interview(application, actor, scheduled_for, duration, notes, meeting_url)
    try:
        notifier.notify(interview)
        notified = True
    except Exception:
        logger.exception("Notification failed for application %s; interview %s kept", app_id, interview.id)
        notified = False
    return ItemOutcome(app_id, Outcome.CREATED, interview=interview, notified=notified)


def schedule_interviews(actor_id, application_ids, scheduled_for, duration=None, notes='',
                        notifier=None, link_generator=None, rollback_on_notify_failure=None):
    """
    Schedule one interview per existing application.

    actor_id: id of the (active) user doing the scheduling; User.DoesNotExist
        is raised before anything is written when it cannot be resolved.
    application_ids: iterable of ids; duplicates are collapsed to their first occurrence.
    scheduled_for: timezone aware datetime.
    duration: minutes, INTERVIEW_DEFAULT_DURATION when None.

    Returns a BatchReport; report.interviews lists the created interviews in input order.
    """
    if duration is None:
        duration = settings.INTERVIEW_DEFAULT_DURATION
    if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
        raise ValueError(f"duration must be a positive number of minutes, got {duration!r}")
    if isinstance(application_ids, (str, bytes)):
        raise ValueError("application_ids must be a list of ids, not a string")
    if rollback_on_notify_failure is None:
        rollback_on_notify_failure = settings.INTERVIEW_ROLLBACK_ON_NOTIFY_FAILURE

    actor = get_user_model().objects.get(pk=actor_id, is_active=True)
    notifier = notifier or EmailInterviewNotifier()
    link_generator = link_generator or generate_meeting_url

    report = BatchReport()
    for app_id in _unique_ids(application_ids):
        application = _find_application(app_id)
        if application is None:
            logger.info("Application %s not found; skipped", app_id)
            report.outcomes.append(ItemOutcome(app_id, Outcome.SKIPPED_NOT_FOUND, reason='application not found'))
            continue

        outcome = _schedule_one(
            application, actor, scheduled_for, duration, notes, notifier,
            link_generator(), rollback_on_notify_failure,
        )
        report.outcomes.append(outcome)

    logger.info(
        "Interview batch by %s: created=%s skipped=%s failed=%s",
        actor.username,
        report.count(Outcome.CREATED),
        report.count(Outcome.SKIPPED_NOT_FOUND),
        report.count(Outcome.FAILED),
    )
    return report


def list_interviews():
    return Interview.objects.select_related('application__job', 'candidate', 'scheduler').all()
