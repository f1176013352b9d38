# interview/email_utils.py
import uuid
from datetime import timedelta, timezone as dt_timezone

from django.conf import settings
from django.core.mail import EmailMessage
from django.utils import timezone

def _ics_stamp(dt):
    return dt.astimezone(dt_timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def build_ics(interview_dt, duration_minutes=60, summary="Interview", description="",
              organizer_name=None, organizer_email=None, location=None, uid=None):
    """
    Build a simple ICS calendar invite string.
    interview_dt must be timezone aware; times are emitted in UTC.
    """
    if uid is None:
        uid = str(uuid.uuid4())

    organizer_email = organizer_email or getattr(settings, "DEFAULT_FROM_EMAIL", "no-reply@hireflow.local")
    organizer_name = organizer_name or "HireFlow"
    location = location or "Virtual"

    ics = [
        "BEGIN:VCALENDAR",
        "PRODID:-//HireFlow//EN",
        "VERSION:2.0",
        "CALSCALE:GREGORIAN",
        "METHOD:REQUEST",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{_ics_stamp(timezone.now())}",
        f"DTSTART:{_ics_stamp(interview_dt)}",
        f"DTEND:{_ics_stamp(interview_dt + timedelta(minutes=duration_minutes))}",
        f"SUMMARY:{summary}",
        f"DESCRIPTION:{description}",
        f"LOCATION:{location}",
        f"ORGANIZER;CN={organizer_name}:MAILTO:{organizer_email}",
        "END:VEVENT",
        "END:VCALENDAR"
    ]
    return "\r\n".join(ics)


def send_interview_invitation(interview):
    """
    Email the candidate their interview time and meeting link, with an ICS invite attached.
    Raises whatever the mail backend raises.
    """
    candidate = interview.candidate
    job_title = interview.application.job.title
    recruiter_name = interview.scheduler.display_name()
    local_dt = timezone.localtime(interview.scheduled_for)

    subject = f"[{job_title}] Interview invitation from {recruiter_name}"
    body_lines = [
        f"Hi {candidate.name},",
        "",
        f"Good news, we would like to interview you for the role: {job_title}.",
        "",
        "Interview details:",
        f"Date/time: {local_dt:%Y-%m-%d %H:%M} ({timezone.get_current_timezone_name()})",
        f"Duration: {interview.duration} minutes",
        f"Join link: {interview.meeting_url}",
    ]
    if interview.notes:
        body_lines += ["", f"Message from recruiter: {interview.notes}"]
    body_lines += ["", "If you cannot attend, please reply to this email to reschedule."]
    body = "\n".join(body_lines)

    email = EmailMessage(subject=subject, body=body, from_email=settings.DEFAULT_FROM_EMAIL, to=[candidate.email])
    ics_text = build_ics(
        interview.scheduled_for,
        duration_minutes=interview.duration,
        summary=f"{job_title} interview with {recruiter_name}",
        description=interview.notes or f"Interview for {job_title}",
        organizer_name=recruiter_name,
        organizer_email=interview.scheduler.email or None,
        location=interview.meeting_url,
        uid=str(interview.id),
    )
    email.attach(filename="invite.ics", content=ics_text, mimetype="text/calendar")
    email.send(fail_silently=False)
    return True
