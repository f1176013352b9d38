# jobs/services.py
import logging
import time

from django.conf import settings

from .models import Application, Candidate, Job
from .utils import parse_uuid, store_resume_file

logger = logging.getLogger(__name__)


# Stand-in for a real parsing service (Affinda, Sovren, an in-house model...).
# Every upload yields the same candidate.
MOCK_PARSED_RESUME = {
    'name': 'John Applicant',
    'email': 'john.applicant@example.com',
    'phone': '+1 (555) 987-6543',
    'skills': ['React', 'Next.js', 'TypeScript', 'Tailwind CSS'],
    'experience': '5 years of frontend development experience',
    'education': [
        {
            'institution': 'University of Technology',
            'degree': 'Bachelor of Computer Science',
            'year': '2018',
        },
    ],
}


def parse_resume(uploaded_file):
    """
    Parse an already validated resume upload.

    Sleeps RESUME_PARSER_DELAY_SECONDS, stores the file, and upserts the
    Candidate (keyed by email) with the extracted fields.
    Returns the parser response dict consumed by the apply flow.
    """
    delay = settings.RESUME_PARSER_DELAY_SECONDS
    if delay > 0:
        time.sleep(delay)

    resume_url = store_resume_file(uploaded_file)
    parsed = dict(MOCK_PARSED_RESUME)

    candidate, created = Candidate.objects.update_or_create(
        email=parsed['email'],
        defaults={
            'name': parsed['name'],
            'phone': parsed['phone'],
            'skills': list(parsed['skills']),
            'experience': parsed['experience'],
            'education': list(parsed['education']),
            'resume_url': resume_url,
        },
    )
    logger.info(
        "Resume parsed: file=%s candidate=%s (%s)",
        uploaded_file.name, candidate.id, 'created' if created else 'updated',
    )

    parsed['candidateId'] = str(candidate.id)
    parsed['resumeUrl'] = resume_url
    return parsed


def submit_application(job_id, candidate_id, resume_url='', cover_letter=''):
    """
    Create an Application for an open job.

    Not idempotent: every call creates a new row.
    Raises Job.DoesNotExist / Candidate.DoesNotExist for unknown or closed jobs
    and unknown candidates.
    """
    try:
        job = Job.objects.get(pk=int(job_id), is_active=True)
    except (TypeError, ValueError):
        raise Job.DoesNotExist(f"Invalid job id: {job_id!r}")

    candidate_uuid = parse_uuid(candidate_id)
    if candidate_uuid is None:
        raise Candidate.DoesNotExist(f"Invalid candidate id: {candidate_id!r}")
    candidate = Candidate.objects.get(pk=candidate_uuid)

    application = Application.objects.create(
        job=job,
        candidate=candidate,
        resume_url=resume_url or candidate.resume_url,
        cover_letter=cover_letter or '',
    )
    logger.info("Application %s submitted: job=%s candidate=%s", application.id, job.id, candidate.id)
    return application
