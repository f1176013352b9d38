# jobs/intake.py
"""
Multi-step application intake: resume upload -> review/edit -> submission.

ApplicationIntake is a small state machine. Everything that talks to the
outside world is injected:

  parser.parse(file) -> dict        (name, email, phone, skills, experience,
                                     candidateId, resumeUrl); raises on failure
  submitter.submit(payload)         raises on failure
  notifier.success(title, text) / notifier.error(title, text)
  navigator.go(url)
  checkpoint(intake)                optional; called once the flow is marked
                                    SUBMITTING, before the submitter runs

The controller is plain data between requests (see to_session / from_session),
so a Django view can rebuild it from the session on every request.
"""
import enum
import logging
import time
from dataclasses import asdict, dataclass, fields

from .utils import skills_to_text

logger = logging.getLogger(__name__)


class IntakeState(enum.Enum):
    AWAITING_RESUME = 'awaiting_resume'
    REVIEWING_DETAILS = 'reviewing_details'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


# FAILED re-enables the form: it behaves like REVIEWING_DETAILS
EDITABLE_STATES = (IntakeState.REVIEWING_DETAILS, IntakeState.FAILED)

REQUIRED_FIELDS = ('name', 'email', 'skills', 'experience')


class IntakeTransitionError(RuntimeError):
    """A transition was attempted from a state (or with data) that does not allow it."""


@dataclass
class IntakeDetails:
    name: str = ''
    email: str = ''
    phone: str = ''
    skills: str = ''
    experience: str = ''
    candidate_id: str = ''
    resume_url: str = ''
    cover_letter: str = ''


EDITABLE_FIELDS = tuple(f.name for f in fields(IntakeDetails))


@dataclass(frozen=True)
class SubmissionPayload:
    job_id: int
    candidate_id: str
    resume_url: str
    cover_letter: str

    def as_json(self):
        return {
            'jobId': self.job_id,
            'candidateId': self.candidate_id,
            'resumeUrl': self.resume_url,
            'coverLetter': self.cover_letter,
        }


class ApplicationIntake:

    def __init__(self, job_id, parser, submitter, notifier, navigator, confirmation_url,
                 state=IntakeState.AWAITING_RESUME, details=None, resume_uploaded=False,
                 checkpoint=None, submitting_since=None):
        self.job_id = job_id
        self.parser = parser
        self.submitter = submitter
        self.notifier = notifier
        self.navigator = navigator
        self.confirmation_url = confirmation_url
        self.state = state
        self.details = details or IntakeDetails()
        self.resume_uploaded = resume_uploaded
        self.checkpoint = checkpoint
        # a SUBMITTING flow restored from the session is still in flight in another request
        self.submitting = state is IntakeState.SUBMITTING
        self.submitting_since = submitting_since if self.submitting else None

    # ---- queries ----

    @property
    def is_editable(self):
        return self.state in EDITABLE_STATES

    def missing_fields(self):
        return [name for name in REQUIRED_FIELDS if not (getattr(self.details, name) or '').strip()]

    def can_submit(self):
        return self.is_editable and not self.submitting and not self.missing_fields()

    def payload(self):
        return SubmissionPayload(
            job_id=self.job_id,
            candidate_id=self.details.candidate_id,
            resume_url=self.details.resume_url,
            cover_letter=self.details.cover_letter,
        )

    # ---- transitions ----

    def upload_resume(self, file):
        """
        Send the file to the parser. On success the parsed fields replace the
        current ones and the flow moves to review; on failure nothing changes.
        """
        if self.state is not IntakeState.AWAITING_RESUME:
            raise IntakeTransitionError(f"Cannot upload a resume while {self.state.value}.")

        try:
            data = self.parser.parse(file)
            parsed = {
                'name': data['name'],
                'email': data['email'],
                'phone': data.get('phone') or '',
                'skills': skills_to_text(data['skills']),
                'experience': data['experience'],
                'candidate_id': str(data['candidateId']),
                'resume_url': data['resumeUrl'],
            }
        except Exception:
            logger.exception("Error uploading resume for job %s", self.job_id)
            self.notifier.error("Error", "Failed to parse resume. Please try again.")
            return False

        for name, value in parsed.items():
            setattr(self.details, name, value)
        self.resume_uploaded = True
        self.state = IntakeState.REVIEWING_DETAILS
        self.notifier.success(
            "Resume uploaded successfully",
            "We've extracted your information. Please review and make any necessary changes.",
        )
        return True

    def continue_to_review(self):
        if self.state is not IntakeState.AWAITING_RESUME or not self.resume_uploaded:
            raise IntakeTransitionError("Upload a resume before reviewing your details.")
        self.state = IntakeState.REVIEWING_DETAILS

    def edit_field(self, name, value):
        if not self.is_editable:
            raise IntakeTransitionError(f"Cannot edit details while {self.state.value}.")
        if name not in EDITABLE_FIELDS:
            raise IntakeTransitionError(f"Unknown field: {name}")
        setattr(self.details, name, value if value is not None else '')

    def go_back(self):
        if not self.is_editable:
            raise IntakeTransitionError(f"Cannot go back while {self.state.value}.")
        self.state = IntakeState.AWAITING_RESUME

    def submit(self):
        if self.submitting:
            raise IntakeTransitionError("A submission is already in progress.")
        if not self.is_editable:
            raise IntakeTransitionError(f"Cannot submit while {self.state.value}.")
        missing = self.missing_fields()
        if missing:
            raise IntakeTransitionError(f"Missing required fields: {', '.join(missing)}")

        payload = self.payload()
        self.submitting = True
        self.submitting_since = time.time()
        self.state = IntakeState.SUBMITTING
        try:
            if self.checkpoint is not None:
                self.checkpoint(self)
            self.submitter.submit(payload)
        except Exception:
            logger.exception("Error submitting application for job %s", self.job_id)
            self.state = IntakeState.FAILED
            self.notifier.error("Error", "Failed to submit application. Please try again.")
            return False
        finally:
            self.submitting = False
            self.submitting_since = None

        self.state = IntakeState.SUCCEEDED
        self.navigator.go(self.confirmation_url)
        return True

    # ---- persistence between requests ----

    def to_session(self):
        return {
            'job_id': self.job_id,
            'state': self.state.value,
            'resume_uploaded': self.resume_uploaded,
            'details': asdict(self.details),
            'submitting_since': self.submitting_since,
        }

    @classmethod
    def from_session(cls, data, stale_after=0, **kwargs):
        """
        Rebuild a flow saved by to_session(). A SUBMITTING flow younger than
        stale_after seconds stays SUBMITTING so a second request cannot submit
        again; an older one never finished and comes back as FAILED.
        """
        data = data or {}
        state = IntakeState(data.get('state', IntakeState.AWAITING_RESUME.value))
        submitting_since = data.get('submitting_since')
        if state is IntakeState.SUBMITTING:
            if submitting_since is None or time.time() - submitting_since >= stale_after:
                state = IntakeState.FAILED
                submitting_since = None
        known = {k: v for k, v in (data.get('details') or {}).items() if k in EDITABLE_FIELDS}
        return cls(
            state=state,
            details=IntakeDetails(**known),
            resume_uploaded=bool(data.get('resume_uploaded')),
            submitting_since=submitting_since,
            **kwargs
        )
