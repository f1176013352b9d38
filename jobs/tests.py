import datetime
import json
import shutil
import tempfile
import time
from io import StringIO
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from .collaborators import ServiceApplicationSubmitter
from .intake import ApplicationIntake, IntakeState, IntakeTransitionError
from .models import Application, Candidate, Job
from .services import MOCK_PARSED_RESUME
from .utils import resume_upload_name

MEDIA_ROOT = tempfile.mkdtemp(prefix='hireflow-tests-')


def tearDownModule():
    shutil.rmtree(MEDIA_ROOT, ignore_errors=True)


def pdf_upload(name='resume.pdf'):
    return SimpleUploadedFile(name, b'%PDF-1.4 fake resume', content_type='application/pdf')


def make_job(**kwargs):
    defaults = {
        'title': 'Frontend Developer',
        'department': 'Engineering',
        'location': 'Remote',
        'employment_type': 'Full-time',
        'description': 'Build user interfaces with React.',
        'requirements': ['3+ years of experience with React'],
        'responsibilities': ['Develop and maintain user interfaces'],
        'benefits': ['Competitive salary'],
    }
    defaults.update(kwargs)
    return Job.objects.create(**defaults)


class JobPagesTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.frontend = make_job(posted_date=datetime.date(2023, 10, 15))
        self.designer = make_job(
            title='UX Designer', department='Design', location='New York, NY',
            description='Design delightful experiences.', posted_date=datetime.date(2023, 10, 10),
        )
        self.closed = make_job(title='Old Role', is_active=False)

    def test_home_shows_featured_jobs(self):
        resp = self.client.get(reverse('home'))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'Frontend Developer')
        self.assertNotContains(resp, 'Old Role')

    def test_job_list_filters_by_keyword_and_location(self):
        resp = self.client.get(reverse('jobs:job_list'), {'q': 'design'})
        self.assertEqual(list(resp.context['jobs']), [self.designer])

        resp = self.client.get(reverse('jobs:job_list'), {'location': 'remote'})
        self.assertEqual(list(resp.context['jobs']), [self.frontend])

    def test_job_detail(self):
        resp = self.client.get(reverse('jobs:job_detail', args=[self.frontend.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'Develop and maintain user interfaces')

    def test_closed_job_detail_is_404(self):
        resp = self.client.get(reverse('jobs:job_detail', args=[self.closed.id]))
        self.assertEqual(resp.status_code, 404)


class JobApiTest(TestCase):
    def setUp(self):
        self.client = Client()
        for day in (1, 2, 3):
            make_job(title=f'Role {day}', posted_date=datetime.date(2023, 10, day))

    def test_list_is_newest_first(self):
        resp = self.client.get(reverse('api_job_list'))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([j['title'] for j in data], ['Role 3', 'Role 2', 'Role 1'])
        self.assertEqual(data[0]['postedDate'], '2023-10-03')
        self.assertNotIn('benefits', data[0])

    def test_featured_returns_two(self):
        resp = self.client.get(reverse('api_job_list'), {'featured': '1'})
        self.assertEqual(len(resp.json()), 2)

    def test_detail_and_missing(self):
        job = Job.objects.get(title='Role 1')
        resp = self.client.get(reverse('api_job_detail', args=[job.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['benefits'], ['Competitive salary'])

        resp = self.client.get(reverse('api_job_detail', args=[999999]))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {'error': 'Job not found'})


@override_settings(RESUME_PARSER_DELAY_SECONDS=0, MEDIA_ROOT=MEDIA_ROOT)
class ResumeParserApiTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('api_resume_parser')

    def test_no_file(self):
        resp = self.client.post(self.url, {})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {'error': 'No file provided'})

    def test_rejects_other_file_types(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        resp = self.client.post(self.url, {'file': upload})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('PDF', resp.json()['error'])

    @override_settings(MAX_RESUME_BYTES=10)
    def test_rejects_large_files(self):
        resp = self.client.post(self.url, {'file': pdf_upload()})
        self.assertEqual(resp.status_code, 400)

    def test_parse_upserts_candidate(self):
        resp = self.client.post(self.url, {'file': pdf_upload()})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['name'], 'John Applicant')
        self.assertEqual(data['skills'], MOCK_PARSED_RESUME['skills'])
        self.assertTrue(data['resumeUrl'].startswith('/media/uploads/'))

        candidate = Candidate.objects.get(pk=data['candidateId'])
        self.assertEqual(candidate.resume_url, data['resumeUrl'])

        # same email, same candidate
        second = self.client.post(self.url, {'file': pdf_upload('resume2.docx')}).json()
        self.assertEqual(second['candidateId'], data['candidateId'])
        self.assertEqual(Candidate.objects.count(), 1)


class ApplicationsApiTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('api_applications')
        self.job = make_job()
        self.candidate = Candidate.objects.create(name='Jane Doe', email='jane@example.com')

    def post(self, body):
        return self.client.post(self.url, data=json.dumps(body), content_type='application/json')

    def test_creates_application(self):
        resp = self.post({
            'jobId': self.job.id,
            'candidateId': str(self.candidate.id),
            'resumeUrl': '/media/uploads/1-cv.pdf',
            'coverLetter': 'Hello',
        })
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data['status'], 'Submitted')
        self.assertEqual(data['coverLetter'], 'Hello')
        self.assertTrue(Application.objects.filter(pk=data['id']).exists())

    def test_not_idempotent(self):
        body = {'jobId': self.job.id, 'candidateId': str(self.candidate.id)}
        first = self.post(body).json()
        second = self.post(body).json()
        self.assertNotEqual(first['id'], second['id'])
        self.assertEqual(Application.objects.count(), 2)

    def test_unknown_job_and_candidate(self):
        resp = self.post({'jobId': 999999, 'candidateId': str(self.candidate.id)})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {'error': 'Job not found'})

        resp = self.post({'jobId': self.job.id, 'candidateId': 'not-a-uuid'})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {'error': 'Candidate not found'})

    def test_bad_requests(self):
        resp = self.client.post(self.url, data='{oops', content_type='application/json')
        self.assertEqual(resp.status_code, 400)

        resp = self.post({'jobId': self.job.id})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Application.objects.count(), 0)


# ---- intake controller, with in-memory collaborators ----

class FakeParser:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def parse(self, file):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


class FakeSubmitter:
    def __init__(self):
        self.payloads = []
        self.fail_next = False

    def submit(self, payload):
        self.payloads.append(payload)
        if self.fail_next:
            self.fail_next = False
            raise RuntimeError("server said no")


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def success(self, title, description=''):
        self.sent.append(('success', title, description))

    def error(self, title, description=''):
        self.sent.append(('error', title, description))


class FakeNavigator:
    def __init__(self):
        self.visited = []

    def go(self, url):
        self.visited.append(url)


PARSED = {
    'name': 'John Applicant',
    'email': 'john.applicant@example.com',
    'phone': '+1 (555) 987-6543',
    'skills': ['React', 'Next.js'],
    'experience': '5 years',
    'candidateId': 'c-1',
    'resumeUrl': '/media/uploads/1-cv.pdf',
}


class ApplicationIntakeTest(TestCase):
    def make_intake(self, parser=None, **kwargs):
        self.parser = parser or FakeParser(result=dict(PARSED))
        self.submitter = FakeSubmitter()
        self.notifier = FakeNotifier()
        self.navigator = FakeNavigator()
        return ApplicationIntake(
            job_id=7,
            parser=self.parser,
            submitter=self.submitter,
            notifier=self.notifier,
            navigator=self.navigator,
            confirmation_url='/jobs/7/apply/success/',
            **kwargs
        )

    def test_successful_parse_fills_fields_and_moves_to_review(self):
        intake = self.make_intake()
        self.assertTrue(intake.upload_resume(object()))
        self.assertIs(intake.state, IntakeState.REVIEWING_DETAILS)
        self.assertEqual(intake.details.name, 'John Applicant')
        self.assertEqual(intake.details.skills, 'React, Next.js')
        self.assertEqual(intake.details.candidate_id, 'c-1')
        self.assertEqual(self.notifier.sent[0][:2], ('success', 'Resume uploaded successfully'))

    def test_failed_parse_leaves_fields_untouched(self):
        intake = self.make_intake(parser=FakeParser(error=RuntimeError("boom")))
        intake.details.name = 'Typed by hand'
        self.assertFalse(intake.upload_resume(object()))
        self.assertIs(intake.state, IntakeState.AWAITING_RESUME)
        self.assertEqual(intake.details.name, 'Typed by hand')
        self.assertFalse(intake.resume_uploaded)
        self.assertEqual(self.notifier.sent, [('error', 'Error', 'Failed to parse resume. Please try again.')])

    def test_incomplete_parser_response_counts_as_failure(self):
        partial = {k: v for k, v in PARSED.items() if k != 'candidateId'}
        intake = self.make_intake(parser=FakeParser(result=partial))
        self.assertFalse(intake.upload_resume(object()))
        self.assertEqual(intake.details.name, '')

    def test_continue_requires_upload(self):
        intake = self.make_intake()
        with self.assertRaises(IntakeTransitionError):
            intake.continue_to_review()

    def test_submit_blocked_while_required_field_is_blank(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        intake.edit_field('experience', '   ')
        self.assertFalse(intake.can_submit())
        with self.assertRaises(IntakeTransitionError):
            intake.submit()
        self.assertEqual(self.submitter.payloads, [])

    def test_successful_submit_navigates_to_confirmation(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        intake.edit_field('cover_letter', 'Pick me')
        self.assertTrue(intake.submit())
        self.assertIs(intake.state, IntakeState.SUCCEEDED)
        self.assertEqual(self.navigator.visited, ['/jobs/7/apply/success/'])
        self.assertEqual(self.submitter.payloads[0].as_json(), {
            'jobId': 7,
            'candidateId': 'c-1',
            'resumeUrl': '/media/uploads/1-cv.pdf',
            'coverLetter': 'Pick me',
        })

    def test_resubmit_after_failure_sends_identical_payload(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        self.submitter.fail_next = True

        self.assertFalse(intake.submit())
        self.assertIs(intake.state, IntakeState.FAILED)
        self.assertFalse(intake.submitting)
        self.assertEqual(self.navigator.visited, [])
        self.assertEqual(self.notifier.sent[-1][0], 'error')

        self.assertTrue(intake.submit())
        first, second = self.submitter.payloads
        self.assertEqual(first, second)

    def test_no_second_submit_while_one_is_in_flight(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        intake.submitting = True
        with self.assertRaises(IntakeTransitionError):
            intake.submit()
        self.assertEqual(self.submitter.payloads, [])

    def test_back_keeps_entered_data(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        intake.edit_field('name', 'Johnny')
        intake.go_back()
        self.assertIs(intake.state, IntakeState.AWAITING_RESUME)
        self.assertEqual(intake.details.name, 'Johnny')
        intake.continue_to_review()
        self.assertEqual(intake.details.name, 'Johnny')

    def test_session_round_trip(self):
        intake = self.make_intake()
        intake.upload_resume(object())
        data = intake.to_session()
        json.dumps(data)

        restored = ApplicationIntake.from_session(
            data, job_id=7, parser=None, submitter=None, notifier=None, navigator=None, confirmation_url='/',
        )
        self.assertIs(restored.state, IntakeState.REVIEWING_DETAILS)
        self.assertEqual(restored.details, intake.details)
        self.assertTrue(restored.resume_uploaded)

        data['state'] = IntakeState.SUBMITTING.value
        stale = ApplicationIntake.from_session(
            data, job_id=7, parser=None, submitter=None, notifier=None, navigator=None, confirmation_url='/',
        )
        self.assertIs(stale.state, IntakeState.FAILED)

    def test_recent_submitting_flow_stays_locked(self):
        data = self.make_intake().to_session()
        data['state'] = IntakeState.SUBMITTING.value
        data['submitting_since'] = time.time()

        restored = ApplicationIntake.from_session(
            data, stale_after=60, job_id=7, parser=None, submitter=FakeSubmitter(),
            notifier=None, navigator=None, confirmation_url='/',
        )
        self.assertIs(restored.state, IntakeState.SUBMITTING)
        self.assertTrue(restored.submitting)
        with self.assertRaises(IntakeTransitionError):
            restored.submit()

        data['submitting_since'] = time.time() - 120
        expired = ApplicationIntake.from_session(
            data, stale_after=60, job_id=7, parser=None, submitter=None,
            notifier=None, navigator=None, confirmation_url='/',
        )
        self.assertIs(expired.state, IntakeState.FAILED)
        self.assertFalse(expired.submitting)

    def test_checkpoint_runs_before_the_submitter(self):
        seen = []
        intake = self.make_intake(checkpoint=lambda i: seen.append((i.to_session(), list(self.submitter.payloads))))
        intake.upload_resume(object())
        self.assertTrue(intake.submit())

        saved, payloads_so_far = seen[0]
        self.assertEqual(saved['state'], IntakeState.SUBMITTING.value)
        self.assertIsNotNone(saved['submitting_since'])
        self.assertEqual(payloads_so_far, [])
        self.assertIsNone(intake.to_session()['submitting_since'])


@override_settings(RESUME_PARSER_DELAY_SECONDS=0, MEDIA_ROOT=MEDIA_ROOT)
class ApplyWizardTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.job = make_job()
        self.url = reverse('jobs:job_apply', args=[self.job.id])

    def details(self, **overrides):
        data = {
            'action': 'submit',
            'name': 'John Applicant',
            'email': 'john.applicant@example.com',
            'phone': '',
            'skills': 'React, Next.js',
            'experience': '5 years',
            'cover_letter': 'I love this job.',
        }
        data.update(overrides)
        return data

    def test_full_flow(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context['step'], 1)

        resp = self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()}, follow=True)
        self.assertEqual(resp.context['step'], 2)
        self.assertContains(resp, 'John Applicant')
        self.assertContains(resp, 'Resume uploaded successfully')

        resp = self.client.post(self.url, self.details())
        self.assertRedirects(resp, reverse('jobs:apply_success', args=[self.job.id]))
        application = Application.objects.get()
        self.assertEqual(application.job, self.job)
        self.assertEqual(application.cover_letter, 'I love this job.')
        self.assertEqual(application.candidate.email, 'john.applicant@example.com')

    def test_bad_upload_stays_on_step_one(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        resp = self.client.post(self.url, {'action': 'upload', 'file': upload})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context['step'], 1)
        self.assertEqual(Candidate.objects.count(), 0)

    def test_missing_required_field_does_not_submit(self):
        self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()})
        resp = self.client.post(self.url, self.details(name=''))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context['step'], 2)
        self.assertEqual(Application.objects.count(), 0)

    def test_failed_submission_can_be_retried(self):
        self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()})
        candidate = Candidate.objects.get()
        candidate.delete()

        resp = self.client.post(self.url, self.details(), follow=True)
        self.assertContains(resp, 'Failed to submit application')
        self.assertEqual(resp.context['intake'].state, IntakeState.FAILED)

        # a fresh parse recreates the candidate, then the retry goes through
        self.client.post(self.url, self.details(action='back'))
        self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()})
        resp = self.client.post(self.url, self.details())
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(Application.objects.count(), 1)

    def test_second_submit_while_first_is_running_is_rejected(self):
        self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()})
        original_submit = ServiceApplicationSubmitter.submit
        overlapping = {}

        def slow_submit(submitter, payload):
            # the user clicks again before the first request has answered
            overlapping['response'] = self.client.post(self.url, self.details())
            return original_submit(submitter, payload)

        with mock.patch.object(ServiceApplicationSubmitter, 'submit', slow_submit):
            resp = self.client.post(self.url, self.details())

        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp.url, reverse('jobs:apply_success', args=[self.job.id]))
        self.assertEqual(overlapping['response'].status_code, 302)
        self.assertEqual(overlapping['response'].url, self.url)
        self.assertEqual(Application.objects.count(), 1)

    def test_page_shows_submission_in_progress(self):
        self.client.post(self.url, {'action': 'upload', 'file': pdf_upload()})
        session = self.client.session
        key = f"intake:{self.job.id}"
        data = session[key]
        data['state'] = IntakeState.SUBMITTING.value
        data['submitting_since'] = time.time()
        session[key] = data
        session.save()

        resp = self.client.get(self.url)
        self.assertContains(resp, 'Submitting...')
        resp = self.client.post(self.url, self.details())
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(Application.objects.count(), 0)

    def test_unknown_action(self):
        resp = self.client.post(self.url, {'action': 'dance'})
        self.assertEqual(resp.status_code, 400)


class UtilsTest(TestCase):
    def test_job_str_without_department(self):
        self.assertEqual(str(Job(title='Analyst', department='')), 'Analyst (-)')

    def test_resume_upload_name(self):
        self.assertEqual(resume_upload_name('my cv.pdf', now=1700000000), 'uploads/1700000000000-my_cv.pdf')


class SeedJobsCommandTest(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command('seed_jobs', stdout=out)
        self.assertEqual(Job.objects.count(), 3)
        self.assertIn('Created=3', out.getvalue())

        out = StringIO()
        call_command('seed_jobs', stdout=out)
        self.assertEqual(Job.objects.count(), 3)
        self.assertIn('Skipped=3', out.getvalue())

    def test_update_refreshes_existing(self):
        call_command('seed_jobs', stdout=StringIO())
        Job.objects.filter(title='UX Designer').update(location='Mars')
        call_command('seed_jobs', '--update', stdout=StringIO())
        self.assertNotEqual(Job.objects.get(title='UX Designer').location, 'Mars')
