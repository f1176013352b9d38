import json
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from jobs.models import Application, Candidate, Job, STATUS_INTERVIEW_SCHEDULED, STATUS_SUBMITTED
from .email_utils import build_ics
from .models import Interview
from .scheduling import Outcome, schedule_interviews

User = get_user_model()

SLOT = datetime(2026, 11, 2, 15, 30, tzinfo=dt_timezone.utc)


class FailingNotifier:
    def notify(self, interview):
        raise ConnectionError("smtp down")


class SchedulingFixtures(TestCase):
    def setUp(self):
        self.recruiter = User.objects.create_user(
            username='recruiter', password='pass', role='recruiter',
            email='recruiter@example.com', first_name='Rita', last_name='Recruiter',
        )
        self.job = Job.objects.create(title='Backend Engineer', department='Engineering', description='APIs')
        self.candidate = Candidate.objects.create(name='Jane Doe', email='jane@example.com')
        self.application = Application.objects.create(job=self.job, candidate=self.candidate)
        self.other_candidate = Candidate.objects.create(name='Sam Smith', email='sam@example.com')
        self.other_application = Application.objects.create(job=self.job, candidate=self.other_candidate)


class ScheduleInterviewsTest(SchedulingFixtures):

    def test_existing_scheduled_missing_skipped(self):
        missing = str(uuid.uuid4())
        report = schedule_interviews(self.recruiter.pk, [str(self.application.id), missing], SLOT)

        self.assertEqual(len(report.interviews), 1)
        interview = report.interviews[0]
        self.assertEqual(interview.application, self.application)
        self.assertEqual(interview.candidate, self.candidate)
        self.assertEqual(interview.scheduler, self.recruiter)
        self.assertEqual(interview.duration, 60)
        self.assertTrue(interview.meeting_url.startswith('https://meet.google.com/fake-meeting-'))

        self.assertEqual([o.status for o in report.outcomes], [Outcome.CREATED, Outcome.SKIPPED_NOT_FOUND])
        self.assertEqual(report.outcomes[1].application_id, missing)
        self.assertIsNone(report.outcomes[1].interview)

        self.application.refresh_from_db()
        self.assertEqual(self.application.status, STATUS_INTERVIEW_SCHEDULED)
        self.assertEqual(self.application.get_status_display(), 'Interview Scheduled')
        self.other_application.refresh_from_db()
        self.assertEqual(self.other_application.status, STATUS_SUBMITTED)

    def test_invitation_email_with_calendar_invite(self):
        schedule_interviews(self.recruiter.pk, [str(self.application.id)], SLOT, notes='Bring a laptop')

        self.assertEqual(len(mail.outbox), 1)
        msg = mail.outbox[0]
        self.assertEqual(msg.to, ['jane@example.com'])
        self.assertEqual(msg.subject, '[Backend Engineer] Interview invitation from Rita Recruiter')
        interview = Interview.objects.get()
        self.assertIn(interview.meeting_url, msg.body)
        self.assertIn('Bring a laptop', msg.body)

        filename, content, mimetype = msg.attachments[0]
        self.assertEqual(filename, 'invite.ics')
        self.assertEqual(mimetype, 'text/calendar')
        self.assertIn('DTSTART:20261102T153000Z', content)
        self.assertIn('DTEND:20261102T163000Z', content)

    @override_settings(DEFAULT_FROM_EMAIL='Talent Team <talent@example.com>')
    def test_invitation_uses_configured_sender(self):
        schedule_interviews(self.recruiter.pk, [str(self.application.id)], SLOT)
        self.assertEqual(mail.outbox[0].from_email, 'Talent Team <talent@example.com>')

    def test_order_kept_and_duplicates_collapsed(self):
        first, second = str(self.other_application.id), str(self.application.id)
        report = schedule_interviews(self.recruiter.pk, [first, second, first], SLOT, duration=45)

        self.assertEqual([str(i.application_id) for i in report.interviews], [first, second])
        self.assertEqual(Interview.objects.count(), 2)
        self.assertTrue(all(i.duration == 45 for i in report.interviews))

    def test_malformed_id_is_skipped(self):
        report = schedule_interviews(self.recruiter.pk, ['not-a-uuid'], SLOT)
        self.assertEqual(report.count(Outcome.SKIPPED_NOT_FOUND), 1)
        self.assertEqual(Interview.objects.count(), 0)

    def test_unknown_or_inactive_actor_writes_nothing(self):
        with self.assertRaises(User.DoesNotExist):
            schedule_interviews(999999, [str(self.application.id)], SLOT)

        self.recruiter.is_active = False
        self.recruiter.save()
        with self.assertRaises(User.DoesNotExist):
            schedule_interviews(self.recruiter.pk, [str(self.application.id)], SLOT)

        self.assertEqual(Interview.objects.count(), 0)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, STATUS_SUBMITTED)
        self.assertEqual(len(mail.outbox), 0)

    def test_invalid_duration(self):
        with self.assertRaises(ValueError):
            schedule_interviews(self.recruiter.pk, [str(self.application.id)], SLOT, duration=0)
        self.assertEqual(Interview.objects.count(), 0)

    def test_notify_failure_keeps_interview_by_default(self):
        report = schedule_interviews(
            self.recruiter.pk, [str(self.application.id)], SLOT,
            notifier=FailingNotifier(), rollback_on_notify_failure=False,
        )
        outcome = report.outcomes[0]
        self.assertIs(outcome.status, Outcome.CREATED)
        self.assertFalse(outcome.notified)
        self.assertEqual(Interview.objects.count(), 1)

    def test_notify_failure_rolls_item_back_when_configured(self):
        report = schedule_interviews(
            self.recruiter.pk, [str(self.application.id), str(self.other_application.id)], SLOT,
            notifier=FailingNotifier(), rollback_on_notify_failure=True,
        )
        self.assertEqual(report.count(Outcome.FAILED), 2)
        self.assertEqual(report.interviews, [])
        self.assertEqual(Interview.objects.count(), 0)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, STATUS_SUBMITTED)

    @override_settings(INTERVIEW_MEETING_BASE_URL='https://meet.example.org/')
    def test_custom_link_generator(self):
        report = schedule_interviews(
            self.recruiter.pk, [str(self.application.id)], SLOT,
            link_generator=lambda: 'https://meet.example.org/room-1',
        )
        self.assertEqual(report.interviews[0].meeting_url, 'https://meet.example.org/room-1')


class BuildIcsTest(TestCase):
    def test_times_are_utc(self):
        local = datetime(2026, 11, 2, 10, 0, tzinfo=dt_timezone(timedelta(hours=-5)))
        ics = build_ics(local, duration_minutes=30, uid='abc')
        self.assertIn('UID:abc', ics)
        self.assertIn('DTSTART:20261102T150000Z', ics)
        self.assertIn('DTEND:20261102T153000Z', ics)
        self.assertTrue(ics.startswith('BEGIN:VCALENDAR\r\n'))


class InterviewsApiTest(SchedulingFixtures):
    def setUp(self):
        super().setUp()
        self.client = Client()
        self.url = reverse('api_interviews')

    def post(self, body):
        return self.client.post(self.url, data=json.dumps(body), content_type='application/json')

    def test_requires_login(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)
        resp = self.post({'applicationIds': [str(self.application.id)], 'scheduledFor': SLOT.isoformat()})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {'error': 'Unauthorized'})
        self.assertEqual(Interview.objects.count(), 0)

    def test_schedule_and_list(self):
        self.client.login(username='recruiter', password='pass')
        resp = self.post({
            'applicationIds': [str(self.application.id), str(uuid.uuid4())],
            'scheduledFor': '2026-11-02T15:30:00+00:00',
            'notes': 'Panel interview',
        })
        self.assertEqual(resp.status_code, 200)
        created = resp.json()
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0]['applicationId'], str(self.application.id))
        self.assertEqual(created[0]['duration'], 60)
        self.assertEqual(created[0]['userId'], self.recruiter.pk)

        listing = self.client.get(self.url).json()
        self.assertEqual(len(listing), 1)
        item = listing[0]
        self.assertEqual(item['application']['status'], 'Interview Scheduled')
        self.assertEqual(item['application']['position']['title'], 'Backend Engineer')
        self.assertEqual(item['candidate']['email'], 'jane@example.com')
        self.assertEqual(item['scheduler']['username'], 'recruiter')

    def test_malformed_bodies(self):
        self.client.login(username='recruiter', password='pass')

        resp = self.client.post(self.url, data='not json', content_type='application/json')
        self.assertEqual(resp.status_code, 400)

        resp = self.post({'applicationIds': str(self.application.id), 'scheduledFor': SLOT.isoformat()})
        self.assertEqual(resp.status_code, 400)

        resp = self.post({'applicationIds': [str(self.application.id)]})
        self.assertEqual(resp.status_code, 400)

        for bad in ({'scheduledFor': 12345}, {'scheduledFor': [SLOT.isoformat()]},
                    {'scheduledFor': SLOT.isoformat(), 'duration': '45'},
                    {'scheduledFor': SLOT.isoformat(), 'duration': True},
                    {'scheduledFor': SLOT.isoformat(), 'notes': ['x']}):
            resp = self.post(dict(bad, applicationIds=[str(self.application.id)]))
            self.assertEqual(resp.status_code, 400, bad)
            self.assertIn('error', resp.json())

        resp = self.post({
            'applicationIds': [str(self.application.id)], 'scheduledFor': SLOT.isoformat(), 'duration': 0,
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Interview.objects.count(), 0)


class RecruiterPagesTest(SchedulingFixtures):
    def setUp(self):
        super().setUp()
        self.client = Client()

    def test_pages_need_a_recruiter(self):
        resp = self.client.get(reverse('interview:interview_list'))
        self.assertEqual(resp.status_code, 302)

        candidate_user = User.objects.create_user(username='cand', password='pass')
        self.assertFalse(candidate_user.is_recruiter())
        self.client.login(username='cand', password='pass')
        resp = self.client.get(reverse('interview:interview_list'))
        self.assertEqual(resp.status_code, 403)

        self.assertTrue(self.recruiter.is_recruiter())
        self.client.login(username='recruiter', password='pass')
        resp = self.client.get(reverse('interview:interview_list'))
        self.assertEqual(resp.status_code, 200)

    def test_schedule_page(self):
        self.client.login(username='recruiter', password='pass')
        resp = self.client.get(reverse('interview:schedule'))
        self.assertEqual(resp.status_code, 200)

        resp = self.client.post(reverse('interview:schedule'), {
            'applications': [str(self.application.pk)],
            'scheduled_for': '2026-11-02 15:30',
            'duration': '',
            'notes': '',
        }, follow=True)
        self.assertRedirects(resp, reverse('interview:interview_list'))
        self.assertContains(resp, 'Scheduled 1 interview(s).')
        self.assertContains(resp, 'Jane Doe')
        self.assertEqual(Interview.objects.get().duration, 60)


class PdfViewsTest(SchedulingFixtures):
    def setUp(self):
        super().setUp()
        self.client = Client()
        self.client.login(username='recruiter', password='pass')
        self.interview = schedule_interviews(self.recruiter.pk, [str(self.application.id)], SLOT).interviews[0]

    def test_invitation_pdf_inline(self):
        resp = self.client.get(reverse('interview:interview_pdf', args=[self.interview.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp['Content-Type'], 'application/pdf')
        self.assertIn('inline', resp['Content-Disposition'])

    def test_invitation_pdf_download(self):
        resp = self.client.get(reverse('interview:interview_pdf', args=[self.interview.id]) + '?download=1')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('attachment', resp['Content-Disposition'])
        self.assertEqual(resp['Content-Type'], 'application/pdf')
