# jobs/views.py
import json
import logging

from django.conf import settings
from django.contrib import messages
from django.db.models import Q
from django.http import JsonResponse, HttpResponseBadRequest
from django.shortcuts import render, get_object_or_404, redirect
from django.urls import reverse
from django.views.decorators.http import require_http_methods

from .collaborators import (
    MessagesNotifier,
    RedirectNavigator,
    ServiceApplicationSubmitter,
    ServiceResumeParser,
)
from .forms import ApplicationDetailsForm, ResumeUploadForm
from .intake import ApplicationIntake, IntakeState, IntakeTransitionError
from .models import Candidate, Job
from .services import parse_resume, submit_application

logger = logging.getLogger(__name__)

FEATURED_JOB_COUNT = 2

# fields the review step posts back; everything else in IntakeDetails is parser-owned
REVIEW_FIELDS = ('name', 'email', 'phone', 'skills', 'experience', 'cover_letter')


# -------------------------
# Listing pages
# -------------------------
def home(request):
    jobs = Job.objects.filter(is_active=True)[:FEATURED_JOB_COUNT]
    return render(request, 'home.html', {'jobs': jobs})


def job_list(request):
    qs = Job.objects.filter(is_active=True)
    q = request.GET.get('q', '').strip()
    location = request.GET.get('location', '').strip()

    if q:
        qs = qs.filter(
            Q(title__icontains=q) |
            Q(department__icontains=q) |
            Q(description__icontains=q)
        )
    if location:
        qs = qs.filter(location__icontains=location)

    return render(request, 'jobs/job_list.html', {'jobs': qs, 'q': q, 'location': location})


def job_detail(request, job_id):
    job = get_object_or_404(Job, id=job_id, is_active=True)
    return render(request, 'jobs/job_detail.html', {'job': job})


# -------------------------
# Apply flow
# -------------------------
def _intake_key(job_id):
    return f"intake:{job_id}"


def _session_checkpoint(request, job_id):
    # persist the SUBMITTING marker before the submitter runs so a concurrent request sees it
    def save(intake):
        request.session[_intake_key(job_id)] = intake.to_session()
        request.session.save()
    return save


def _build_intake(request, job, navigator):
    return ApplicationIntake.from_session(
        request.session.get(_intake_key(job.id)),
        stale_after=settings.APPLICATION_SUBMIT_TIMEOUT_SECONDS,
        job_id=job.id,
        parser=ServiceResumeParser(),
        submitter=ServiceApplicationSubmitter(),
        notifier=MessagesNotifier(request),
        navigator=navigator,
        confirmation_url=reverse('jobs:apply_success', args=[job.id]),
        checkpoint=_session_checkpoint(request, job.id),
    )


def _apply_edits(intake, data):
    for name in REVIEW_FIELDS:
        if name in data:
            intake.edit_field(name, data[name])


@require_http_methods(["GET", "POST"])
def apply(request, job_id):
    """
    Two-step apply wizard. The intake state lives in the session between requests;
    every POST names an action: upload, continue, back or submit.
    """
    job = get_object_or_404(Job, id=job_id, is_active=True)
    navigator = RedirectNavigator()
    intake = _build_intake(request, job, navigator)
    if intake.state is IntakeState.SUCCEEDED:
        # a finished flow from an earlier visit; start over
        request.session.pop(_intake_key(job.id), None)
        intake = _build_intake(request, job, navigator)

    upload_form = ResumeUploadForm()
    details_form = None

    if request.method == 'POST':
        action = request.POST.get('action', '')
        if action not in ('upload', 'continue', 'back', 'submit'):
            return HttpResponseBadRequest("Unknown action")
        if intake.state is IntakeState.SUBMITTING:
            messages.warning(request, "Your application is already being submitted. Please wait.")
            return redirect('jobs:job_apply', job_id=job.id)

        invalid = False
        try:
            if action == 'upload':
                upload_form = ResumeUploadForm(request.POST, request.FILES)
                if upload_form.is_valid():
                    intake.upload_resume(upload_form.cleaned_data['file'])
                else:
                    invalid = True
            elif action == 'continue':
                intake.continue_to_review()
            elif action == 'back':
                _apply_edits(intake, request.POST)
                intake.go_back()
            else:
                _apply_edits(intake, request.POST)
                details_form = ApplicationDetailsForm(request.POST)
                if details_form.is_valid():
                    intake.submit()
                else:
                    invalid = True
        except IntakeTransitionError as e:
            messages.error(request, str(e))

        request.session[_intake_key(job.id)] = intake.to_session()

        if navigator.location:
            return redirect(navigator.location)
        if not invalid:
            return redirect('jobs:job_apply', job_id=job.id)

    if details_form is None:
        details_form = ApplicationDetailsForm(initial={
            name: getattr(intake.details, name) for name in REVIEW_FIELDS
        })

    return render(request, 'jobs/apply.html', {
        'job': job,
        'intake': intake,
        'step': 1 if intake.state is IntakeState.AWAITING_RESUME else 2,
        'upload_form': upload_form,
        'details_form': details_form,
    })


def apply_success(request, job_id):
    job = get_object_or_404(Job, id=job_id)
    request.session.pop(_intake_key(job.id), None)
    return render(request, 'jobs/apply_success.html', {'job': job})


# -------------------------
# JSON API
# -------------------------
@require_http_methods(["GET"])
def api_job_list(request):
    qs = Job.objects.filter(is_active=True)
    if request.GET.get('featured') == '1':
        qs = qs[:FEATURED_JOB_COUNT]
    return JsonResponse([job.to_dict() for job in qs], safe=False)


@require_http_methods(["GET"])
def api_job_detail(request, job_id):
    try:
        job = Job.objects.get(id=job_id, is_active=True)
    except Job.DoesNotExist:
        return JsonResponse({'error': 'Job not found'}, status=404)
    return JsonResponse(job.to_dict(detail=True))


@require_http_methods(["POST"])
def api_resume_parser(request):
    if 'file' not in request.FILES:
        return JsonResponse({'error': 'No file provided'}, status=400)

    form = ResumeUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return JsonResponse({'error': form.errors['file'][0]}, status=400)

    try:
        parsed = parse_resume(form.cleaned_data['file'])
    except Exception:
        logger.exception("Error parsing resume")
        return JsonResponse({'error': 'Failed to parse resume'}, status=500)
    return JsonResponse(parsed)


@require_http_methods(["POST"])
def api_applications(request):
    try:
        payload = json.loads(request.body.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        return JsonResponse({'error': 'Invalid JSON'}, status=400)

    if not isinstance(payload, dict) or not payload.get('jobId') or not payload.get('candidateId'):
        return JsonResponse({'error': 'jobId and candidateId are required'}, status=400)

    try:
        application = submit_application(
            job_id=payload['jobId'],
            candidate_id=payload['candidateId'],
            resume_url=payload.get('resumeUrl') or '',
            cover_letter=payload.get('coverLetter') or '',
        )
    except Job.DoesNotExist:
        return JsonResponse({'error': 'Job not found'}, status=404)
    except Candidate.DoesNotExist:
        return JsonResponse({'error': 'Candidate not found'}, status=404)
    except Exception:
        logger.exception("Error submitting application")
        return JsonResponse({'error': 'Failed to submit application'}, status=500)

    return JsonResponse(application.to_dict(), status=201)
