# interview/views.py
import json
import logging

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods

from accounts.decorators import api_login_required, recruiter_required
from .forms import InterviewSlotForm, ScheduleInterviewsForm
from .models import Interview
from .scheduling import Outcome, list_interviews, schedule_interviews
from .utils import render_invitation_pdf

logger = logging.getLogger(__name__)


def _first_error(form):
    for field, errors in form.errors.items():
        label = field if field != '__all__' else 'request'
        return f"{label}: {errors[0]}"
    return "Invalid request"


# -------------------------
# JSON API
# -------------------------
@require_http_methods(["GET", "POST"])
@api_login_required
def api_interviews(request):
    """
    GET  -> every interview with its application (and job), candidate and scheduler.
    POST -> {"applicationIds": [...], "scheduledFor": "...", "duration": 60, "notes": "..."};
            answers the list of interviews that were created.
    """
    if request.method == 'GET':
        try:
            data = [interview.to_dict(related=True) for interview in list_interviews()]
        except Exception:
            logger.exception("Error fetching interviews")
            return JsonResponse({'error': 'Failed to fetch interviews'}, status=500)
        return JsonResponse(data, safe=False)

    try:
        payload = json.loads(request.body.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'error': 'Request body must be a JSON object'}, status=400)

    application_ids = payload.get('applicationIds')
    if not isinstance(application_ids, list) or not all(isinstance(i, str) for i in application_ids):
        return JsonResponse({'error': 'applicationIds must be a list of strings'}, status=400)

    if not isinstance(payload.get('scheduledFor'), str):
        return JsonResponse({'error': 'scheduledFor must be an ISO 8601 date-time string'}, status=400)
    duration = payload.get('duration')
    if duration is not None and (isinstance(duration, bool) or not isinstance(duration, int)):
        return JsonResponse({'error': 'duration must be a whole number of minutes'}, status=400)
    if payload.get('notes') is not None and not isinstance(payload['notes'], str):
        return JsonResponse({'error': 'notes must be a string'}, status=400)

    form = InterviewSlotForm(data={
        'scheduled_for': payload.get('scheduledFor'),
        'duration': payload.get('duration'),
        'notes': payload.get('notes') or '',
    })
    if not form.is_valid():
        return JsonResponse({'error': _first_error(form)}, status=400)

    try:
        report = schedule_interviews(
            actor_id=request.user.pk,
            application_ids=application_ids,
            scheduled_for=form.cleaned_data['scheduled_for'],
            duration=form.cleaned_data['duration'],
            notes=form.cleaned_data['notes'],
        )
    except get_user_model().DoesNotExist:
        return JsonResponse({'error': 'User not found'}, status=404)
    except Exception:
        logger.exception("Error scheduling interviews")
        return JsonResponse({'error': 'Failed to schedule interviews'}, status=500)

    return JsonResponse([interview.to_dict() for interview in report.interviews], safe=False)


# -------------------------
# Recruiter pages
# -------------------------
@recruiter_required
def interview_list(request):
    return render(request, 'interview/interview_list.html', {'interviews': list_interviews()})


@recruiter_required
def schedule(request):
    if request.method == 'POST':
        form = ScheduleInterviewsForm(request.POST)
        if form.is_valid():
            try:
                report = schedule_interviews(
                    actor_id=request.user.pk,
                    application_ids=[str(a.pk) for a in form.cleaned_data['applications']],
                    scheduled_for=form.cleaned_data['scheduled_for'],
                    duration=form.cleaned_data['duration'],
                    notes=form.cleaned_data['notes'],
                )
            except Exception as e:
                logger.exception("Error scheduling interviews from the recruiter page")
                messages.error(request, f"Failed to schedule interviews: {e}")
            else:
                created = report.count(Outcome.CREATED)
                messages.success(request, f"Scheduled {created} interview(s).")
                for outcome in report.outcomes:
                    if outcome.status is not Outcome.CREATED:
                        messages.warning(request, f"Application {outcome.application_id}: {outcome.reason}")
                    elif not outcome.notified:
                        messages.warning(request, f"Application {outcome.application_id}: invitation email was not sent.")
                return redirect('interview:interview_list')
    else:
        form = ScheduleInterviewsForm()
    return render(request, 'interview/schedule.html', {'form': form})


@recruiter_required
def interview_pdf(request, pk):
    """
    Invitation as PDF. ?download=1 sends it as an attachment instead of inline.
    """
    interview = get_object_or_404(
        Interview.objects.select_related('application__job', 'candidate', 'scheduler'), pk=pk,
    )
    pdf_bytes = render_invitation_pdf(interview)
    if not pdf_bytes:
        return HttpResponse("Failed to generate PDF", status=500)

    filename = f"interview_{interview.id}.pdf"
    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    disposition = "attachment" if request.GET.get("download") == "1" else "inline"
    response["Content-Disposition"] = f'{disposition}; filename="{filename}"'
    return response
