# hireflow/urls.py
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from jobs import views as jobs_views
from interview import views as interview_views

urlpatterns = [
    path('admin/', admin.site.urls),

    # Auth (login/logout/password reset)
    path('accounts/', include('django.contrib.auth.urls')),

    # Home with featured listings
    path('', jobs_views.home, name='home'),

    # Job browsing + apply flow
    path('jobs/', include('jobs.urls', namespace='jobs')),

    # Recruiter interview pages
    path('interviews/', include('interview.urls', namespace='interview')),

    # JSON API
    path('api/jobs/', jobs_views.api_job_list, name='api_job_list'),
    path('api/jobs/<int:job_id>/', jobs_views.api_job_detail, name='api_job_detail'),
    path('api/resume-parser/', jobs_views.api_resume_parser, name='api_resume_parser'),
    path('api/applications/', jobs_views.api_applications, name='api_applications'),
    path('api/interviews/', interview_views.api_interviews, name='api_interviews'),
]

# Serve media in development (only when DEBUG=True)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
