# interview/admin.py
from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Interview


@admin.register(Interview)
class InterviewAdmin(admin.ModelAdmin):
    list_display = ('candidate', 'job_title', 'scheduled_for', 'duration', 'scheduler', 'pdf_link')
    list_filter = ('scheduled_for',)
    search_fields = ('candidate__name', 'candidate__email', 'application__job__title')
    readonly_fields = ('meeting_url', 'created_at')

    def job_title(self, obj):
        return obj.application.job.title
    job_title.short_description = 'Job'

    def pdf_link(self, obj):
        url = reverse('interview:interview_pdf', args=[obj.id])
        return format_html('<a href="{}?download=1">PDF</a>', url)
    pdf_link.short_description = 'PDF'
