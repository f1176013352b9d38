from django.contrib import admin

from .models import Job, Candidate, Application


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'department', 'location', 'employment_type', 'posted_date', 'is_active')
    list_filter = ('is_active', 'employment_type', 'department')
    search_fields = ('title', 'department', 'description')


@admin.register(Candidate)
class CandidateAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'phone', 'updated_at')
    search_fields = ('name', 'email')


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ('candidate', 'job', 'status', 'applied_at')
    list_filter = ('status',)
    search_fields = ('candidate__name', 'candidate__email', 'job__title')
