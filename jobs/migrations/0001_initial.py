from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Candidate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(blank=True, max_length=64)),
                ("skills", models.JSONField(blank=True, default=list)),
                ("experience", models.TextField(blank=True)),
                ("education", models.JSONField(blank=True, default=list)),
                ("resume_url", models.CharField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="Job",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("department", models.CharField(blank=True, max_length=120)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("employment_type", models.CharField(choices=[("Full-time", "Full-time"), ("Part-time", "Part-time"), ("Contract", "Contract"), ("Internship", "Internship")], default="Full-time", max_length=32)),
                ("description", models.TextField()),
                ("requirements", models.JSONField(blank=True, default=list)),
                ("responsibilities", models.JSONField(blank=True, default=list)),
                ("benefits", models.JSONField(blank=True, default=list)),
                ("posted_date", models.DateField(default=django.utils.timezone.localdate)),
                ("is_active", models.BooleanField(default=True)),
                ("posted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="posted_jobs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-posted_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Application",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("resume_url", models.CharField(blank=True, max_length=500)),
                ("cover_letter", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("submitted", "Submitted"), ("interview_scheduled", "Interview Scheduled"), ("rejected", "Rejected"), ("hired", "Hired")], default="submitted", max_length=32)),
                ("applied_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("candidate", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="jobs.candidate")),
                ("job", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="applications", to="jobs.job")),
            ],
            options={
                "ordering": ["-applied_at"],
            },
        ),
    ]
