from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("jobs", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Interview",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("scheduled_for", models.DateTimeField()),
                ("duration", models.PositiveIntegerField(default=60, help_text="minutes", validators=[django.core.validators.MinValueValidator(1)])),
                ("meeting_url", models.URLField(max_length=500)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("application", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="interviews", to="jobs.application")),
                ("candidate", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="interviews", to="jobs.candidate")),
                ("scheduler", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="scheduled_interviews", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["scheduled_for"],
            },
        ),
    ]
