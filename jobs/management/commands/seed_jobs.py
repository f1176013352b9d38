# jobs/management/commands/seed_jobs.py
import datetime
import json
import os

from django.core.management.base import BaseCommand, CommandError

from jobs.models import Job

DEFAULT_JOBS_PATH = os.path.join(os.path.dirname(__file__), '..', '..', 'data', 'jobs.json')


class Command(BaseCommand):
    help = (
        "Load job postings from a JSON file (defaults to the bundled jobs/data/jobs.json).\n\n"
        "Expected format: a JSON array of objects like:\n"
        '[{"title":"Frontend Developer","department":"Engineering","location":"Remote","type":"Full-time",'
        '"description":"...","requirements":["..."],"responsibilities":["..."],"benefits":["..."],'
        '"postedDate":"2023-10-15"}, ...]\n'
        "Postings are matched by title + department; existing ones are skipped unless --update is given."
    )

    def add_arguments(self, parser):
        parser.add_argument('path', nargs='?', default=DEFAULT_JOBS_PATH, help='Path to the JSON file to load.')
        parser.add_argument('--update', action='store_true', help='Update existing postings (match by title+department).')

    def handle(self, *args, **options):
        path = options['path']
        update = options['update']

        if not os.path.exists(path):
            raise CommandError(f"File not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise CommandError(f"Failed to load JSON: {exc}")

        if not isinstance(data, list):
            raise CommandError("JSON root must be a list/array of job objects.")

        created = 0
        updated = 0
        skipped = 0
        errors = 0

        for idx, item in enumerate(data, start=1):
            try:
                title = str(item.get('title', '')).strip()
                department = str(item.get('department', '')).strip()
                if not title:
                    self.stderr.write(f"[{idx}] Skipping: missing title.")
                    skipped += 1
                    continue

                defaults = {
                    'location': item.get('location', '') or '',
                    'employment_type': item.get('type', 'Full-time') or 'Full-time',
                    'description': item.get('description', '') or '',
                    'requirements': list(item.get('requirements') or []),
                    'responsibilities': list(item.get('responsibilities') or []),
                    'benefits': list(item.get('benefits') or []),
                }
                if item.get('postedDate'):
                    defaults['posted_date'] = datetime.date.fromisoformat(item['postedDate'])

                existing = Job.objects.filter(title=title, department=department).first()
                if existing:
                    if update:
                        for k, v in defaults.items():
                            setattr(existing, k, v)
                        existing.save()
                        updated += 1
                        self.stdout.write(f"[{idx}] Updated: '{title}'")
                    else:
                        skipped += 1
                        self.stdout.write(f"[{idx}] Exists, skipped: '{title}'")
                    continue

                Job.objects.create(title=title, department=department, **defaults)
                created += 1
                self.stdout.write(f"[{idx}] Created: '{title}'")

            except (AttributeError, TypeError, ValueError) as e:
                errors += 1
                self.stderr.write(f"[{idx}] ERROR: {e}")

        self.stdout.write(self.style.SUCCESS(
            f"Seed finished. Created={created}, Updated={updated}, Skipped={skipped}, Errors={errors}"
        ))
