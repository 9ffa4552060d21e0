"""Management command to materialize DRAFT evaluations.

Creates the missing evaluations for every employee a template applies to
and every period the template tracks. Existing evaluations are left alone,
so the command is safe to re-run.

Example usage:
    python manage.py generate_evaluations --year 2024
    python manage.py generate_evaluations --year 2024 --template-id 12 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from apps.performance.exceptions import TemplateNotFound
from apps.performance.services import materialize_year


class Command(BaseCommand):
    """Management command to materialize evaluations for a fiscal year."""

    help = "Create missing DRAFT evaluations for the active templates of a fiscal year"

    def add_arguments(self, parser):
        parser.add_argument(
            "--year",
            type=int,
            required=True,
            help="Fiscal year (e.g., 2024 for September 2024 - August 2025)",
        )
        parser.add_argument(
            "--template-id",
            type=int,
            help="Only materialize this template",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would be created without writing anything",
        )

    def handle(self, *args, **options):
        year = options["year"]
        template_id = options.get("template_id")
        dry_run = options.get("dry_run", False)

        try:
            result = materialize_year(year, template_id=template_id, dry_run=dry_run)
        except TemplateNotFound:
            raise CommandError(f"No active template {template_id} found for year {year}")

        if not result["templates"]:
            self.stdout.write(self.style.WARNING(f"No active templates found for year {year}"))
            return

        label = "to create" if dry_run else "created"
        for item in result["templates"]:
            self.stdout.write(f"Template {item['template_id']}: {item['created']} {label}, {item['skipped']} existing")
            for sample in item["sample"]:
                self.stdout.write(f"  - {sample['employee_code']} {sample['period_code']}")

        if dry_run:
            self.stdout.write(self.style.WARNING(f"Dry run: {result['created']} evaluations would be created"))
        else:
            self.stdout.write(
                self.style.SUCCESS(f"Created {result['created']} evaluations ({result['skipped']} already existed)")
            )
