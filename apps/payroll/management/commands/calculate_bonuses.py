"""Management command to calculate the bonuses of a fiscal year.

Scores every employee with at least one CLOSED evaluation in the year,
applies the year's bonus configuration (with department and employee
overrides) and stores one bonus result per employee. Re-running overwrites
the previous results.

Example usage:
    python manage.py calculate_bonuses --year 2024
    python manage.py calculate_bonuses --year 2024 --department-id 3
    python manage.py calculate_bonuses --year 2024 --employee-id 42
"""

from django.core.management.base import BaseCommand, CommandError

from apps.payroll.exceptions import BonusConfigNotFound
from apps.payroll.services import calculate_bonus_batch


class Command(BaseCommand):
    """Management command to run the bonus batch."""

    help = "Calculate and store bonus results for a fiscal year"

    def add_arguments(self, parser):
        parser.add_argument(
            "--year",
            type=int,
            required=True,
            help="Fiscal year (e.g., 2024 for September 2024 - August 2025)",
        )
        scope = parser.add_mutually_exclusive_group()
        scope.add_argument(
            "--department-id",
            type=int,
            help="Only calculate employees of this department",
        )
        scope.add_argument(
            "--employee-id",
            type=int,
            help="Only calculate this employee",
        )

    def handle(self, *args, **options):
        year = options["year"]
        scope_filter = {
            key: options[key] for key in ("department_id", "employee_id") if options.get(key) is not None
        }

        try:
            result = calculate_bonus_batch(year, scope_filter=scope_filter)
        except BonusConfigNotFound:
            raise CommandError(f"No bonus configuration found for year {year}")

        for trace in result["sample"]:
            self.stdout.write(
                f"  - {trace['employee_code']}: score {trace['global_score']}, "
                f"fraction {trace['payout_fraction']}, amount {trace['amount']} ({trace['config_source']})"
            )
        for failure in result["failures"]:
            self.stdout.write(self.style.ERROR(f"  ! employee {failure['employee_id']}: {failure['error']}"))

        message = f"Stored {result['count']} bonus results for year {year}"
        if result["failures"]:
            self.stdout.write(self.style.WARNING(f"{message}, {len(result['failures'])} failed"))
        else:
            self.stdout.write(self.style.SUCCESS(message))
