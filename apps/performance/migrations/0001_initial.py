import decimal

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

EVALUATION_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("PENDING_EMPLOYEE", "Pending employee"),
    ("PENDING_HR", "Pending HR"),
    ("CLOSED", "Closed"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("hrm", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AssignmentTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[("objective", "Objective"), ("aptitude", "Aptitude")],
                        max_length=20,
                        verbose_name="Kind",
                    ),
                ),
                (
                    "year",
                    models.PositiveIntegerField(
                        db_index=True,
                        help_text="Fiscal year Y runs from September 1 of Y to August 31 of Y+1",
                        verbose_name="Fiscal year",
                    ),
                ),
                (
                    "scope_type",
                    models.CharField(
                        choices=[("department", "Department"), ("section", "Section"), ("employee", "Employee")],
                        max_length=20,
                        verbose_name="Scope type",
                    ),
                ),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("process", models.CharField(blank=True, max_length=255, verbose_name="Process")),
                (
                    "base_weight",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Weight of this assignment inside its block (0-100)",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                        verbose_name="Base weight",
                    ),
                ),
                (
                    "frequency",
                    models.CharField(
                        choices=[
                            ("monthly", "Monthly"),
                            ("quarterly", "Quarterly"),
                            ("semiannual", "Semiannual"),
                            ("annual", "Annual"),
                        ],
                        default="annual",
                        max_length=20,
                        verbose_name="Review frequency",
                    ),
                ),
                (
                    "window_start",
                    models.DateField(
                        blank=True,
                        help_text="Custom first day of the review window (defaults to fiscal year start)",
                        null=True,
                        verbose_name="Window start",
                    ),
                ),
                (
                    "window_end",
                    models.DateField(
                        blank=True,
                        help_text="Custom last day of the review window (defaults to fiscal year end)",
                        null=True,
                        verbose_name="Window end",
                    ),
                ),
                (
                    "rating_scale_max",
                    models.PositiveSmallIntegerField(
                        default=5,
                        help_text="Aptitudes are rated from 1 to this value",
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Rating scale maximum",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="Active")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        help_text="Target when scope_type is department",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignment_templates",
                        to="hrm.department",
                        verbose_name="Department",
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        help_text="Target when scope_type is employee",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignment_templates",
                        to="hrm.employee",
                        verbose_name="Employee",
                    ),
                ),
                (
                    "section",
                    models.ForeignKey(
                        blank=True,
                        help_text="Target when scope_type is section",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignment_templates",
                        to="hrm.section",
                        verbose_name="Section",
                    ),
                ),
            ],
            options={
                "verbose_name": "Assignment template",
                "verbose_name_plural": "Assignment templates",
                "db_table": "performance_assignment_template",
                "ordering": ["year", "kind", "name"],
                "indexes": [models.Index(fields=["year", "kind", "is_active"], name="perf_template_year_kind_idx")],
            },
        ),
        migrations.CreateModel(
            name="GoalDefinition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                (
                    "expected_value",
                    models.DecimalField(
                        decimal_places=4,
                        default=decimal.Decimal("0"),
                        max_digits=20,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))],
                        verbose_name="Expected value",
                    ),
                ),
                (
                    "unit",
                    models.CharField(
                        choices=[("binary", "Met / not met"), ("percentage", "Percentage"), ("numeric", "Numeric")],
                        default="numeric",
                        max_length=20,
                        verbose_name="Unit",
                    ),
                ),
                (
                    "operator",
                    models.CharField(
                        choices=[
                            (">=", "Greater than or equal"),
                            (">", "Greater than"),
                            ("<=", "Less than or equal"),
                            ("<", "Less than"),
                            ("=", "Equal"),
                        ],
                        default=">=",
                        max_length=2,
                        verbose_name="Operator",
                    ),
                ),
                (
                    "weight",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Empty means no explicit weight; 0 means the goal contributes nothing",
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                        verbose_name="Weight",
                    ),
                ),
                (
                    "accumulation_mode",
                    models.CharField(
                        choices=[("per_period", "Per period"), ("cumulative", "Cumulative")],
                        default="per_period",
                        max_length=20,
                        verbose_name="Accumulation mode",
                    ),
                ),
                (
                    "closure_rule",
                    models.CharField(
                        choices=[
                            ("average", "Average of periods"),
                            ("last_period", "Last period only"),
                            ("threshold_count", "Periods met threshold"),
                        ],
                        default="average",
                        max_length=20,
                        verbose_name="Closure rule",
                    ),
                ),
                (
                    "threshold_periods",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Periods that must be met under the threshold_count rule (empty means all)",
                        null=True,
                        verbose_name="Threshold periods",
                    ),
                ),
                (
                    "tolerance",
                    models.DecimalField(
                        decimal_places=4,
                        default=decimal.Decimal("0"),
                        max_digits=20,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))],
                        verbose_name="Tolerance",
                    ),
                ),
                (
                    "effort_credit",
                    models.BooleanField(
                        default=False,
                        help_text="Score proportionally to the expected value instead of all-or-nothing",
                        verbose_name="Effort credit",
                    ),
                ),
                ("allow_overachievement", models.BooleanField(default=False, verbose_name="Allow overachievement")),
                (
                    "overachievement_cap",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("120"),
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("100"))],
                        verbose_name="Overachievement cap",
                    ),
                ),
                ("order", models.PositiveSmallIntegerField(default=0, verbose_name="Order")),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="goals",
                        to="performance.assignmenttemplate",
                        verbose_name="Template",
                    ),
                ),
            ],
            options={
                "verbose_name": "Goal definition",
                "verbose_name_plural": "Goal definitions",
                "db_table": "performance_goal_definition",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Evaluation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "period_code",
                    models.CharField(
                        help_text="Stable code of the tracked period, e.g. 2024M09 or 2024Q1",
                        max_length=16,
                        verbose_name="Period code",
                    ),
                ),
                ("year", models.PositiveIntegerField(db_index=True, verbose_name="Fiscal year")),
                (
                    "status",
                    models.CharField(
                        choices=EVALUATION_STATUS_CHOICES,
                        db_index=True,
                        default="DRAFT",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "score",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Derived score of this period",
                        max_digits=7,
                        null=True,
                        verbose_name="Score",
                    ),
                ),
                (
                    "rating",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Aptitude rating on the template's scale",
                        max_digits=5,
                        null=True,
                        verbose_name="Rating",
                    ),
                ),
                ("manager_comment", models.TextField(blank=True, verbose_name="Manager comment")),
                ("employee_comment", models.TextField(blank=True, verbose_name="Employee comment")),
                ("hr_comment", models.TextField(blank=True, verbose_name="HR comment")),
                (
                    "acknowledgement_status",
                    models.CharField(
                        blank=True,
                        choices=[("AGREE", "Agree"), ("CONTEST", "Contest")],
                        max_length=10,
                        verbose_name="Acknowledgement",
                    ),
                ),
                ("acknowledged_at", models.DateTimeField(blank=True, null=True, verbose_name="Acknowledged at")),
                (
                    "submitted_to_employee_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Submitted to employee at"),
                ),
                ("submitted_to_hr_at", models.DateTimeField(blank=True, null=True, verbose_name="Submitted to HR at")),
                ("closed_at", models.DateTimeField(blank=True, null=True, verbose_name="Closed at")),
                (
                    "acknowledged_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Acknowledged by",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        help_text="Employee being evaluated",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="evaluations",
                        to="hrm.employee",
                        verbose_name="Employee",
                    ),
                ),
                (
                    "evaluator",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="evaluations_as_evaluator",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Evaluator",
                    ),
                ),
                (
                    "hr_reviewer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="evaluations_as_hr_reviewer",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="HR reviewer",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="evaluations",
                        to="performance.assignmenttemplate",
                        verbose_name="Template",
                    ),
                ),
            ],
            options={
                "verbose_name": "Evaluation",
                "verbose_name_plural": "Evaluations",
                "db_table": "performance_evaluation",
                "ordering": ["employee_id", "template_id", "period_code"],
                "indexes": [
                    models.Index(fields=["year", "status"], name="perf_eval_year_status_idx"),
                    models.Index(fields=["template", "period_code"], name="perf_eval_template_period_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("employee", "template", "period_code"),
                        name="performance_evaluation_unique_period",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="GoalResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("goal_name", models.CharField(blank=True, max_length=255, verbose_name="Goal name")),
                (
                    "submitted_value",
                    models.DecimalField(
                        blank=True, decimal_places=4, max_digits=20, null=True, verbose_name="Submitted value"
                    ),
                ),
                (
                    "evaluated_value",
                    models.DecimalField(
                        blank=True,
                        decimal_places=4,
                        help_text="Value the scorer used; the running sum for cumulative goals",
                        max_digits=20,
                        null=True,
                        verbose_name="Evaluated value",
                    ),
                ),
                ("score", models.DecimalField(decimal_places=2, default=0, max_digits=7, verbose_name="Score")),
                ("met", models.BooleanField(default=False, verbose_name="Met")),
                (
                    "evaluation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="goal_results",
                        to="performance.evaluation",
                        verbose_name="Evaluation",
                    ),
                ),
                (
                    "goal",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="results",
                        to="performance.goaldefinition",
                        verbose_name="Goal",
                    ),
                ),
            ],
            options={
                "verbose_name": "Goal result",
                "verbose_name_plural": "Goal results",
                "db_table": "performance_goal_result",
                "ordering": ["evaluation_id", "goal__order", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("evaluation", "goal"), name="performance_goal_result_unique_goal")
                ],
            },
        ),
        migrations.CreateModel(
            name="EvaluationTimelineEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("CREATE", "Create"),
                            ("EDIT", "Edit"),
                            ("SUBMIT_TO_EMPLOYEE", "Submit to employee"),
                            ("EMPLOYEE_ACKNOWLEDGE", "Employee acknowledge"),
                            ("EMPLOYEE_CONTEST", "Employee contest"),
                            ("SUBMIT_TO_HR", "Submit to HR"),
                            ("CLOSE", "Close"),
                            ("REOPEN", "Reopen"),
                            ("BULK_CLOSE", "Bulk close"),
                            ("RECALCULATE", "Recalculate"),
                        ],
                        max_length=30,
                        verbose_name="Action",
                    ),
                ),
                ("from_status", models.CharField(blank=True, max_length=20, verbose_name="From status")),
                ("to_status", models.CharField(blank=True, max_length=20, verbose_name="To status")),
                ("note", models.TextField(blank=True, verbose_name="Note")),
                (
                    "snapshot",
                    models.JSONField(
                        blank=True,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        null=True,
                        verbose_name="Snapshot",
                    ),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Actor",
                    ),
                ),
                (
                    "evaluation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="timeline",
                        to="performance.evaluation",
                        verbose_name="Evaluation",
                    ),
                ),
            ],
            options={
                "verbose_name": "Evaluation timeline entry",
                "verbose_name_plural": "Evaluation timeline entries",
                "db_table": "performance_evaluation_timeline",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="AssignmentOverride",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("year", models.PositiveIntegerField(verbose_name="Fiscal year")),
                (
                    "excluded",
                    models.BooleanField(
                        default=False,
                        help_text="Skip this assignment entirely for the employee",
                        verbose_name="Excluded",
                    ),
                ),
                (
                    "weight",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Replacement effective weight (0-100)",
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                        verbose_name="Weight",
                    ),
                ),
                ("note", models.TextField(blank=True, verbose_name="Note")),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignment_overrides",
                        to="hrm.employee",
                        verbose_name="Employee",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="overrides",
                        to="performance.assignmenttemplate",
                        verbose_name="Template",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Updated by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Assignment override",
                "verbose_name_plural": "Assignment overrides",
                "db_table": "performance_assignment_override",
                "unique_together": {("employee", "year", "template")},
                "indexes": [models.Index(fields=["year", "employee"], name="perf_override_year_emp_idx")],
            },
        ),
    ]
