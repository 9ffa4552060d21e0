import decimal

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

SCALE_TYPE_CHOICES = [("linear", "Linear"), ("tiered", "Tiered")]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("hrm", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BonusConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("year", models.PositiveIntegerField(unique=True, verbose_name="Fiscal year")),
                (
                    "scale_type",
                    models.CharField(
                        choices=SCALE_TYPE_CHOICES,
                        default="linear",
                        max_length=10,
                        verbose_name="Scale type",
                    ),
                ),
                (
                    "min_fraction",
                    models.DecimalField(decimal_places=4, default=0, max_digits=6, verbose_name="Minimum fraction"),
                ),
                (
                    "max_fraction",
                    models.DecimalField(decimal_places=4, default=0, max_digits=6, verbose_name="Maximum fraction"),
                ),
                (
                    "floor_fraction",
                    models.DecimalField(decimal_places=4, default=0, max_digits=6, verbose_name="Floor fraction"),
                ),
                (
                    "threshold",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                        verbose_name="Threshold",
                    ),
                ),
                ("tiers", models.JSONField(blank=True, default=list, verbose_name="Tiers")),
                (
                    "target_multiple",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("1.00"),
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))],
                        verbose_name="Target multiple",
                    ),
                ),
                ("note", models.TextField(blank=True, verbose_name="Note")),
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
                "verbose_name": "Bonus configuration",
                "verbose_name_plural": "Bonus configurations",
                "db_table": "payroll_bonus_config",
                "ordering": ["-year"],
            },
        ),
        migrations.CreateModel(
            name="BonusConfigOverride",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "scope",
                    models.CharField(
                        choices=[("department", "Department"), ("employee", "Employee")],
                        max_length=20,
                        verbose_name="Scope",
                    ),
                ),
                (
                    "scale_type",
                    models.CharField(
                        blank=True,
                        choices=SCALE_TYPE_CHOICES,
                        max_length=10,
                        null=True,
                        verbose_name="Scale type",
                    ),
                ),
                ("min_fraction", models.DecimalField(blank=True, decimal_places=4, max_digits=6, null=True)),
                ("max_fraction", models.DecimalField(blank=True, decimal_places=4, max_digits=6, null=True)),
                ("floor_fraction", models.DecimalField(blank=True, decimal_places=4, max_digits=6, null=True)),
                (
                    "threshold",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                    ),
                ),
                ("tiers", models.JSONField(blank=True, null=True)),
                (
                    "target_multiple",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=6,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))],
                        verbose_name="Target multiple",
                    ),
                ),
                ("note", models.TextField(blank=True, verbose_name="Note")),
                (
                    "config",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="overrides",
                        to="payroll.bonusconfig",
                        verbose_name="Bonus configuration",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bonus_overrides",
                        to="hrm.department",
                        verbose_name="Department",
                    ),
                ),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bonus_overrides",
                        to="hrm.employee",
                        verbose_name="Employee",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bonus configuration override",
                "verbose_name_plural": "Bonus configuration overrides",
                "db_table": "payroll_bonus_config_override",
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("scope", "department")),
                        fields=("config", "department"),
                        name="payroll_bonus_override_unique_department",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("scope", "employee")),
                        fields=("config", "employee"),
                        name="payroll_bonus_override_unique_employee",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BonusResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("year", models.PositiveIntegerField(db_index=True, verbose_name="Fiscal year")),
                ("objective_score", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ("aptitude_score", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                (
                    "global_score",
                    models.DecimalField(decimal_places=2, default=0, max_digits=7, verbose_name="Global score"),
                ),
                (
                    "payout_fraction",
                    models.DecimalField(decimal_places=4, default=0, max_digits=6, verbose_name="Payout fraction"),
                ),
                (
                    "base_salary",
                    models.DecimalField(decimal_places=2, default=0, max_digits=20, verbose_name="Base salary"),
                ),
                (
                    "target_multiple",
                    models.DecimalField(decimal_places=2, default=0, max_digits=6, verbose_name="Target multiple"),
                ),
                (
                    "target_amount",
                    models.DecimalField(decimal_places=2, default=0, max_digits=20, verbose_name="Target amount"),
                ),
                (
                    "amount",
                    models.DecimalField(decimal_places=2, default=0, max_digits=20, verbose_name="Bonus amount"),
                ),
                (
                    "scale",
                    models.JSONField(
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        verbose_name="Resolved scale",
                    ),
                ),
                (
                    "config_source",
                    models.CharField(
                        choices=[
                            ("GLOBAL", "Global configuration"),
                            ("DEPARTMENT_OVERRIDE", "Department override"),
                            ("EMPLOYEE_OVERRIDE", "Employee override"),
                        ],
                        default="GLOBAL",
                        max_length=30,
                        verbose_name="Configuration source",
                    ),
                ),
                ("department_name", models.CharField(blank=True, max_length=200, verbose_name="Department name")),
                ("section_name", models.CharField(blank=True, max_length=200, verbose_name="Section name")),
                (
                    "trace",
                    models.JSONField(
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        verbose_name="Calculation trace",
                    ),
                ),
                ("calculated_at", models.DateTimeField(verbose_name="Calculated at")),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bonus_results",
                        to="hrm.employee",
                        verbose_name="Employee",
                    ),
                ),
            ],
            options={
                "verbose_name": "Bonus result",
                "verbose_name_plural": "Bonus results",
                "db_table": "payroll_bonus_result",
                "ordering": ["year", "employee"],
                "unique_together": {("employee", "year")},
            },
        ),
    ]
