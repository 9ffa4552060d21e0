from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from apps.payroll.constants import DEFAULT_TARGET_MULTIPLE, BonusOverrideScope, BonusScaleType
from apps.payroll.utils.bonus_calculation import BonusScale, BonusTier, validate_scale
from libs.decimals import to_decimal
from libs.models import BaseModel


def _tiers_from_json(items):
    return [
        BonusTier(min_score=to_decimal(item.get("min_score")), payout=to_decimal(item.get("payout")))
        for item in items or []
    ]


class BonusConfig(BaseModel):
    """Bonus configuration of a fiscal year.

    Holds the default scale (linear or tiered) and the target multiple of the
    base salary. Department and employee overrides in ``overrides`` replace
    the scale and/or target for their scope.

    Attributes:
        min_fraction: Linear payout at the threshold score
        max_fraction: Linear payout at score 100
        floor_fraction: Payout below the threshold (or below the lowest tier)
        threshold: Qualifying score of the linear scale
        tiers: Tiered brackets, ``[{"min_score": "90", "payout": "0.2"}, ...]``
        target_multiple: Target bonus as a multiple of the base salary
    """

    year = models.PositiveIntegerField(unique=True, verbose_name="Fiscal year")
    scale_type = models.CharField(
        max_length=10,
        choices=BonusScaleType.choices,
        default=BonusScaleType.LINEAR,
        verbose_name="Scale type",
    )
    min_fraction = models.DecimalField(max_digits=6, decimal_places=4, default=0, verbose_name="Minimum fraction")
    max_fraction = models.DecimalField(max_digits=6, decimal_places=4, default=0, verbose_name="Maximum fraction")
    floor_fraction = models.DecimalField(max_digits=6, decimal_places=4, default=0, verbose_name="Floor fraction")
    threshold = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name="Threshold",
    )
    tiers = models.JSONField(default=list, blank=True, verbose_name="Tiers")
    target_multiple = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal(DEFAULT_TARGET_MULTIPLE),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name="Target multiple",
    )
    note = models.TextField(blank=True, verbose_name="Note")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Updated by",
    )

    class Meta:
        verbose_name = "Bonus configuration"
        verbose_name_plural = "Bonus configurations"
        db_table = "payroll_bonus_config"
        ordering = ["-year"]

    def __str__(self):
        return f"Bonus config {self.year} ({self.scale_type})"

    def default_scale(self) -> BonusScale:
        return BonusScale(
            scale_type=self.scale_type,
            min_fraction=to_decimal(self.min_fraction),
            max_fraction=to_decimal(self.max_fraction),
            threshold=to_decimal(self.threshold),
            floor_fraction=to_decimal(self.floor_fraction),
            tiers=_tiers_from_json(self.tiers),
        )

    def clean(self):
        errors = validate_scale(self.default_scale())
        if errors:
            raise ValidationError(errors)


class BonusConfigOverride(BaseModel):
    """Department- or employee-level replacement of the year's scale and target.

    A null ``scale_type`` leaves the scale to the next layer; a null
    ``target_multiple`` does the same for the target. Unset numeric fields
    of an overriding scale are taken from the year's configuration.
    """

    config = models.ForeignKey(
        BonusConfig,
        on_delete=models.CASCADE,
        related_name="overrides",
        verbose_name="Bonus configuration",
    )
    scope = models.CharField(max_length=20, choices=BonusOverrideScope.choices, verbose_name="Scope")
    department = models.ForeignKey(
        "hrm.Department",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="bonus_overrides",
        verbose_name="Department",
    )
    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="bonus_overrides",
        verbose_name="Employee",
    )
    scale_type = models.CharField(
        max_length=10,
        choices=BonusScaleType.choices,
        null=True,
        blank=True,
        verbose_name="Scale type",
    )
    min_fraction = models.DecimalField(max_digits=6, decimal_places=4, null=True, blank=True)
    max_fraction = models.DecimalField(max_digits=6, decimal_places=4, null=True, blank=True)
    floor_fraction = models.DecimalField(max_digits=6, decimal_places=4, null=True, blank=True)
    threshold = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    tiers = models.JSONField(null=True, blank=True)
    target_multiple = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name="Target multiple",
    )
    note = models.TextField(blank=True, verbose_name="Note")

    class Meta:
        verbose_name = "Bonus configuration override"
        verbose_name_plural = "Bonus configuration overrides"
        db_table = "payroll_bonus_config_override"
        constraints = [
            models.UniqueConstraint(
                fields=["config", "department"],
                condition=Q(scope=BonusOverrideScope.DEPARTMENT),
                name="payroll_bonus_override_unique_department",
            ),
            models.UniqueConstraint(
                fields=["config", "employee"],
                condition=Q(scope=BonusOverrideScope.EMPLOYEE),
                name="payroll_bonus_override_unique_employee",
            ),
        ]

    def __str__(self):
        target = self.employee_id if self.scope == BonusOverrideScope.EMPLOYEE else self.department_id
        return f"{self.config_id} {self.scope} {target}"

    def get_scale(self, fallback: BonusScale):
        """Overriding scale, or None when this override leaves the scale alone."""
        if not self.scale_type:
            return None

        def pick(value, default):
            return default if value is None else to_decimal(value)

        return BonusScale(
            scale_type=self.scale_type,
            min_fraction=pick(self.min_fraction, fallback.min_fraction),
            max_fraction=pick(self.max_fraction, fallback.max_fraction),
            threshold=pick(self.threshold, fallback.threshold),
            floor_fraction=pick(self.floor_fraction, fallback.floor_fraction),
            tiers=fallback.tiers if self.tiers is None else _tiers_from_json(self.tiers),
        )

    def clean(self):
        errors = {}
        if self.scope == BonusOverrideScope.DEPARTMENT and not self.department_id:
            errors["department"] = "Department overrides need a department."
        if self.scope == BonusOverrideScope.EMPLOYEE and not self.employee_id:
            errors["employee"] = "Employee overrides need an employee."
        if not self.scale_type and self.target_multiple is None:
            errors["scale_type"] = "Override the scale, the target multiple, or both."
        if errors:
            raise ValidationError(errors)

        if self.scale_type and self.config_id:
            scale_errors = validate_scale(self.get_scale(self.config.default_scale()))
            if scale_errors:
                raise ValidationError(scale_errors)
