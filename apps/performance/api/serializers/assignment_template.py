from django.db import transaction
from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.performance.constants import AssignmentKind, ClosureRule, GoalUnit
from apps.performance.models import SCOPE_TARGET_FIELDS, AssignmentTemplate, GoalDefinition, review_window_errors


class GoalDefinitionSerializer(serializers.ModelSerializer):
    """Serializer for GoalDefinition nested in a template.

    ``id`` is writable on update so existing goals (and the results pointing
    at them) are kept instead of recreated.
    """

    id = serializers.IntegerField(required=False)

    class Meta:
        model = GoalDefinition
        fields = [
            "id",
            "name",
            "expected_value",
            "unit",
            "operator",
            "weight",
            "accumulation_mode",
            "closure_rule",
            "threshold_periods",
            "tolerance",
            "effort_credit",
            "allow_overachievement",
            "overachievement_cap",
            "order",
        ]

    def validate(self, data):
        if data.get("threshold_periods") is not None and data.get("closure_rule") != ClosureRule.THRESHOLD_COUNT:
            raise serializers.ValidationError(
                {"threshold_periods": _("Threshold periods only apply to the threshold_count closure rule")}
            )
        if data.get("threshold_periods") == 0:
            raise serializers.ValidationError({"threshold_periods": _("Threshold periods must be at least 1")})
        if data.get("unit") == GoalUnit.BINARY and data.get("effort_credit"):
            raise serializers.ValidationError({"effort_credit": _("Binary goals cannot use effort credit")})
        return data


class AssignmentTemplateSerializer(serializers.ModelSerializer):
    """Serializer for AssignmentTemplate with nested, writable goals."""

    goals = GoalDefinitionSerializer(many=True, required=False)

    class Meta:
        model = AssignmentTemplate
        fields = [
            "id",
            "kind",
            "year",
            "scope_type",
            "department",
            "section",
            "employee",
            "name",
            "description",
            "process",
            "base_weight",
            "frequency",
            "window_start",
            "window_end",
            "rating_scale_max",
            "is_active",
            "goals",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]

    def _current(self, data, field):
        if field in data:
            return data[field]
        return getattr(self.instance, field, None) if self.instance else None

    def validate(self, data):
        """Check the scope target, the review window and the goal list."""
        errors = {}
        scope_type = self._current(data, "scope_type")
        target_field = SCOPE_TARGET_FIELDS.get(scope_type)

        if target_field and self._current(data, target_field) is None:
            errors[target_field] = _("This field is required for the selected scope type")
        for field in SCOPE_TARGET_FIELDS.values():
            if field != target_field and self._current(data, field) is not None:
                errors[field] = _("Only the target matching the scope type may be set")

        errors.update(
            review_window_errors(
                self._current(data, "year"),
                self._current(data, "window_start"),
                self._current(data, "window_end"),
            )
        )

        goals = data.get("goals")
        if goals and self._current(data, "kind") == AssignmentKind.APTITUDE:
            errors["goals"] = _("Aptitudes are rated directly and cannot have goals")

        if errors:
            raise serializers.ValidationError(errors)
        return data

    @transaction.atomic
    def create(self, validated_data):
        goals = validated_data.pop("goals", [])
        template = AssignmentTemplate.objects.create(**validated_data)
        GoalDefinition.objects.bulk_create(
            [
                GoalDefinition(template=template, **{key: value for key, value in goal.items() if key != "id"})
                for goal in goals
            ]
        )
        return template

    @transaction.atomic
    def update(self, instance, validated_data):
        goals = validated_data.pop("goals", None)
        instance = super().update(instance, validated_data)
        if goals is not None:
            self._sync_goals(instance, goals)
        return instance

    def _sync_goals(self, template, goals):
        """Update goals by id, create new ones and delete the ones left out."""
        existing = {goal.pk: goal for goal in template.goals.all()}
        kept = set()
        for data in goals:
            goal_id = data.pop("id", None)
            goal = existing.get(goal_id)
            if goal_id is not None and goal is None:
                raise serializers.ValidationError(
                    {"goals": _("Goal %(id)s does not belong to this template") % {"id": goal_id}}
                )
            if goal is None:
                goal = GoalDefinition.objects.create(template=template, **data)
            else:
                for field, value in data.items():
                    setattr(goal, field, value)
                goal.save()
            kept.add(goal.pk)
        template.goals.exclude(pk__in=kept).delete()


class AssignmentTemplateListSerializer(serializers.ModelSerializer):
    """Serializer for listing templates without their goals."""

    goal_count = serializers.IntegerField(source="goals.count", read_only=True)

    class Meta:
        model = AssignmentTemplate
        fields = [
            "id",
            "kind",
            "year",
            "scope_type",
            "department",
            "section",
            "employee",
            "name",
            "base_weight",
            "frequency",
            "is_active",
            "goal_count",
        ]


class PeriodSerializer(serializers.Serializer):
    code = serializers.CharField()
    index = serializers.IntegerField()
    start = serializers.DateField()
    end = serializers.DateField()


class MaterializeRequestSerializer(serializers.Serializer):
    dry_run = serializers.BooleanField(default=False, help_text="Only report what would be created")


class MaterializeResponseSerializer(serializers.Serializer):
    template_id = serializers.IntegerField()
    dry_run = serializers.BooleanField()
    created = serializers.IntegerField(help_text="Evaluations created (or that would be created on dry run)")
    skipped = serializers.IntegerField(help_text="Evaluations that already existed")
    sample = serializers.ListField(child=serializers.DictField())


class RecalculateRequestSerializer(serializers.Serializer):
    employee = serializers.IntegerField(required=False, help_text="Only rescore this employee's evaluations")


class RecalculateResponseSerializer(serializers.Serializer):
    template_id = serializers.IntegerField()
    employees = serializers.IntegerField()
    evaluations = serializers.IntegerField()
    changed = serializers.IntegerField()
