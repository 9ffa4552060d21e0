from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.hrm.models import Employee
from apps.performance.constants import EvaluationAction
from apps.performance.models import AssignmentTemplate, Evaluation, EvaluationTimelineEntry, GoalResult
from apps.performance.services.workflow import TRANSITIONS, EvaluationWorkflow


class GoalResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = GoalResult
        fields = ["id", "goal", "goal_name", "submitted_value", "evaluated_value", "score", "met"]
        read_only_fields = fields


class EvaluationTimelineEntrySerializer(serializers.ModelSerializer):
    actor_username = serializers.CharField(source="actor.username", read_only=True, default=None)

    class Meta:
        model = EvaluationTimelineEntry
        fields = [
            "id",
            "actor",
            "actor_username",
            "action",
            "from_status",
            "to_status",
            "note",
            "snapshot",
            "created_at",
        ]
        read_only_fields = fields


class EvaluationListSerializer(serializers.ModelSerializer):
    """Compact evaluation row for listings."""

    employee_code = serializers.CharField(source="employee.code", read_only=True)
    employee_fullname = serializers.CharField(source="employee.fullname", read_only=True)
    template_name = serializers.CharField(source="template.name", read_only=True)
    kind = serializers.CharField(source="template.kind", read_only=True)

    class Meta:
        model = Evaluation
        fields = [
            "id",
            "employee",
            "employee_code",
            "employee_fullname",
            "template",
            "template_name",
            "kind",
            "period_code",
            "year",
            "status",
            "score",
            "rating",
            "acknowledgement_status",
            "updated_at",
        ]
        read_only_fields = fields


class EvaluationSerializer(EvaluationListSerializer):
    """Full evaluation with goal results, timeline and the actions open to the caller."""

    goal_results = GoalResultSerializer(many=True, read_only=True)
    timeline = EvaluationTimelineEntrySerializer(many=True, read_only=True)
    available_actions = serializers.SerializerMethodField()

    class Meta(EvaluationListSerializer.Meta):
        fields = EvaluationListSerializer.Meta.fields + [
            "evaluator",
            "hr_reviewer",
            "created_by",
            "manager_comment",
            "employee_comment",
            "hr_comment",
            "acknowledged_at",
            "acknowledged_by",
            "submitted_to_employee_at",
            "submitted_to_hr_at",
            "closed_at",
            "goal_results",
            "timeline",
            "available_actions",
            "created_at",
        ]
        read_only_fields = fields

    def get_available_actions(self, obj) -> list:
        request = self.context.get("request")
        if request is None:
            return []
        return EvaluationWorkflow.available_actions(request.user, obj)


class EvaluationCreateSerializer(serializers.Serializer):
    """Input for create-or-fetch of an evaluation."""

    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    template = serializers.PrimaryKeyRelatedField(queryset=AssignmentTemplate.objects.all())
    period_code = serializers.CharField(max_length=16)


class GoalResultInputSerializer(serializers.Serializer):
    goal = serializers.IntegerField()
    submitted_value = serializers.JSONField(
        allow_null=True,
        help_text="Number, or true/false / 0/1 for binary goals; null clears the value",
    )


class EvaluationTransitionSerializer(serializers.Serializer):
    """Input for a workflow action; the service validates content fields strictly."""

    action = serializers.ChoiceField(
        choices=[(str(action), action.label) for action in TRANSITIONS if action != EvaluationAction.BULK_CLOSE]
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    goal_results = GoalResultInputSerializer(many=True, required=False)
    rating = serializers.JSONField(required=False, allow_null=True)
    score = serializers.JSONField(required=False, allow_null=True)

    def validate(self, data):
        content_fields = {"goal_results", "rating", "score"} & set(data)
        if content_fields and data["action"] != EvaluationAction.EDIT:
            raise serializers.ValidationError(
                {field: _("Only the EDIT action accepts this field") for field in sorted(content_fields)}
            )
        return data


class BulkCloseSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), required=False, allow_empty=True)
    period_code = serializers.CharField(required=False, allow_blank=True)
    template = serializers.IntegerField(required=False)
    note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, data):
        if not data.get("ids") and not (data.get("period_code") or data.get("template")):
            raise serializers.ValidationError(_("Provide evaluation ids or a period/template filter"))
        return data


class BulkCloseFailureSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    error = serializers.CharField()


class BulkCloseResponseSerializer(serializers.Serializer):
    processed = serializers.IntegerField()
    closed = serializers.IntegerField()
    closed_ids = serializers.ListField(child=serializers.IntegerField())
    failures = BulkCloseFailureSerializer(many=True)
