from django.contrib import admin

from apps.performance.models import (
    AssignmentOverride,
    AssignmentTemplate,
    Evaluation,
    EvaluationTimelineEntry,
    GoalDefinition,
    GoalResult,
)


class GoalDefinitionInline(admin.TabularInline):
    model = GoalDefinition
    extra = 0


@admin.register(AssignmentTemplate)
class AssignmentTemplateAdmin(admin.ModelAdmin):
    list_display = ["name", "year", "kind", "scope_type", "base_weight", "frequency", "is_active"]
    list_filter = ["year", "kind", "scope_type", "frequency", "is_active"]
    search_fields = ["name", "process"]
    inlines = [GoalDefinitionInline]


class GoalResultInline(admin.TabularInline):
    model = GoalResult
    extra = 0
    can_delete = False
    readonly_fields = ["goal", "goal_name", "submitted_value", "evaluated_value", "score", "met"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class EvaluationTimelineEntryInline(admin.TabularInline):
    model = EvaluationTimelineEntry
    extra = 0
    can_delete = False
    readonly_fields = ["actor", "action", "from_status", "to_status", "note", "snapshot", "created_at"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    """Read-only view of evaluations. Changes go through the evaluation workflow."""

    list_display = ["employee", "template", "period_code", "year", "status", "score"]
    list_filter = ["year", "status"]
    search_fields = ["employee__code", "employee__fullname", "template__name", "period_code"]
    raw_id_fields = ["employee", "template", "evaluator", "hr_reviewer", "created_by", "acknowledged_by"]
    inlines = [GoalResultInline, EvaluationTimelineEntryInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AssignmentOverride)
class AssignmentOverrideAdmin(admin.ModelAdmin):
    list_display = ["employee", "template", "year", "excluded", "weight"]
    list_filter = ["year", "excluded"]
    raw_id_fields = ["employee", "template", "updated_by"]
