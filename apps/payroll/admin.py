from django.contrib import admin

from apps.payroll.models import BonusConfig, BonusConfigOverride, BonusResult


class BonusConfigOverrideInline(admin.TabularInline):
    model = BonusConfigOverride
    extra = 0
    raw_id_fields = ["department", "employee"]


@admin.register(BonusConfig)
class BonusConfigAdmin(admin.ModelAdmin):
    list_display = ["year", "scale_type", "threshold", "min_fraction", "max_fraction", "target_multiple"]
    list_filter = ["scale_type"]
    inlines = [BonusConfigOverrideInline]


@admin.register(BonusResult)
class BonusResultAdmin(admin.ModelAdmin):
    list_display = ["employee", "year", "global_score", "payout_fraction", "amount", "config_source", "calculated_at"]
    list_filter = ["year", "config_source"]
    search_fields = ["employee__code", "employee__fullname", "department_name"]
    raw_id_fields = ["employee"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
