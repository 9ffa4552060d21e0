from django.contrib import admin

from apps.hrm.models import Department, Employee, Section, SectionParticipation


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "is_active"]
    search_fields = ["code", "name"]


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "department", "is_active"]
    list_filter = ["department"]
    search_fields = ["code", "name"]


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ["code", "fullname", "department", "section", "status"]
    list_filter = ["department", "status"]
    search_fields = ["code", "fullname", "email"]
    raw_id_fields = ["user"]


@admin.register(SectionParticipation)
class SectionParticipationAdmin(admin.ModelAdmin):
    list_display = ["employee", "section", "year", "percentage"]
    list_filter = ["year", "section"]
