from django.apps import AppConfig


class HrmConfig(AppConfig):
    """Configuration for HRM application"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.hrm"
    verbose_name = "Human Resources Management"
