from django.apps import AppConfig


class PerformanceConfig(AppConfig):
    """Configuration for Performance application"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.performance"
    verbose_name = "Performance Management"
