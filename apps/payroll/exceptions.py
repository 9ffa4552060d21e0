from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import NotFound


class BonusConfigNotFound(NotFound):
    default_detail = _("No bonus configuration exists for this year.")
    default_code = "bonus_config_not_found"
