from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied


class InvalidTransition(APIException):
    """Workflow action attempted from a state that does not allow it."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("This action is not allowed in the current state.")
    default_code = "invalid_transition"

    def __init__(self, action, current_status, required_states):
        self.action = str(action)
        self.current_status = str(current_status)
        self.required_states = sorted(str(state) for state in required_states)
        detail = _("Cannot perform %(action)s on an evaluation in state %(current)s; required state: %(required)s.") % {
            "action": self.action,
            "current": self.current_status,
            "required": ", ".join(self.required_states),
        }
        super().__init__(detail=detail)


class TransitionNotPermitted(PermissionDenied):
    default_detail = _("You are not allowed to perform this action on the evaluation.")
    default_code = "transition_not_permitted"


class EvaluationNotFound(NotFound):
    default_detail = _("Evaluation not found.")
    default_code = "evaluation_not_found"


class TemplateNotFound(NotFound):
    default_detail = _("Assignment template not found.")
    default_code = "template_not_found"


class TimelineEntryImmutable(Exception):
    """Raised when code tries to change or delete a timeline entry."""

    pass
