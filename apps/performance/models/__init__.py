from .assignment_template import SCOPE_TARGET_FIELDS, AssignmentTemplate, GoalDefinition, review_window_errors
from .evaluation import Evaluation, EvaluationTimelineEntry, GoalResult
from .override import AssignmentOverride

__all__ = [
    "SCOPE_TARGET_FIELDS",
    "AssignmentTemplate",
    "GoalDefinition",
    "Evaluation",
    "GoalResult",
    "EvaluationTimelineEntry",
    "AssignmentOverride",
    "review_window_errors",
]
