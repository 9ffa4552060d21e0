from .assignment_template import AssignmentTemplateFilterSet
from .evaluation import EvaluationFilterSet
from .override import AssignmentOverrideFilterSet

__all__ = ["AssignmentTemplateFilterSet", "EvaluationFilterSet", "AssignmentOverrideFilterSet"]
