from .assignment_template import AssignmentTemplateViewSet
from .evaluation import EvaluationViewSet
from .override import AssignmentOverrideViewSet
from .score import ScoreViewSet

__all__ = ["AssignmentTemplateViewSet", "EvaluationViewSet", "AssignmentOverrideViewSet", "ScoreViewSet"]
