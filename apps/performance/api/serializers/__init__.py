from .assignment_template import (
    AssignmentTemplateListSerializer,
    AssignmentTemplateSerializer,
    GoalDefinitionSerializer,
    MaterializeRequestSerializer,
    MaterializeResponseSerializer,
    PeriodSerializer,
    RecalculateRequestSerializer,
    RecalculateResponseSerializer,
)
from .evaluation import (
    BulkCloseResponseSerializer,
    BulkCloseSerializer,
    EvaluationCreateSerializer,
    EvaluationListSerializer,
    EvaluationSerializer,
    EvaluationTimelineEntrySerializer,
    EvaluationTransitionSerializer,
    GoalResultInputSerializer,
    GoalResultSerializer,
)
from .override import AssignmentOverrideSerializer
from .score import (
    AnnualScoreQuerySerializer,
    AssignmentScoreSerializer,
    EmployeeScoreSerializer,
    ScoreQuerySerializer,
    SimulationRequestSerializer,
)

__all__ = [
    "AssignmentTemplateListSerializer",
    "AssignmentTemplateSerializer",
    "GoalDefinitionSerializer",
    "MaterializeRequestSerializer",
    "MaterializeResponseSerializer",
    "PeriodSerializer",
    "RecalculateRequestSerializer",
    "RecalculateResponseSerializer",
    "BulkCloseResponseSerializer",
    "BulkCloseSerializer",
    "EvaluationCreateSerializer",
    "EvaluationListSerializer",
    "EvaluationSerializer",
    "EvaluationTimelineEntrySerializer",
    "EvaluationTransitionSerializer",
    "GoalResultInputSerializer",
    "GoalResultSerializer",
    "AssignmentOverrideSerializer",
    "AnnualScoreQuerySerializer",
    "AssignmentScoreSerializer",
    "EmployeeScoreSerializer",
    "ScoreQuerySerializer",
    "SimulationRequestSerializer",
]
