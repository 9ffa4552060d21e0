from rest_framework.routers import DefaultRouter

from apps.performance.api.views import (
    AssignmentOverrideViewSet,
    AssignmentTemplateViewSet,
    EvaluationViewSet,
    ScoreViewSet,
)

app_name = "performance"

router = DefaultRouter()
router.register(r"templates", AssignmentTemplateViewSet, basename="assignment-templates")
router.register(r"evaluations", EvaluationViewSet, basename="evaluations")
router.register(r"overrides", AssignmentOverrideViewSet, basename="assignment-overrides")
router.register(r"scores", ScoreViewSet, basename="scores")

urlpatterns = router.urls
