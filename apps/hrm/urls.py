from rest_framework.routers import DefaultRouter

from apps.hrm.api.views import SectionParticipationViewSet

app_name = "hrm"

router = DefaultRouter()
router.register(r"section-participations", SectionParticipationViewSet, basename="section-participations")

urlpatterns = router.urls
