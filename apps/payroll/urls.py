from rest_framework.routers import DefaultRouter

from apps.payroll.api.views import BonusConfigViewSet, BonusResultViewSet

app_name = "payroll"

router = DefaultRouter()
router.register(r"bonus-configs", BonusConfigViewSet, basename="bonus-configs")
router.register(r"bonus-results", BonusResultViewSet, basename="bonus-results")

urlpatterns = router.urls
