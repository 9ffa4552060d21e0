from .participation import SectionParticipationViewSet

__all__ = ["SectionParticipationViewSet"]
