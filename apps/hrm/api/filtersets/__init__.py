from .participation import SectionParticipationFilterSet

__all__ = ["SectionParticipationFilterSet"]
