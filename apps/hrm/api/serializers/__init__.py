from .participation import SectionParticipationSerializer

__all__ = ["SectionParticipationSerializer"]
