from .employee import Employee
from .organization import Department, Section
from .participation import SectionParticipation

__all__ = [
    "Department",
    "Section",
    "Employee",
    "SectionParticipation",
]
