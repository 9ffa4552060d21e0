from django.db import models

from libs.models import BaseModel


class Role(BaseModel):
    """Named role; its code selects an entry of the capability policy table"""

    code = models.CharField(max_length=50, unique=True, verbose_name="Role code")
    name = models.CharField(max_length=100, unique=True, verbose_name="Role name")
    description = models.CharField(max_length=255, blank=True, verbose_name="Description")
    is_system_role = models.BooleanField(default=False, verbose_name="System role")

    class Meta:
        verbose_name = "Role"
        verbose_name_plural = "Roles"
        db_table = "core_role"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"
