from rest_framework import serializers

from apps.core.models import User


class MeSerializer(serializers.ModelSerializer):
    """Current user with role and linked employee"""

    role = serializers.CharField(source="role_code", read_only=True)
    employee_id = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "last_name", "is_superuser", "role", "employee_id"]
        read_only_fields = fields

    def get_employee_id(self, obj):
        employee = getattr(obj, "employee", None)
        return employee.id if employee else None
