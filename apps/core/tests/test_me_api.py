import json

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.core.constants import RoleCode
from apps.core.models import Role, User
from apps.hrm.models import Department, Employee


class APITestMixin:
    """Mixin to handle wrapped API responses and data extraction"""

    def get_response_data(self, response):
        """Extract data from wrapped API response"""
        content = json.loads(response.content.decode())
        if "data" in content:
            return content["data"]
        return content


class MeAPITest(TestCase, APITestMixin):
    """Test cases for /api/me endpoint"""

    def setUp(self):
        self.client = APIClient()
        self.role = Role.objects.create(code=RoleCode.MANAGER, name="Manager")
        self.user = User.objects.create_user(
            username="manager",
            email="manager@test.com",
            first_name="Bob",
            last_name="Manager",
            role=self.role,
        )
        self.url = reverse("core:me")

    def test_me_with_linked_employee(self):
        # Arrange
        department = Department.objects.create(code="SALES", name="Sales")
        employee = Employee.objects.create(code="MGR001", fullname="Bob Manager", department=department, user=self.user)
        self.client.force_authenticate(user=self.user)

        # Act
        response = self.client.get(self.url)

        # Assert
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = self.get_response_data(response)
        self.assertEqual(data["username"], "manager")
        self.assertEqual(data["role"], "manager")
        self.assertEqual(data["employee_id"], employee.id)
        self.assertFalse(data["is_superuser"])

    def test_me_without_employee(self):
        # Arrange
        self.client.force_authenticate(user=self.user)

        # Act
        response = self.client.get(self.url)

        # Assert
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(self.get_response_data(response)["employee_id"])

    def test_me_requires_authentication(self):
        # Act
        response = self.client.get(self.url)

        # Assert
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])
