"""
Global pytest configuration for test database toggling.

Usage:
- Default: reuse test DB across runs for speed.
- Override quickly via CLI:
    pytest --db-mode=recreate   # drop and re-create test DB
    pytest --db-mode=flush      # keep schema, flush data at session start
    pytest --db-mode=reuse      # reuse existing test DB (default)
- Or via env var (takes effect if CLI option omitted):
    PYTEST_DB_MODE=recreate pytest

Modes:
- reuse:     pytest-django --reuse-db (fastest, no deletion)
- recreate:  force re-create test DB (--create-db, disable reuse)
- flush:     reuse schema but flush all data once at session start
"""

import os
import secrets
from decimal import Decimal

import pytest
from django.core.management import call_command


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--db-mode",
        action="store",
        default=os.getenv("PYTEST_DB_MODE", "reuse"),
        choices=["reuse", "recreate", "flush"],
        help=(
            "Test DB mode: 'reuse' (default), 'recreate' (drop & re-create), or "
            "'flush' (keep schema, clear data at session start)."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    mode = config.getoption("--db-mode")

    # Normalize pytest-django options based on requested mode
    if mode == "recreate":
        config.option.reuse_db = False
        config.option.create_db = True
    elif mode == "reuse":
        config.option.reuse_db = True
        config.option.create_db = False
    elif mode == "flush":
        config.option.reuse_db = True
        config.option.create_db = False


@pytest.fixture(scope="session", autouse=True)
def _maybe_flush_db(request: pytest.FixtureRequest, django_db_blocker) -> None:  # type: ignore[no-redef]
    """Flush DB once at session start if --db-mode=flush."""
    mode = request.config.getoption("--db-mode")
    if mode != "flush":
        return

    with django_db_blocker.unblock():
        call_command("flush", verbosity=0, interactive=False)


@pytest.fixture(autouse=True)
def disable_throttling(settings):
    """
    Disable DRF throttling in all tests to avoid cache/Redis dependency.
    """
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "test-cache-fixture",
        },
    }
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}


@pytest.fixture
def superuser(db):
    """
    Fixture that creates a superuser for testing.

    This superuser is used for auto-authentication in tests that don't
    explicitly test RoleBasedPermission behavior.
    """
    from apps.core.models import User

    password = secrets.token_urlsafe(16)

    return User.objects.create_superuser(
        username="test_superuser",
        email="superuser@test.com",
        password=password,
    )


@pytest.fixture
def api_client(request, superuser):
    """
    Fixture that provides a DRF APIClient with auto-authentication.

    By default, the client is authenticated as a superuser to bypass
    RoleBasedPermission checks. Tests that need to verify permission
    behavior should be marked with @pytest.mark.rbp to receive an
    unauthenticated client instead.
    """
    from rest_framework.test import APIClient

    client = APIClient()

    marker_names = {marker.name for marker in request.node.iter_markers()}
    if "rbp" not in marker_names:
        client.force_authenticate(user=superuser)

    return client


@pytest.fixture
def roles(db):
    """Create the system roles (migrations are skipped in tests)."""
    from apps.core.constants import RoleCode
    from apps.core.models import Role

    return {
        code: Role.objects.create(code=code, name=label, is_system_role=True)
        for code, label in RoleCode.choices
    }


@pytest.fixture
def make_user(db, roles):
    """Factory creating a user with the given role code."""
    from apps.core.models import User

    def _make_user(username, role_code=None, **extra_fields):
        return User.objects.create_user(
            username=username,
            email=f"{username}@test.com",
            password=secrets.token_urlsafe(16),
            role=roles[role_code] if role_code else None,
            **extra_fields,
        )

    return _make_user


@pytest.fixture
def hr_user(make_user):
    return make_user("hr_user", "hr")


@pytest.fixture
def manager_user(make_user):
    return make_user("manager_user", "manager")


@pytest.fixture
def department(db):
    from apps.hrm.models import Department

    return Department.objects.create(code="SALES", name="Sales")


@pytest.fixture
def other_department(db):
    from apps.hrm.models import Department

    return Department.objects.create(code="OPS", name="Operations")


@pytest.fixture
def section(db, department):
    from apps.hrm.models import Section

    return Section.objects.create(code="SALES-N", name="Sales North", department=department)


@pytest.fixture
def make_employee(db, department):
    """Factory creating employees; codes are sequential unless given."""
    from apps.hrm.models import Employee

    counter = {"value": 0}

    def _make_employee(code=None, **fields):
        counter["value"] += 1
        fields.setdefault("department", department)
        fields.setdefault("fullname", f"Employee {counter['value']}")
        fields.setdefault("base_salary", Decimal("1000000"))
        return Employee.objects.create(code=code or f"EMP{counter['value']:03d}", **fields)

    return _make_employee


@pytest.fixture
def employee(make_employee, make_user, section):
    """Employee with a linked user account, primary section set."""
    user = make_user("employee_user", "employee")
    return make_employee(code="EMP100", fullname="Alice Employee", section=section, user=user)


@pytest.fixture
def manager_employee(make_employee, manager_user):
    """Employee record of the manager, in the same department as ``employee``."""
    return make_employee(code="MGR001", fullname="Bob Manager", user=manager_user)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Auto-categorize tests as unit or integration based on patterns.

    Tests can override these auto-markers by explicitly using decorators:
    @pytest.mark.integration, @pytest.mark.unit
    """
    for item in items:
        marker_names = {marker.name for marker in item.iter_markers()}

        has_test_type = "integration" in marker_names or "unit" in marker_names
        if not has_test_type:
            is_integration = (
                "test_api" in item.nodeid
                or "/api/" in item.nodeid
                or "API" in str(item.cls)
                or "ViewSet" in str(item.cls)
            )

            if is_integration:
                item.add_marker(pytest.mark.integration)
            else:
                item.add_marker(pytest.mark.unit)
