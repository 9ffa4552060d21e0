from django.db import migrations

SYSTEM_ROLES = [
    ("admin", "Administrator", "Full access"),
    ("hr", "Human resources", "Manages templates, closes evaluations and runs bonus calculations"),
    ("manager", "Manager", "Evaluates direct reports"),
    ("employee", "Employee", "Acknowledges or contests own evaluations"),
]


def create_system_roles(apps, schema_editor):
    Role = apps.get_model("core", "Role")
    for code, name, description in SYSTEM_ROLES:
        Role.objects.update_or_create(
            code=code,
            defaults={"name": name, "description": description, "is_system_role": True},
        )


def remove_system_roles(apps, schema_editor):
    Role = apps.get_model("core", "Role")
    Role.objects.filter(code__in=[code for code, _, _ in SYSTEM_ROLES], is_system_role=True).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_system_roles, remove_system_roles),
    ]
