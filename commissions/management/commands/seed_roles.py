from django.contrib.auth.models import Group, Permission
from django.core.management.base import BaseCommand

from commissions.module import ROLE_PERMISSIONS, role_permissions


class Command(BaseCommand):
    help = "Create the admin, manager and viewer roles with their permissions"

    def handle(self, *args, **options):
        for role in ROLE_PERMISSIONS:
            codenames = role_permissions(role)
            permissions = Permission.objects.filter(
                content_type__app_label="commissions", codename__in=codenames
            )
            missing = set(codenames) - set(permissions.values_list("codename", flat=True))
            if missing:
                self.stderr.write(self.style.WARNING(
                    f"Role {role}: unknown permissions {', '.join(sorted(missing))}"
                ))

            group, created = Group.objects.get_or_create(name=role)
            group.permissions.set(permissions)
            action = "Created" if created else "Updated"
            self.stdout.write(f"{action} role {role} with {permissions.count()} permission(s)")

        self.stdout.write(self.style.SUCCESS("Roles seeded"))
