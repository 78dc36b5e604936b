from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from accounts.models import CustomUser


class Command(BaseCommand):
    help = 'Create one development user per role (super_admin, admin, employee, agent, customer)'

    def add_arguments(self, parser):
        parser.add_argument('--password', type=str, default='changeme123', help='Password for every created user')

    def handle(self, *args, **options):
        password = options['password']
        created = 0
        for role, _label in CustomUser.ROLE_CHOICES:
            username = f"{role}_user"
            if CustomUser.objects.filter(username=username).exists():
                self.stdout.write(self.style.WARNING(f"User {username} already exists"))
                continue

            CustomUser.objects.create(
                username=username,
                email=f"{username}@example.com",
                password=make_password(password),
                role=role,
                is_staff=role in ('super_admin', 'admin'),
                is_superuser=role == 'super_admin',
            )
            created += 1
            self.stdout.write(self.style.SUCCESS(f"Created {role} user: {username}"))

        self.stdout.write(self.style.SUCCESS(f"{created} test user(s) created"))
