"""
Create or update the platform super admin.

Usage:
    python manage.py seed_superadmin --email admin@example.com --password '...'

Falls back to the SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD settings when the
options are omitted.
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from apps.accounts.models import User, UserRole


class Command(BaseCommand):
    help = 'Create or update the super admin account'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=None, help='Super admin email')
        parser.add_argument('--password', default=None, help='Super admin password')
        parser.add_argument('--name', default='Super Admin', help='Display name')

    def handle(self, *args, **options):
        email = (options['email'] or settings.SUPERADMIN_EMAIL or '').strip().lower()
        password = options['password'] or settings.SUPERADMIN_PASSWORD

        if not email or not password:
            raise CommandError('Provide --email and --password or set SUPERADMIN_EMAIL/SUPERADMIN_PASSWORD.')

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_superuser(email=email, password=password, full_name=options['name'])
            self.stdout.write(self.style.SUCCESS(f'Created super admin {email}'))
            return

        user.role = UserRole.SUPER_ADMIN
        user.is_staff = True
        user.is_superuser = True
        user.is_active = True
        user.set_password(password)
        user.save()
        self.stdout.write(self.style.SUCCESS(f'Updated super admin {email}'))
