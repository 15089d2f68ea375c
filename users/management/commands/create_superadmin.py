import getpass
import os

from django.core.management.base import BaseCommand, CommandError

from users.credentials import hash_password
from users.models import AdminPrincipal


class Command(BaseCommand):
    help = 'Create the initial superadmin account.'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--first-name', default='Initial')
        parser.add_argument('--last-name', default='SuperAdmin')
        parser.add_argument(
            '--password',
            help='Defaults to $PORTAL_SUPERADMIN_PASSWORD, or prompts when that is unset.',
        )

    def handle(self, *args, **options):
        email = options['email'].strip()
        if AdminPrincipal.objects.filter(email__iexact=email).exists():
            self.stdout.write(self.style.WARNING(f'Superadmin with email {email} already exists.'))
            return

        password = options['password'] or os.environ.get('PORTAL_SUPERADMIN_PASSWORD')
        if not password:
            password = getpass.getpass('Password: ')
        if not password:
            raise CommandError('A password is required.')

        AdminPrincipal.objects.create(
            email=email,
            password_hash=hash_password(password),
            role='superadmin',
            first_name=options['first_name'],
            last_name=options['last_name'],
        )
        self.stdout.write(self.style.SUCCESS(f'Superadmin {email} created successfully.'))
