"""
Management command to create sample data for testing the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 users (admin, one core member, two students)
- Invite codes for every role
- 4 upcoming events, one of them full with a waiting list
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from datetime import time, timedelta
from django.utils import timezone

from apps.accounts.models import User, UserRole, RoleChange
from apps.events.models import Event, EventCategory
from apps.events.services import create_event, rsvp
from apps.invites.models import InviteCode
from apps.invites.services import generate_invite_code


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        codes = self.create_invite_codes(users['admin'])
        self.create_events(users)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (admin, superuser)')
        self.stdout.write('  grace@example.com / password123 (core member)')
        self.stdout.write('  john@example.com / password123')
        self.stdout.write('  ruth@example.com / password123')
        self.stdout.write('')
        self.stdout.write('Invite codes:')
        for code in codes:
            self.stdout.write(f'  {code.code} ({code.role}, {code.max_uses} uses)')

    def clear_data(self):
        """Clear all data from the database."""
        Event.objects.all().delete()
        InviteCode.objects.all().delete()
        RoleChange.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Ministry Admin',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        people = {}
        for key, email, name, role in [
            ('grace', 'grace@example.com', 'Grace Core', UserRole.CORE_MEMBER),
            ('john', 'john@example.com', 'John Student', UserRole.STUDENT),
            ('ruth', 'ruth@example.com', 'Ruth Student', UserRole.STUDENT),
        ]:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'display_name': name,
                    'campus': 'Main Campus',
                    'role': role,
                }
            )
            user.set_password('password123')
            user.save()
            people[key] = user

        return {'admin': admin, **people}

    def create_invite_codes(self, admin):
        """Create one invite code per role."""
        self.stdout.write('  Creating invite codes...')

        return [
            generate_invite_code(
                role=UserRole.STUDENT,
                created_for='Freshers week',
                created_by=admin,
                max_uses=50,
            ),
            generate_invite_code(
                role=UserRole.CORE_MEMBER,
                created_for='Worship team',
                created_by=admin,
                max_uses=5,
                valid_days=30,
            ),
            generate_invite_code(
                role=UserRole.ADMIN,
                created_for='Campus pastor',
                created_by=admin,
                valid_days=7,
            ),
        ]

    def create_events(self, users):
        """Create upcoming events and a few RSVPs."""
        self.stdout.write('  Creating events...')

        today = timezone.localdate()
        events_data = [
            {
                'title': 'Friday Worship Night',
                'date': today + timedelta(days=2),
                'time': time(19, 0),
                'location': 'Chapel',
                'category': EventCategory.WORSHIP,
                'max_attendees': 1,
            },
            {
                'title': 'Gospel of John Study',
                'date': today + timedelta(days=5),
                'time': time(18, 30),
                'location': 'Library Room 2',
                'category': EventCategory.STUDY,
                'max_attendees': 12,
            },
            {
                'title': 'Welcome Picnic',
                'date': today + timedelta(days=9),
                'location': 'South Lawn',
                'category': EventCategory.FELLOWSHIP,
            },
            {
                'title': 'Morning Prayer',
                'date': today + timedelta(days=1),
                'time': time(7, 0),
                'location': 'Chapel',
                'category': EventCategory.PRAYER,
                'requirements': 'Bring a Bible',
            },
        ]

        events = [create_event(organizer=users['grace'], **data) for data in events_data]

        # First event is full: john gets the seat, ruth waits
        rsvp(event_id=events[0].id, user_id=users['john'].id)
        rsvp(event_id=events[0].id, user_id=users['ruth'].id)
        rsvp(event_id=events[1].id, user_id=users['ruth'].id)

        return events
