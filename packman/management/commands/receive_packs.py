"""
Management command to receive packs from serialized numbers.

Usage:
    python manage.py receive_packs main-st 000112345670123456789012 000112345680003456789012
    python manage.py receive_packs main-st --file scans.txt
    python manage.py receive_packs main-st --file scans.txt --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from packman import packs
from packman.exceptions import PackError
from packman.models import Store


class _DryRun(Exception):
    pass


class Command(BaseCommand):
    """Receive packs command."""

    help = 'Receive lottery packs into a store from 24-digit serialized numbers'

    def add_arguments(self, parser):
        parser.add_argument('store_code', help='Code of the receiving store')
        parser.add_argument('codes', nargs='*', help='Serialized numbers')
        parser.add_argument(
            '--file',
            help='Read serialized numbers from a file, one per line'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be received without saving'
        )

    def handle(self, *args, **options):
        try:
            store = Store.objects.get(code=options['store_code'])
        except Store.DoesNotExist:
            raise CommandError(f"Store '{options['store_code']}' not found") from None

        codes = list(options['codes'])
        if options['file']:
            with open(options['file']) as f:
                codes.extend(line.strip() for line in f if line.strip())

        try:
            if options['dry_run']:
                result = self._dry_run(store, codes)
            else:
                result = packs.receive_batch(store, codes)
        except PackError as e:
            raise CommandError(str(e)) from e

        for code in result.duplicates:
            self.stdout.write(self.style.WARNING(f'Duplicate: {code}'))
        for error in result.errors:
            self.stdout.write(self.style.ERROR(f'{error.code}: {error.reason}'))

        verb = 'would be received' if options['dry_run'] else 'received'
        self.stdout.write(
            self.style.SUCCESS(f'{len(result.created)} pack(s) {verb}')
        )

    def _dry_run(self, store, codes):
        result = None
        try:
            with transaction.atomic():
                result = packs.receive_batch(store, codes)
                raise _DryRun
        except _DryRun:
            return result
