"""
Management command to replace all data with the contents of a JSON backup.

Usage:
    python manage.py restore_data ServicePrices_Backup_2024-12-15_101500.json
    python manage.py restore_data backup.json --dry-run
"""

import json

from django.core.management.base import BaseCommand, CommandError
from apps.catalog.services import CatalogStore, restore_backup


class Command(BaseCommand):
    help = 'Replace all services and categories with a JSON backup'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Backup file to restore')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be restored without making changes',
        )

    def handle(self, *args, **options):
        try:
            with open(options['path'], 'rb') as backup_file:
                content = backup_file.read()
        except OSError as e:
            raise CommandError(f'Cannot read backup: {e}')

        if options['dry_run']:
            try:
                document = json.loads(content)
                services = len(document['services'])
                categories = len(document['categories'])
            except (ValueError, KeyError, TypeError) as e:
                raise CommandError(f'Backup is not valid: {e}')

            self.stdout.write(
                f'Backup version {document.get("version")}: '
                f'{services} service(s), {categories} categor(y/ies)'
            )
            self.stdout.write(
                self.style.WARNING('--dry-run mode: No changes made.')
            )
            return

        store = CatalogStore()
        if not restore_backup(content, store=store):
            raise CommandError('Backup could not be restored, existing data kept')

        self.stdout.write(
            self.style.SUCCESS(
                f'Restored {len(store.services)} service(s) and '
                f'{len(store.categories)} categor(y/ies)'
            )
        )
