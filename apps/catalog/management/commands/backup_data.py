"""
Management command to write a JSON backup of all services and categories.

Usage:
    python manage.py backup_data
    python manage.py backup_data --output /path/to/backups/
"""

from pathlib import Path

from django.core.management.base import BaseCommand
from apps.catalog.services import CatalogStore, dump_backup, backup_filename


class Command(BaseCommand):
    help = 'Write a JSON backup of every service and category'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            default='.',
            help='Target file or directory (default: current directory)',
        )

    def handle(self, *args, **options):
        store = CatalogStore.load()

        target = Path(options['output'])
        if target.is_dir():
            target = target / backup_filename()

        target.write_text(dump_backup(store.services, store.categories), encoding='utf-8')

        self.stdout.write(
            self.style.SUCCESS(
                f'Backed up {len(store.services)} service(s) and '
                f'{len(store.categories)} categor(y/ies) to {target}'
            )
        )
