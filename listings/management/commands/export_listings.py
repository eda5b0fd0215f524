# listings/management/commands/export_listings.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from listings.exceptions import StoreError
from listings.stores import DjangoListingStore, JsonFileListingStore

User = get_user_model()


class Command(BaseCommand):
    help = "Write a host's listing collection (or every listing) to a JSON file."

    def add_arguments(self, parser):
        parser.add_argument('path', help="Destination JSON file")
        parser.add_argument('--host', help="Email of the host to export (default: all hosts)")

    def handle(self, *args, **options):
        host = None
        if options['host']:
            host = User.objects.filter(email=options['host']).first()
            if host is None:
                raise CommandError(f"No user with email {options['host']}")

        try:
            listings = DjangoListingStore(host).read()
            JsonFileListingStore(options['path']).write(listings)
        except StoreError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Exported {len(listings)} listings to {options['path']}"))
