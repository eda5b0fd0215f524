# listings/management/commands/import_listings.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from listings.exceptions import StoreError
from listings.stores import DjangoListingStore, JsonFileListingStore

User = get_user_model()


class Command(BaseCommand):
    help = "Append listings from a JSON export to a host's collection, skipping ids already present."

    def add_arguments(self, parser):
        parser.add_argument('path', help="JSON file written by export_listings")
        parser.add_argument('--host', required=True, help="Email of the host receiving the listings")

    def handle(self, *args, **options):
        host = User.objects.filter(email=options['host']).first()
        if host is None:
            raise CommandError(f"No user with email {options['host']}")

        store = DjangoListingStore(host)
        try:
            incoming = JsonFileListingStore(options['path']).read()
            collection = store.read()
            # listing ids are table-wide primary keys, so ids owned by other hosts are skipped too
            taken = {listing.id for listing in DjangoListingStore().read()}
            added = [listing for listing in incoming if listing.id not in taken]
            store.write(collection + added)
        except StoreError as e:
            raise CommandError(str(e)) from e

        skipped = len(incoming) - len(added)
        self.stdout.write(self.style.SUCCESS(
            f"Imported {len(added)} listings for {host.email} ({skipped} skipped)"
        ))
