# listings/stores.py
"""
Durable homes for a listing collection.

A store only knows how to read the whole collection and replace the whole
collection. Any failure is raised as ``StoreError`` so callers can tell a
storage problem apart from bad input.
"""
import json
import logging
import os
import tempfile
from pathlib import Path

from django.db import DatabaseError, transaction

from .draft import image_from_state, image_to_state, normalize_images
from .exceptions import StoreError
from .models import Listing
from .records import PersistedListing

logger = logging.getLogger(__name__)


class ListingStore:

    def read(self):
        """Return the collection in insertion order (empty if nothing was stored)."""
        raise NotImplementedError

    def write(self, listings):
        """Replace the stored collection with ``listings``."""
        raise NotImplementedError


def row_to_record(row):
    return PersistedListing(
        id=row.id,
        title=row.title,
        description=row.description,
        city=row.city,
        landmark=row.landmark,
        category=row.category,
        listing_type=row.listing_type,
        rent=row.rent,
        images=normalize_images(image_from_state(image) for image in row.images or []),
        amenities=tuple(row.amenities or ()),
        max_guests=row.max_guests,
        bedrooms=row.bedrooms,
        bathrooms=row.bathrooms,
        latitude=row.latitude,
        longitude=row.longitude,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def record_to_values(record, position):
    return {
        'position': position,
        'title': record.title,
        'description': record.description,
        'city': record.city,
        'landmark': record.landmark,
        'category': record.category,
        'listing_type': record.listing_type,
        'rent': record.rent,
        'images': [image_to_state(image) for image in record.images],
        'amenities': list(record.amenities),
        'max_guests': record.max_guests,
        'bedrooms': record.bedrooms,
        'bathrooms': record.bathrooms,
        'latitude': record.latitude,
        'longitude': record.longitude,
        'status': record.status,
        'created_at': record.created_at,
        'updated_at': record.updated_at,
    }


class DjangoListingStore(ListingStore):
    """A host's collection kept in the ``Listing`` table.

    With ``host=None`` the store reads every host's listings and refuses to
    write.
    """

    def __init__(self, host=None):
        self.host = host

    def read(self):
        queryset = Listing.objects.all()
        if self.host is not None:
            queryset = queryset.filter(host=self.host)
        try:
            return [row_to_record(row) for row in queryset.order_by('host_id', 'position')]
        except DatabaseError as exc:
            raise StoreError(f"Could not read listings: {exc}") from exc

    def write(self, listings):
        if self.host is None:
            raise StoreError("A host is required to write a listing collection")
        try:
            with transaction.atomic():
                ids = [record.id for record in listings]
                Listing.objects.filter(host=self.host).exclude(id__in=ids).delete()
                for position, record in enumerate(listings):
                    Listing.objects.update_or_create(
                        id=record.id,
                        host=self.host,
                        defaults=record_to_values(record, position),
                    )
        except DatabaseError as exc:
            raise StoreError(f"Could not save listings: {exc}") from exc


class JsonFileListingStore(ListingStore):
    """A collection kept as one JSON document on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def read(self):
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding='utf-8') as fh:
                payload = json.load(fh)
            return [PersistedListing.from_dict(item) for item in payload]
        except (OSError, ValueError, TypeError, KeyError) as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc

    def write(self, listings):
        payload = [record.to_dict() for record in listings]
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Could not write {self.path}: {exc}") from exc
        logger.debug(f"Wrote {len(payload)} listings to {self.path}")
