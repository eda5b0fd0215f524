# listings/services.py

import logging
import random
import string
import time
from dataclasses import replace

from django.utils import timezone

from .draft import ImageBlob, normalize_images
from .exceptions import (
    InvalidField,
    ListingNotFound,
    PersistenceFailed,
    StoreError,
    ValidationFailed,
)
from .models import STATUSES
from .records import EDITABLE_FIELDS, PersistedListing, normalize_field
from .steps import LAST_STEP
from .validators import VALIDATORS, validate_field, validate_step

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_listing_id(existing=()):
    """Millisecond timestamp plus a random suffix, unique within ``existing``."""
    while True:
        suffix = ''.join(random.choices(ID_ALPHABET, k=9))
        listing_id = f"{int(time.time() * 1000)}-{suffix}"
        if listing_id not in existing:
            return listing_id


class ListingPublisher:
    """Turns a finished draft into a listing in the host's collection.

    ``uploader``, when given, is called with every ``ImageBlob`` still in the
    draft and returns the hosted URL stored in its place. It reports failures
    by raising ``StoreError``.
    """

    def __init__(self, store, draft_store, clock=timezone.now, uploader=None):
        self.store = store
        self.draft_store = draft_store
        self.clock = clock
        self.uploader = uploader

    def _host_images(self, draft):
        if self.uploader is None:
            return draft
        images = [self.uploader(ref) if isinstance(ref, ImageBlob) else ref for ref in draft.images]
        return replace(draft, images=normalize_images(images))

    def commit(self, draft=None):
        """
        Validate the whole draft, append it to the collection and clear the draft.

        Raises ValidationFailed (nothing changed) or PersistenceFailed (the
        collection was not written and the draft is kept for a retry).
        """
        if draft is None:
            draft = self.draft_store.snapshot()

        errors = validate_step(LAST_STEP, draft)
        if errors:
            logger.info(f"Commit rejected, invalid fields: {sorted(errors)}")
            raise ValidationFailed(errors)

        try:
            collection = self.store.read()
            listing = PersistedListing.from_draft(
                self._host_images(draft),
                listing_id=generate_listing_id({item.id for item in collection}),
                created_at=self.clock(),
            )
            self.store.write(collection + [listing])
        except StoreError as exc:
            logger.error(f"❌ Listing commit failed, draft kept: {exc}")
            raise PersistenceFailed(str(exc)) from exc

        self.draft_store.reset()
        logger.info(f"✅ Listing {listing.id} committed: {listing.title}")
        return listing


def _find(collection, listing_id):
    for index, listing in enumerate(collection):
        if listing.id == listing_id:
            return index
    raise ListingNotFound(listing_id)


def _read(store):
    try:
        return store.read()
    except StoreError as exc:
        raise PersistenceFailed(str(exc)) from exc


def _write(store, collection):
    try:
        store.write(collection)
    except StoreError as exc:
        logger.error(f"❌ Listing collection write failed: {exc}")
        raise PersistenceFailed(str(exc)) from exc


def update_listing(store, listing_id, changes, clock=timezone.now):
    """Edit fields of a committed listing. Every changed field is re-validated."""
    collection = _read(store)
    index = _find(collection, listing_id)

    errors = {}
    values = {}
    for name, value in changes.items():
        if name == 'status':
            if value not in STATUSES:
                errors[name] = f"Status must be one of: {', '.join(STATUSES)}"
            else:
                values[name] = value
            continue
        if name not in EDITABLE_FIELDS:
            raise InvalidField(name)
        if name in VALIDATORS:
            message = validate_field(name, value)
            if message:
                errors[name] = message
                continue
        values[name] = normalize_field(name, value)
    if errors:
        raise ValidationFailed(errors)

    updated = replace(collection[index], updated_at=clock(), **values)
    collection[index] = updated
    _write(store, collection)
    logger.info(f"Listing {listing_id} updated: {sorted(values)}")
    return updated


def delete_listing(store, listing_id):
    collection = _read(store)
    index = _find(collection, listing_id)
    removed = collection.pop(index)
    _write(store, collection)
    logger.info(f"Listing {listing_id} deleted")
    return removed
