import re
from datetime import timedelta

import pytest

from listings.draft import DraftStore, EMPTY_DRAFT
from listings.exceptions import (
    InvalidField,
    ListingNotFound,
    PersistenceFailed,
    StoreError,
    ValidationFailed,
)
from listings.services import ListingPublisher, delete_listing, generate_listing_id, update_listing

from conftest import BASE_TIME, MemoryListingStore, make_draft, make_listing


def test_generated_ids_are_timestamp_and_suffix():
    listing_id = generate_listing_id()
    assert re.fullmatch(r'\d{13}-[a-z0-9]{9}', listing_id)
    assert generate_listing_id({listing_id}) != listing_id


def test_commit_appends_listing_and_clears_draft(memory_store, valid_draft, clock):
    existing = make_listing()
    memory_store.listings = [existing]
    draft_store = DraftStore(valid_draft)

    listing = ListingPublisher(memory_store, draft_store, clock=clock).commit()

    assert memory_store.listings == [existing, listing]
    assert listing.created_at == BASE_TIME
    assert listing.status == 'active'
    assert draft_store.snapshot() == EMPTY_DRAFT


def test_commit_stores_trimmed_text_and_numeric_rent(memory_store, clock):
    draft = make_draft(title='  Cozy Cabin Retreat  ', city=' Goa ', rent=' 1200 ')
    listing = ListingPublisher(memory_store, DraftStore(draft), clock=clock).commit()

    assert listing.title == 'Cozy Cabin Retreat'
    assert listing.city == 'Goa'
    assert listing.rent == 1200


def test_commit_rejects_invalid_draft_without_writing(memory_store):
    draft_store = DraftStore(make_draft(images=(None, None, None), listing_type=''))

    with pytest.raises(ValidationFailed) as exc_info:
        ListingPublisher(memory_store, draft_store).commit()

    assert set(exc_info.value.errors) == {'images', 'listing_type'}
    assert memory_store.writes == 0
    assert draft_store.snapshot().title == 'Cozy Cabin Retreat'


def test_write_failure_keeps_draft(broken_store, valid_draft):
    draft_store = DraftStore(valid_draft)

    with pytest.raises(PersistenceFailed) as exc_info:
        ListingPublisher(broken_store, draft_store).commit()

    assert exc_info.value.reason == 'disk full'
    assert draft_store.snapshot() == valid_draft


def test_read_failure_keeps_draft(valid_draft):
    class Unreadable(MemoryListingStore):
        def read(self):
            raise StoreError("corrupt collection")

    store = Unreadable()
    draft_store = DraftStore(valid_draft)

    with pytest.raises(PersistenceFailed):
        ListingPublisher(store, draft_store).commit()

    assert draft_store.snapshot() == valid_draft
    assert store.writes == 0


def test_update_listing_validates_and_stamps(clock):
    store = MemoryListingStore([make_listing('a'), make_listing('b')])

    updated = update_listing(store, 'b', {'rent': '2500', 'title': ' Bigger Loft '}, clock=clock)

    assert updated.rent == 2500
    assert updated.title == 'Bigger Loft'
    assert updated.updated_at == BASE_TIME
    assert [listing.id for listing in store.listings] == ['a', 'b']
    assert store.listings[1] == updated


def test_update_listing_rejects_bad_values():
    store = MemoryListingStore([make_listing('a')])

    with pytest.raises(ValidationFailed) as exc_info:
        update_listing(store, 'a', {'rent': '50', 'status': 'archived'})

    assert set(exc_info.value.errors) == {'rent', 'status'}
    assert store.writes == 0


def test_update_listing_can_change_status(clock):
    store = MemoryListingStore([make_listing('a')])
    updated = update_listing(store, 'a', {'status': 'pending'}, clock=clock)
    assert updated.status == 'pending'


def test_update_listing_refuses_fixed_fields():
    store = MemoryListingStore([make_listing('a')])
    with pytest.raises(InvalidField):
        update_listing(store, 'a', {'created_at': BASE_TIME - timedelta(days=1)})


def test_update_and_delete_unknown_listing():
    store = MemoryListingStore([make_listing('a')])
    with pytest.raises(ListingNotFound):
        update_listing(store, 'zzz', {'rent': '500'})
    with pytest.raises(ListingNotFound):
        delete_listing(store, 'zzz')


def test_delete_listing_keeps_the_rest_in_order():
    store = MemoryListingStore([make_listing('a'), make_listing('b'), make_listing('c')])

    removed = delete_listing(store, 'b')

    assert removed.id == 'b'
    assert [listing.id for listing in store.listings] == ['a', 'c']


def test_delete_write_failure_is_reported(broken_store):
    broken_store.listings = [make_listing('a')]
    with pytest.raises(PersistenceFailed):
        delete_listing(broken_store, 'a')


def test_uploader_hosts_blob_images(memory_store, valid_draft):
    hosted = []

    def uploader(blob):
        hosted.append(blob.name)
        return f"https://img.example.com/{blob.name}"

    draft = make_draft(images=(valid_draft.images[0], 'https://img.example.com/old.jpg', None))
    listing = ListingPublisher(memory_store, DraftStore(draft), uploader=uploader).commit()

    assert hosted == ['cabin.jpg']
    assert listing.images == ('https://img.example.com/cabin.jpg', 'https://img.example.com/old.jpg', None)


def test_upload_failure_keeps_draft(memory_store, valid_draft):
    def uploader(blob):
        raise StoreError("image host unreachable")

    draft_store = DraftStore(valid_draft)
    with pytest.raises(PersistenceFailed):
        ListingPublisher(memory_store, draft_store, uploader=uploader).commit()

    assert draft_store.snapshot() == valid_draft
    assert memory_store.writes == 0
