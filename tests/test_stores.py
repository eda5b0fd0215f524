import pytest

from listings.draft import ImageBlob
from listings.exceptions import StoreError
from listings.models import Listing
from listings.stores import DjangoListingStore, JsonFileListingStore

from conftest import BASE_TIME, make_listing


def test_json_store_missing_file_is_empty(tmp_path):
    assert JsonFileListingStore(tmp_path / 'listings.json').read() == []


def test_json_store_write_then_read(tmp_path):
    store = JsonFileListingStore(tmp_path / 'nested' / 'listings.json')
    listings = [
        make_listing('a', amenities=('WiFi',), latitude=15.49, longitude=73.82),
        make_listing('b', images=(ImageBlob('b.jpg', 'image/jpeg', 10), None, None), updated_at=BASE_TIME),
    ]

    store.write(listings)

    assert store.read() == listings
    assert list((tmp_path / 'nested').iterdir()) == [tmp_path / 'nested' / 'listings.json']


def test_json_store_corrupt_file(tmp_path):
    path = tmp_path / 'listings.json'
    path.write_text('{not json', encoding='utf-8')
    with pytest.raises(StoreError):
        JsonFileListingStore(path).read()


def test_json_store_unwritable_location(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('a file, not a directory', encoding='utf-8')
    with pytest.raises(StoreError):
        JsonFileListingStore(blocker / 'listings.json').write([make_listing()])


@pytest.mark.django_db
def test_django_store_keeps_collection_order(user):
    store = DjangoListingStore(user)
    listings = [make_listing('b'), make_listing('a', rent=900), make_listing('c')]

    store.write(listings)

    assert store.read() == listings
    assert Listing.objects.get(id='a').position == 1


@pytest.mark.django_db
def test_django_store_write_replaces_collection(user):
    store = DjangoListingStore(user)
    store.write([make_listing('a'), make_listing('b')])

    store.write([make_listing('b', rent=2000)])

    assert [listing.id for listing in store.read()] == ['b']
    assert Listing.objects.get(id='b').rent == 2000


@pytest.mark.django_db
def test_django_store_hosts_are_separate(user, other_user):
    DjangoListingStore(user).write([make_listing('a')])
    DjangoListingStore(other_user).write([make_listing('b')])

    DjangoListingStore(user).write([])

    assert DjangoListingStore(other_user).read()[0].id == 'b'
    assert [listing.id for listing in DjangoListingStore().read()] == ['b']


@pytest.mark.django_db
def test_django_store_without_host_is_read_only():
    with pytest.raises(StoreError):
        DjangoListingStore().write([make_listing()])


@pytest.mark.django_db
def test_django_store_id_owned_by_another_host(user, other_user):
    DjangoListingStore(user).write([make_listing('a')])
    with pytest.raises(StoreError):
        DjangoListingStore(other_user).write([make_listing('a')])
    assert Listing.objects.get(id='a').host == user
