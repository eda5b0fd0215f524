from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from listings.draft import Draft, ImageBlob
from listings.exceptions import StoreError
from listings.records import PersistedListing
from listings.stores import ListingStore

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class MemoryListingStore(ListingStore):
    """Keeps the collection in a list and counts writes."""

    def __init__(self, listings=None):
        self.listings = list(listings or [])
        self.writes = 0

    def read(self):
        return list(self.listings)

    def write(self, listings):
        self.writes += 1
        self.listings = list(listings)


class BrokenListingStore(MemoryListingStore):
    """Reads fine, refuses every write."""

    def write(self, listings):
        raise StoreError("disk full")


class Clock:
    """Hands out BASE_TIME, BASE_TIME + 1 minute, ..."""

    def __init__(self, start=BASE_TIME):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(minutes=1)
        return current


def make_draft(**overrides):
    values = {
        'title': 'Cozy Cabin Retreat',
        'description': 'A lovely wooden cabin close to the sea and the market.',
        'city': 'Goa',
        'landmark': 'Near the main beach road',
        'category': 'Cabin',
        'listing_type': 'rent',
        'rent': '1200',
        'images': (ImageBlob('cabin.jpg', 'image/jpeg', 200_000), None, None),
    }
    values.update(overrides)
    return Draft(**values)


def make_listing(listing_id='1700000000000-abcdefghi', **overrides):
    values = {
        'id': listing_id,
        'title': 'Sunny Loft',
        'description': 'Bright loft with a big window over the old town.',
        'city': 'Pune',
        'landmark': 'Opposite the central library',
        'category': 'Loft',
        'listing_type': 'rent',
        'rent': 1500,
        'images': ('https://img.example.com/loft.jpg', None, None),
        'created_at': BASE_TIME,
    }
    values.update(overrides)
    return PersistedListing(**values)


@pytest.fixture
def valid_draft():
    return make_draft()


@pytest.fixture
def memory_store():
    return MemoryListingStore()


@pytest.fixture
def broken_store():
    return BrokenListingStore()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        email='host@example.com',
        password='s3cret-pass',
        first_name='Ada',
        last_name='Host',
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        email='other@example.com',
        password='s3cret-pass',
        first_name='Other',
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(user):
    client = APIClient()
    token, _ = Token.objects.get_or_create(user=user)
    client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
    return client
