# listings/selectors.py
"""
Read-only views over a listing collection: filtering, search and sorting.

Nothing here touches storage or mutates the listings it is given.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Optional

DEFAULT_SORT = 'newest'

# sort key -> (key function, descending)
SORTS = {
    'newest': (lambda listing: listing.created_at, True),
    'oldest': (lambda listing: listing.created_at, False),
    'price-asc': (lambda listing: listing.rent, False),
    'price-desc': (lambda listing: listing.rent, True),
    'title-asc': (lambda listing: listing.title.lower(), False),
}
SORT_CHOICES = tuple(SORTS)


@dataclass(frozen=True)
class ListingFilters:
    city_contains: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_guests: Optional[int] = None
    required_amenities: frozenset = frozenset()
    status: Optional[str] = None
    search: Optional[str] = None

    def matches(self, listing):
        if self.city_contains and self.city_contains.strip().lower() not in listing.city.lower():
            return False
        if self.category and listing.category.lower() != self.category.strip().lower():
            return False
        if self.min_price is not None and listing.rent < self.min_price:
            return False
        if self.max_price is not None and listing.rent > self.max_price:
            return False
        if self.min_guests is not None and listing.max_guests < self.min_guests:
            return False
        if self.required_amenities and not set(self.required_amenities) <= set(listing.amenities):
            return False
        if self.status and listing.status != self.status:
            return False
        if self.search and not _matches_search(listing, self.search):
            return False
        return True


def _matches_search(listing, query):
    # every term has to appear somewhere in the listing's text
    text = ' '.join([
        listing.title, listing.description, listing.city,
        listing.landmark, listing.category,
    ]).lower()
    return all(term in text for term in query.lower().split())


def list_listings(listings, filters=None, sort=DEFAULT_SORT):
    if sort not in SORTS:
        raise ValueError(f"Unknown sort '{sort}'. Use one of: {', '.join(SORT_CHOICES)}")
    filters = filters or ListingFilters()
    key, descending = SORTS[sort]
    matched = [listing for listing in listings if filters.matches(listing)]
    # sorted() is stable in both directions, so ties keep insertion order
    return sorted(matched, key=key, reverse=descending)


def price_stats(listings):
    prices = [listing.rent for listing in listings if 0 < listing.rent < 1000000]
    if not prices:
        return {'min': 0, 'max': 10000, 'avg': 5000}
    return {
        'min': min(prices),
        'max': max(prices),
        'avg': round(sum(prices) / len(prices)),
    }


def category_counts(listings):
    return dict(Counter(listing.category or 'Other' for listing in listings))
