# listings/exceptions.py


class InvalidField(LookupError):
    """Raised when a field name the wizard does not know about is used.

    This is a programming error, not bad user input.
    """

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown listing field: {name!r}")


class ValidationFailed(Exception):
    """A commit or edit was attempted with fields that do not validate."""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__(f"Validation failed for: {', '.join(sorted(self.errors))}")


class StoreError(Exception):
    """The durable listing store could not be read or written."""


class PersistenceFailed(Exception):
    """The listing collection was not written. The draft is left as it was."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class ListingNotFound(LookupError):
    def __init__(self, listing_id):
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id!r} not found")


class ImageUploadFailed(Exception):
    """A listing photo could not be hosted."""
