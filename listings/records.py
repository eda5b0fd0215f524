# listings/records.py
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional

from .draft import image_from_state, image_to_state, normalize_images

# Text fields are stored trimmed, as the host meant them
TEXT_FIELDS = ('title', 'description', 'city', 'landmark', 'category', 'listing_type')

EDITABLE_FIELDS = TEXT_FIELDS + (
    'rent', 'images', 'amenities', 'max_guests', 'bedrooms', 'bathrooms',
    'latitude', 'longitude',
)


def normalize_field(name, value):
    """Convert a validated draft value to the type it is stored with."""
    if name in TEXT_FIELDS:
        return (value or '').strip()
    if name == 'rent':
        return int(str(value).strip())
    if name == 'images':
        return normalize_images(value)
    if name == 'amenities':
        return tuple(value or ())
    if name in ('max_guests', 'bedrooms', 'bathrooms'):
        return int(value)
    return value


@dataclass(frozen=True)
class PersistedListing:
    """A committed listing. Only explicit edits or deletes change it afterwards."""
    id: str
    title: str
    description: str
    city: str
    landmark: str
    category: str
    listing_type: str
    rent: int
    images: tuple
    created_at: datetime
    amenities: tuple = ()
    max_guests: int = 1
    bedrooms: int = 1
    bathrooms: int = 1
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: str = 'active'
    updated_at: Optional[datetime] = None

    @classmethod
    def from_draft(cls, draft, listing_id, created_at, status='active'):
        values = {name: normalize_field(name, getattr(draft, name)) for name in EDITABLE_FIELDS}
        return cls(id=listing_id, created_at=created_at, status=status, **values)

    def to_dict(self):
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['images'] = [image_to_state(image) for image in self.images]
        data['amenities'] = list(self.amenities)
        data['created_at'] = self.created_at.isoformat()
        data['updated_at'] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_dict(cls, data):
        data = dict(data)
        data['images'] = normalize_images(image_from_state(v) for v in data.get('images') or [])
        data['amenities'] = tuple(data.get('amenities') or ())
        data['created_at'] = datetime.fromisoformat(data['created_at'])
        if data.get('updated_at'):
            data['updated_at'] = datetime.fromisoformat(data['updated_at'])
        return cls(**data)
