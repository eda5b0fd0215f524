# listings/draft.py
"""
The in-progress listing shared by every wizard step.

A ``Draft`` is immutable; ``DraftStore`` swaps in a new one on every write so a
snapshot handed out earlier never changes under its holder.
"""
from dataclasses import dataclass, fields, replace
from typing import Optional

from .exceptions import InvalidField
from .models import IMAGE_SLOTS

HISTORY_LIMIT = 10


@dataclass(frozen=True)
class ImageBlob:
    """An uploaded file that has not been hosted anywhere yet."""
    name: str
    content_type: str
    size: int

    def to_dict(self):
        return {'name': self.name, 'content_type': self.content_type, 'size': self.size}


def image_to_state(ref):
    if isinstance(ref, ImageBlob):
        return ref.to_dict()
    return ref or None


def image_from_state(value):
    if isinstance(value, dict):
        return ImageBlob(
            name=value.get('name', ''),
            content_type=value.get('content_type', ''),
            size=int(value.get('size', 0)),
        )
    return value or None


def normalize_images(images):
    """Pad (or check) an image list to exactly ``IMAGE_SLOTS`` slots."""
    images = list(images or [])
    if len(images) > IMAGE_SLOTS:
        raise ValueError(f"A listing holds at most {IMAGE_SLOTS} images")
    images += [None] * (IMAGE_SLOTS - len(images))
    return tuple(image or None for image in images)


@dataclass(frozen=True)
class Draft:
    # Basic information
    title: str = ''
    description: str = ''
    category: str = ''
    listing_type: str = ''
    rent: str = ''

    # Location
    city: str = ''
    landmark: str = ''
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Property details
    images: tuple = (None,) * IMAGE_SLOTS
    amenities: tuple = ()
    max_guests: int = 1
    bedrooms: int = 1
    bathrooms: int = 1

    def to_state(self):
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['images'] = [image_to_state(image) for image in self.images]
        data['amenities'] = list(self.amenities)
        return data

    @classmethod
    def from_state(cls, data):
        data = dict(data or {})
        unknown = set(data) - set(DRAFT_FIELDS)
        if unknown:
            raise InvalidField(sorted(unknown)[0])
        if 'images' in data:
            data['images'] = normalize_images(image_from_state(v) for v in data['images'])
        if 'amenities' in data:
            data['amenities'] = tuple(data['amenities'] or ())
        return cls(**data)


DRAFT_FIELDS = tuple(f.name for f in fields(Draft))
EMPTY_DRAFT = Draft()


def completion_percentage(draft):
    """How much of the draft has been filled in, as a whole percentage."""
    filled = 0
    for name in DRAFT_FIELDS:
        value = getattr(draft, name)
        if isinstance(value, tuple):
            filled += any(item is not None for item in value)
        elif isinstance(value, str):
            filled += bool(value.strip())
        else:
            filled += value is not None and value is not False
    return round(filled * 100 / len(DRAFT_FIELDS))


class DraftStore:
    """Holds the single active draft of a wizard session.

    Writes never validate; consumers pull validation when they need it.
    Subscribers are called with ``(name, value)`` after every field write and
    with ``(None, None)`` after ``reset()`` or ``undo()``.
    """

    def __init__(self, draft=None, history=None):
        self._draft = draft or EMPTY_DRAFT
        self._history = list(history or [])[-HISTORY_LIMIT:]
        self._listeners = []

    def subscribe(self, callback):
        self._listeners.append(callback)

    def _notify(self, name, value):
        for callback in self._listeners:
            callback(name, value)

    def _replace(self, **changes):
        self._history = (self._history + [self._draft])[-HISTORY_LIMIT:]
        self._draft = replace(self._draft, **changes)

    @staticmethod
    def _normalize(name, value):
        if name not in DRAFT_FIELDS:
            raise InvalidField(name)
        if name == 'images':
            return normalize_images(value)
        if name == 'amenities':
            return tuple(value or ())
        return value

    def set_field(self, name, value):
        value = self._normalize(name, value)
        self._replace(**{name: value})
        self._notify(name, value)

    def set_fields(self, changes):
        """Write several fields as one change, so a single ``undo()`` reverts them all."""
        changes = {name: self._normalize(name, value) for name, value in changes.items()}
        if not changes:
            return
        self._replace(**changes)
        for name, value in changes.items():
            self._notify(name, value)

    def set_image(self, index, ref):
        if not 0 <= index < IMAGE_SLOTS:
            raise IndexError(f"Image slot must be between 0 and {IMAGE_SLOTS - 1}")
        images = list(self._draft.images)
        images[index] = ref or None
        self.set_field('images', images)

    def reset(self):
        self._draft = EMPTY_DRAFT
        self._history = []
        self._notify(None, None)

    def undo(self):
        if not self._history:
            return False
        self._draft = self._history.pop()
        self._notify(None, None)
        return True

    @property
    def can_undo(self):
        return bool(self._history)

    def snapshot(self):
        return self._draft

    def to_state(self):
        return {
            'draft': self._draft.to_state(),
            'history': [draft.to_state() for draft in self._history],
        }

    @classmethod
    def from_state(cls, state):
        state = state or {}
        draft = Draft.from_state(state['draft']) if state.get('draft') else None
        history = [Draft.from_state(item) for item in state.get('history', [])]
        return cls(draft=draft, history=history)
