# listings/validators.py
"""
Field rules for listing drafts.

Every function here is pure: the same field and value always give the same
message (or ``None`` when the value is fine). Messages are returned, never
raised, so the wizard can show them next to the field. The only exception is
``InvalidField`` for a field name nobody defined a rule for.
"""
import re

from .draft import ImageBlob
from .exceptions import InvalidField
from .models import (
    ALLOWED_IMAGE_TYPES,
    AMENITIES,
    CATEGORIES,
    LISTING_TYPES,
    MAX_IMAGE_SIZE,
)

REQUIRED_MESSAGE = 'This field is required'

TEXT_RULES = {
    'title': {
        'min_length': 5,
        'max_length': 100,
        'pattern': re.compile(r'[a-zA-Z0-9\s\-.,!?()]+', re.ASCII),
        'message': 'Title must be 5-100 characters with only letters, numbers, and basic punctuation',
    },
    'description': {
        'min_length': 20,
        'max_length': 1000,
    },
    'city': {
        'min_length': 2,
        'max_length': 50,
        'pattern': re.compile(r"[a-zA-Z\s\-']+", re.ASCII),
        'message': 'City must be 2-50 letters with spaces and hyphens only',
    },
    'landmark': {
        'min_length': 5,
        'max_length': 100,
    },
}

RENT_MIN = 100
RENT_MAX = 100000
RENT_PATTERN = re.compile(r'\d+', re.ASCII)


def _as_text(value):
    if value is None:
        return ''
    return str(value).strip()


def _text_rule(name):
    rules = TEXT_RULES[name]

    def check(value):
        text = _as_text(value)
        if not text:
            return REQUIRED_MESSAGE
        if len(text) < rules['min_length']:
            return f"Minimum {rules['min_length']} characters required"
        if len(text) > rules['max_length']:
            return f"Maximum {rules['max_length']} characters allowed"
        pattern = rules.get('pattern')
        if pattern is not None and not pattern.fullmatch(text):
            return rules['message']
        return None

    return check


def validate_rent(value):
    if isinstance(value, bool):
        return 'Rent must be a number between ₹100 and ₹100,000'
    text = _as_text(value)
    if not text:
        return REQUIRED_MESSAGE
    if not RENT_PATTERN.fullmatch(text):
        return 'Rent must be a number between ₹100 and ₹100,000'
    amount = int(text)
    if amount < RENT_MIN:
        return f"Minimum value is {RENT_MIN}"
    if amount > RENT_MAX:
        return f"Maximum value is {RENT_MAX}"
    return None


def validate_category(value):
    if not _as_text(value):
        return 'Please select a category'
    if value not in CATEGORIES:
        return 'Please select a valid category'
    return None


def validate_listing_type(value):
    if not _as_text(value):
        return 'Please select a listing type'
    if value not in LISTING_TYPES:
        return "Listing type must be either 'rent' or 'purchase'"
    return None


def validate_image(ref):
    """Check one image slot. URLs of already-hosted images are always accepted."""
    if ref is None or isinstance(ref, str):
        return None
    if not isinstance(ref, ImageBlob):
        return 'Invalid image reference'
    if ref.content_type not in ALLOWED_IMAGE_TYPES:
        return 'Please upload only JPG, PNG, or WebP images'
    if ref.size > MAX_IMAGE_SIZE:
        return 'Image size must be less than 5MB'
    return None


def validate_images(value):
    images = list(value or [])
    if not images or not images[0]:
        return 'At least one image is required'
    for ref in images:
        error = validate_image(ref)
        if error:
            return error
    return None


def validate_amenities(value):
    for amenity in value or ():
        if amenity not in AMENITIES:
            return f"Unknown amenity: {amenity}"
    return None


def validate_count(value):
    if isinstance(value, bool):
        return 'Must be a whole number of at least 1'
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return 'Must be a whole number of at least 1'
        value = int(value)
    if not isinstance(value, int) or value < 1:
        return 'Must be a whole number of at least 1'
    return None


VALIDATORS = {
    'title': _text_rule('title'),
    'description': _text_rule('description'),
    'city': _text_rule('city'),
    'landmark': _text_rule('landmark'),
    'category': validate_category,
    'listing_type': validate_listing_type,
    'rent': validate_rent,
    'images': validate_images,
    'amenities': validate_amenities,
    'max_guests': validate_count,
    'bedrooms': validate_count,
    'bathrooms': validate_count,
}

# Fields each wizard step is responsible for. The last step re-checks everything.
STEP_FIELDS = {
    1: ('title', 'description', 'images', 'listing_type'),
    2: ('category', 'listing_type'),
    3: tuple(VALIDATORS),
}


def validate_field(name, value, draft=None):
    """Return the error message for ``value`` or ``None``.

    ``draft`` is the snapshot the value belongs to, for rules that need to
    look at other fields.
    """
    rule = VALIDATORS.get(name)
    if rule is None:
        raise InvalidField(name)
    return rule(value)


def validate_step(step, draft):
    """Validate the fields of one wizard step; an empty dict means the step passes."""
    if step not in STEP_FIELDS:
        raise ValueError(f"Unknown wizard step: {step}")
    errors = {}
    for name in STEP_FIELDS[step]:
        message = validate_field(name, getattr(draft, name), draft)
        if message:
            errors[name] = message
    return errors
