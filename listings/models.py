# listings/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone

# Categories a listing can be filed under
CATEGORY_CHOICES = [
    ('Apartment', 'Apartment'),
    ('House', 'House'),
    ('Villa', 'Villa'),
    ('Condo', 'Condo'),
    ('Studio', 'Studio'),
    ('Cabin', 'Cabin'),
    ('Farm', 'Farm'),
    ('Castle', 'Castle'),
    ('Treehouse', 'Treehouse'),
    ('Boat', 'Boat'),
    ('Guesthouse', 'Guesthouse'),
    ('Hotel', 'Hotel'),
    ('Resort', 'Resort'),
    ('Cottage', 'Cottage'),
    ('Loft', 'Loft'),
]
CATEGORIES = [value for value, _ in CATEGORY_CHOICES]

# Whether the place is offered for rent or for sale
LISTING_TYPE_CHOICES = [
    ('rent', 'Rent'),
    ('purchase', 'Purchase'),
]
LISTING_TYPES = [value for value, _ in LISTING_TYPE_CHOICES]

STATUS_CHOICES = [
    ('active', 'Active'),
    ('draft', 'Draft'),
    ('pending', 'Pending'),
]
STATUSES = [value for value, _ in STATUS_CHOICES]

AMENITIES = [
    'WiFi', 'Pool', 'Kitchen', 'Parking', 'Air Conditioning',
    'Heating', 'Washer', 'Dryer', 'TV', 'Gym', 'Hot Tub',
    'Pet Friendly', 'Breakfast', 'Fireplace', 'Beachfront',
    'Mountain View', 'City View', 'Garden', 'Balcony', 'Elevator',
]

# Image upload limits
IMAGE_SLOTS = 3
ALLOWED_IMAGE_TYPES = ['image/jpeg', 'image/jpg', 'image/png', 'image/webp']
MAX_IMAGE_SIZE = 5 * 1024 * 1024


class ListingDraft(models.Model):
    """The host's in-progress wizard: one row per user, replaced on every step."""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='listing_draft'
    )
    current_step = models.PositiveSmallIntegerField(default=1)
    state = models.JSONField(default=dict, blank=True)  # draft fields, undo history, touched fields

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        display_name = self.user.display_name
        title = (self.state.get('draft') or {}).get('title') or 'Untitled'
        return f"Draft: {title} by {display_name} (step {self.current_step})"

    class Meta:
        ordering = ['-updated_at']
        verbose_name = "Listing Draft"
        verbose_name_plural = "Listing Drafts"


class Listing(models.Model):
    # Opaque id generated at commit time, unique within the host's collection
    id = models.CharField(max_length=40, primary_key=True)
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='listings'
    )
    position = models.PositiveIntegerField(default=0)  # insertion order within the host's collection

    # Basic information
    title = models.CharField(max_length=100)
    description = models.TextField()
    category = models.CharField(max_length=50, choices=CATEGORY_CHOICES)
    listing_type = models.CharField(max_length=20, choices=LISTING_TYPE_CHOICES)
    rent = models.PositiveIntegerField()

    # Location
    city = models.CharField(max_length=50)
    landmark = models.CharField(max_length=100)
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    # Property details
    images = models.JSONField(default=list, blank=True)  # one entry per image slot, URL or null
    amenities = models.JSONField(default=list, blank=True)
    max_guests = models.PositiveSmallIntegerField(default=1)
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(blank=True, null=True)

    def cover_image(self):
        for image in self.images or []:
            if isinstance(image, str) and image:
                return image
        return None

    def __str__(self):
        return f"Listing: {self.title} in {self.city} [{self.get_status_display()}]"

    class Meta:
        ordering = ['host', 'position']
        verbose_name = "Listing"
        verbose_name_plural = "Listings"
