# listings/serializers.py

from rest_framework import serializers

from .draft import image_to_state
from .models import IMAGE_SLOTS, STATUS_CHOICES
from .selectors import DEFAULT_SORT, SORT_CHOICES


def _blank_if_missing(value):
    # Frontends send these for unset inputs
    if value is None or value in ('null', 'undefined'):
        return ''
    return value


class DraftFieldsSerializer(serializers.Serializer):
    """
    Type conversion for draft updates coming from the wizard.
    Field rules are NOT applied here; the wizard validates when the host moves on.
    """
    title = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    listing_type = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rent = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    landmark = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    latitude = serializers.FloatField(required=False, allow_null=True)
    longitude = serializers.FloatField(required=False, allow_null=True)
    images = serializers.ListField(
        child=serializers.CharField(allow_null=True, allow_blank=True),
        required=False,
        max_length=IMAGE_SLOTS
    )
    amenities = serializers.ListField(child=serializers.CharField(), required=False)
    max_guests = serializers.IntegerField(required=False)
    bedrooms = serializers.IntegerField(required=False)
    bathrooms = serializers.IntegerField(required=False)

    def validate_title(self, value):
        return _blank_if_missing(value)

    def validate_description(self, value):
        return _blank_if_missing(value)

    def validate_category(self, value):
        return _blank_if_missing(value)

    def validate_listing_type(self, value):
        return _blank_if_missing(value)

    def validate_rent(self, value):
        """Rent stays a numeric string in the draft"""
        return _blank_if_missing(value)

    def validate_city(self, value):
        return _blank_if_missing(value)

    def validate_landmark(self, value):
        return _blank_if_missing(value)


class ListingUpdateSerializer(DraftFieldsSerializer):
    """Edits to an already committed listing, plus its status."""
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.FileField()
    slot = serializers.IntegerField(required=False, default=0, min_value=0, max_value=IMAGE_SLOTS - 1)


class ListingQuerySerializer(serializers.Serializer):
    """Query string of the browse endpoints."""
    city = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True)
    price_min = serializers.IntegerField(required=False, min_value=0)
    price_max = serializers.IntegerField(required=False, min_value=0)
    guests = serializers.IntegerField(required=False, min_value=1)
    amenities = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False, default=DEFAULT_SORT)

    def validate_amenities(self, value):
        return [item.strip() for item in value.split(',') if item.strip()]

    def validate_status(self, value):
        if value in ('', 'all'):
            return ''
        valid = [choice for choice, _ in STATUS_CHOICES]
        if value not in valid:
            raise serializers.ValidationError(f"Status must be 'all' or one of: {', '.join(valid)}")
        return value


class ListingSerializer(serializers.Serializer):
    """Full public representation of a committed listing."""
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    listing_type = serializers.CharField()
    rent = serializers.IntegerField()
    city = serializers.CharField()
    landmark = serializers.CharField()
    latitude = serializers.FloatField(allow_null=True)
    longitude = serializers.FloatField(allow_null=True)
    images = serializers.SerializerMethodField()
    amenities = serializers.ListField(child=serializers.CharField())
    max_guests = serializers.IntegerField()
    bedrooms = serializers.IntegerField()
    bathrooms = serializers.IntegerField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField(allow_null=True)

    def get_images(self, obj):
        return [image_to_state(image) for image in obj.images]


class ListingCardSerializer(serializers.Serializer):
    """
    Compact representation for list views.
    Includes only what a listing card shows.
    """
    id = serializers.CharField()
    title = serializers.CharField()
    rent = serializers.IntegerField()
    city = serializers.CharField()
    category = serializers.CharField()
    listing_type = serializers.CharField()
    max_guests = serializers.IntegerField()
    cover_image = serializers.SerializerMethodField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()

    def get_cover_image(self, obj):
        image = obj.images[0] if obj.images else None
        return image if isinstance(image, str) else None
