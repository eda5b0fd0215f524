# listings/views.py

import logging

from django.db import DatabaseError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .draft import ImageBlob
from .exceptions import (
    ImageUploadFailed,
    InvalidField,
    ListingNotFound,
    PersistenceFailed,
    StoreError,
    ValidationFailed,
)
from .models import Listing, ListingDraft
from .selectors import ListingFilters, category_counts, list_listings, price_stats
from .serializers import (
    DraftFieldsSerializer,
    ImageUploadSerializer,
    ListingCardSerializer,
    ListingQuerySerializer,
    ListingSerializer,
    ListingUpdateSerializer,
)
from .services import delete_listing, update_listing
from .stores import DjangoListingStore, row_to_record
from .utils import geocode_address, upload_listing_image
from .validators import validate_image
from .wizard import ListingWizard

logger = logging.getLogger(__name__)

STORAGE_ERROR_MESSAGE = "We could not save your listing right now. Your draft has been kept, please try again."


# === Wizard session helpers ===

def _load_wizard(request, lock=False):
    # lock=True must run inside transaction.atomic()
    drafts = ListingDraft.objects.select_for_update() if lock else ListingDraft.objects
    row, _ = drafts.get_or_create(user=request.user)
    wizard = ListingWizard.build(
        DjangoListingStore(request.user),
        state=row.state,
        step=row.current_step
    )
    return row, wizard


def _save_wizard(row, wizard):
    row.state = wizard.to_state()
    row.current_step = wizard.steps.current
    row.save(update_fields=['state', 'current_step', 'updated_at'])


def _wizard_response(row, wizard, http_status=status.HTTP_200_OK):
    _save_wizard(row, wizard)
    return Response(wizard.describe(), status=http_status)


def _step_from(request):
    try:
        return int(request.data.get('step'))
    except (TypeError, ValueError):
        return None


# === Wizard endpoints (authenticated) ===

@api_view(['POST'])
@permission_classes([IsAuthenticated])
def start_listing(request):
    """Start a fresh listing wizard, discarding any unfinished draft"""
    row, wizard = _load_wizard(request)
    wizard.reset()
    return _wizard_response(row, wizard, status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def listing_wizard(request):
    """Read the wizard, or write any draft fields (no validation until the host moves on)"""
    row, wizard = _load_wizard(request)
    if request.method == 'GET':
        return Response(wizard.describe())

    unknown = sorted(set(request.data) - set(DraftFieldsSerializer().fields))
    if unknown:
        return Response({
            "error": "Unknown draft fields",
            "unknown": unknown
        }, status=status.HTTP_400_BAD_REQUEST)

    serializer = DraftFieldsSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    wizard.update_fields(serializer.validated_data)
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def touch_field(request):
    row, wizard = _load_wizard(request)
    try:
        wizard.touch(request.data.get('field'))
    except InvalidField as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def upload_listing_image_view(request):
    """Check one photo, host it, and put its URL into an image slot"""
    serializer = ImageUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    file = serializer.validated_data['image']
    slot = serializer.validated_data['slot']
    error = validate_image(ImageBlob(name=file.name, content_type=file.content_type, size=file.size))
    if error:
        return Response({"error": error}, status=status.HTTP_400_BAD_REQUEST)

    row, wizard = _load_wizard(request)
    try:
        image_url = upload_listing_image(file)
    except ImageUploadFailed as e:
        logger.error(f"❌ Image upload failed for {request.user.email}: {e}")
        return Response({
            "error": "We could not upload your photo right now. Please try again."
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    wizard.set_image(slot, image_url)
    _save_wizard(row, wizard)
    return Response({
        "url": image_url,
        "slot": slot,
        "wizard": wizard.describe()
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def confirm_location(request):
    """Fill in latitude and longitude from the draft's landmark and city"""
    row, wizard = _load_wizard(request)
    draft = wizard.draft_store.snapshot()
    address = ', '.join(part.strip() for part in (draft.landmark, draft.city) if part and part.strip())
    if not address:
        return Response({"error": "City or landmark is required"}, status=status.HTTP_400_BAD_REQUEST)

    coords = geocode_address(address)
    if not coords:
        return Response({
            "error": "Could not find coordinates for this location. Please try being more specific."
        }, status=status.HTTP_400_BAD_REQUEST)

    wizard.update('latitude', coords['lat'])
    wizard.update('longitude', coords['lng'])
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def advance_step(request):
    row, wizard = _load_wizard(request)
    wizard.advance()
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def retreat_step(request):
    row, wizard = _load_wizard(request)
    wizard.retreat()
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jump_to_step(request):
    row, wizard = _load_wizard(request)
    step = _step_from(request)
    try:
        wizard.jump_to(step)
    except ValueError as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def undo_change(request):
    row, wizard = _load_wizard(request)
    if not wizard.undo():
        return Response({"error": "Nothing to undo"}, status=status.HTTP_400_BAD_REQUEST)
    return _wizard_response(row, wizard)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def commit_listing(request):
    """
    Publish the finished draft into the host's listings.
    The new listing and the cleared draft are saved in one transaction, with
    the draft row locked so a second commit waits and then finds it empty.
    """
    try:
        with transaction.atomic():
            row, wizard = _load_wizard(request, lock=True)
            try:
                listing = wizard.commit()
            except ValidationFailed as e:
                _save_wizard(row, wizard)
                return Response({
                    "error": "Please fix all validation errors",
                    "errors": e.errors,
                    "wizard": wizard.describe()
                }, status=status.HTTP_400_BAD_REQUEST)
            _save_wizard(row, wizard)
    except PersistenceFailed as e:
        reason = e.reason
    except DatabaseError as e:
        reason = str(e)
    else:
        return Response({
            "message": "✅ Your listing has been published successfully.",
            "listing": ListingSerializer(listing).data
        }, status=status.HTTP_201_CREATED)

    logger.error(f"❌ Commit failed for {request.user.email}: {reason}")
    return Response({
        "error": STORAGE_ERROR_MESSAGE,
        "reason": reason
    }, status=status.HTTP_503_SERVICE_UNAVAILABLE)


# === Public endpoints (unauthenticated) ===

def _filters_from(query, **overrides):
    data = query.validated_data
    values = {
        'city_contains': data.get('city') or None,
        'category': data.get('category') or None,
        'min_price': data.get('price_min'),
        'max_price': data.get('price_max'),
        'min_guests': data.get('guests'),
        'required_amenities': frozenset(data.get('amenities') or ()),
        'status': data.get('status') or None,
        'search': data.get('search') or None,
    }
    values.update(overrides)
    return ListingFilters(**values)


def _read_listings(store):
    try:
        return store.read(), None
    except StoreError as e:
        logger.error(f"❌ Could not read listings: {e}")
        return None, Response({
            "error": "Listings are temporarily unavailable."
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['GET'])
@permission_classes([AllowAny])
def listing_list(request):
    query = ListingQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

    listings, error_response = _read_listings(DjangoListingStore())
    if error_response:
        return error_response

    results = list_listings(listings, _filters_from(query, status='active'), query.validated_data['sort'])
    serializer = ListingCardSerializer(results, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def listing_summary(request):
    listings, error_response = _read_listings(DjangoListingStore())
    if error_response:
        return error_response

    active = [listing for listing in listings if listing.status == 'active']
    return Response({
        "total": len(active),
        "price": price_stats(active),
        "categories": category_counts(active)
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def listing_detail(request, listing_id):
    try:
        row = Listing.objects.get(id=listing_id, status='active')
    except Listing.DoesNotExist:
        return Response({
            "error": "Listing not found."
        }, status=status.HTTP_404_NOT_FOUND)

    serializer = ListingSerializer(row_to_record(row))
    return Response(serializer.data, status=status.HTTP_200_OK)


# === Host's own listings (authenticated) ===

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_listings(request):
    query = ListingQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

    listings, error_response = _read_listings(DjangoListingStore(request.user))
    if error_response:
        return error_response

    results = list_listings(listings, _filters_from(query), query.validated_data['sort'])
    return Response({
        "count": len(results),
        "total": len(listings),
        "active": sum(1 for listing in listings if listing.status == 'active'),
        "results": ListingSerializer(results, many=True).data
    }, status=status.HTTP_200_OK)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@parser_classes([JSONParser, FormParser])
def my_listing_detail(request, listing_id):
    store = DjangoListingStore(request.user)
    try:
        if request.method == 'DELETE':
            delete_listing(store, listing_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ListingUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        listing = update_listing(store, listing_id, serializer.validated_data)
    except ListingNotFound:
        return Response({"error": "Listing not found."}, status=status.HTTP_404_NOT_FOUND)
    except ValidationFailed as e:
        return Response({"error": "Invalid listing fields", "errors": e.errors}, status=status.HTTP_400_BAD_REQUEST)
    except PersistenceFailed as e:
        return Response({"error": STORAGE_ERROR_MESSAGE, "reason": e.reason}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(ListingSerializer(listing).data, status=status.HTTP_200_OK)
