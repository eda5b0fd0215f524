# listings/utils.py

import logging
import random

import cloudinary.uploader
import requests
from django.conf import settings

from .exceptions import ImageUploadFailed

logger = logging.getLogger(__name__)

# Placeholder images used when Cloudinary is not reachable (development)
MOCK_IMAGE_URLS = [
    "https://images.unsplash.com/photo-1510798831971-661eb04b3739",
    "https://images.unsplash.com/photo-1571896349842-33c89424de2d",
    "https://images.unsplash.com/photo-1542314831-068cd1dbfeeb",
]


def upload_listing_image(file):
    """
    Upload one listing photo to Cloudinary and return its URL.
    In DEBUG a failed upload falls back to a placeholder image; otherwise it
    raises ImageUploadFailed.
    """
    try:
        upload_result = cloudinary.uploader.upload(
            file,
            folder="listings/drafts",
            resource_type="image",
            overwrite=False,
            unique_filename=True
        )
        image_url = upload_result.get('secure_url')
        if image_url:
            return image_url
        logger.warning(f"Cloudinary returned no URL for {file.name}")
    except Exception as e:
        logger.warning(f"Cloudinary upload failed for {file.name}: {e}")

    if not settings.DEBUG:
        raise ImageUploadFailed(f"Could not upload {file.name}")

    mock_url = random.choice(MOCK_IMAGE_URLS)
    filename_base = file.name.rsplit('.', 1)[0] if '.' in file.name else file.name
    safe_text = filename_base.replace('+', '%20').replace(' ', '+')
    return f"{mock_url}?text={safe_text}"


def geocode_address(address):
    """
    Look up coordinates for a free-text address using Nominatim (OpenStreetMap).
    Returns {'lat': ..., 'lng': ...} or None if nothing was found.
    """
    params = {
        'q': address.strip(),
        'format': 'json',
        'limit': 1,
    }
    headers = {
        'User-Agent': settings.NOMINATIM_USER_AGENT  # Required by Nominatim
    }

    try:
        response = requests.get(settings.NOMINATIM_URL, params=params, headers=headers, timeout=10)
    except requests.RequestException as e:
        logger.warning(f"Geocoding request failed for '{address}': {e}")
        return None

    if response.status_code != 200:
        logger.warning(f"Geocoding failed. Status: {response.status_code}")
        return None

    results = response.json()
    if not results:
        logger.info(f"No geocoding results found for '{address}'")
        return None

    loc = results[0]
    return {
        'lat': float(loc['lat']),
        'lng': float(loc['lon'])
    }
