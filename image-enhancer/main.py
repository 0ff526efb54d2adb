"""
Image Enhancer Cloud Function

Replaces a product photo's background with studio white via the Photoroom
segment API.

Responsibilities:
- Validate the request and Photoroom configuration
- Forward the image URL to Photoroom
- Store the result in Cloud Storage when GCS_BUCKET is set, otherwise
  return it inline as a data URL

Does NOT:
- Update the product record (the dashboard does that with the returned URL)
- Retry failed enhancements
"""

import functions_framework
from google.oauth2 import service_account
from google.cloud import storage
import requests
import base64
import json
import os
import traceback
import uuid

# Configuration
PHOTOROOM_API_KEY = os.environ.get('PHOTOROOM_API_KEY')
GCS_BUCKET = os.environ.get('GCS_BUCKET')  # Optional: store results instead of inlining them
SCOPES = ['https://www.googleapis.com/auth/cloud-platform']

PHOTOROOM_SEGMENT_URL = 'https://sdk.photoroom.com/v1/segment'
PHOTOROOM_KEY_PLACEHOLDER = 'YOUR_PHOTOROOM_KEY_HERE'
PHOTOROOM_TIMEOUT = 60  # seconds
STUDIO_BACKGROUND = '#ffffff'
MIN_IMAGE_URL_LENGTH = 5


def get_storage_client():
    """Initialize Cloud Storage client."""
    creds_json = os.environ.get('GOOGLE_SERVICE_ACCOUNT')
    if creds_json:
        creds_dict = json.loads(creds_json)
        creds = service_account.Credentials.from_service_account_info(
            creds_dict,
            scopes=SCOPES
        )
        return storage.Client(credentials=creds, project=creds_dict.get('project_id'))
    else:
        # Use default credentials in Cloud Functions
        return storage.Client()


def upload_image_to_gcs(client, image_bytes: bytes, content_type: str = 'image/jpeg') -> dict:
    """Upload enhanced image bytes and return its public URL."""
    bucket = client.bucket(GCS_BUCKET)
    blob_name = f"enhanced/{uuid.uuid4().hex}.jpg"
    blob = bucket.blob(blob_name)

    blob.upload_from_string(image_bytes, content_type=content_type)

    # Bucket is public via IAM
    public_url = f"https://storage.googleapis.com/{GCS_BUCKET}/{blob_name}"

    return {
        'blob_name': blob_name,
        'public_url': public_url,
        'size_bytes': len(image_bytes)
    }


def to_data_url(image_bytes: bytes, content_type: str = 'image/jpeg') -> str:
    """Encode image bytes as a data URL the dashboard can show directly."""
    encoded = base64.b64encode(image_bytes).decode('utf-8')
    return f"data:{content_type};base64,{encoded}"


def request_background_removal(image_url: str) -> requests.Response:
    """Call Photoroom's segment endpoint for image_url."""
    return requests.post(
        PHOTOROOM_SEGMENT_URL,
        headers={
            'x-api-key': PHOTOROOM_API_KEY,
            'Content-Type': 'application/json'
        },
        json={
            'image_url': image_url,
            'background_color': STUDIO_BACKGROUND,
            'format': 'jpg',
            'quality': '90'
        },
        timeout=PHOTOROOM_TIMEOUT
    )


@functions_framework.http
def enhance_image(request):
    """
    Cloud Function entry point.

    Expected JSON input:
    {
        "imageUrl": "https://example.com/product.jpg",
        "promptType": "studio"
    }
    """
    if request.method == 'OPTIONS':
        headers = {
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Methods': 'POST',
            'Access-Control-Allow-Headers': 'Content-Type',
            'Access-Control-Max-Age': '3600'
        }
        return ('', 204, headers)

    headers = {'Access-Control-Allow-Origin': '*'}

    if not PHOTOROOM_API_KEY or PHOTOROOM_API_KEY == PHOTOROOM_KEY_PLACEHOLDER:
        return (json.dumps({'error': 'Photoroom API Key not configured'}), 500, headers)

    try:
        request_json = request.get_json(silent=True) or {}
        image_url = request_json.get('imageUrl')

        if not isinstance(image_url, str) or len(image_url) < MIN_IMAGE_URL_LENGTH:
            return (json.dumps({'error': 'Valid Image URL required'}), 400, headers)

        print(f"Requesting Photoroom enhancement for: {image_url}")
        response = request_background_removal(image_url)

        if not response.ok:
            print(f"Photoroom API error: {response.status_code} - {response.text[:200]}")
            return (json.dumps({
                'error': 'Photoroom processing failed',
                'details': response.text
            }), response.status_code, headers)

        image_bytes = response.content

        if GCS_BUCKET:
            stored = upload_image_to_gcs(get_storage_client(), image_bytes)
            enhanced_url = stored['public_url']
            print(f"Stored enhanced image: {stored['blob_name']} ({stored['size_bytes']} bytes)")
        else:
            enhanced_url = to_data_url(image_bytes)

        return (json.dumps({
            'success': True,
            'enhancedImageUrl': enhanced_url,
            'message': 'Background replaced with Studio White'
        }), 200, headers)

    except Exception as e:
        print(f"Enhancement error: {str(e)}\n{traceback.format_exc()}")
        return (json.dumps({
            'error': 'Failed to enhance image',
            'details': str(e)
        }), 500, headers)
