"""
Product Extractor Cloud Function

Turns a social media post URL (or a pasted caption) into a product draft
for the PostCart seller dashboard.

Responsibilities:
- Validate the request
- Classify the URL and fetch the post with platform-specific headers
- Fall back to a synthetic description when the post cannot be read
- Ask Gemini for name, price (TZS) and description
- Sanitize the answer into a fully populated product draft

Does NOT:
- Save the product (the dashboard writes it to the seller's store)
- Retry failed AI calls (the seller can resubmit or enter details by hand)
- Talk to the Meta Graph API (the official connection flow does that)
"""

import functions_framework
import json
import os
import sys
import traceback

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.url_utils import classify_url, is_social_category, validate_url
from shared.fetch_utils import fetch_content
from shared.prompt_utils import build_prompt, build_caption_prompt
from shared.gemini_client import generate_content, DEFAULT_MODEL
from shared.product_utils import sanitize_model_response, assemble_product_draft
from shared.errors import (
    ExtractionError,
    INPUT_VALIDATION,
    NOT_CONFIGURED,
    UNKNOWN,
    ai_unavailable,
    error_response,
    platform_protected,
)

# Configuration
GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
GEMINI_MODEL = os.environ.get('GEMINI_MODEL', DEFAULT_MODEL)
# Hard-stop with "connect official API" instead of guessing from the URL
STRICT_SOCIAL_GUARD = os.environ.get('STRICT_SOCIAL_GUARD', 'false').lower() in ('1', 'true', 'yes')


def _require_api_key():
    if not GEMINI_API_KEY:
        raise ai_unavailable(NOT_CONFIGURED, 'GEMINI_API_KEY not configured')


def extract_product_draft(url: str, platform: str = None) -> dict:
    """
    Run the full URL extraction pipeline.

    Returns:
        Product draft dict (name, price, description, image, platform, sourceUrl)

    Raises:
        ExtractionError: for input, protected-post and AI failures
    """
    if not validate_url(url):
        raise ExtractionError(INPUT_VALIDATION, 'Valid URL required')

    url = url.strip()
    # Anything but a non-blank string counts as no platform
    platform = platform.strip() if isinstance(platform, str) and platform.strip() else None
    _require_api_key()

    category = classify_url(url)
    print(f"Extracting product from {category} URL: {url}")

    descriptor = fetch_content(url, category, platform)

    if STRICT_SOCIAL_GUARD and is_social_category(category) and descriptor.fallback_reason:
        print(f"Strict social guard: {category} post unreadable ({descriptor.fallback_reason})")
        raise platform_protected(category)

    prompt = build_prompt(url, platform, descriptor.page_content)
    raw_answer = generate_content(prompt, GEMINI_API_KEY, model=GEMINI_MODEL)
    fields = sanitize_model_response(raw_answer)

    return assemble_product_draft(fields, descriptor, url, platform)


def extract_caption_fields(caption: str) -> dict:
    """Extract name, price and description from a caption string."""
    if not isinstance(caption, str) or not caption.strip():
        raise ExtractionError(INPUT_VALIDATION, 'Caption required')

    _require_api_key()

    prompt = build_caption_prompt(caption)
    raw_answer = generate_content(prompt, GEMINI_API_KEY, model=GEMINI_MODEL)
    return sanitize_model_response(raw_answer)


def _preflight():
    headers = {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Methods': 'POST',
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Max-Age': '3600'
    }
    return ('', 204, headers)


def _request_body(request) -> dict:
    request_json = request.get_json(silent=True)
    return request_json if isinstance(request_json, dict) else {}


def _error_reply(error: ExtractionError, headers: dict):
    body, status = error_response(error)
    print(f"Extraction error ({error.kind}/{error.reason}): {error}")
    return (json.dumps(body), status, headers)


def _unknown_reply(e: Exception, headers: dict):
    print(f"Error: {str(e)}\n{traceback.format_exc()}")
    return _error_reply(ExtractionError(UNKNOWN, str(e) or 'Unknown error occurred'), headers)


@functions_framework.http
def extract_product(request):
    """
    Cloud Function entry point for URL extraction.

    Expected JSON input:
    {
        "url": "https://www.instagram.com/p/abc123/",
        "platform": "Instagram"
    }
    """
    if request.method == 'OPTIONS':
        return _preflight()

    headers = {'Access-Control-Allow-Origin': '*'}

    try:
        request_json = _request_body(request)
        product = extract_product_draft(request_json.get('url'), request_json.get('platform'))

        return (json.dumps({'success': True, 'product': product}), 200, headers)

    except ExtractionError as e:
        return _error_reply(e, headers)
    except Exception as e:
        return _unknown_reply(e, headers)


@functions_framework.http
def extract_caption(request):
    """
    Cloud Function entry point for caption extraction.

    Expected JSON input:
    {
        "caption": "New arrivals! Leather bag 80k, DM to order"
    }
    """
    if request.method == 'OPTIONS':
        return _preflight()

    headers = {'Access-Control-Allow-Origin': '*'}

    try:
        request_json = _request_body(request)
        fields = extract_caption_fields(request_json.get('caption'))

        return (json.dumps({'success': True, 'product': fields}), 200, headers)

    except ExtractionError as e:
        return _error_reply(e, headers)
    except Exception as e:
        return _unknown_reply(e, headers)
