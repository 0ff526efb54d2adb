"""
Product draft utilities for PostCart.

Turns the model's free-text answer into product fields and merges them with
what the fetch stage found. A draft always has every field: anything the
model left out gets a default.
"""

import json
import re

from .errors import JSON_PARSE_FAILURE, ai_unavailable
from .text_utils import truncate_text, normalize_price

PLACEHOLDER_IMAGE_URL = 'https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=600'

FIELD_DEFAULTS = {
    'name': 'Unknown Product',
    'price': '0',
    'description': 'No description available',
}

# How much of an unparseable answer to keep for diagnostics
PARSE_ERROR_TEXT_LIMIT = 200


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers and surrounding whitespace."""
    if not text:
        return ''
    return re.sub(r'```(?:json)?', '', text, flags=re.I).strip()


def _json_candidate(text: str) -> str:
    """The text itself if it looks like an object, else its outermost {...} span."""
    if text.startswith('{') and text.endswith('}'):
        return text

    json_match = re.search(r'\{[\s\S]*\}', text)
    if json_match:
        return json_match.group()

    return text


def _text_field(value) -> str:
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        value = ', '.join(str(item) for item in value)
    return ' '.join(str(value).split())


def sanitize_model_response(raw: str) -> dict:
    """
    Parse the model's answer into name, price and description.

    Args:
        raw: Answer text as returned by the model

    Returns:
        Dict with exactly the keys name, price, description, all filled

    Raises:
        ExtractionError: AI_SERVICE_UNAVAILABLE / JSON_PARSE_FAILURE when no
            JSON object can be recovered from the answer

    Examples:
        >>> sanitize_model_response('Sure! {"name": "Hat"}')
        {'name': 'Hat', 'price': '0', 'description': 'No description available'}
    """
    cleaned = strip_code_fences(raw)
    candidate = _json_candidate(cleaned)

    try:
        parsed = json.loads(candidate)
    except ValueError as e:
        print(f"Could not parse model answer as JSON: {e}")
        raise ai_unavailable(JSON_PARSE_FAILURE, f'{e}: {candidate[:PARSE_ERROR_TEXT_LIMIT]}')

    if not isinstance(parsed, dict):
        raise ai_unavailable(
            JSON_PARSE_FAILURE,
            f'Expected a JSON object, got {type(parsed).__name__}: {candidate[:PARSE_ERROR_TEXT_LIMIT]}'
        )

    name = _text_field(parsed.get('name')) or FIELD_DEFAULTS['name']

    price = parsed.get('price')
    price = normalize_price(price) if price not in (None, '') else FIELD_DEFAULTS['price']

    description = _text_field(parsed.get('description'))
    description, _ = truncate_text(description)

    return {
        'name': name,
        'price': price,
        'description': description or FIELD_DEFAULTS['description'],
    }


def assemble_product_draft(fields: dict, descriptor, url: str, platform: str = None) -> dict:
    """Merge sanitized fields with the fetched image and request metadata."""
    return {
        'name': fields['name'],
        'price': fields['price'],
        'description': fields['description'],
        'image': descriptor.image_url or PLACEHOLDER_IMAGE_URL,
        'platform': platform or 'Unknown',
        'sourceUrl': url,
    }
