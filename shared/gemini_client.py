"""
Gemini REST client for PostCart.

One POST to the generateContent endpoint per call, no retries. Every way
the call can go wrong is raised as an ExtractionError so the HTTP handler
can show the seller a specific message.

This talks to the REST endpoint with requests rather than going through
the google.generativeai SDK: telling a rejected key (401/403) from a quota
hit (429) from a malformed body needs the raw status code and the
candidates/content/parts structure, which the SDK hides behind its own
exception types and response objects.
"""

import requests

from .errors import (
    ExtractionError,
    NETWORK_UNAVAILABLE,
    NOT_CONFIGURED,
    INVALID_KEY,
    RATE_LIMITED,
    HTTP_ERROR,
    UNEXPECTED_SHAPE,
    EMPTY,
    ai_unavailable,
)

GEMINI_API_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent'
DEFAULT_MODEL = 'gemini-2.0-flash'
GEMINI_TIMEOUT = 30  # seconds

# How much of an error body to keep for diagnostics
ERROR_BODY_LIMIT = 200


def _response_text(data) -> str:
    """Pull the answer text out of a generateContent response body."""
    if not isinstance(data, dict):
        raise ai_unavailable(UNEXPECTED_SHAPE, 'Response body is not a JSON object')

    candidates = data.get('candidates')
    if not candidates or not isinstance(candidates, list):
        raise ai_unavailable(UNEXPECTED_SHAPE, 'Response has no candidates')

    content = candidates[0].get('content') if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        finish_reason = candidates[0].get('finishReason') if isinstance(candidates[0], dict) else None
        raise ai_unavailable(UNEXPECTED_SHAPE, f'First candidate has no content (finishReason: {finish_reason})')

    parts = content.get('parts') or []
    text = ''.join(part.get('text') or '' for part in parts if isinstance(part, dict))

    if not text.strip():
        raise ai_unavailable(EMPTY, 'Model returned an empty answer')

    return text


def generate_content(prompt: str, api_key: str, model: str = DEFAULT_MODEL,
                     timeout: float = GEMINI_TIMEOUT) -> str:
    """
    Send a prompt to Gemini and return the raw answer text.

    Args:
        prompt: Full prompt, sent as the only content part
        api_key: Gemini API key
        model: Model name in the endpoint path
        timeout: Seconds before the request is abandoned

    Returns:
        The model's answer text (not yet parsed)

    Raises:
        ExtractionError: AI_SERVICE_UNAVAILABLE with a reason, or
            NETWORK_UNAVAILABLE when the endpoint cannot be reached
    """
    if not api_key:
        raise ai_unavailable(NOT_CONFIGURED, 'GEMINI_API_KEY not configured')

    try:
        response = requests.post(
            GEMINI_API_URL.format(model=model or DEFAULT_MODEL),
            headers={
                'Content-Type': 'application/json',
                'x-goog-api-key': api_key,
            },
            json={'contents': [{'parts': [{'text': prompt}]}]},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        print(f"Gemini request failed: {e}")
        raise ExtractionError(NETWORK_UNAVAILABLE, f'AI service unreachable: {e}', technical_details=str(e))

    if not response.ok:
        body = response.text[:ERROR_BODY_LIMIT]
        print(f"Gemini API error: {response.status_code} - {body}")

        if response.status_code in (401, 403):
            raise ai_unavailable(INVALID_KEY, f'HTTP {response.status_code}: {body}')
        if response.status_code == 429:
            raise ai_unavailable(RATE_LIMITED, f'HTTP 429: {body}')
        raise ai_unavailable(HTTP_ERROR, f'HTTP {response.status_code}: {body}')

    try:
        data = response.json()
    except ValueError:
        raise ai_unavailable(UNEXPECTED_SHAPE, f'Response is not JSON: {response.text[:ERROR_BODY_LIMIT]}')

    return _response_text(data)
