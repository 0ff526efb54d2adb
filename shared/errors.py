"""
Error taxonomy for the PostCart extraction pipeline.

Errors are raised as ExtractionError where the failure is detected and
travel unchanged up to the HTTP handler, which calls error_response() once
to turn them into a stable JSON body and status code.

Error Classification:
====================

INPUT_VALIDATION (HTTP 400):
- Missing url / caption / imageUrl, or too short to be usable

INSTAGRAM_PROTECTED / FACEBOOK_PROTECTED (HTTP 403, requiresApi):
- Post could not be read and the strict social guard is enabled

NETWORK_UNAVAILABLE (HTTP 403):
- Outbound request denied, timed out or failed at transport level

AI_SERVICE_UNAVAILABLE (HTTP 500):
- Model not configured, key rejected, quota hit, unexpected or empty
  response, or an answer that is not JSON even after cleanup

UNKNOWN (HTTP 500):
- Anything else
"""

from typing import Optional, Tuple

from .url_utils import INSTAGRAM, FACEBOOK

# Error kinds
INPUT_VALIDATION = 'input_validation'
INSTAGRAM_PROTECTED = 'instagram_protected'
FACEBOOK_PROTECTED = 'facebook_protected'
NETWORK_UNAVAILABLE = 'network_unavailable'
AI_SERVICE_UNAVAILABLE = 'ai_service_unavailable'
UNKNOWN = 'unknown'

# Reasons for AI_SERVICE_UNAVAILABLE
NOT_CONFIGURED = 'not_configured'
INVALID_KEY = 'invalid_key'
RATE_LIMITED = 'rate_limited'
HTTP_ERROR = 'http_error'
UNEXPECTED_SHAPE = 'unexpected_shape'
EMPTY = 'empty'
JSON_PARSE_FAILURE = 'json_parse_failure'

STATUS_CODES = {
    INPUT_VALIDATION: 400,
    INSTAGRAM_PROTECTED: 403,
    FACEBOOK_PROTECTED: 403,
    NETWORK_UNAVAILABLE: 403,
    AI_SERVICE_UNAVAILABLE: 500,
    UNKNOWN: 500,
}

# User-facing detail text per AI failure reason
AI_DETAILS = {
    NOT_CONFIGURED: 'The AI service is not configured on the server. Please add the product manually.',
    INVALID_KEY: 'The AI service rejected the configured API key. Please add the product manually.',
    RATE_LIMITED: 'The AI service is receiving too many requests. Please wait a moment and try again, or add the product manually.',
    HTTP_ERROR: 'The AI service returned an error. Please try again later or add the product manually.',
    UNEXPECTED_SHAPE: 'The AI service returned an unexpected response. Please try again or add the product manually.',
    EMPTY: 'The AI service returned an empty answer. Please try again or add the product manually.',
    JSON_PARSE_FAILURE: 'The AI answer could not be read as product details. Please try again or add the product manually.',
}


class ExtractionError(Exception):
    """A classified pipeline failure.

    kind is one of the module-level error kinds; reason narrows
    AI_SERVICE_UNAVAILABLE down to what went wrong with the model call.
    technical_details is for logs and the technicalDetails response field,
    never for the user-facing message.
    """

    def __init__(self, kind: str, message: str = '', reason: Optional[str] = None,
                 platform: Optional[str] = None, technical_details: Optional[str] = None):
        super().__init__(message or reason or kind)
        self.kind = kind
        self.reason = reason
        self.platform = platform
        self.technical_details = technical_details

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.kind, 500)

    def __repr__(self):
        return f"ExtractionError(kind={self.kind!r}, reason={self.reason!r}, message={str(self)!r})"


def ai_unavailable(reason: str, technical_details: str = None) -> ExtractionError:
    """Shortcut for the AI_SERVICE_UNAVAILABLE family."""
    return ExtractionError(
        AI_SERVICE_UNAVAILABLE,
        f"AI service unavailable ({reason})",
        reason=reason,
        technical_details=technical_details,
    )


def platform_protected(platform: str) -> ExtractionError:
    """Error for a social post that needs the official API connection."""
    kind = INSTAGRAM_PROTECTED if platform == INSTAGRAM else FACEBOOK_PROTECTED
    return ExtractionError(kind, f"{platform} post is protected", platform=platform)


def error_response(error: ExtractionError) -> Tuple[dict, int]:
    """
    Translate an ExtractionError into the external (body, status) pair.

    Body always carries error, details and requiresApi; platform and
    technicalDetails are added when known.
    """
    kind = error.kind

    if kind == INPUT_VALIDATION:
        body = {
            'error': str(error) or 'Invalid request',
            'details': 'Check the request body and try again.',
            'requiresApi': False,
        }
    elif kind in (INSTAGRAM_PROTECTED, FACEBOOK_PROTECTED):
        platform = error.platform or (INSTAGRAM if kind == INSTAGRAM_PROTECTED else FACEBOOK)
        body = {
            'error': f'{platform} URLs require official API connection',
            'details': (
                f'{platform} posts are protected and cannot be accessed directly. '
                f'Please use the "Official {platform} Connection" button to connect '
                f'your Meta account, or add products manually.'
            ),
            'requiresApi': True,
            'platform': platform,
        }
    elif kind == NETWORK_UNAVAILABLE:
        body = {
            'error': 'Unable to access URL',
            'details': (
                'The URL may be private, require login, or be blocked. Try using '
                'the official API connection or add products manually.'
            ),
            'requiresApi': False,
        }
    elif kind == AI_SERVICE_UNAVAILABLE:
        body = {
            'error': 'AI service unavailable',
            'details': AI_DETAILS.get(error.reason, AI_DETAILS[HTTP_ERROR]),
            'requiresApi': False,
        }
    else:
        body = {
            'error': 'Failed to extract product from URL',
            'details': str(error) or 'Unknown error occurred',
            'requiresApi': False,
        }

    if error.platform and 'platform' not in body:
        body['platform'] = error.platform
    if error.technical_details:
        body['technicalDetails'] = error.technical_details

    return body, error.status_code
