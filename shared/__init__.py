"""Shared utilities for PostCart Cloud Functions."""

from .url_utils import (
    INSTAGRAM,
    FACEBOOK,
    OTHER,
    classify_url,
    is_social_category,
    validate_url,
)

from .og_utils import (
    extract_og,
    extract_body_text,
)

from .fetch_utils import (
    FETCH_TIMEOUT,
    ContentDescriptor,
    fetch_content,
)

from .prompt_utils import (
    CURRENCY_RULES,
    build_prompt,
    build_caption_prompt,
)

from .gemini_client import (
    DEFAULT_MODEL,
    generate_content,
)

from .text_utils import (
    MAX_DESCRIPTION_LENGTH,
    truncate_text,
    normalize_price,
)

from .product_utils import (
    PLACEHOLDER_IMAGE_URL,
    FIELD_DEFAULTS,
    sanitize_model_response,
    assemble_product_draft,
)

from .errors import (
    ExtractionError,
    error_response,
)

__all__ = [
    # URL classification
    'INSTAGRAM',
    'FACEBOOK',
    'OTHER',
    'classify_url',
    'is_social_category',
    'validate_url',
    # Open Graph extraction
    'extract_og',
    'extract_body_text',
    # Fetching
    'FETCH_TIMEOUT',
    'ContentDescriptor',
    'fetch_content',
    # Prompts
    'CURRENCY_RULES',
    'build_prompt',
    'build_caption_prompt',
    # Gemini
    'DEFAULT_MODEL',
    'generate_content',
    # Text
    'MAX_DESCRIPTION_LENGTH',
    'truncate_text',
    'normalize_price',
    # Product drafts
    'PLACEHOLDER_IMAGE_URL',
    'FIELD_DEFAULTS',
    'sanitize_model_response',
    'assemble_product_draft',
    # Errors
    'ExtractionError',
    'error_response',
]
