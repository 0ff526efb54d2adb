"""
Text normalisation utilities for PostCart product drafts.

Product descriptions are limited to 150 characters and prices are stored as
plain digit strings in Tanzanian Shillings. Model output does not always
respect either rule, so values are normalised before they reach a draft.
"""

import math
import re
from typing import Tuple

MAX_DESCRIPTION_LENGTH = 150


def truncate_text(text: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> Tuple[str, bool]:
    """
    Truncate text at a word boundary, not mid-word.

    Returns:
        Tuple of (truncated_text, was_truncated)

    Examples:
        >>> truncate_text("Hello World", 150)
        ('Hello World', False)

        >>> truncate_text("Soft cotton tee in three colours", 20)
        ('Soft cotton tee in', True)
    """
    if not text:
        return ('', False)

    # Clean whitespace
    text = ' '.join(text.split())

    if len(text) <= max_length:
        return (text, False)

    truncated = text[:max_length]
    last_space = truncated.rfind(' ')

    # Single long word: hard cut with ellipsis
    if last_space == -1:
        return (text[:max_length - 3] + '...', True)

    return (truncated[:last_space].rstrip(' ,;:-'), True)


def normalize_price(value) -> str:
    """
    Coerce a model-supplied price into a digit string, '0' when unusable.

    Examples:
        >>> normalize_price(50000)
        '50000'

        >>> normalize_price('50,000')
        '50000'

        >>> normalize_price('TZS 1,250.50')
        '1250'

        >>> normalize_price('50k')
        '50000'

        >>> normalize_price(None)
        '0'
    """
    if value is None or isinstance(value, bool):
        return '0'

    if isinstance(value, (int, float)):
        # json.loads accepts NaN, Infinity and 1e400
        if not math.isfinite(value) or value < 0:
            return '0'
        return str(int(round(value)))

    text = str(value).strip()
    if not text:
        return '0'

    # Shorthand thousands, e.g. "50k"
    shorthand = re.search(r'(\d+(?:\.\d+)?)\s*[kK]\b', text)
    if shorthand:
        amount = float(shorthand.group(1)) * 1000
        return str(int(round(amount))) if math.isfinite(amount) else '0'

    # Drop thousands separators, then the decimal part
    text = re.sub(r'(?<=\d)[,\s](?=\d{3}\b)', '', text)
    match = re.search(r'\d+', text)
    if not match:
        return '0'

    digits = match.group().lstrip('0')
    return digits or '0'
