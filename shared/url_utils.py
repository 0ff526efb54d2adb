"""
URL classification utilities for PostCart.

Every extraction request is routed by the platform its URL points at.
Classification is a plain case-insensitive substring match, so the same URL
always lands in the same category.
"""

# URL categories (also used as platform labels in prompts and logs)
INSTAGRAM = 'Instagram'
FACEBOOK = 'Facebook'
OTHER = 'Other'

# URL patterns for category detection (checked in this order)
INSTAGRAM_PATTERNS = ['instagram.com', 'instagr.am']
FACEBOOK_PATTERNS = ['facebook.com', 'fb.com', 'fb.me']

# Anything shorter cannot be a usable URL
MIN_URL_LENGTH = 5


def classify_url(url: str) -> str:
    """
    Categorize a URL as Instagram, Facebook or Other.

    Examples:
        >>> classify_url("https://www.instagram.com/p/x")
        'Instagram'

        >>> classify_url("https://shop.example.com/item")
        'Other'
    """
    if not url:
        return OTHER

    lowered = url.lower()

    for pattern in INSTAGRAM_PATTERNS:
        if pattern in lowered:
            return INSTAGRAM

    for pattern in FACEBOOK_PATTERNS:
        if pattern in lowered:
            return FACEBOOK

    return OTHER


def is_social_category(category: str) -> bool:
    """True for the platforms that hide post content behind a login wall."""
    return category in (INSTAGRAM, FACEBOOK)


def validate_url(url) -> bool:
    """Check that url is a non-empty string of sane length."""
    if not isinstance(url, str):
        return False
    return len(url.strip()) >= MIN_URL_LENGTH
