"""
Open Graph extraction for PostCart.

Social platforms and most shops expose link-preview metadata as
<meta property="og:..."> tags. This is a best-effort scraper: missing tags,
attribute order and broken markup all just mean "no match".
"""

import re
from bs4 import BeautifulSoup

# Field name -> og property, in lookup order
OG_FIELDS = {
    'image': 'og:image',
    'description': 'og:description',
    'title': 'og:title',
}

# Default length for page-body fallback text
BODY_TEXT_LIMIT = 500


def _find_meta_content(soup: BeautifulSoup, og_property: str):
    """Return the first non-empty content for an og property, or None."""
    pattern = re.compile(rf'^\s*{re.escape(og_property)}\s*$', re.I)

    # property= is the standard, some sites put og tags in name=
    for attr in ('property', 'name'):
        for tag in soup.find_all('meta', attrs={attr: pattern}):
            content = (tag.get('content') or '').strip()
            if content:
                return content

    return None


def extract_og(html: str) -> dict:
    """
    Extract og:image, og:description and og:title from an HTML page.

    Returns a dict with only the fields that were found, so a page without
    Open Graph tags yields {}.

    Examples:
        >>> extract_og('<meta property="og:description" content="Nice Shoes 50k"/>')
        {'description': 'Nice Shoes 50k'}

        >>> extract_og('<p>no tags</p>')
        {}
    """
    if not html:
        return {}

    soup = BeautifulSoup(html, 'html.parser')

    result = {}
    for field, og_property in OG_FIELDS.items():
        content = _find_meta_content(soup, og_property)
        if content:
            result[field] = content

    return result


def extract_body_text(html: str, limit: int = BODY_TEXT_LIMIT) -> str:
    """Visible page text cut to limit chars; raw markup if there is no text."""
    if not html:
        return ''

    soup = BeautifulSoup(html, 'html.parser')

    # Remove elements that never hold product copy
    for element in soup.find_all(['script', 'style', 'noscript', 'template']):
        element.decompose()

    container = soup.find('body') or soup
    text = container.get_text(separator=' ', strip=True)
    text = re.sub(r'\s+', ' ', text).strip()

    if not text:
        return html[:limit]

    return text[:limit]
