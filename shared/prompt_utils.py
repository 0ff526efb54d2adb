"""
Prompt templates for PostCart product extraction.

The instruction block below defines what a product draft is: exactly three
JSON keys, a digits-only price in Tanzanian Shillings and a short
description. The response sanitizer relies on the model mostly following
it, so changes here must keep the strict-JSON wording.
"""

from .text_utils import MAX_DESCRIPTION_LENGTH

# Page content beyond this is not worth the tokens
MAX_PROMPT_CONTENT = 5000

NO_CONTENT_PLACEHOLDER = 'No content could be extracted from this page.'

CURRENCY_RULES = """- The store uses Tanzanian Shilling (TZS). Convert informal prices like '50k', '50,000/-' or '50K TSh' to '50000'
- If you see prices in other currencies, convert them to TZS (approximate: 1 USD = 2300 TZS)"""

OUTPUT_RULES = f"""Extract product information and return ONLY a valid JSON object with exactly these keys:
{{
    "name": "Product Name (short and catchy, or 'Unknown Product' if not found)",
    "price": "Numerical price as a string of digits only (e.g. '50000'), or '0' if not found",
    "description": "Professional product description (or content summary if no product found)"
}}

IMPORTANT:
{CURRENCY_RULES}
- The price must contain digits only: no currency symbols, separators or decimals
- If no clear product is found, make an educated guess based on the content
- Keep descriptions under {MAX_DESCRIPTION_LENGTH} characters
- Do not wrap the JSON in markdown code fences and do not add any other text"""


def build_prompt(url: str, platform: str, page_content: str) -> str:
    """Prompt for extracting a product from a fetched social media post or page."""
    content = (page_content or '').strip()[:MAX_PROMPT_CONTENT] or NO_CONTENT_PLACEHOLDER

    return f"""You are an expert e-commerce data extractor analyzing a social media post.

URL: {url}
Platform: {platform or 'Unknown'}
Content: {content}

{OUTPUT_RULES}
"""


def build_caption_prompt(caption: str) -> str:
    """Prompt for extracting a product from a caption the seller pasted in."""
    content = (caption or '').strip()[:MAX_PROMPT_CONTENT] or NO_CONTENT_PLACEHOLDER

    return f"""You are an expert e-commerce data extractor.
Analyze this social media caption: "{content}"

{OUTPUT_RULES}
"""
