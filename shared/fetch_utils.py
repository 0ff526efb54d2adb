"""
Page fetching for the PostCart product extractor.

fetch_content() never raises. Whatever happens on the wire, it hands back a
ContentDescriptor whose page_content is something the AI stage can work
with: the real caption when we got one, otherwise a sentence describing the
URL and why the page could not be read.

Responsibilities:
- Pick request headers per URL category (Instagram / Facebook / Other)
- Bound every fetch by FETCH_TIMEOUT from the first byte sent to the last
  byte read, and cap the body at MAX_BODY_BYTES
- Pull caption and image out of Open Graph tags
- Degrade to a synthetic description on any failure

requests' own timeout only limits the connect and each socket read, so a
server that trickles bytes could hold a fetch open indefinitely. Downloads
therefore run on a worker thread that stops reading once the deadline
passes, and the caller stops waiting for it at the same moment.
"""

import concurrent.futures
import time
from typing import NamedTuple, Optional, Tuple

import requests

from .og_utils import extract_og, extract_body_text
from .url_utils import INSTAGRAM, FACEBOOK, OTHER, is_social_category

FETCH_TIMEOUT = 10  # seconds
MAX_BODY_BYTES = 2 * 1024 * 1024  # longer pages are truncated
CHUNK_SIZE = 1024
FETCH_WORKERS = 8

_fetch_executor = concurrent.futures.ThreadPoolExecutor(max_workers=FETCH_WORKERS, thread_name_prefix='fetch')

SOCIAL_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
GENERIC_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

REFERERS = {
    INSTAGRAM: 'https://www.instagram.com/',
    FACEBOOK: 'https://www.facebook.com/',
}

# fallback_reason values
NO_OG_CONTENT = 'no_og_content'
TIMEOUT = 'timeout'
REQUEST_FAILED = 'request_failed'


class ContentDescriptor(NamedTuple):
    """What the fetch stage learned about a page.

    fallback_reason is None when page_content is real page text; otherwise
    page_content is a synthetic instruction for the AI stage.
    """
    page_content: str
    image_url: str = ''
    caption: str = ''
    fallback_reason: Optional[str] = None


def build_headers(category: str) -> dict:
    """Request headers for a URL category."""
    if is_social_category(category):
        return {
            'User-Agent': SOCIAL_USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
            'Referer': REFERERS[category],
        }

    return {'User-Agent': GENERIC_USER_AGENT}


def _http_reason(status_code: int) -> str:
    return f'http_{status_code}'


def _read_body(response: requests.Response, deadline: float) -> str:
    """Read a streamed body until EOF, MAX_BODY_BYTES or the deadline."""
    chunks = []
    size = 0

    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if time.monotonic() > deadline:
            raise requests.exceptions.Timeout('Page body was still arriving at the fetch deadline')
        chunks.append(chunk)
        size += len(chunk)
        if size >= MAX_BODY_BYTES:
            print(f"Page body reached {MAX_BODY_BYTES} bytes, truncating: {response.url}")
            break

    return b''.join(chunks)[:MAX_BODY_BYTES].decode(response.encoding or 'utf-8', errors='replace')


def _download(url: str, headers: dict, timeout: float, deadline: float) -> Tuple[int, str]:
    with requests.get(url, headers=headers, timeout=timeout, stream=True, allow_redirects=True) as response:
        if not response.ok:
            return response.status_code, ''
        return response.status_code, _read_body(response, deadline)


def fetch_page(url: str, headers: dict, timeout: float = FETCH_TIMEOUT) -> Tuple[int, str]:
    """
    GET a page within a total time budget.

    Returns:
        Tuple of (status_code, html); html is '' for non-2xx responses

    Raises:
        requests.exceptions.Timeout: the whole fetch took longer than timeout
        requests.exceptions.RequestException: any other transport failure
    """
    deadline = time.monotonic() + timeout
    future = _fetch_executor.submit(_download, url, headers, timeout, deadline)

    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        # The worker gives up at its next chunk; nobody waits for it
        future.cancel()
        raise requests.exceptions.Timeout(f'Fetch did not finish within {timeout}s')


def _private_post_content(url: str, category: str) -> str:
    return (
        f"This {category} post could not be loaded directly; it may be private or require login. "
        f"URL: {url}. Infer the most likely product name, price and description from the URL itself."
    )


def _url_only_content(url: str, category: str) -> str:
    return (
        f"No caption could be read from this {category} post. URL: {url}. "
        f"Platform: {category}. Infer any product information from the URL alone."
    )


def _fetch_social(url: str, category: str, timeout: float) -> ContentDescriptor:
    try:
        status_code, html = fetch_page(url, build_headers(category), timeout)
    except requests.exceptions.Timeout:
        print(f"{category} fetch timed out after {timeout}s: {url}")
        return ContentDescriptor(page_content=_private_post_content(url, category), fallback_reason=TIMEOUT)
    except requests.exceptions.RequestException as e:
        print(f"{category} fetch failed for {url}: {e}")
        return ContentDescriptor(page_content=_private_post_content(url, category), fallback_reason=REQUEST_FAILED)

    if not 200 <= status_code < 300:
        print(f"{category} fetch returned HTTP {status_code} for {url}")
        return ContentDescriptor(
            page_content=_private_post_content(url, category),
            fallback_reason=_http_reason(status_code),
        )

    og = extract_og(html)
    image_url = og.get('image', '')
    caption = og.get('description') or og.get('title') or ''

    if not caption:
        # Login walls usually serve a 200 page with no og text
        print(f"{category} page had no Open Graph text: {url}")
        return ContentDescriptor(
            page_content=_url_only_content(url, category),
            image_url=image_url,
            fallback_reason=NO_OG_CONTENT,
        )

    return ContentDescriptor(page_content=caption, image_url=image_url, caption=caption)


def _fetch_other(url: str, platform: str, timeout: float) -> ContentDescriptor:
    label = platform or 'Unknown'

    try:
        status_code, html = fetch_page(url, build_headers(OTHER), timeout)
    except requests.exceptions.RequestException as e:
        print(f"Direct fetch failed, using AI analysis of the URL: {e}")
        reason = TIMEOUT if isinstance(e, requests.exceptions.Timeout) else REQUEST_FAILED
        return ContentDescriptor(
            page_content=(
                f"Analyze this social media URL: {url}. Platform: {label}. "
                f"Extract product name, price, and description if available."
            ),
            fallback_reason=reason,
        )

    if not 200 <= status_code < 300:
        print(f"Fetch returned HTTP {status_code} for {url}")
        return ContentDescriptor(
            page_content=(
                f"URL: {url}. Platform: {label}. Please extract any product "
                f"information that might be in this social media post."
            ),
            fallback_reason=_http_reason(status_code),
        )

    og = extract_og(html)
    image_url = og.get('image', '')
    caption = og.get('description') or og.get('title') or ''

    if caption:
        return ContentDescriptor(page_content=caption, image_url=image_url, caption=caption)

    body_text = extract_body_text(html)
    if body_text:
        return ContentDescriptor(page_content=body_text, image_url=image_url)

    return ContentDescriptor(
        page_content=_url_only_content(url, label),
        image_url=image_url,
        fallback_reason=NO_OG_CONTENT,
    )


def fetch_content(url: str, category: str, platform: str = None,
                  timeout: float = FETCH_TIMEOUT) -> ContentDescriptor:
    """
    Fetch a page and describe its content for the AI stage.

    Args:
        url: Page to fetch
        category: Result of classify_url(url)
        platform: Platform label from the request, used in fallback text
        timeout: Seconds before the request is abandoned

    Returns:
        ContentDescriptor, never raises
    """
    if is_social_category(category):
        return _fetch_social(url, category, timeout)
    return _fetch_other(url, platform, timeout)
