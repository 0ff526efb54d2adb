"""
Shared pytest fixtures for PostCart Cloud Function tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function modules with unique names at module load time
_product_extractor_module = _load_module_from_path(
    'product_extractor_main',
    PROJECT_ROOT / 'product-extractor' / 'main.py'
)

_image_enhancer_module = _load_module_from_path(
    'image_enhancer_main',
    PROJECT_ROOT / 'image-enhancer' / 'main.py'
)


# ============================================================================
# Cloud Function module fixtures
# ============================================================================

@pytest.fixture
def product_extractor(monkeypatch):
    """product-extractor module with a test Gemini key and default settings."""
    monkeypatch.setattr(_product_extractor_module, 'GEMINI_API_KEY', 'test-gemini-key')
    monkeypatch.setattr(_product_extractor_module, 'GEMINI_MODEL', 'gemini-2.0-flash')
    monkeypatch.setattr(_product_extractor_module, 'STRICT_SOCIAL_GUARD', False)
    return _product_extractor_module


@pytest.fixture
def image_enhancer(monkeypatch):
    """image-enhancer module with a test Photoroom key and no bucket."""
    monkeypatch.setattr(_image_enhancer_module, 'PHOTOROOM_API_KEY', 'test-photoroom-key')
    monkeypatch.setattr(_image_enhancer_module, 'GCS_BUCKET', None)
    return _image_enhancer_module


@pytest.fixture
def extract_product(product_extractor):
    """Returns extract_product entry point from product-extractor."""
    return product_extractor.extract_product


@pytest.fixture
def extract_caption(product_extractor):
    """Returns extract_caption entry point from product-extractor."""
    return product_extractor.extract_caption


@pytest.fixture
def enhance_image(image_enhancer):
    """Returns enhance_image entry point from image-enhancer."""
    return image_enhancer.enhance_image


# ============================================================================
# Sample pages and model answers
# ============================================================================

@pytest.fixture
def sample_instagram_html():
    """Instagram post page as served to a logged-out browser."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Instagram</title>
        <meta property="og:title" content="Mama Shop on Instagram">
        <meta property="og:image" content="https://cdn.example.com/ig/shoes.jpg">
        <meta property="og:description" content="Nice Shoes 50k, sizes 38-44. DM to order">
    </head>
    <body><div id="react-root"></div></body>
    </html>
    """


@pytest.fixture
def sample_login_wall_html():
    """Page served when Instagram wants a login: 200 but no og text."""
    return """
    <!DOCTYPE html>
    <html>
    <head><title>Login • Instagram</title></head>
    <body><form><input name="username"></form></body>
    </html>
    """


@pytest.fixture
def sample_product_html():
    """Shop product page with Open Graph tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Leather Bag | Example Shop</title>
        <meta property="og:image" content="https://example.com/images/bag.jpg">
        <meta property="og:description" content="Leather Bag 80,000 TSh">
    </head>
    <body>
        <h1>Leather Bag</h1>
        <span class="price">80,000 TSh</span>
    </body>
    </html>
    """


@pytest.fixture
def sample_plain_html():
    """Page without any Open Graph tags."""
    return """
    <html>
    <head><title>Plain</title><style>body { color: red; }</style></head>
    <body>
        <script>var tracking = true;</script>
        <p>Handmade kikoi beach towel, 25,000 TZS. Free delivery in Dar.</p>
    </body>
    </html>
    """


def gemini_body(text: str) -> dict:
    """generateContent response body carrying text."""
    return {
        'candidates': [
            {
                'content': {'parts': [{'text': text}], 'role': 'model'},
                'finishReason': 'STOP'
            }
        ]
    }


@pytest.fixture
def gemini_response():
    """Factory for Gemini generateContent response bodies."""
    return gemini_body


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest
