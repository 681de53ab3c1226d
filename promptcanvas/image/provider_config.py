"""Provider/runtime configuration for the generation layer.

Architectural role:
    Centralizes endpoint, model, output-format and credential-source settings
    for `promptcanvas.image.client`, `promptcanvas.image.service` and
    `promptcanvas.credentials.resolver`.

Determinism:
    Deterministic for a fixed process environment. Values are resolved at import
    time after `load_dotenv()` has merged a local `.env` file.

Failure behavior:
    Nothing here raises. Missing credentials are represented as `None` and turned
    into `ConfigurationError` by the resolver.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Generative Language API root shared by both generation modes.
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
).rstrip("/")

IMAGE_MODEL = os.getenv("IMAGE_MODEL", "imagen-4.0-generate-001")
DESCRIPTION_MODEL = os.getenv("DESCRIPTION_MODEL", "gemini-2.5-flash")

# One image per request, PNG unless overridden.
NUMBER_OF_IMAGES = 1
IMAGE_MIME_TYPE = os.getenv("IMAGE_MIME_TYPE", "image/png")

MIME_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
}

# Wraps the user prompt for description mode.
DESCRIPTION_TEMPLATE = (
    "Write a vivid, detailed description of an image that depicts the following "
    "scene. Describe composition, lighting, colors and mood in one paragraph.\n\n"
    "Scene: {prompt}"
)

# Credential sources, in precedence order: environment, user input, key file.
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
API_KEY_FILE = os.getenv("API_KEY_FILE", "config/gemini.key")

# Values shipped in templates that must never be sent to the service.
PLACEHOLDER_KEYS = frozenset({
    "your_api_key_here",
    "paste_your_api_key_here",
    "<your_api_key>",
    "your-api-key",
})

OUTPUT_DIR = os.getenv("OUTPUT_DIR", "outputs")

DEBUG = os.getenv("DEBUG") == "true"


def load_key(path):
    """Load an API key from a committed key file.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Stripped file contents, or `None` when the path is unset or missing.
    """
    if not path:
        return None
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip()
