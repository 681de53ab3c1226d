"""API credential resolution.

Resolution order:
    1. Environment variables (`GEMINI_API_KEY`, then `API_KEY`), which also
       covers values merged from `.env` by `provider_config`.
    2. A value entered by the user (CLI prompt or HTTP header).
    3. The committed key file (`config/gemini.key` by default).

A source counts as absent when it is empty after trimming or holds a known
template placeholder. When no source yields a usable key the resolver raises
`ConfigurationError`.

Security considerations:
    The credential value is never logged or persisted. Only the name of the
    winning source is logged.
"""

import logging
import os

from promptcanvas.core.errors import ConfigurationError, ValidationError
from promptcanvas.image.provider_config import (
    API_KEY_ENV_VARS,
    API_KEY_FILE,
    PLACEHOLDER_KEYS,
    load_key,
)

logger = logging.getLogger(__name__)


def is_usable_key(value) -> bool:
    """Return True when `value` is a non-empty, non-placeholder key."""
    if not value or not value.strip():
        return False
    return value.strip().lower() not in PLACEHOLDER_KEYS


def validate_user_key(value) -> str:
    """Trim a key typed by the user, rejecting blank input."""
    key = (value or "").strip()
    if not key:
        raise ValidationError("Please enter a valid API key.")
    return key


class CredentialResolver:
    """Pick the active API key from the configured sources."""

    def __init__(self, user_value=None, env_vars=API_KEY_ENV_VARS, key_file=None):
        self.user_value = user_value
        self.env_vars = tuple(env_vars)
        self.key_file = key_file or API_KEY_FILE

    def candidates(self):
        """Yield `(source, value)` pairs in precedence order."""
        for name in self.env_vars:
            yield f"env:{name}", os.getenv(name)
        yield "user", self.user_value
        yield f"file:{self.key_file}", load_key(self.key_file)

    def resolve(self) -> str:
        for source, value in self.candidates():
            if is_usable_key(value):
                logger.info("Using API key from %s", source)
                return value.strip()
            if value:
                logger.warning("Ignoring placeholder API key from %s", source)

        raise ConfigurationError()

    def can_generate(self) -> bool:
        try:
            self.resolve()
        except ConfigurationError:
            return False
        return True


def resolve_credential(user_value=None) -> str:
    """Resolve a key with the default sources plus an optional user value."""
    return CredentialResolver(user_value=user_value).resolve()
