"""Generative Language API HTTP client.

Processing flow:
    1. Caller constructs a `GeminiClient` for one resolved API key.
    2. Each method submits exactly one JSON request.
    3. Parsed JSON is returned, or `ApiError` is raised on non-200/transport
       failure.

Base64:
    Image payloads are returned as the base64 strings the service produced.
    This module does not decode them.

Retry behavior:
    None. One HTTP call per method invocation.

Error handling strategy:
    - Non-200 responses raise `ApiError` carrying the service's
      `error.message`, `error.status` and detail reasons so callers can
      classify them by text.
    - `requests` transport exceptions are re-raised as `ApiError`.

Security considerations:
    The key is sent only in the `x-goog-api-key` header and is excluded from
    `repr()`.
"""

import requests

from promptcanvas.core.errors import ApiError
from promptcanvas.image.provider_config import GEMINI_BASE_URL


def _error_text(response) -> str:
    """Extract a readable error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or ""

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return response.text

    parts = [str(error.get("message", "")).strip()]
    if error.get("status"):
        parts.append(f"[{error['status']}]")
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason"):
            parts.append(f"[{detail['reason']}]")
    return " ".join(p for p in parts if p)


class GeminiClient:
    """Thin transport wrapper bound to a single API key."""

    def __init__(self, api_key: str, base_url: str = GEMINI_BASE_URL, session=None):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def __repr__(self):
        return f"GeminiClient(base_url={self.base_url!r})"

    def _post(self, model: str, method: str, payload: dict) -> dict:
        url = f"{self.base_url}/models/{model}:{method}"
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(url, json=payload, headers=headers)
        except requests.exceptions.RequestException as err:
            raise ApiError(f"Request to {model} failed: {err}") from err

        if response.status_code != 200:
            raise ApiError(
                f"Request failed with status {response.status_code}: {_error_text(response)}",
                status_code=response.status_code,
            )

        return response.json()

    def predict_images(
        self,
        model: str,
        prompt: str,
        aspect_ratio: str,
        number_of_images: int = 1,
        mime_type: str = "image/png",
    ) -> list:
        """Submit an Imagen `:predict` request.

        Returns:
            The `predictions` list. Each entry typically holds
            `bytesBase64Encoded` and `mimeType`, or `raiFilteredReason` when the
            image was filtered. Empty when nothing was generated.
        """
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": number_of_images,
                "aspectRatio": aspect_ratio,
                "outputOptions": {"mimeType": mime_type},
            },
        }
        data = self._post(model, "predict", payload)
        return data.get("predictions") or []

    def generate_content(self, model: str, text: str) -> dict:
        """Submit a single-turn `:generateContent` request and return the body."""
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": text}]},
            ],
        }
        return self._post(model, "generateContent", payload)


class ClientCache:
    """Owns at most one client per credential for a session or app.

    Clients are created lazily and never mutated afterwards, so reuse across
    calls is read-only.
    """

    def __init__(self, factory=GeminiClient):
        self._factory = factory
        self._clients = {}

    def get(self, credential: str):
        client = self._clients.get(credential)
        if client is None:
            client = self._factory(credential)
            self._clients[credential] = client
        return client

    def __len__(self):
        return len(self._clients)
