from unittest.mock import MagicMock

import pytest

from promptcanvas.image.client import GeminiClient

FAKE_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch, tmp_path):
    """Isolate tests from keys in the developer's environment or key file."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.setattr(
        "promptcanvas.credentials.resolver.API_KEY_FILE",
        str(tmp_path / "missing.key"),
    )


@pytest.fixture
def fake_client():
    client = MagicMock(spec=GeminiClient)
    client.predict_images.return_value = [
        {"bytesBase64Encoded": FAKE_PNG_B64, "mimeType": "image/png"}
    ]
    client.generate_content.return_value = {
        "candidates": [
            {"content": {"parts": [{"text": "A fox curled in fresh snow."}]}, "finishReason": "STOP"}
        ]
    }
    return client
