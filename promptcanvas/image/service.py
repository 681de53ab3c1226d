"""Generation adapter used by the CLI and HTTP surfaces.

Role in pipeline:
    - Receives a `GenerationRequest` from an adapter.
    - Rejects blank prompts before any network call.
    - Issues exactly one call through the injected client.
    - Unwraps the response into a `GenerationResult` without re-encoding.
    - Converts every failure into a classified `GenerationError`.

Client ownership:
    The client is passed in by the caller. Surfaces that serve many requests
    keep a `ClientCache` so each credential gets one client.

Error handling strategy:
    - Resolver/validation errors propagate unchanged.
    - Empty responses -> `EmptyResultError`.
    - Filtered responses -> `SafetyBlockedError`.
    - Client/transport failures -> `classify_exception`.

Retry/caching:
    None. Every invocation performs one request.
"""

import logging

from promptcanvas.core.errors import (
    ConfigurationError,
    EmptyResultError,
    GenerationError,
    SafetyBlockedError,
    ValidationError,
    classify_exception,
)
from promptcanvas.core.types import (
    DEFAULT_ASPECT_RATIO,
    GenerationMode,
    GenerationRequest,
    GenerationResult,
)
from promptcanvas.credentials.resolver import is_usable_key, resolve_credential
from promptcanvas.image.client import GeminiClient
from promptcanvas.image.provider_config import (
    DESCRIPTION_MODEL,
    DESCRIPTION_TEMPLATE,
    IMAGE_MIME_TYPE,
    IMAGE_MODEL,
    NUMBER_OF_IMAGES,
)

logger = logging.getLogger(__name__)


class ImageService:
    """Stateless request/response adapter around one API client."""

    def __init__(
        self,
        client,
        image_model: str = IMAGE_MODEL,
        description_model: str = DESCRIPTION_MODEL,
        mime_type: str = IMAGE_MIME_TYPE,
    ):
        self.client = client
        self.image_model = image_model
        self.description_model = description_model
        self.mime_type = mime_type

    @classmethod
    def for_credential(cls, credential: str, **kwargs) -> "ImageService":
        return cls(GeminiClient(credential), **kwargs)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run one generation.

        Raises:
            ValidationError: Prompt is empty after trimming.
            GenerationError: Any classified service or transport failure.
        """
        prompt = (request.prompt or "").strip()
        if not prompt:
            raise ValidationError()

        try:
            if request.mode is GenerationMode.DESCRIPTION:
                return self._describe(prompt)
            return self._generate_image(prompt, request.aspect_ratio.value)
        except GenerationError:
            raise
        except Exception as err:
            logger.exception("Error generating %s", request.mode.value)
            raise classify_exception(err) from err

    def _generate_image(self, prompt: str, aspect_ratio: str) -> GenerationResult:
        predictions = self.client.predict_images(
            self.image_model,
            prompt,
            aspect_ratio,
            number_of_images=NUMBER_OF_IMAGES,
            mime_type=self.mime_type,
        )

        if not predictions:
            raise EmptyResultError()

        for prediction in predictions:
            image_bytes = prediction.get("bytesBase64Encoded")
            if image_bytes:
                return GenerationResult(
                    mode=GenerationMode.IMAGE,
                    image_base64=image_bytes,
                    mime_type=prediction.get("mimeType") or self.mime_type,
                )

        reasons = [p["raiFilteredReason"] for p in predictions if p.get("raiFilteredReason")]
        if reasons:
            logger.warning("Image filtered by safety policy: %s", reasons[0])
            raise SafetyBlockedError(
                f"The image was blocked by the safety policy: {reasons[0]}"
            )
        raise EmptyResultError()

    def _describe(self, prompt: str) -> GenerationResult:
        data = self.client.generate_content(
            self.description_model,
            DESCRIPTION_TEMPLATE.format(prompt=prompt),
        )

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise SafetyBlockedError(
                f"The prompt was blocked by the safety policy: {block_reason}"
            )

        candidates = data.get("candidates") or []
        if not candidates:
            raise EmptyResultError(
                "No description was generated. The response was empty and may "
                "have been blocked by the safety policy."
            )

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if text:
            return GenerationResult(mode=GenerationMode.DESCRIPTION, text=text)

        if candidate.get("finishReason") == "SAFETY":
            raise SafetyBlockedError()
        raise EmptyResultError(
            "No description was generated. The response was empty and may "
            "have been blocked by the safety policy."
        )


def generate_image(
    prompt,
    aspect_ratio=DEFAULT_ASPECT_RATIO,
    credential=None,
    client=None,
) -> str:
    """Generate one image and return its base64 bytes.

    Args:
        prompt: Text prompt for generation.
        aspect_ratio: `AspectRatio` member or its string value.
        credential: API key used when `client` is not supplied. `None` falls
            back to the configured sources; a blank or placeholder value
            raises `ConfigurationError`.
        client: Pre-built client to reuse.
    """
    request = GenerationRequest(
        prompt=prompt, aspect_ratio=aspect_ratio, credential=credential
    )
    return _service_for(request, client).generate(request).image_base64


def describe_image(prompt, credential=None, client=None) -> str:
    """Generate a text description for `prompt`."""
    request = GenerationRequest(
        prompt=prompt, credential=credential, mode=GenerationMode.DESCRIPTION
    )
    return _service_for(request, client).generate(request).text


def _service_for(request, client) -> ImageService:
    if client is not None:
        return ImageService(client)
    # Blank prompts must fail before a credential or client is required.
    if not (request.prompt or "").strip():
        raise ValidationError()
    if request.credential is None:
        request.credential = resolve_credential()
    elif is_usable_key(request.credential):
        request.credential = request.credential.strip()
    else:
        raise ConfigurationError()
    return ImageService.for_credential(request.credential)
