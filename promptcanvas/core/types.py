"""Generation data contracts shared by the adapter and its callers.

Architectural role:
    Defines the request/result schema passed between the API/CLI adapters and
    `promptcanvas.image.service`, plus the fixed aspect-ratio catalog.

Validation:
    `GenerationRequest.aspect_ratio` accepts either an `AspectRatio` member or
    its string value. Unsupported values raise `ValidationError` at
    construction time. Prompt emptiness is checked by the service, not here, so
    the adapter can enforce it immediately before the network call.

Determinism:
    Purely structural; no I/O and no shared state.
"""

import base64
from dataclasses import dataclass
from enum import Enum

from promptcanvas.core.errors import ValidationError


class AspectRatio(str, Enum):
    """Aspect ratios accepted by the image model."""

    SQUARE = "1:1"
    WIDESCREEN = "16:9"
    PORTRAIT = "9:16"
    LANDSCAPE = "4:3"
    TALL = "3:4"

    @property
    def label(self) -> str:
        return self.name.title()

    @classmethod
    def parse(cls, value) -> "AspectRatio":
        """Return the member for `value` or raise `ValidationError`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValidationError(
                f"Unsupported aspect ratio: {value!r}. Choose one of {supported}."
            ) from None


DEFAULT_ASPECT_RATIO = AspectRatio.SQUARE


class GenerationMode(str, Enum):
    IMAGE = "image"
    DESCRIPTION = "description"


@dataclass
class GenerationRequest:
    """One user action: a prompt plus generation options.

    Attributes:
        prompt: Raw user prompt. Must be non-empty after trimming.
        aspect_ratio: Requested ratio (image mode only).
        credential: Resolved API key. Held in memory only.
        mode: Whether an image or a text description is requested.
    """

    prompt: str
    aspect_ratio: AspectRatio = DEFAULT_ASPECT_RATIO
    credential: str | None = None
    mode: GenerationMode = GenerationMode.IMAGE

    def __post_init__(self):
        self.aspect_ratio = AspectRatio.parse(self.aspect_ratio)
        self.mode = GenerationMode(self.mode)

    def __repr__(self):
        # Keep the credential out of tracebacks and log records.
        return (
            f"GenerationRequest(prompt={self.prompt!r}, "
            f"aspect_ratio={self.aspect_ratio.value!r}, mode={self.mode.value!r})"
        )


@dataclass(frozen=True)
class GenerationResult:
    """Unwrapped service payload: base64 image bytes or description text."""

    mode: GenerationMode
    image_base64: str | None = None
    text: str | None = None
    mime_type: str | None = None

    @property
    def value(self) -> str:
        """The plain payload handed to display layers."""
        if self.mode is GenerationMode.IMAGE:
            return self.image_base64
        return self.text

    def to_data_uri(self) -> str:
        if self.image_base64 is None:
            raise ValueError("Description results have no image data.")
        return f"data:{self.mime_type or 'image/png'};base64,{self.image_base64}"

    def image_bytes(self) -> bytes:
        if self.image_base64 is None:
            raise ValueError("Description results have no image data.")
        return base64.b64decode(self.image_base64)
