"""
HTTP API adapter for PromptCanvas.

Architectural role:
- Expose image and description generation over JSON endpoints.
- Resolve the request credential (header or environment).
- Delegate all generation work to `promptcanvas.image.service.ImageService`.
- Translate classified errors to HTTP status codes.

Endpoint responsibilities:
- `GET /v1/aspect-ratios`: list the supported ratios with display labels.
- `POST /v1/images/generations`: generate one image, returned as base64,
  data URI and download filename.
- `POST /v1/descriptions`: generate a text description of a prompt.

API request lifecycle (`POST /v1/images/generations`):
1. Parse request body (`prompt`, optional `aspect_ratio`).
2. Resolve the credential: environment first, then the `X-API-Key` header.
3. Fetch the app-owned client for that credential and call the service.
4. Format the result, or map the raised `GenerationError` to a JSON error.

Error handling strategy:
- Every `GenerationError` becomes `{"error": {"category", "message"}}` with a
  status chosen by category.
- Unexpected exceptions are not wrapped here and follow FastAPI defaults.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Keeps one API client per credential in `app.state.clients`.
"""

from dotenv import load_dotenv

load_dotenv()

import time

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from promptcanvas.core.errors import ErrorCategory, GenerationError
from promptcanvas.core.types import (
    DEFAULT_ASPECT_RATIO,
    AspectRatio,
    GenerationMode,
    GenerationRequest,
)
from promptcanvas.credentials.resolver import CredentialResolver
from promptcanvas.image.client import ClientCache
from promptcanvas.image.output import download_filename
from promptcanvas.image.service import ImageService

app = FastAPI(title="PromptCanvas")
app.state.clients = ClientCache()

STATUS_BY_CATEGORY = {
    ErrorCategory.CONFIGURATION: 400,
    ErrorCategory.AUTHENTICATION: 401,
    ErrorCategory.BILLING: 402,
    ErrorCategory.SAFETY_BLOCKED: 422,
    ErrorCategory.EMPTY_RESULT: 422,
    ErrorCategory.UNKNOWN: 502,
}


# ============================================================
# Request Schema
# ============================================================

class ImageGenerationBody(BaseModel):
    prompt: str = Field("", description="A text description of the desired image.")
    aspect_ratio: str = Field(DEFAULT_ASPECT_RATIO.value, description="One of the supported ratios.")


class DescriptionBody(BaseModel):
    prompt: str = Field("", description="Scene to describe.")


# ============================================================
# Error Translation
# ============================================================

@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    return JSONResponse(
        status_code=STATUS_BY_CATEGORY[exc.category],
        content={"error": {"category": exc.category.value, "message": exc.message}},
    )


def _service(api_key: str | None) -> ImageService:
    """Resolve the credential and return a service bound to its client."""
    credential = CredentialResolver(user_value=api_key).resolve()
    return ImageService(app.state.clients.get(credential))


# ============================================================
# Endpoints
# ============================================================

@app.get("/v1/aspect-ratios")
def list_aspect_ratios():
    return {
        "object": "list",
        "default": DEFAULT_ASPECT_RATIO.value,
        "data": [{"label": ratio.label, "value": ratio.value} for ratio in AspectRatio],
    }


@app.post("/v1/images/generations")
def create_image(body: ImageGenerationBody, x_api_key: str | None = Header(None)):
    """
    Generate one image.

    Response formatting:
    - `data[0].b64_json`: base64 bytes exactly as returned by the service.
    - `data[0].url`: the same bytes as a data URI.
    - `data[0].filename`: suggested download filename.
    """
    # Validates ratio and builds the request before a credential is needed.
    request = GenerationRequest(prompt=body.prompt, aspect_ratio=body.aspect_ratio)
    service = _service(x_api_key)
    result = service.generate(request)

    return {
        "created": int(time.time()),
        "data": [
            {
                "b64_json": result.image_base64,
                "url": result.to_data_uri(),
                "mime_type": result.mime_type,
                "filename": download_filename(body.prompt, result.mime_type),
            }
        ],
    }


@app.post("/v1/descriptions")
def create_description(body: DescriptionBody, x_api_key: str | None = Header(None)):
    request = GenerationRequest(prompt=body.prompt, mode=GenerationMode.DESCRIPTION)
    result = _service(x_api_key).generate(request)
    return {"created": int(time.time()), "text": result.text}
