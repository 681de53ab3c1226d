"""Download naming and persistence for generated images.

Filename rule:
    First 20 characters of the prompt with whitespace runs replaced by `_`,
    falling back to `generated_image`, plus the extension for the MIME type.
    Any character other than letters, digits, `_`, `.` and `-` becomes `_`.

Side effects:
    `save_result` creates the output directory when needed and writes decoded
    image bytes. Existing files with the same name are overwritten.
"""

import os
import re

from promptcanvas.image.provider_config import MIME_EXTENSIONS, OUTPUT_DIR

FILENAME_PREFIX_LENGTH = 20
DEFAULT_FILENAME = "generated_image"


def download_filename(prompt, mime_type="image/png") -> str:
    stem = re.sub(r"\s+", "_", (prompt or "")[:FILENAME_PREFIX_LENGTH])
    # Only word characters, dots and dashes reach the filesystem.
    stem = re.sub(r"[^\w.-]", "_", stem)
    extension = MIME_EXTENSIONS.get(mime_type, ".png")
    return f"{stem or DEFAULT_FILENAME}{extension}"


def save_result(result, prompt, output_dir=OUTPUT_DIR) -> str:
    """Write an image result to disk and return the file path."""
    data = result.image_bytes()
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, download_filename(prompt, result.mime_type))
    with open(path, "wb") as f:
        f.write(data)
    return path
