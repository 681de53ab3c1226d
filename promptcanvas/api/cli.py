"""
Interactive CLI adapter for PromptCanvas.

Architectural role:
- Collects prompts from the terminal and renders generation results.
- Owns the session credential and client cache.
- Delegates all generation work to `promptcanvas.image.service.ImageService`.

Request lifecycle (per user turn):
1. Read stdin.
2. Handle local commands (`exit`/`quit`, `/help`, `/ratio`, `/describe`).
3. Send plain text to the service as an image request.
4. Save the image under the output directory, or print the description.

Input validation behavior:
- Empty input is ignored.
- `/ratio` validates against the supported aspect ratios.
- A blank key at the key prompt is rejected and asked for again.

Error handling strategy:
- `GenerationError` messages are printed verbatim; the loop continues.
- Failures writing the image file are reported as `UnknownError`.
- EOF and keyboard interrupts terminate the loop without traceback output.

Side effects:
- Writes image files under `OUTPUT_DIR`.
- Reads the API key from environment, key file, or a hidden prompt. The key is
  kept in memory for the session only.
"""

from dotenv import load_dotenv

load_dotenv()

import getpass
import logging
import sys

from promptcanvas.core.errors import (
    ConfigurationError,
    GenerationError,
    UnknownError,
    ValidationError,
)
from promptcanvas.core.types import (
    DEFAULT_ASPECT_RATIO,
    AspectRatio,
    GenerationMode,
    GenerationRequest,
)
from promptcanvas.credentials.resolver import CredentialResolver, validate_user_key
from promptcanvas.image.client import ClientCache
from promptcanvas.image.output import save_result
from promptcanvas.image.provider_config import DEBUG, OUTPUT_DIR
from promptcanvas.image.service import ImageService

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
 <prompt>              generate an image
 /describe <prompt>    generate a text description
 /ratio                list aspect ratios
 /ratio <value>        set aspect ratio (e.g. /ratio 16:9)
 /help                 show this help
 exit | quit           leave
"""


class Session:
    """State for one terminal session: credential, ratio and clients."""

    def __init__(self, credential, clients=None, output_dir=OUTPUT_DIR):
        self.credential = credential
        self.clients = clients if clients is not None else ClientCache()
        self.output_dir = output_dir
        self.aspect_ratio = DEFAULT_ASPECT_RATIO

    @property
    def service(self) -> ImageService:
        return ImageService(self.clients.get(self.credential))

    def set_ratio(self, value) -> str:
        self.aspect_ratio = AspectRatio.parse(value)
        return f"Aspect ratio set to {self.aspect_ratio.value} ({self.aspect_ratio.label})."

    def list_ratios(self) -> str:
        lines = ["Aspect ratios:"]
        for ratio in AspectRatio:
            marker = " (active)" if ratio is self.aspect_ratio else ""
            lines.append(f" - {ratio.value}  {ratio.label}{marker}")
        return "\n".join(lines)

    def generate(self, prompt) -> str:
        request = GenerationRequest(prompt=prompt, aspect_ratio=self.aspect_ratio)
        result = self.service.generate(request)
        try:
            path = save_result(result, prompt, self.output_dir)
        except (OSError, ValueError) as err:
            # binascii.Error (malformed payload) is a ValueError.
            logger.exception("Failed to save image to %s", self.output_dir)
            raise UnknownError(f"Could not save the image: {err}") from err
        return f"Image saved to {path}"

    def describe(self, prompt) -> str:
        request = GenerationRequest(prompt=prompt, mode=GenerationMode.DESCRIPTION)
        return self.service.generate(request).text

    def handle(self, line):
        """Process one input line.

        Returns:
            Text to print, or `None` when the session should end.
        """
        command = line.strip()
        lowered = command.lower()

        if lowered in ("exit", "quit"):
            return None
        if lowered == "/help":
            return HELP_TEXT
        if lowered == "/ratio":
            return self.list_ratios()

        try:
            if lowered.startswith("/ratio "):
                return self.set_ratio(command[len("/ratio "):])
            if lowered == "/describe" or lowered.startswith("/describe "):
                return self.describe(command[len("/describe"):])
            return self.generate(command)
        except GenerationError as err:
            return f"Error: {err.message}"


def prompt_for_key(read=None) -> str:
    """Ask for a key until a non-blank value is entered."""
    read = read or getpass.getpass
    while True:
        try:
            return validate_user_key(read("Gemini API key (input hidden): "))
        except ValidationError as err:
            print(err.message)


def resolve_session_credential(read=None) -> str:
    resolver = CredentialResolver()
    try:
        return resolver.resolve()
    except ConfigurationError:
        print("No API key configured. Your key is used only for this session and is not stored.")
        resolver.user_value = prompt_for_key(read)
        return resolver.resolve()


# =========================================================
# MAIN
# =========================================================

def main():
    """
    Run the interactive terminal session.

    Error handling strategy:
    - A missing key triggers a hidden prompt; a placeholder entry aborts.
    - Generation errors are printed and the loop continues.
    - EOF/interrupt are handled without stack traces.
    """
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        credential = resolve_session_credential()
    except (EOFError, KeyboardInterrupt):
        print("\nNo API key entered.")
        return 1
    except ConfigurationError as err:
        print(err.message)
        return 1

    session = Session(credential)

    print("PromptCanvas started. (Type '/help' for commands, 'exit' to quit)")
    print(f"Aspect ratio: {session.aspect_ratio.value}")
    print("-" * 60)

    while True:

        try:
            line = input("Prompt: ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            break

        if not line:
            continue

        output = session.handle(line)

        if output is None:
            print("Shutting down.")
            break

        print(output)
        print("\n" + "-" * 60 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
