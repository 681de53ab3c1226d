"""PromptCanvas adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates generation to `promptcanvas.image.service`.

Scope:
- No direct API client logic is implemented in this package.
"""
