"""Image generation adapter package.

Scope:
    Provides the Generative Language API client, the generation adapter used
    by CLI/HTTP surfaces, and helpers for saving generated images.

Module split:
    - `provider_config`: environment-driven endpoint/model/output settings.
    - `client`: HTTP transport and per-credential client cache.
    - `service`: request validation, response unwrapping, error classification.
    - `output`: download filenames and on-disk persistence of results.

Non-goals:
    - No retries, batching or caching of prior generations.
"""
