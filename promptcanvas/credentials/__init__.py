"""Credential resolution package.

Scope:
    Decides which API key (if any) a session may use for generation.

Non-goals:
    - No key storage or rotation.
    - No OAuth or service-account flows.
"""
