"""Core contracts package.

Composition:
    - `types`: aspect ratios, generation request and result schema.
    - `errors`: user-facing error taxonomy and message classification.

Determinism and side effects:
    Import is side-effect free; nothing here performs I/O.
"""
