"""Image generation adapter package.

Scope:
    Provides the text-to-image client and the small service used by the
    dispatcher when `mode=image` is requested.

Non-goals:
    - No file ingestion or image editing.
    - No Base64 decoding.
"""
