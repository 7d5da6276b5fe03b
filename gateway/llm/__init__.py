"""LLM access package.

Architectural role:
    Provides provider configuration, request-payload construction, and transport
    used by the dispatcher to invoke the text/vision upstream.

Module split:
    - `provider_config`: credential, model and endpoint configuration.
    - `service`: multimodal content construction and text generation entrypoint.
    - `client`: single-shot HTTP transport with failure normalization.
    - `errors`: upstream error-body reading and message normalization.
"""
