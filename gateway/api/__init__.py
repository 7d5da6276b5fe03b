"""Message gateway API adapter package.

Architectural role:
- Defines the external HTTP boundary and the server entrypoint.
- Performs transport-level validation and response shaping.
- Delegates validation and routing to the core dispatcher.

Scope:
- Request lifecycle control for adapter concerns only.
- No direct upstream invocation is implemented in this package.
"""
