"""External retrieval package.

Scope:
    Provider-backed search used by the dispatcher's news mode. Results are
    returned to the client as structured data, not injected into prompts.
"""
