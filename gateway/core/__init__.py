"""Core request orchestration package.

Architectural role:
    Sits between the HTTP adapter and the upstream clients (LLM, image, news).

Composition:
    - `types`: request-scoped value types and the `Outcome` / `CoreError` model.
    - `settings`: process configuration resolved once at startup.
    - `dispatcher`: validation, mode classification and adapter routing.

Determinism and side effects:
    Package import is side-effect free. Network side effects happen only inside
    adapter calls made by `dispatcher`.
"""
