"""OpenAPI customization: API key security scheme, tag metadata and the
documented 429 response shared by every rate-limited operation."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

PUBLIC_OPERATIONS = {
    ("/health", "get"),
    ("/v1/rsvp", "post"),
    ("/v1/weddings/{wedding_id}/expiration", "get"),
}

TAGS = [
    {"name": "Weddings", "description": "Wedding sites and their expiration."},
    {"name": "RSVP", "description": "Guest answers and head counts."},
    {"name": "Health", "description": "Liveness checks."},
]

TOO_MANY_REQUESTS = {
    "description": "Rate limit exceeded; retry after the number of seconds in Retry-After.",
    "headers": {
        "Retry-After": {"schema": {"type": "integer"}},
        "X-RateLimit-Limit": {"schema": {"type": "integer"}},
        "X-RateLimit-Remaining": {"schema": {"type": "integer"}},
        "X-RateLimit-Reset": {"schema": {"type": "string", "format": "date-time"}},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation.

    - Declares the ``X-API-Key`` header scheme and requires it by default
    - Clears the requirement on public operations (``security: []``)
    - Documents the 429 response on every ``/v1`` operation
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "ApiKeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Provide your API key via the X-API-Key header.",
            },
        )
        schema.setdefault("security", [{"ApiKeyAuth": []}])

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS if t["name"] not in existing_tag_names)

        for path, methods in schema.get("paths", {}).items():
            for method, operation in methods.items():
                if not isinstance(operation, dict):
                    continue
                if (path, method) in PUBLIC_OPERATIONS:
                    operation["security"] = []
                if path.startswith("/v1/"):
                    operation.setdefault("responses", {}).setdefault("429", TOO_MANY_REQUESTS)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
