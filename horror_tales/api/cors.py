"""
Cross-origin headers shared by the CORS middleware and explicit pre-flight routes.
"""

from fastapi import Response

ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}


def preflight_response() -> Response:
    """Empty pre-flight answer with permissive cross-origin headers."""
    return Response(status_code=200, headers=CORS_HEADERS)
