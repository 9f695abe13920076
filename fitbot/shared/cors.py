"""
CORS helpers.

The CORS middleware answers browser preflights; ``preflight_response`` covers
plain OPTIONS calls that carry no Origin header.
"""

from fastapi.responses import PlainTextResponse

ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}


def preflight_response() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)
