"""CORS middleware that answers successful preflights with 204 No Content."""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

# Describe the "OK" body Starlette attaches, which a 204 must not carry
_BODY_HEADERS = {"content-length", "content-type"}


class PreflightCORSMiddleware(CORSMiddleware):
    """Starlette's CORSMiddleware, with empty 204 preflight responses.

    Rejected preflights (disallowed origin, method or header) keep
    Starlette's 400 with its explanatory text.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in _BODY_HEADERS
        }
        return Response(status_code=204, headers=headers)
