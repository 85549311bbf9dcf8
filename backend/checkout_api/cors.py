"""CORS middleware whose successful preflight answers have an empty body.

Starlette answers an allowed preflight with ``OK``; storefront clients expect
the same empty 200 that a bare ``OPTIONS`` gets from the routers.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

_BODY_HEADERS = ("content-length", "content-type")


class EmptyPreflightCORSMiddleware(CORSMiddleware):

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            name: value
            for name, value in response.headers.items()
            if name not in _BODY_HEADERS
        }
        return Response(status_code=200, headers=headers)
