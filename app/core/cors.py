import logging
from collections.abc import Mapping

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RouteGroupCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers preflights with the methods of the matched route group.

    ``method_groups`` maps a path to a comma-separated method list. A key
    ending in ``/`` matches every path under it, any other key matches
    exactly. Preflights for paths outside every group fall back to the
    global ``allow_methods``.
    """

    def __init__(
        self,
        app: ASGIApp,
        method_groups: Mapping[str, str],
        **kwargs,
    ) -> None:
        super().__init__(app, **kwargs)
        self.method_groups = {
            path: [m.strip() for m in methods.split(",")]
            for path, methods in method_groups.items()
        }

    def _group_methods(self, path: str) -> list[str] | None:
        if path in self.method_groups:
            return self.method_groups[path]
        for prefix, methods in self.method_groups.items():
            if prefix.endswith("/") and path.startswith(prefix):
                return methods
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "OPTIONS":
            await super().__call__(scope, receive, send)
            return

        headers = Headers(scope=scope)
        methods = self._group_methods(scope["path"])
        if (
            methods is None
            or "origin" not in headers
            or "access-control-request-method" not in headers
        ):
            await super().__call__(scope, receive, send)
            return

        response = self.group_preflight_response(headers, methods)
        await response(scope, receive, send)

    def group_preflight_response(
        self, request_headers: Headers, methods: list[str]
    ) -> Response:
        response = self.preflight_response(request_headers=request_headers)
        if response.status_code != 200:
            return response

        passthrough = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        passthrough["access-control-allow-methods"] = ", ".join(methods)

        requested = request_headers["access-control-request-method"]
        if requested not in methods:
            logger.warning(
                "Rejected CORS preflight: origin=%s method=%s",
                request_headers["origin"],
                requested,
            )
            return PlainTextResponse(
                "Disallowed CORS method", status_code=400, headers=passthrough
            )

        return Response(status_code=204, headers=passthrough)
