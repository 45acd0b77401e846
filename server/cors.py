"""
CORS policy applied in front of the router.

Two fixed policies exist: production allows a single configured origin and
a short list of headers/methods, debug allows everything. Both answer
preflight (OPTIONS) requests directly without routing them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


@dataclass(frozen=True)
class CORSPolicy:
    allow_origin: str
    allow_headers: str
    allow_methods: str

    @classmethod
    def production(cls, origin: str) -> "CORSPolicy":
        return cls(
            allow_origin=origin,
            allow_headers="Authorization, Content-Type",
            allow_methods="OPTIONS, GET, POST",
        )

    @classmethod
    def debug(cls) -> "CORSPolicy":
        return cls(allow_origin="*", allow_headers="*", allow_methods="*")

    def headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Headers": self.allow_headers,
            "Access-Control-Allow-Methods": self.allow_methods,
            "Access-Control-Allow-Origin": self.allow_origin,
        }


class CORSPolicyMiddleware(BaseHTTPMiddleware):
    """Stamp every response with the policy headers; short-circuit OPTIONS."""

    def __init__(self, app: ASGIApp, policy: CORSPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.policy.headers())

        response = await call_next(request)
        response.headers.update(self.policy.headers())
        return response
