"""
Request pipeline: an ordered chain of handlers ending in an endpoint.

Each handler receives the request context and a ``call_next`` callable.
It either forwards (optionally after augmenting the context) by awaiting
``call_next(ctx)``, or terminates the request by returning a response or
raising an HTTPException.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from fastapi import Request

logger = logging.getLogger(__name__)

NextHandler = Callable[["RequestContext"], Awaitable[Any]]
Handler = Callable[["RequestContext", NextHandler], Awaitable[Any]]
Endpoint = Callable[["RequestContext"], Awaitable[Any]]


@dataclass
class RequestContext:
    """Framework independent view of an inbound request."""

    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None
    state: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = {k.lower(): v for k, v in self.headers.items()}

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @classmethod
    def from_request(cls, request: Request, body: Optional[Mapping[str, Any]] = None) -> "RequestContext":
        """
        Build a context from a Starlette request.

        Args:
            request: Incoming request
            body: Already parsed body; copied so handlers may rewrite fields in place
        """
        return cls(
            method=request.method,
            path=request.url.path,
            headers=dict(request.headers),
            body=dict(body) if body is not None else None,
        )


class Pipeline:
    """Runs handlers in order, then the endpoint."""

    def __init__(self, handlers: Sequence[Handler], endpoint: Endpoint):
        self.handlers = tuple(handlers)
        self.endpoint = endpoint

    def then(self, handler: Handler) -> "Pipeline":
        return Pipeline(self.handlers + (handler,), self.endpoint)

    async def __call__(self, ctx: RequestContext) -> Any:
        return await self._dispatch(0, ctx)

    async def _dispatch(self, index: int, ctx: RequestContext) -> Any:
        if index == len(self.handlers):
            return await self.endpoint(ctx)

        handler = self.handlers[index]

        async def call_next(next_ctx: RequestContext) -> Any:
            return await self._dispatch(index + 1, next_ctx)

        return await handler(ctx, call_next)

    def __repr__(self):
        names = [getattr(h, "__name__", type(h).__name__) for h in self.handlers]
        return f"Pipeline({' -> '.join(names + [self.endpoint.__name__])})"
