import logging
from typing import Awaitable, Callable, Dict, Tuple

from fastapi import status

from config import MAX_CHECKS, TOKEN_TTL_MS
from exceptions import ServiceError
from resources.accounts import AccountResource
from resources.base import Verb, HandlerRequest, HandlerResponse, current_millis
from resources.checks import CheckResource
from resources.tokens import TokenResource, TokenVerifier
from store import RecordStore, StoreError

logger = logging.getLogger(__name__)

Handler = Callable[[HandlerRequest], Awaitable[HandlerResponse]]
Registry = Dict[Tuple[str, Verb], Handler]


def build_registry(store: RecordStore, clock: Callable[[], int] = current_millis,
                   max_checks: int = MAX_CHECKS, token_ttl_ms: int = TOKEN_TTL_MS) -> Registry:
    """Builds the (resource kind, verb) -> handler table once, at startup."""
    verifier = TokenVerifier(store, clock)
    resources = [
        AccountResource(store, clock, verifier=verifier),
        TokenResource(store, clock, ttl_ms=token_ttl_ms),
        CheckResource(store, clock, verifier=verifier, max_checks=max_checks),
    ]

    registry: Registry = {}
    for resource in resources:
        registry.update(resource.routes())
    return registry


async def dispatch(registry: Registry, request: HandlerRequest) -> HandlerResponse:
    if not any(kind == request.resource for kind, _ in registry):
        return HandlerResponse(status_code=status.HTTP_404_NOT_FOUND)

    verb = Verb.parse(request.method)
    handler = registry.get((request.resource, verb)) if verb is not None else None
    if handler is None:
        return HandlerResponse(status_code=status.HTTP_405_METHOD_NOT_ALLOWED)

    try:
        return await handler(request)
    except ServiceError as e:
        return HandlerResponse(status_code=e.status_code, body={"Error": e.message})
    except StoreError as e:
        logger.error(f"{verb.value} /{request.resource} failed in storage: {e}")
        return HandlerResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, body={"Error": "Storage failure."})


__all__ = [
    "Verb",
    "HandlerRequest",
    "HandlerResponse",
    "Registry",
    "TokenVerifier",
    "build_registry",
    "dispatch",
]
