import json
import logging
from fastapi import Request

from resources import HandlerRequest, Registry
from store import RecordStore

logger = logging.getLogger(__name__)


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


async def get_handler_request(resource: str, request: Request) -> HandlerRequest:
    """
    Normalizes the HTTP request into a HandlerRequest.
    A body that is empty, malformed or not a JSON object becomes an empty payload.
    """
    raw_body = await request.body()
    payload = {}
    if raw_body:
        try:
            parsed = json.loads(raw_body)
            if isinstance(parsed, dict):
                payload = parsed
        except (ValueError, UnicodeDecodeError):
            logger.debug(f"Ignoring malformed body on {request.method} /api/{resource}")

    return HandlerRequest(
        method=request.method.lower(),
        resource=resource.strip("/").lower(),
        headers={k.lower(): v for k, v in request.headers.items()},
        query=dict(request.query_params),
        payload=payload,
    )
