from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from dependencies import get_registry, get_handler_request
from resources import HandlerRequest, Registry, dispatch

router = APIRouter(prefix="/api", tags=["api"])

ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"]


@router.api_route(
    "/{resource}",
    methods=ALL_METHODS,
    summary="Users, Tokens and Checks",
    description="Dispatches `users`, `tokens` and `checks` requests. Authenticated operations expect the session token id in the `token` header.",
)
async def handle_resource(
    handler_request: HandlerRequest = Depends(get_handler_request),
    registry: Registry = Depends(get_registry),
):
    result = await dispatch(registry, handler_request)
    if result.body is None:
        return Response(status_code=result.status_code, media_type=result.content_type)
    return JSONResponse(status_code=result.status_code, content=result.body, media_type=result.content_type)
