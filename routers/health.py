import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from dependencies import get_store
from store import RecordStore, StoreError, RecordNotFoundError

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)

@router.get("/ping")
def ping():
    """
    Returns 200 with an empty body while the service is up.
    """
    return Response(status_code=status.HTTP_200_OK)

@router.get("/health/liveness")
def liveness():
    """Process is up; touches nothing else."""
    return {"status": "ok"}

@router.get("/health/readiness")
async def readiness(store: RecordStore = Depends(get_store)):
    """
    Reads a sentinel id from the users collection.
    A not-found answer means the store round-trip works; any other store
    error answers 503.
    """
    try:
        await store.read("users", "__readiness__")
    except RecordNotFoundError:
        pass
    except StoreError as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store unavailable"
        )
    return {"status": "ready"}
