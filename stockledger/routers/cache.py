from fastapi import APIRouter

from stockledger.core.invalidation import get_invalidation_bus

router = APIRouter(prefix="/cache", tags=["Cache"])


@router.get("/versions")
def cache_versions():
    """Generation per cache key; a view refetches when its key's number moves."""
    return get_invalidation_bus().versions()


__all__ = ["router"]
