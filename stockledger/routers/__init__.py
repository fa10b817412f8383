from stockledger.routers.cache import router as cache_router
from stockledger.routers.health import router as health_router
from stockledger.routers.stocks import router as stocks_router

__all__ = [
    "cache_router",
    "health_router",
    "stocks_router",
]
