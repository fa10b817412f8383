import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from stockledger.config import get_settings
from stockledger.database.engine import engine

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _database_status():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return "unavailable"
    return "ok"


@router.get("/health")
def health_check():
    settings = get_settings()
    database = _database_status()
    return {
        "status": "ok" if database == "ok" else "degraded",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "database": database,
        "time": datetime.now(timezone.utc).isoformat(),
    }
