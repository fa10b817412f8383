import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from stockledger.config import Settings, get_settings
from stockledger.core.logging import setup_logging
from stockledger.core.scheduler import DailyScheduler
from stockledger.database import Base, SessionLocal, engine
from stockledger.models import import_all_models
from stockledger.routers import cache_router, health_router, stocks_router
from stockledger.services.stock_service import carry_forward_stock

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()
Base.metadata.create_all(bind=engine)


def run_carry_forward(run_date):
    db = SessionLocal()
    try:
        return carry_forward_stock(db, run_date)
    finally:
        db.close()


scheduler = DailyScheduler(
    timezone_mode=settings.SCHEDULER_TZ,
    poll_seconds=settings.SCHEDULER_POLL_SECONDS,
)
scheduler.add_daily_job("carry-forward", settings.CARRY_FORWARD_TIME, run_carry_forward)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        scheduler.stop()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(stocks_router)
app.include_router(cache_router)


__all__ = ["app", "run_carry_forward", "scheduler"]
