import argparse
import logging
from datetime import date

from stockledger.config import get_settings
from stockledger.core.logging import setup_logging
from stockledger.core.scheduler import DailyScheduler
from stockledger.database import SessionLocal
from stockledger.services.stock_service import carry_forward_stock

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Open stock days from the previous day's counts.")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to open (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument(
        "--forever",
        action="store_true",
        help="Keep running and open each new day at CARRY_FORWARD_TIME.",
    )
    return parser.parse_args()


def run_for(target_date):
    db = SessionLocal()
    try:
        return carry_forward_stock(db, target_date)
    finally:
        db.close()


def main():
    setup_logging()
    args = parse_args()
    settings = get_settings()

    if not args.forever:
        created = run_for(args.date or date.today())
        logger.info("Opened %d stock row(s).", created)
        return

    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler disabled by SCHEDULER_ENABLED.")
        return

    scheduler = DailyScheduler(
        timezone_mode=settings.SCHEDULER_TZ,
        poll_seconds=settings.SCHEDULER_POLL_SECONDS,
    )
    scheduler.add_daily_job("carry-forward", settings.CARRY_FORWARD_TIME, run_for)
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Carry forward loop stopped.")


if __name__ == "__main__":
    main()
