import logging
import os
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from faceyoga.core.database import SessionLocal
from faceyoga.crud.subscription import subscription as crud_subscription

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def expire_lapsed_subscriptions():
    db = SessionLocal()
    try:
        expired = crud_subscription.expire_lapsed(db)
        logger.info(f"Subscription sweep finished: {expired} subscriptions expired")
        return expired
    except Exception as e:
        db.rollback()
        logger.error(f"Error expiring subscriptions: {e}")
        return 0
    finally:
        db.close()


def start_scheduler():
    if os.getenv("TESTING") == "true":
        logger.info("Scheduler disabled in test environment")
        return

    if not scheduler.running:
        scheduler.add_job(
            expire_lapsed_subscriptions,
            'cron',
            hour=0,
            minute=0,
            id='expire_lapsed_subscriptions',
            name='Expire Lapsed Subscriptions',
            replace_existing=True
        )
        scheduler.start()
        logger.info("Scheduler started with daily subscription expiry job")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
