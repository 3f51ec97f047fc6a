import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SEED_PATH = os.getenv("FINANCE_SEED_PATH", "data/seed.json")
    USER_ID = os.getenv("FINANCE_USER_ID", "demo")
    CURRENCY = os.getenv("FINANCE_CURRENCY", "JPY")
    LOG_LEVEL = os.getenv("FINANCE_LOG_LEVEL", "INFO")
    REMINDER_HOUR = int(os.getenv("FINANCE_REMINDER_HOUR", "20"))
    BUDGET_CHECK_INTERVAL = float(os.getenv("FINANCE_BUDGET_CHECK_INTERVAL", "3600"))


def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
