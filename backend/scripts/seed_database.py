"""
Create the schema and upsert the two test accounts.

    python scripts/seed_database.py [--reset]
"""

import os
import sys
import argparse
import logging
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from legal_office.core.config import get_config  # noqa: E402
from legal_office.core.database import create_tables, drop_tables, get_db_transaction  # noqa: E402
from legal_office.core.logging_config import configure_logging  # noqa: E402
from legal_office.core.security import get_password_hash  # noqa: E402
from legal_office.models import Profile  # noqa: E402
from legal_office.services.ai_settings_service import AISettingsService  # noqa: E402

config = get_config()
logger = logging.getLogger("seed")

TEST_ACCOUNTS = [
    {"email": "lawyer@example.com", "password": "lawyer123", "role": "lawyer", "full_name": "محامي النظام"},
    {"email": "admin@example.com", "password": "admin123", "role": "admin", "full_name": "مشرف النظام"},
]


def upsert_account(db, account) -> Profile:
    now = datetime.utcnow().isoformat()
    profile = db.query(Profile).filter(Profile.email == account["email"]).first()
    if profile is None:
        profile = Profile(email=account["email"], created_at=now)
        db.add(profile)
        logger.info(f"Creating {account['role']} {account['email']}")
    else:
        logger.info(f"Resetting {account['role']} {account['email']}")

    profile.role = account["role"]
    profile.full_name = account["full_name"]
    profile.hashed_password = get_password_hash(account["password"])
    profile.is_active = True
    profile.updated_at = now
    return profile


def seed(reset: bool = False) -> None:
    if reset:
        logger.warning("Dropping all tables")
        drop_tables()
    create_tables()

    with get_db_transaction() as db:
        for account in TEST_ACCOUNTS:
            upsert_account(db, account)
        AISettingsService(db).get_or_create()

    logger.info(f"Database ready at {config.get_database_url()}")


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed the test accounts")
    parser.add_argument("--reset", action="store_true", help="Drop every table first")
    args = parser.parse_args()

    configure_logging(config.application.log_level)
    seed(reset=args.reset)


if __name__ == "__main__":
    main()
