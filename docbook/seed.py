import argparse
import logging
import sys

from .core.database import SessionLocal, init_db
from .core.logger import setup_logging
from .services.seed_service import seed_database

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the appointment database with sample data")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create the database tables before seeding.",
    )
    args = parser.parse_args(argv)

    setup_logging()

    if args.create_tables:
        init_db()
        logger.info("Database tables created successfully")

    db = SessionLocal()
    try:
        logger.info("Starting database seeding...")
        seed_database(db)
        logger.info("Database seeding completed")
    except Exception:
        logger.exception("Error seeding database")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
