"""CLI script to seed the portfolio database with demo content.
Usage: python scripts/seed_content.py [--force]
"""
import sys
import argparse
import logging
import pathlib
# Ensure `backend/` is on sys.path so `portfolio` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session, SQLModel
from portfolio.database import engine, create_db_and_tables
from portfolio.seed import seed_database


def main(force: bool = False):
    """Create the tables and insert the demo content if the database is empty.

    With `force`, every table is dropped and recreated first, which
    discards all stored content including contact messages.
    """
    if force:
        SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    with Session(engine) as session:
        seeded = seed_database(session)
    print(f'Database: {engine.url}')
    print('Seeded demo content' if seeded else 'Projects already present, nothing seeded')


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser()
    parser.add_argument('--force', action='store_true', help='Drop all tables before seeding')
    args = parser.parse_args()
    main(force=args.force)
