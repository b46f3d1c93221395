"""
Script to create ALL library tables if they don't exist.
This script checks the database and creates only the missing tables.

Usage:
    python create_all_tables.py [--seed]

This will:
1. Import all models from the codebase
2. Check which tables exist in the database
3. Create only the missing tables
4. Optionally load the sample catalog (--seed)
5. Print a summary of what exists
"""
import sys
import argparse
from pathlib import Path
from dotenv import load_dotenv
import logging

# Add project root to path
ROOT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT_DIR))

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Import database components
from database import Base, engine
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

TABLE_GROUPS = {
    "Members": ["members"],
    "Catalog": ["authors", "publishers", "categories", "books", "book_authors", "book_copies"],
    "Circulation": ["loans", "reservations", "fines"],
    "Staff & Audit": ["staff", "audit_log"],
}


def import_all_models():
    """Import all models to register them with SQLAlchemy Base.metadata"""
    logger.info("Importing all models...")
    import models

    registered = set(Base.metadata.tables)
    missing = [name for name in models.EXPECTED_TABLES if name not in registered]
    if missing:
        logger.error(f"Tables not registered in Base.metadata: {', '.join(missing)}")
        return False

    logger.info(f"Imported {len(models.EXPECTED_TABLES)} model(s), {len(registered)} table(s) registered")
    return True


def get_existing_tables(bind=None):
    """Get list of existing tables in the database, or None if it cannot be reached"""
    try:
        inspector = inspect(bind or engine)
        return inspector.get_table_names()
    except OperationalError as e:
        logger.error(f"Cannot connect to database: {e}")
        logger.error("Please check your DATABASE_URL environment variable")
        return None


def create_missing_tables(existing_tables, bind=None):
    """
    Create missing tables using Base.metadata.create_all().
    Returns the sorted list of tables that were created.
    """
    bind = bind or engine
    missing_tables = set(Base.metadata.tables) - set(existing_tables)

    if not missing_tables:
        logger.info("All tables already exist in the database")
        return []

    logger.info(f"Found {len(missing_tables)} missing table(s): {', '.join(sorted(missing_tables))}")

    # checkfirst skips tables that already exist
    with bind.begin() as conn:
        Base.metadata.create_all(bind=conn, checkfirst=True)

    created = set(inspect(bind).get_table_names()) - set(existing_tables)
    still_missing = missing_tables - created
    if still_missing:
        logger.warning(f"{len(still_missing)} table(s) were not created: {', '.join(sorted(still_missing))}")

    logger.info(f"Created {len(created)} table(s): {', '.join(sorted(created))}")
    return sorted(created)


def print_table_summary(existing_tables, newly_created):
    """Print a summary of all tables"""
    print("\n" + "=" * 70)
    print("DATABASE TABLES SUMMARY")
    print("=" * 70)

    all_tables = set(existing_tables)
    print(f"\nTotal tables in database: {len(all_tables)}")

    if newly_created:
        print(f"\nNewly created tables ({len(newly_created)}):")
        for table in newly_created:
            print(f"   [OK] {table}")

    for group, tables in TABLE_GROUPS.items():
        print(f"\n{group} Tables:")
        for table in tables:
            status = "[OK]" if table in all_tables else "[MISSING]"
            print(f"   {status} {table}")

    grouped = {table for tables in TABLE_GROUPS.values() for table in tables}
    other_tables = all_tables - grouped
    if other_tables:
        print("\nOther Tables:")
        for table in sorted(other_tables):
            print(f"   [OK] {table}")

    print("\n" + "=" * 70)


def main(argv=None):
    """Main function to create all missing tables"""
    parser = argparse.ArgumentParser(description="Create missing library tables")
    parser.add_argument("--seed", action="store_true", help="also load the sample catalog")
    args = parser.parse_args(argv)

    logger.info("Step 1: Importing all models...")
    if not import_all_models():
        logger.error("Failed to import models. Exiting.")
        return False

    logger.info("Step 2: Checking existing tables in database...")
    existing_tables = get_existing_tables()
    if existing_tables is None:
        logger.error("Cannot proceed without database connection. Exiting.")
        return False
    logger.info(f"Found {len(existing_tables)} existing table(s) in database")

    logger.info("Step 3: Creating missing tables...")
    newly_created = create_missing_tables(existing_tables)

    if args.seed:
        logger.info("Step 4: Seeding sample catalog...")
        from Catalog_module.bootstrap import seed_default_catalog
        seed_default_catalog()

    final_tables = get_existing_tables()
    if final_tables:
        print_table_summary(final_tables, newly_created)

    return True


if __name__ == "__main__":
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    try:
        success = main()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        logger.info("Script interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
