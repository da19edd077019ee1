"""
Database initialization and maintenance utilities.
"""
import sys
import argparse

from database import get_db_manager
from shared.repositories.session_repository import SessionRepository
from shared.services.settings_service import SettingsService


def migrate():
    """Create all database tables."""
    print("Creating database tables...")
    try:
        get_db_manager().create_tables()
        print("✓ Tables created")
    except Exception as e:
        print(f"Error during migration: {e}")
        raise


def reset_settings():
    """Restore the default settings profile."""
    with get_db_manager().session_scope() as db:
        settings = SettingsService(db).reset_settings()
    print(f"✓ Settings reset: {settings.model_dump()}")


def reset_progress():
    """Delete all essay session history."""
    with get_db_manager().session_scope() as db:
        count = SessionRepository(db).delete_all()
    print(f"✓ Deleted {count} essay sessions")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Database management CLI")
    parser.add_argument("--migrate", action="store_true", help="Create database tables")
    parser.add_argument("--reset-settings", action="store_true", help="Restore default writing settings")
    parser.add_argument("--reset-progress", action="store_true", help="Delete all essay sessions")

    args = parser.parse_args()

    if args.migrate:
        migrate()
    elif args.reset_settings:
        reset_settings()
    elif args.reset_progress:
        reset_progress()
    else:
        print("Usage:")
        print("  python db.py --migrate          # Create tables")
        print("  python db.py --reset-settings   # Restore default settings")
        print("  python db.py --reset-progress   # Delete essay history")
        sys.exit(1)
