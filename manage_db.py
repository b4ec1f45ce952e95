#!/usr/bin/env python3
"""
Database management script for Hourbook.
Handles migrations, local schema creation and demo seeding.
"""

import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from alembic.config import Config
from alembic import command
from hourbook.infrastructure.db.database import Base, engine, SessionLocal
from hourbook.infrastructure.db.models import UserModel, ProjectModel, TimeEntryModel

ALEMBIC_INI = "hourbook/infrastructure/db/migrations/alembic.ini"


def _config() -> Config:
    return Config(ALEMBIC_INI)


def create_migration(message: str = "Auto-generated migration"):
    """Create a new migration."""
    print(f"Creating migration: {message}")
    command.revision(_config(), message=message, autogenerate=True)


def run_migrations():
    """Run pending migrations."""
    print("Running migrations...")
    command.upgrade(_config(), "head")


def rollback_migration():
    """Rollback last migration."""
    print("Rolling back migration...")
    command.downgrade(_config(), "-1")


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Resetting database...")
        command.downgrade(_config(), "base")
        command.upgrade(_config(), "head")
    else:
        print("Database reset cancelled.")


def show_current_revision():
    """Show current database revision."""
    command.current(_config())


def show_history():
    """Show migration history."""
    command.history(_config())


def create_tables():
    """Create all tables directly from the models, for local SQLite databases."""
    Base.metadata.create_all(bind=engine)
    print("Tables created.")


def seed_demo_data():
    """
    Insert an admin, an employee and two projects with logged hours.
    Profiles use fixed ids; sign-in with Supabase still needs matching accounts.
    """
    session = SessionLocal()
    try:
        if session.query(UserModel).count():
            print("Database already has users, skipping seed.")
            return

        admin = UserModel(
            id="00000000-0000-0000-0000-000000000001",
            email="admin@example.com",
            full_name="Anna Admin",
            role="admin",
            hourly_rate=Decimal("80"),
        )
        employee = UserModel(
            id="00000000-0000-0000-0000-000000000002",
            email="employee@example.com",
            full_name="Erik Employee",
            role="employee",
            hourly_rate=Decimal("60"),
        )
        session.add_all([admin, employee])
        session.flush()

        website = ProjectModel(name="Website Redesign", client="Acme BV", status="active",
                               hourly_rate=Decimal("75"), created_by=admin.id)
        audit = ProjectModel(name="Security Audit", client="Globex", status="to-invoice",
                             hourly_rate=Decimal("95"), created_by=employee.id)
        session.add_all([website, audit])
        session.flush()

        today = date.today()
        session.add_all([
            TimeEntryModel(project_id=website.id, user_id=employee.id, description="Wireframes",
                           hours=Decimal("3.5"), date=today - timedelta(days=2)),
            TimeEntryModel(project_id=audit.id, user_id=employee.id, description="Pentest report",
                           hours=Decimal("6"), date=today - timedelta(days=1)),
            TimeEntryModel(project_id=audit.id, user_id=admin.id, description="Review findings",
                           hours=Decimal("1.5"), date=today),
        ])
        session.commit()
        print("Demo data inserted.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create [msg]   - Create new migration")
        print("  migrate        - Run pending migrations")
        print("  rollback       - Rollback last migration")
        print("  reset          - Reset database (WARNING: drops all data)")
        print("  current        - Show current revision")
        print("  history        - Show migration history")
        print("  tables         - Create tables without migrations (SQLite)")
        print("  seed           - Insert demo users, projects and hours")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        message = " ".join(sys.argv[2:]) if len(sys.argv) > 2 else "Auto-generated migration"
        create_migration(message)
    elif command_name == "migrate":
        run_migrations()
    elif command_name == "rollback":
        rollback_migration()
    elif command_name == "reset":
        reset_database()
    elif command_name == "current":
        show_current_revision()
    elif command_name == "history":
        show_history()
    elif command_name == "tables":
        create_tables()
    elif command_name == "seed":
        seed_demo_data()
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
