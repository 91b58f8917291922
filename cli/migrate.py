#!/usr/bin/env python3
"""Schema migrations: numbered .sql files applied once, in name order."""

from pathlib import Path
from typing import List, Set
from logger import get_logger

logger = get_logger()


def init_schema_migrations_table(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def get_applied_migrations(conn) -> Set[str]:
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def get_available_migrations(migrations_dir: Path) -> List[str]:
    if not migrations_dir.exists():
        return []
    return sorted(file_path.name for file_path in migrations_dir.glob("*.sql"))


def get_pending_migrations(conn, migrations_dir: Path) -> List[str]:
    """Migrations found on disk but not recorded as applied, in order."""
    init_schema_migrations_table(conn)
    applied = get_applied_migrations(conn)
    return [m for m in get_available_migrations(migrations_dir) if m not in applied]


def apply_migration(conn, migrations_dir: Path, migration_file: str):
    """Run one migration script and record it.

    Raises:
        sqlite3.Error: If the script fails. The record is rolled back.
    """
    sql = (migrations_dir / migration_file).read_text(encoding="utf-8")

    try:
        conn.executescript(sql)
        conn.execute(
            "INSERT INTO schema_migrations (migration_file) VALUES (?)",
            (migration_file,),
        )
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.error(f"Error applying migration {migration_file}: {e}")
        raise

    logger.info(f"Applied migration: {migration_file}")


def apply_pending_migrations(conn, migrations_dir: Path) -> List[str]:
    """Bring a database up to date.

    Returns:
        Names of the migrations applied, in order.
    """
    pending = get_pending_migrations(conn, migrations_dir)
    for migration in pending:
        apply_migration(conn, migrations_dir, migration)
    return pending


def cmd_status(args, db_manager):
    """Show which migrations are applied and which are pending."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    migrations_dir = db_manager.get_migrations_dir()
    available = get_available_migrations(migrations_dir)
    if not available:
        logger.info("No migrations found.")
        return

    with db_manager.connect() as conn:
        pending = set(get_pending_migrations(conn, migrations_dir))

    for migration in available:
        logger.info(f"{'PENDING' if migration in pending else 'APPLIED':<8} {migration}")

    logger.info(
        f"\n{len(available)} migration(s): "
        f"{len(available) - len(pending)} applied, {len(pending)} pending"
    )


def cmd_apply(args, db_manager):
    """Apply pending migrations, creating the database if needed."""
    with db_manager.connect() as conn:
        applied = apply_pending_migrations(conn, db_manager.get_migrations_dir())

    if applied:
        logger.info(f"Successfully applied {len(applied)} migration(s).")
    else:
        logger.info("No pending migrations.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    migrate_subparsers.add_parser(
        "status", help="Show migration status"
    ).set_defaults(func=cmd_status)

    migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    ).set_defaults(func=cmd_apply)
