"""
Database Migrator Entry Point.

Applies the SQL files in ``migrations/`` that have not been applied yet.
"""
import asyncio
import sys
from pathlib import Path

import asyncpg
from dotenv import load_dotenv


# Load environment variables before reading settings
load_dotenv()

from config.settings import settings  # noqa: E402


MIGRATIONS_DIR = Path(__file__).parent.parent.parent / "migrations"


async def get_applied_migrations(conn: asyncpg.Connection) -> set[str]:
    """
    Get names of already applied migrations.

    Args:
        conn: Database connection.

    Returns:
        Set of applied migration names.
    """
    await conn.execute("""
        CREATE TABLE IF NOT EXISTS _migrations (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL UNIQUE,
            applied_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
        )
    """)

    rows = await conn.fetch("SELECT name FROM _migrations")
    return {row["name"] for row in rows}


def pending_migrations(applied: set[str], directory: Path = MIGRATIONS_DIR) -> list[Path]:
    """
    List migration files not applied yet, in name order.

    Args:
        applied: Names already recorded in the tracking table.
        directory: Folder holding ``*.sql`` files.

    Returns:
        Paths of pending migrations.
    """
    if not directory.exists():
        return []
    return [f for f in sorted(directory.glob("*.sql")) if f.name not in applied]


async def apply_migration(conn: asyncpg.Connection, migration_path: Path) -> None:
    """
    Apply a single migration inside a transaction.

    Args:
        conn: Database connection.
        migration_path: Path to migration SQL file.
    """
    print(f"Applying migration: {migration_path.name}")

    async with conn.transaction():
        await conn.execute(migration_path.read_text())
        await conn.execute(
            "INSERT INTO _migrations (name) VALUES ($1)",
            migration_path.name,
        )

    print(f"  ✓ Applied: {migration_path.name}")


async def run_migrations(dry_run: bool = False) -> None:
    """
    Run all pending migrations.

    Args:
        dry_run: Only list pending migrations.
    """
    conn = await asyncpg.connect(settings.DATABASE_URL)

    try:
        applied = await get_applied_migrations(conn)
        pending = pending_migrations(applied)

        if not pending:
            print("All migrations already applied")
            return

        print(f"Pending migrations: {len(pending)}")
        for migration_path in pending:
            if dry_run:
                print(f"  - {migration_path.name}")
            else:
                await apply_migration(conn, migration_path)
    finally:
        await conn.close()


def main() -> None:
    """Main entry point."""
    args = sys.argv[1:]
    if args and args[0] not in ("status",):
        print(f"Unknown command: {args[0]}")
        print("Usage:")
        print("  PYTHONPATH=. python cmd/migrator/main.py          # Apply pending migrations")
        print("  PYTHONPATH=. python cmd/migrator/main.py status   # List pending migrations")
        sys.exit(1)

    asyncio.run(run_migrations(dry_run=bool(args)))


if __name__ == "__main__":
    main()
