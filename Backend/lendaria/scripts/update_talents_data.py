#!/usr/bin/env python3
"""
Talent data migration
Renames seeded demo profiles and refreshes their talent records.
Each step looks the profile up by full name; missing profiles are skipped,
so the script can be re-run safely. Any store error aborts with exit code 1.
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from lendaria.core.config import Settings
from lendaria.core.exceptions import DatabaseError
from lendaria.core.logging import get_logger
from lendaria.infrastructure.database import PROFILES, TALENTS, RecordStore, StoreResult, create_record_store

logger = get_logger("lendaria.scripts.update_talents_data")


@dataclass(frozen=True)
class TalentMigration:
    current_name: str
    profile_changes: Dict[str, Any] = field(default_factory=dict)
    talent_changes: Dict[str, Any] = field(default_factory=dict)
    done_message: str = ""
    missing_message: str = ""


MIGRATIONS: List[TalentMigration] = [
    TalentMigration(
        current_name="Nilson Silva",
        talent_changes={"hourly_rate": "8000"},
        done_message="Updated Nilson Silva salary.",
        missing_message="Nilson Silva not found.",
    ),
    TalentMigration(
        current_name="Ana Clara",
        profile_changes={
            "full_name": "Vitor Silva",
            "email": "vitor.silva@example.com",
            "avatar_url": "https://i.pravatar.cc/150?u=vitor",
        },
        talent_changes={
            "hourly_rate": "12000",
            "bio": "Focado em estruturar data lakes para LLMs e pipelines de RAG.",
        },
        done_message="Updated Ana Clara -> Vitor Silva.",
        missing_message="Ana Clara not found (maybe already updated).",
    ),
    TalentMigration(
        current_name="Carlos Mendes",
        profile_changes={
            "full_name": "Ana Marques",
            "email": "ana.marques@example.com",
            "avatar_url": "https://i.pravatar.cc/150?u=ana",
        },
        talent_changes={
            "hourly_rate": "10000",
            "bio": "Copywriter sênior migrando para IA. Cria personas complexas e fluxos de conversa naturais.",
        },
        done_message="Updated Carlos Mendes -> Ana Marques.",
        missing_message="Carlos Mendes not found (maybe already updated).",
    ),
]


def _checked(result: StoreResult, action: str) -> StoreResult:
    if not result.ok:
        raise DatabaseError(f"{action}: {result.error.message}", {"code": result.error.code})
    return result


async def apply_migration(store: RecordStore, migration: TalentMigration) -> bool:
    """Apply one migration; returns False when the profile does not exist."""
    found = _checked(
        await store.find_first(PROFILES, {"full_name": migration.current_name}, columns="id,full_name"),
        f"lookup {migration.current_name}",
    )
    if found.data is None:
        logger.info(migration.missing_message)
        return False

    profile_id = found.data["id"]
    if migration.profile_changes:
        _checked(await store.update(PROFILES, profile_id, migration.profile_changes), f"update profile {profile_id}")
    if migration.talent_changes:
        _checked(await store.update(TALENTS, profile_id, migration.talent_changes), f"update talent {profile_id}")
    logger.info(migration.done_message)
    return True


async def run_migrations(store: RecordStore, migrations: Sequence[TalentMigration] = MIGRATIONS) -> int:
    logger.info("Updating talents data...")
    applied = 0
    try:
        for migration in migrations:
            if await apply_migration(store, migration):
                applied += 1
    finally:
        await store.close()
    return applied


def main(argv: Optional[Sequence[str]] = None, *, store: Optional[RecordStore] = None) -> int:
    parser = argparse.ArgumentParser(description="Refresh seeded talent profiles")
    parser.add_argument("--env-file", default=".env.local", help="dotenv file with SUPABASE_URL / SUPABASE_ANON_KEY")
    args = parser.parse_args(argv)

    load_dotenv(args.env_file)
    store = store or create_record_store(Settings())
    try:
        applied = asyncio.run(run_migrations(store))
    except DatabaseError as exc:
        logger.error(exc.message, extra={"event": "talent_migration_failed"})
        return 1
    logger.info({"event": "talent_migration_finished", "applied": applied})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
