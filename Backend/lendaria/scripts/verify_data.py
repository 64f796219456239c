#!/usr/bin/env python3
"""
Record store verification
Checks connectivity to the hosted backend and reports how many jobs and
talents it holds. Exits 1 when credentials are missing or a table cannot be
read.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from dotenv import load_dotenv

from lendaria.core.config import Settings
from lendaria.core.logging import get_logger
from lendaria.infrastructure.database import JOBS, TALENTS, RecordStore, create_record_store

logger = get_logger("lendaria.scripts.verify_data")

SAMPLE_SIZE = 3


async def verify(store: RecordStore) -> bool:
    healthy = True
    try:
        jobs = await store.count(JOBS)
        if not jobs.ok:
            logger.error(f"Error fetching jobs: {jobs.error.message}", extra={"table": JOBS})
            healthy = False
        else:
            logger.info(f"Jobs found: {jobs.count}", extra={"table": JOBS})
            sample = await store.select(JOBS, columns="id,title", limit=SAMPLE_SIZE)
            if sample.ok:
                logger.info(f"Jobs data sample: {sample.data}", extra={"table": JOBS})

        talents = await store.count(TALENTS)
        if not talents.ok:
            logger.error(f"Error fetching talents: {talents.error.message}", extra={"table": TALENTS})
            healthy = False
        else:
            logger.info(f"Talents found: {talents.count}", extra={"table": TALENTS})
    finally:
        await store.close()
    return healthy


def main(argv: Optional[Sequence[str]] = None, *, store: Optional[RecordStore] = None) -> int:
    parser = argparse.ArgumentParser(description="Check record store connectivity and record counts")
    parser.add_argument("--env-file", default=".env.local", help="dotenv file with SUPABASE_URL / SUPABASE_ANON_KEY")
    args = parser.parse_args(argv)

    load_dotenv(args.env_file)
    if store is None:
        settings = Settings()
        if not settings.record_store_configured:
            logger.error("Missing Supabase credentials in environment variables.")
            return 1
        logger.info(f"Checking connection to: {settings.SUPABASE_URL}")
        store = create_record_store(settings)

    return 0 if asyncio.run(verify(store)) else 1


if __name__ == "__main__":
    raise SystemExit(main())
