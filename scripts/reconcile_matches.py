#!/usr/bin/env python
"""Script to finish match promotions that failed at like time.

This script:
1. Reads every user profile
2. Re-derives each user's mutual likes from the likes table
3. Ensures every mutual pair has its direct thread

Usage:
    python scripts/reconcile_matches.py

Requirements:
    - SUPABASE_URL and SUPABASE_SECRET_KEY environment variables must be set

Note:
    - Safe to run repeatedly; existing threads are left untouched
    - Retryable failures for a pair are logged and skipped
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from collabmatch.core.errors import StoreError
from collabmatch.services.match_service import MatchService
from collabmatch.store.factory import create_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Identity used for reads that are not made on behalf of a user
MAINTENANCE_CALLER = "maintenance"
MAX_USERS = 100_000


async def main() -> None:
    """Reconcile matches for every user."""
    users = await create_store(MAINTENANCE_CALLER).list_users(limit=MAX_USERS)
    logger.info("Reconciling matches for %d users", len(users))

    total_threads = 0
    failed_users = 0
    for user in users:
        try:
            threads = await MatchService(create_store(user.id)).reconcile(user.id)
        except StoreError as e:
            failed_users += 1
            logger.error("Reconcile failed for %s: %s", user.id, e.message)
            continue
        total_threads += len(threads)

    # Every mutual pair is counted once from each side
    logger.info(
        "Done: %d match threads confirmed, %d users failed",
        total_threads // 2,
        failed_users,
    )
    if failed_users:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
