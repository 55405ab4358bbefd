#!/usr/bin/env python
"""Script to fold legacy direct threads into pair-keyed threads.

Older clients created direct threads under generated ids, so a pair could end
up with several threads. This script:
1. Reads every direct thread from the chats table
2. For each pair with a thread under a non-canonical id, upserts the
   canonical thread carrying the most recent summary
3. Moves the legacy threads' messages to the canonical thread
4. Deletes the legacy threads

Usage:
    python scripts/migrate_direct_threads.py [--dry-run]

Requirements:
    - SUPABASE_URL and SUPABASE_SECRET_KEY environment variables must be set
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from collabmatch.core.errors import InvalidDocumentError
from collabmatch.core.supabase import get_supabase_client
from collabmatch.models import Thread
from collabmatch.services.thread_service import DirectThreadMerge, plan_direct_thread_merges
from collabmatch.store.supabase_store import SupabaseStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_direct_threads(client) -> list[Thread]:
    """Read all non-group threads, skipping rows that fail to decode."""
    result = client.table(SupabaseStore.CHATS).select("*").eq("is_group", False).execute()
    threads: list[Thread] = []
    for row in result.data or []:
        try:
            threads.append(Thread.from_document(row))
        except InvalidDocumentError as e:
            logger.warning("Skipping unreadable thread %s: %s", row.get("id"), e)
    return threads


def apply_merge(client, merge: DirectThreadMerge) -> None:
    """Write one merge: canonical thread first, then messages, then deletes."""
    canonical = merge.canonical
    client.table(SupabaseStore.CHATS).upsert(canonical.to_document(), on_conflict="id").execute()
    client.table(SupabaseStore.MESSAGES).update({"thread_id": canonical.id}).in_(
        "thread_id", merge.legacy_ids
    ).execute()
    client.table(SupabaseStore.CHATS).delete().in_("id", merge.legacy_ids).execute()


async def main() -> None:
    """Plan and apply direct thread merges."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing anything",
    )
    args = parser.parse_args()

    client = get_supabase_client()
    threads = await asyncio.to_thread(load_direct_threads, client)
    merges = plan_direct_thread_merges(threads)
    logger.info("Read %d direct threads, %d pairs need migration", len(threads), len(merges))

    for merge in merges:
        action = "update" if merge.canonical_exists else "create"
        logger.info(
            "%s %s <- %s",
            action,
            merge.canonical.id,
            ", ".join(merge.legacy_ids),
        )
        if args.dry_run:
            continue
        await asyncio.to_thread(apply_merge, client, merge)

    if args.dry_run:
        logger.info("Dry run: no changes written")
    else:
        logger.info("Migrated %d pairs", len(merges))


if __name__ == "__main__":
    asyncio.run(main())
