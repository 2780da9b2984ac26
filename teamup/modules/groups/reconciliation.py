import asyncio
import logging
from typing import Optional
from teamup.config import settings
from teamup.database.supabase_client import SupabaseClient
from teamup.modules.bulletins.repository import BulletinRepository
from teamup.modules.groups.repository import GroupRepository

logger = logging.getLogger(__name__)


def remove_orphaned_bulletins(groups: GroupRepository, bulletins: BulletinRepository) -> int:
    """Delete bulletins that still reference deleted groups. Returns bulletins removed."""
    referenced = bulletins.list_referenced_group_ids()
    if not referenced:
        return 0
    existing = set(groups.list_ids(referenced))
    orphaned = [group_id for group_id in referenced if group_id not in existing]
    removed = 0
    for group_id in orphaned:
        count = bulletins.delete_by_group_id(group_id)
        logger.info(f"Removed {count} orphaned bulletin(s) for deleted group {group_id}")
        removed += count
    return removed


async def reconcile_orphaned_bulletins():
    """One reconciliation pass using the service-role client."""
    try:
        client = SupabaseClient.get_service_client()
        removed = await asyncio.to_thread(
            remove_orphaned_bulletins, GroupRepository(client), BulletinRepository(client)
        )
        if removed:
            logger.info(f"Reconciliation removed {removed} orphaned bulletin(s)")
        else:
            logger.debug("No orphaned bulletins found")
    except Exception as e:
        logger.error(f"Error reconciling orphaned bulletins: {str(e)}")


async def reconciliation_loop(interval_seconds: Optional[int] = None):
    """Background task that periodically removes bulletins left behind by group deletes"""
    interval = interval_seconds or settings.reconcile_interval_seconds
    while True:
        await reconcile_orphaned_bulletins()
        await asyncio.sleep(interval)


async def stop_reconciliation(task: "asyncio.Task") -> None:
    """Cancel the loop and wait for it to unwind"""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        logger.info("Bulletin reconciliation stopped")
