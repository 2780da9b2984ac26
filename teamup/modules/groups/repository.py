from supabase import Client
from teamup.core.errors import NotFoundError, InternalError
from teamup.database.supabase_client import fetch_all
from teamup.modules.groups.schemas import GroupCreate, GroupResponse
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

TABLE = "groups"


class GroupRepository:
    """Group Store: persistence for group rows in Supabase."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, group_data: GroupCreate) -> GroupResponse:
        try:
            result = self.supabase.table(TABLE).insert(
                group_data.model_dump(mode="json")
            ).execute()
        except Exception as e:
            logger.error(f"Error creating group: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise InternalError("Failed to create group")
        return GroupResponse(**result.data[0])

    def get_by_id(self, group_id: str) -> GroupResponse:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting group {group_id}: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise NotFoundError(f"Group {group_id} not found")
        return GroupResponse(**result.data[0])

    def exists(self, group_id: str) -> bool:
        try:
            self.get_by_id(group_id)
        except NotFoundError:
            return False
        return True

    def list_by_owner(self, owner_id: str) -> List[GroupResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("owner_id", owner_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing groups for owner {owner_id}: {str(e)}")
            raise InternalError(str(e))
        return [GroupResponse(**group) for group in result.data or []]

    def _ordered(self):
        return self.supabase.table(TABLE)\
            .select("*")\
            .order("created_at", desc=True)\
            .order("id")

    def list_all(self, limit: Optional[int] = None, offset: int = 0) -> List[GroupResponse]:
        """One page when limit is given, otherwise every row."""
        try:
            if limit is not None:
                rows = self._ordered().range(offset, offset + limit - 1).execute().data
            else:
                rows = fetch_all(self._ordered)
        except Exception as e:
            logger.error(f"Error listing groups: {str(e)}")
            raise InternalError(str(e))
        return [GroupResponse(**group) for group in rows or []]

    def list_ids(self, group_ids: List[str]) -> List[str]:
        """Return the subset of group_ids that still exist."""
        if not group_ids:
            return []
        try:
            result = self.supabase.table(TABLE)\
                .select("id")\
                .in_("id", group_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error checking group ids: {str(e)}")
            raise InternalError(str(e))
        return [row["id"] for row in result.data or []]

    def update(self, group_id: str, patch: Dict[str, Any]) -> GroupResponse:
        """Apply a partial update; keys absent from patch keep their stored values."""
        try:
            result = self.supabase.table(TABLE)\
                .update(patch)\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating group {group_id}: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise NotFoundError(f"Group {group_id} not found")
        return GroupResponse(**result.data[0])

    def delete(self, group_id: str) -> bool:
        try:
            result = self.supabase.table(TABLE)\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {str(e)}")
            raise InternalError(str(e))
        return bool(result.data)
