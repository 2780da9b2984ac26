from supabase import Client
from teamup.core.errors import NotFoundError, InternalError
from teamup.database.supabase_client import fetch_all
from teamup.modules.bulletins.schemas import BulletinCreate, BulletinResponse
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

TABLE = "bulletins"


class BulletinRepository:
    """Bulletin Store: persistence for bulletin rows in Supabase."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, bulletin_data: BulletinCreate) -> BulletinResponse:
        try:
            result = self.supabase.table(TABLE).insert(
                bulletin_data.model_dump(mode="json")
            ).execute()
        except Exception as e:
            logger.error(f"Error creating bulletin: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise InternalError("Failed to create bulletin")
        return BulletinResponse(**result.data[0])

    def get_by_id(self, bulletin_id: str) -> BulletinResponse:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("id", bulletin_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting bulletin {bulletin_id}: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise NotFoundError(f"Bulletin {bulletin_id} not found")
        return BulletinResponse(**result.data[0])

    def _ordered(self, columns: str = "*"):
        return self.supabase.table(TABLE)\
            .select(columns)\
            .order("created_at", desc=True)\
            .order("id")

    def list_all(self, limit: Optional[int] = None, offset: int = 0) -> List[BulletinResponse]:
        """One page when limit is given, otherwise every row."""
        try:
            if limit is not None:
                rows = self._ordered().range(offset, offset + limit - 1).execute().data
            else:
                rows = fetch_all(self._ordered)
        except Exception as e:
            logger.error(f"Error listing bulletins: {str(e)}")
            raise InternalError(str(e))
        return [BulletinResponse(**bulletin) for bulletin in rows or []]

    def list_by_author(self, author_id: str) -> List[BulletinResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("author_id", author_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing bulletins for author {author_id}: {str(e)}")
            raise InternalError(str(e))
        return [BulletinResponse(**bulletin) for bulletin in result.data or []]

    def list_by_group_id(self, group_id: str) -> List[BulletinResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .contains("group_ids", [group_id])\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing bulletins for group {group_id}: {str(e)}")
            raise InternalError(str(e))
        return [BulletinResponse(**bulletin) for bulletin in result.data or []]

    def list_referenced_group_ids(self) -> List[str]:
        """Distinct group ids referenced by any bulletin."""
        try:
            rows = fetch_all(lambda: self._ordered("group_ids"))
        except Exception as e:
            logger.error(f"Error listing bulletin group references: {str(e)}")
            raise InternalError(str(e))
        referenced = set()
        for row in rows:
            referenced.update(row.get("group_ids") or [])
        return sorted(referenced)

    def update(self, bulletin_id: str, patch: Dict[str, Any]) -> BulletinResponse:
        try:
            result = self.supabase.table(TABLE)\
                .update(patch)\
                .eq("id", bulletin_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating bulletin {bulletin_id}: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise NotFoundError(f"Bulletin {bulletin_id} not found")
        return BulletinResponse(**result.data[0])

    def delete(self, bulletin_id: str) -> bool:
        try:
            result = self.supabase.table(TABLE)\
                .delete()\
                .eq("id", bulletin_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting bulletin {bulletin_id}: {str(e)}")
            raise InternalError(str(e))
        return bool(result.data)

    def delete_by_group_id(self, group_id: str) -> int:
        """Delete every bulletin whose group_ids contains group_id. Returns rows removed."""
        try:
            result = self.supabase.table(TABLE)\
                .delete()\
                .contains("group_ids", [group_id])\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting bulletins for group {group_id}: {str(e)}")
            raise InternalError(str(e))
        return len(result.data or [])
