from supabase import Client
from teamup.core.errors import NotFoundError, InternalError
from teamup.modules.members.schemas import MemberResponse
from typing import List
import logging

logger = logging.getLogger(__name__)

TABLE = "members"
# password is never read by this service
COLUMNS = "id, username, first_name, last_name, email, bio, skills"


class MemberRepository:
    """Member Store: read-only access to member profiles."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_by_id(self, member_id: str) -> MemberResponse:
        try:
            result = self.supabase.table(TABLE)\
                .select(COLUMNS)\
                .eq("id", member_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting member {member_id}: {str(e)}")
            raise InternalError(str(e))

        if not result.data:
            raise NotFoundError(f"Member {member_id} not found")
        return MemberResponse(**result.data[0])

    def list_by_ids(self, member_ids: List[str]) -> List[MemberResponse]:
        if not member_ids:
            return []
        try:
            result = self.supabase.table(TABLE)\
                .select(COLUMNS)\
                .in_("id", member_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing members: {str(e)}")
            raise InternalError(str(e))
        return [MemberResponse(**member) for member in result.data or []]
