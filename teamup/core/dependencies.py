"""
Core dependencies for requester identification and group authorization
"""

from abc import ABC, abstractmethod
from fastapi import Header, HTTPException, status
from teamup.config import settings
from teamup.modules.groups.schemas import GroupResponse
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)

MEMBER_ID_HEADER = "X-Member-ID"


def get_requester_id(
    x_member_id: Optional[str] = Header(None, alias=MEMBER_ID_HEADER)
) -> str:
    """Member id of the caller, as forwarded by the gateway after authentication"""
    requester_id = (x_member_id or "").strip()
    if not requester_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing member identification header"
        )
    return requester_id


class GroupDeletePolicy(ABC):
    """Decides whether a requester may delete a group"""

    @abstractmethod
    def is_allowed(self, group: GroupResponse, requester_id: str) -> bool:
        ...


class OwnerOrAdminPolicy(GroupDeletePolicy):
    """Group owner or a configured admin member may delete"""

    def __init__(self, admin_member_ids: Iterable[str] = ()):
        self.admin_member_ids = frozenset(admin_member_ids)

    def is_allowed(self, group: GroupResponse, requester_id: str) -> bool:
        if requester_id == group.owner_id:
            return True
        return requester_id in self.admin_member_ids


def get_delete_policy() -> GroupDeletePolicy:
    return OwnerOrAdminPolicy(settings.get_admin_member_ids())
