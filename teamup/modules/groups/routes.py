from fastapi import APIRouter, Depends, Query
from teamup.config import settings
from teamup.database.supabase_client import get_supabase
from teamup.core.dependencies import get_requester_id, get_delete_policy, GroupDeletePolicy
from teamup.modules.bulletins.repository import BulletinRepository
from teamup.modules.groups.repository import GroupRepository
from teamup.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupDeleteResult, GroupNotifyRequest
)
from teamup.modules.groups.service import GroupService
from teamup.modules.members.repository import MemberRepository
from teamup.modules.members.schemas import MemberResponse
from teamup.modules.notifications.dispatcher import (
    NotificationDispatcher, get_notification_dispatcher, get_notification_publisher
)
from teamup.modules.notifications.publisher import NotificationPublisher
from teamup.modules.notifications.schemas import NotificationMessage
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/group", tags=["groups"])


def get_group_service(
    supabase: Client = Depends(get_supabase),
    dispatcher: Optional[NotificationDispatcher] = Depends(get_notification_dispatcher),
    publisher: Optional[NotificationPublisher] = Depends(get_notification_publisher),
    delete_policy: GroupDeletePolicy = Depends(get_delete_policy)
) -> GroupService:
    return GroupService(
        GroupRepository(supabase),
        BulletinRepository(supabase),
        MemberRepository(supabase),
        dispatcher=dispatcher,
        publisher=publisher,
        delete_policy=delete_policy,
        operator_email=settings.notification_operator_email,
    )


@router.post("", response_model=GroupResponse, status_code=201)
def create_group(
    group_data: GroupCreate,
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the operator is notified in the background"""
    return service.create_group(group_data)


@router.get("", response_model=List[GroupResponse])
def list_groups(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    service: GroupService = Depends(get_group_service)
):
    return service.list_groups(limit=limit, offset=offset)


@router.get("/owner/{owner_id}", response_model=List[GroupResponse])
def list_groups_by_owner(
    owner_id: str,
    service: GroupService = Depends(get_group_service)
):
    return service.list_groups_by_owner(owner_id)


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    return service.get_group_by_id(group_id)


@router.put("/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: str,
    group_data: GroupUpdate,
    service: GroupService = Depends(get_group_service)
):
    """Partial update: fields left out of the body are unchanged"""
    return service.update_group(group_id, group_data)


@router.delete("/{group_id}", response_model=GroupDeleteResult)
def delete_group(
    group_id: str,
    requester_id: str = Depends(get_requester_id),
    service: GroupService = Depends(get_group_service)
):
    """Delete group and the bulletins that reference it (group owner or admin only)"""
    return service.delete_group(group_id, requester_id)


@router.get("/{group_id}/members", response_model=List[MemberResponse])
def list_group_members(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    return service.list_group_members(group_id)


@router.post("/{group_id}/notify", response_model=NotificationMessage, status_code=202)
def notify_group_members(
    group_id: str,
    notify_data: GroupNotifyRequest,
    service: GroupService = Depends(get_group_service)
):
    """Send a notification about the group to the operator address"""
    return service.notify_group_members(group_id, notify_data.subject, notify_data.message)
