from teamup.core.dependencies import GroupDeletePolicy, OwnerOrAdminPolicy
from teamup.core.errors import (
    ServiceError, NotFoundError, ForbiddenError, InvalidArgumentError,
    UnavailableError, InternalError
)
from teamup.modules.bulletins.repository import BulletinRepository
from teamup.modules.groups.repository import GroupRepository
from teamup.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupDeleteResult
)
from teamup.modules.members.repository import MemberRepository
from teamup.modules.members.schemas import MemberResponse
from teamup.modules.notifications.dispatcher import NotificationDispatcher
from teamup.modules.notifications.publisher import NotificationPublisher
from teamup.modules.notifications.schemas import NotificationMessage, NotificationType
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Notification"


class GroupService:
    """
    Group lifecycle: mutations against the Group Store plus their side effects.

    Create and update hand a notification to the dispatcher and return without
    waiting on it. Notify sends straight through the publisher and waits.
    Delete removes the group, then every bulletin that references it; the two
    steps are not atomic and a failed bulletin cleanup leaves the group
    deleted (see teamup.modules.groups.reconciliation).
    """

    def __init__(
        self,
        groups: GroupRepository,
        bulletins: BulletinRepository,
        members: MemberRepository,
        dispatcher: Optional[NotificationDispatcher] = None,
        publisher: Optional[NotificationPublisher] = None,
        delete_policy: Optional[GroupDeletePolicy] = None,
        operator_email: str = "operator@teamup.local",
    ):
        self.groups = groups
        self.bulletins = bulletins
        self.members = members
        self.dispatcher = dispatcher
        self.publisher = publisher
        self.delete_policy = delete_policy or OwnerOrAdminPolicy()
        self.operator_email = operator_email

    def create_group(self, group_data: GroupCreate) -> GroupResponse:
        """Create a new group and notify the operator in the background"""
        group = self.groups.create(group_data)
        logger.info(f"Created group {group.id} owned by {group.owner_id}")

        owner = self._owner_display_name(group.owner_id)
        self._dispatch(
            subject=f"New group created: {group.title}",
            message=f'Group "{group.title}" ({group.id}) was created by {owner}.',
        )
        return group

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        return self.groups.get_by_id(group_id)

    def list_groups(self, limit: Optional[int] = None, offset: int = 0) -> List[GroupResponse]:
        return self.groups.list_all(limit=limit, offset=offset)

    def list_groups_by_owner(self, owner_id: str) -> List[GroupResponse]:
        return self.groups.list_by_owner(owner_id)

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Patch a group: only supplied fields change, owner_id never does"""
        patch = group_data.to_patch()
        if not patch:
            raise InvalidArgumentError("no fields to update")

        group = self.groups.update(group_id, patch)
        logger.info(f"Updated group {group_id}: {', '.join(sorted(patch))}")

        self._dispatch(
            subject=f"Group updated: {group.title}",
            message=f'Group "{group.title}" ({group.id}) was updated. Changed fields: {", ".join(sorted(patch))}.',
        )
        return group

    def delete_group(self, group_id: str, requester_id: str) -> GroupDeleteResult:
        """Delete a group and then every bulletin that references it"""
        group = self.groups.get_by_id(group_id)

        if not self.delete_policy.is_allowed(group, requester_id):
            logger.warning(f"Member {requester_id} denied deleting group {group_id}")
            raise ForbiddenError("You do not have permission to delete this group")

        if not self.groups.delete(group_id):
            # Removed concurrently between lookup and delete
            raise NotFoundError(f"Group {group_id} not found")
        logger.info(f"Deleted group {group_id} (requested by {requester_id})")

        try:
            removed = self.bulletins.delete_by_group_id(group_id)
        except ServiceError as e:
            logger.error(f"Group {group_id} deleted but bulletin cleanup failed: {e.message}")
            raise InternalError(f"group deleted but bulletin cleanup failed: {e.message}")
        logger.info(f"Deleted {removed} bulletin(s) referencing group {group_id}")

        return GroupDeleteResult(group_id=group_id, bulletins_deleted=removed)

    def list_group_members(self, group_id: str) -> List[MemberResponse]:
        group = self.groups.get_by_id(group_id)
        return self.members.list_by_ids(group.members)

    def notify_group_members(self, group_id: str, subject: str, message: str) -> NotificationMessage:
        """
        Publish a notification about a group and wait for the broker to accept it.

        The recipient is the operator address, not the group's members.
        """
        if not message or not message.strip():
            raise InvalidArgumentError("message is required")

        group = self.groups.get_by_id(group_id)

        if self.publisher is None:
            raise UnavailableError("notification publisher is not configured")

        notification = self._message(subject.strip() if subject else "", message)
        try:
            self.publisher.publish([notification])
        except Exception as e:
            logger.error(f"Failed to publish notification for group {group.id}: {str(e)}")
            raise UnavailableError(f"failed to publish notification: {str(e)}")
        logger.info(f"Published notification for group {group.id}")
        return notification

    def _message(self, subject: str, message: str) -> NotificationMessage:
        return NotificationMessage(
            type=NotificationType.EMAIL,
            to=self.operator_email,
            subject=subject or DEFAULT_SUBJECT,
            message=message,
        )

    def _dispatch(self, subject: str, message: str) -> None:
        if self.dispatcher is None:
            logger.info(f"Notification publisher not configured, skipping: {subject}")
            return
        self.dispatcher.submit([self._message(subject, message)])

    def _owner_display_name(self, owner_id: str) -> str:
        try:
            return self.members.get_by_id(owner_id).display_name
        except ServiceError as e:
            logger.debug(f"Could not resolve owner {owner_id}: {e.message}")
            return owner_id
