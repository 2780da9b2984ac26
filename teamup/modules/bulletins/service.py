from teamup.core.errors import NotFoundError, InvalidArgumentError
from teamup.modules.bulletins.repository import BulletinRepository
from teamup.modules.bulletins.schemas import BulletinCreate, BulletinUpdate, BulletinResponse
from teamup.modules.groups.repository import GroupRepository
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class BulletinService:
    def __init__(self, bulletins: BulletinRepository, groups: GroupRepository):
        self.bulletins = bulletins
        self.groups = groups

    def create_bulletin(self, bulletin_data: BulletinCreate) -> BulletinResponse:
        """Create a new bulletin; every referenced group must exist"""
        self._check_group_ids(bulletin_data.group_ids)
        bulletin = self.bulletins.create(bulletin_data)
        logger.info(f"Created bulletin {bulletin.id} by {bulletin.author_id}")
        return bulletin

    def get_bulletin_by_id(self, bulletin_id: str) -> BulletinResponse:
        return self.bulletins.get_by_id(bulletin_id)

    def list_bulletins(self, limit: Optional[int] = None, offset: int = 0) -> List[BulletinResponse]:
        return self.bulletins.list_all(limit=limit, offset=offset)

    def list_by_author(self, author_id: str) -> List[BulletinResponse]:
        return self.bulletins.list_by_author(author_id)

    def list_by_group(self, group_id: str) -> List[BulletinResponse]:
        return self.bulletins.list_by_group_id(group_id)

    def update_bulletin(self, bulletin_id: str, bulletin_data: BulletinUpdate) -> BulletinResponse:
        """Patch a bulletin; only supplied fields change"""
        patch = bulletin_data.to_patch()
        if not patch:
            raise InvalidArgumentError("no fields to update")
        if "group_ids" in patch:
            self._check_group_ids(patch["group_ids"])
        return self.bulletins.update(bulletin_id, patch)

    def delete_bulletin(self, bulletin_id: str) -> None:
        if not self.bulletins.delete(bulletin_id):
            raise NotFoundError(f"Bulletin {bulletin_id} not found")
        logger.info(f"Deleted bulletin {bulletin_id}")

    def _check_group_ids(self, group_ids: List[str]) -> None:
        # reconciliation treats an unknown id as a deleted group
        wanted = set(group_ids)
        unknown = sorted(wanted - set(self.groups.list_ids(sorted(wanted))))
        if unknown:
            raise InvalidArgumentError(f"unknown group id(s): {', '.join(unknown)}")
