import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from teamup.core.errors import InternalError, NotFoundError
from teamup.modules.bulletins.schemas import BulletinCreate, BulletinResponse
from teamup.modules.groups.schemas import GroupCreate, GroupResponse
from teamup.modules.members.schemas import MemberResponse
from teamup.modules.notifications.dispatcher import NotificationDispatcher
from teamup.modules.notifications.publisher import NotificationPublisher, PublishError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FakeGroupRepository:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}

    def create(self, group_data: GroupCreate) -> GroupResponse:
        row = group_data.model_dump(mode="json")
        row["id"] = str(uuid.uuid4())
        row["created_at"] = _now()
        self.rows[row["id"]] = row
        return GroupResponse(**row)

    def get_by_id(self, group_id: str) -> GroupResponse:
        if group_id not in self.rows:
            raise NotFoundError(f"Group {group_id} not found")
        return GroupResponse(**self.rows[group_id])

    def exists(self, group_id: str) -> bool:
        return group_id in self.rows

    def list_by_owner(self, owner_id: str) -> List[GroupResponse]:
        return [GroupResponse(**r) for r in self.rows.values() if r["owner_id"] == owner_id]

    def list_all(self, limit: Optional[int] = None, offset: int = 0) -> List[GroupResponse]:
        groups = [GroupResponse(**r) for r in self.rows.values()]
        if limit is not None:
            groups = groups[offset:offset + limit]
        return groups

    def list_ids(self, group_ids: List[str]) -> List[str]:
        return [g for g in group_ids if g in self.rows]

    def update(self, group_id: str, patch: Dict[str, Any]) -> GroupResponse:
        if group_id not in self.rows:
            raise NotFoundError(f"Group {group_id} not found")
        self.rows[group_id].update(patch)
        return GroupResponse(**self.rows[group_id])

    def delete(self, group_id: str) -> bool:
        return self.rows.pop(group_id, None) is not None


class FakeBulletinRepository:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.delete_by_group_calls: List[str] = []
        self.fail_delete_by_group = False

    def create(self, bulletin_data: BulletinCreate) -> BulletinResponse:
        row = bulletin_data.model_dump(mode="json")
        row["id"] = str(uuid.uuid4())
        row["created_at"] = _now()
        self.rows[row["id"]] = row
        return BulletinResponse(**row)

    def get_by_id(self, bulletin_id: str) -> BulletinResponse:
        if bulletin_id not in self.rows:
            raise NotFoundError(f"Bulletin {bulletin_id} not found")
        return BulletinResponse(**self.rows[bulletin_id])

    def list_all(self, limit: Optional[int] = None, offset: int = 0) -> List[BulletinResponse]:
        return [BulletinResponse(**r) for r in self.rows.values()]

    def list_by_author(self, author_id: str) -> List[BulletinResponse]:
        return [BulletinResponse(**r) for r in self.rows.values() if r["author_id"] == author_id]

    def list_by_group_id(self, group_id: str) -> List[BulletinResponse]:
        return [BulletinResponse(**r) for r in self.rows.values() if group_id in r["group_ids"]]

    def list_referenced_group_ids(self) -> List[str]:
        return sorted({g for r in self.rows.values() for g in r["group_ids"]})

    def update(self, bulletin_id: str, patch: Dict[str, Any]) -> BulletinResponse:
        if bulletin_id not in self.rows:
            raise NotFoundError(f"Bulletin {bulletin_id} not found")
        self.rows[bulletin_id].update(patch)
        return BulletinResponse(**self.rows[bulletin_id])

    def delete(self, bulletin_id: str) -> bool:
        return self.rows.pop(bulletin_id, None) is not None

    def delete_by_group_id(self, group_id: str) -> int:
        self.delete_by_group_calls.append(group_id)
        if self.fail_delete_by_group:
            raise InternalError("connection reset")
        matching = [k for k, r in self.rows.items() if group_id in r["group_ids"]]
        for key in matching:
            del self.rows[key]
        return len(matching)


class FakeMemberRepository:
    def __init__(self, members: Optional[List[MemberResponse]] = None):
        self.members = {m.id: m for m in members or []}

    def get_by_id(self, member_id: str) -> MemberResponse:
        if member_id not in self.members:
            raise NotFoundError(f"Member {member_id} not found")
        return self.members[member_id]

    def list_by_ids(self, member_ids: List[str]) -> List[MemberResponse]:
        return [self.members[m] for m in member_ids if m in self.members]


class RecordingPublisher(NotificationPublisher):
    def __init__(self):
        self.batches = []

    def publish(self, messages):
        self.batches.append(list(messages))

    @property
    def messages(self):
        return [m for batch in self.batches for m in batch]


class FailingPublisher(NotificationPublisher):
    def __init__(self):
        self.calls = 0

    def publish(self, messages):
        self.calls += 1
        raise PublishError("broker unavailable")


@pytest.fixture
def group_repo():
    return FakeGroupRepository()


@pytest.fixture
def bulletin_repo():
    return FakeBulletinRepository()


@pytest.fixture
def member_repo():
    return FakeMemberRepository([
        MemberResponse(id="u1", username="alice", first_name="Alice", last_name="Smith"),
        MemberResponse(id="u2", username="bob"),
    ])


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def make_dispatcher():
    started = []

    def _make(pub, **kwargs):
        kwargs.setdefault("workers", 1)
        kwargs.setdefault("sleep", lambda _: None)
        dispatcher = NotificationDispatcher(pub, **kwargs)
        dispatcher.start()
        started.append(dispatcher)
        return dispatcher

    yield _make
    for dispatcher in started:
        dispatcher.stop(wait=True, timeout=2)
