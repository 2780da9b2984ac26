import pytest

from teamup.core.errors import InvalidArgumentError, NotFoundError
from teamup.modules.bulletins.schemas import BulletinCreate, BulletinUpdate
from teamup.modules.bulletins.service import BulletinService
from teamup.modules.groups.reconciliation import remove_orphaned_bulletins
from teamup.modules.groups.schemas import GroupCreate


@pytest.fixture
def service(bulletin_repo, group_repo):
    return BulletinService(bulletin_repo, group_repo)


def test_create_bulletin_with_live_groups(service, group_repo):
    group = group_repo.create(GroupCreate(title="g1", owner_id="u1"))

    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b", group_ids=[group.id]))

    assert bulletin.group_ids == [group.id]


def test_create_bulletin_without_groups(service):
    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b"))

    assert bulletin.group_ids == []


def test_create_bulletin_rejects_unknown_group(service, group_repo, bulletin_repo):
    live = group_repo.create(GroupCreate(title="g1", owner_id="u1"))

    with pytest.raises(InvalidArgumentError, match="typo-id"):
        service.create_bulletin(BulletinCreate(author_id="u1", title="b", group_ids=[live.id, "typo-id"]))

    assert bulletin_repo.rows == {}


def test_update_bulletin_rejects_unknown_group(service, group_repo):
    live = group_repo.create(GroupCreate(title="g1", owner_id="u1"))
    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b", group_ids=[live.id]))

    with pytest.raises(InvalidArgumentError):
        service.update_bulletin(bulletin.id, BulletinUpdate(group_ids=[live.id, "typo-id"]))

    assert service.get_bulletin_by_id(bulletin.id).group_ids == [live.id]


def test_update_bulletin_without_group_ids_skips_lookup(service, group_repo):
    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b"))
    group_repo.list_ids = None

    updated = service.update_bulletin(bulletin.id, BulletinUpdate(title="renamed"))

    assert updated.title == "renamed"


def test_accepted_bulletins_survive_reconciliation(service, group_repo, bulletin_repo):
    live = group_repo.create(GroupCreate(title="g1", owner_id="u1"))
    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b", group_ids=[live.id]))
    with pytest.raises(InvalidArgumentError):
        service.create_bulletin(BulletinCreate(author_id="u1", title="typo", group_ids=["typo-id"]))

    assert remove_orphaned_bulletins(group_repo, bulletin_repo) == 0
    assert list(bulletin_repo.rows) == [bulletin.id]


def test_update_bulletin_empty_patch_is_invalid(service):
    bulletin = service.create_bulletin(BulletinCreate(author_id="u1", title="b"))

    with pytest.raises(InvalidArgumentError):
        service.update_bulletin(bulletin.id, BulletinUpdate(title=" "))


def test_delete_missing_bulletin_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.delete_bulletin("missing")
