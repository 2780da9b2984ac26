from teamup.modules.groups.repository import GroupRepository
from teamup.modules.groups.schemas import GroupResponse
from teamup.modules.search.schemas import GroupSearchFilter
from typing import List


class GroupSearchService:
    """Filters and paginates the full group list in memory."""

    def __init__(self, groups: GroupRepository, default_limit: int = 20, max_limit: int = 100):
        self.groups = groups
        self.default_limit = default_limit if default_limit > 0 else 20
        self.max_limit = max_limit if max_limit > 0 else 100

    def search(self, search_filter: GroupSearchFilter) -> List[GroupResponse]:
        limit = search_filter.limit if search_filter.limit and search_filter.limit > 0 else self.default_limit
        limit = min(limit, self.max_limit)
        offset = max(search_filter.offset, 0)

        matching = [g for g in self.groups.list_all() if matches(g, search_filter)]
        return matching[offset:offset + limit]


def matches(group: GroupResponse, search_filter: GroupSearchFilter) -> bool:
    if not search_filter.include_closed and group.closed:
        return False
    title_query = search_filter.title.strip().lower()
    if title_query and title_query not in group.title.lower():
        return False
    date_query = search_filter.date.strip().lower()
    if date_query and date_query not in group.date.lower():
        return False
    # Any requested tag is enough
    if search_filter.tags and not set(search_filter.tags) & set(group.tags):
        return False
    return True
