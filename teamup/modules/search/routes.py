from fastapi import APIRouter, Depends, Query
from teamup.config import settings
from teamup.database.supabase_client import get_supabase
from teamup.modules.groups.repository import GroupRepository
from teamup.modules.groups.schemas import GroupResponse, GroupTag
from teamup.modules.search.schemas import GroupSearchFilter
from teamup.modules.search.service import GroupSearchService
from supabase import Client
from typing import List, Optional

# Registered before the groups router so /group/search is not read as a group id
router = APIRouter(prefix="/group", tags=["search"])


def get_search_service(supabase: Client = Depends(get_supabase)) -> GroupSearchService:
    return GroupSearchService(
        GroupRepository(supabase),
        default_limit=settings.search_default_limit,
        max_limit=settings.search_max_limit,
    )


@router.get("/search", response_model=List[GroupResponse])
def search_groups(
    title: str = "",
    tags: List[GroupTag] = Query([]),
    date: str = "",
    include_closed: bool = True,
    limit: Optional[int] = None,
    offset: int = 0,
    service: GroupSearchService = Depends(get_search_service)
):
    """Search groups by title/date substring and tags; limit defaults to 20, capped at 100"""
    return service.search(GroupSearchFilter(
        title=title,
        tags=tags,
        date=date,
        include_closed=include_closed,
        limit=limit,
        offset=offset,
    ))
