from pydantic import BaseModel
from typing import List, Optional
from teamup.modules.groups.schemas import GroupTag


class GroupSearchFilter(BaseModel):
    title: str = ""
    tags: List[GroupTag] = []
    date: str = ""
    include_closed: bool = True
    limit: Optional[int] = None
    offset: int = 0
