from fastapi import APIRouter, Depends, Query
from teamup.database.supabase_client import get_supabase
from teamup.modules.bulletins.repository import BulletinRepository
from teamup.modules.bulletins.schemas import BulletinCreate, BulletinUpdate, BulletinResponse
from teamup.modules.bulletins.service import BulletinService
from teamup.modules.groups.repository import GroupRepository
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/bulletin", tags=["bulletins"])


def get_bulletin_service(supabase: Client = Depends(get_supabase)) -> BulletinService:
    return BulletinService(BulletinRepository(supabase), GroupRepository(supabase))


@router.post("", response_model=BulletinResponse, status_code=201)
def create_bulletin(
    bulletin_data: BulletinCreate,
    service: BulletinService = Depends(get_bulletin_service)
):
    return service.create_bulletin(bulletin_data)


@router.get("", response_model=List[BulletinResponse])
def list_bulletins(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    service: BulletinService = Depends(get_bulletin_service)
):
    return service.list_bulletins(limit=limit, offset=offset)


@router.get("/author/{author_id}", response_model=List[BulletinResponse])
def list_bulletins_by_author(
    author_id: str,
    service: BulletinService = Depends(get_bulletin_service)
):
    return service.list_by_author(author_id)


@router.get("/group/{group_id}", response_model=List[BulletinResponse])
def list_bulletins_by_group(
    group_id: str,
    service: BulletinService = Depends(get_bulletin_service)
):
    """Bulletins that reference a group"""
    return service.list_by_group(group_id)


@router.get("/{bulletin_id}", response_model=BulletinResponse)
def get_bulletin(
    bulletin_id: str,
    service: BulletinService = Depends(get_bulletin_service)
):
    return service.get_bulletin_by_id(bulletin_id)


@router.put("/{bulletin_id}", response_model=BulletinResponse)
def update_bulletin(
    bulletin_id: str,
    bulletin_data: BulletinUpdate,
    service: BulletinService = Depends(get_bulletin_service)
):
    """Partial update: fields left out of the body are unchanged"""
    return service.update_bulletin(bulletin_id, bulletin_data)


@router.delete("/{bulletin_id}", status_code=204)
def delete_bulletin(
    bulletin_id: str,
    service: BulletinService = Depends(get_bulletin_service)
):
    service.delete_bulletin(bulletin_id)
    return None
