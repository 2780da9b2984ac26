from fastapi import APIRouter, Depends
from teamup.database.supabase_client import get_supabase
from teamup.modules.members.repository import MemberRepository
from teamup.modules.members.schemas import MemberResponse
from supabase import Client

router = APIRouter(prefix="/member", tags=["members"])


def get_member_repository(supabase: Client = Depends(get_supabase)) -> MemberRepository:
    return MemberRepository(supabase)


@router.get("/{member_id}", response_model=MemberResponse)
def get_member(
    member_id: str,
    members: MemberRepository = Depends(get_member_repository)
):
    return members.get_by_id(member_id)
