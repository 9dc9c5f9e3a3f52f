from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.squad import (
    ManageMemberRequest,
    SquadCommentCreate,
    SquadCommentResponse,
    SquadCreate,
    SquadListResponse,
    SquadMemberResponse,
    SquadPostCreate,
    SquadPostListResponse,
    SquadPostResponse,
    SquadReactionRequest,
    SquadReactionResponse,
    SquadRef,
    SquadResponse,
    SquadUpdate,
)
from causeconnect.services.squad_service import SquadService
from causeconnect.api.deps import get_current_user

router = APIRouter(tags=["Squads"])


# ============================================================
# Squads
# ============================================================

@router.get("/squad-list", response_model=SquadListResponse, response_model_exclude_none=True)
async def list_my_squads(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Squads the caller belongs to, with their role in each."""
    return await SquadService(db).list_my_squads(current_user)


@router.get("/squad-search", response_model=SquadListResponse)
async def search_squads(
    query: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).search(current_user, query, page, limit)


@router.get(
    "/squad-detail",
    response_model=SquadResponse,
    responses={404: {"model": ErrorResponse, "description": "Squad not found"}}
)
async def get_squad(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).get_detail(current_user, id)


@router.post("/squad-create", response_model=SquadResponse, status_code=status.HTTP_201_CREATED)
async def create_squad(
    data: SquadCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).create_squad(current_user, data)


@router.patch(
    "/squad-update",
    response_model=SquadResponse,
    responses={403: {"model": ErrorResponse, "description": "Admins only"}}
)
async def update_squad(
    data: SquadUpdate,
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).update_squad(current_user, id, data)


@router.delete("/squad-delete", response_model=SuccessResponse)
async def delete_squad(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SquadService(db).delete_squad(current_user, id)
    return SuccessResponse(message="Squad deleted")


# ============================================================
# Membership
# ============================================================

@router.post("/squad-join", response_model=SquadResponse)
async def join_squad(
    data: SquadRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).join(current_user, data.squad_id)


@router.delete("/squad-leave", response_model=SuccessResponse)
async def leave_squad(
    squad_id: UUID = Query(..., alias="squadId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SquadService(db).leave(current_user, squad_id)
    return SuccessResponse(message="Left squad")


@router.get("/squad-members", response_model=List[SquadMemberResponse])
async def list_members(
    squad_id: UUID = Query(..., alias="squadId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Admins first, then moderators, then members; each by join date."""
    return await SquadService(db).list_members(squad_id)


@router.patch("/squad-manage-member", response_model=SquadMemberResponse)
async def change_member_role(
    data: ManageMemberRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).change_role(current_user, data)


@router.delete("/squad-manage-member", response_model=SuccessResponse)
async def remove_member(
    squad_id: UUID = Query(..., alias="squadId"),
    user_id: UUID = Query(..., alias="userId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SquadService(db).remove_member(current_user, squad_id, user_id)
    return SuccessResponse(message="Member removed")


# ============================================================
# Feed
# ============================================================

@router.get("/squad-posts", response_model=SquadPostListResponse)
async def list_squad_posts(
    squad_id: UUID = Query(..., alias="squadId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).list_posts(current_user, squad_id, page, limit)


@router.post("/squad-post-create", response_model=SquadPostResponse, status_code=status.HTTP_201_CREATED)
async def create_squad_post(
    data: SquadPostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).create_post(current_user, data)


@router.get("/squad-comments", response_model=List[SquadCommentResponse])
async def list_squad_comments(
    post_id: UUID = Query(..., alias="postId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).list_comments(current_user, post_id)


@router.post("/squad-comment-create", response_model=SquadCommentResponse, status_code=status.HTTP_201_CREATED)
async def create_squad_comment(
    data: SquadCommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).create_comment(current_user, data)


@router.post("/squad-reaction", response_model=SquadReactionResponse)
async def toggle_reaction(
    data: SquadReactionRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SquadService(db).toggle_reaction(current_user, data)
