"""reg_member REST endpoints.

POST /members             — register the bearer
POST /members/delegated   — register a member from its offline signature
GET  /members/{address}   — member record (level NULL if never registered)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.database import get_db_session
from src.reg_common.response import ApiResponse, respond
from src.reg_gateway.auth.dependencies import get_current_caller
from src.reg_member.application.schemas import (
    MemberResponse,
    RegisterMemberForRequest,
    RegisterMemberRequest,
    RegisterMemberResponse,
)
from src.reg_member.application.service import MemberRegistry

router = APIRouter(prefix="/members", tags=["members"])

_service = MemberRegistry()


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_member(
    body: RegisterMemberRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    member, event = await _service.register_member(db, caller, body.eula, body.profile)
    data = RegisterMemberResponse.from_result(member, event)
    return respond(request, data.model_dump(), "Member registered")


@router.post("/delegated", status_code=status.HTTP_201_CREATED)
async def register_member_for(
    body: RegisterMemberForRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    member, event = await _service.register_member_for(
        db,
        sender=caller,
        member=body.member,
        registered=body.registered,
        eula=body.eula,
        profile=body.profile,
        signature=body.signature,
        chain_id=body.chain_id,
        verifying_contract=body.verifying_contract,
    )
    data = RegisterMemberResponse.from_result(member, event)
    return respond(request, data.model_dump(), "Member registered")


@router.get("/{address}")
async def get_member(
    address: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    member = await _service.get_member(db, address)
    return respond(request, MemberResponse.from_domain(member).model_dump())
