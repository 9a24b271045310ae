"""Pydantic request/response schemas for reg_member.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field

from src.reg_common.events import MemberRegistered, event_log
from src.reg_member.domain.models import Member


class RegisterMemberRequest(BaseModel):
    eula: str = Field(..., min_length=1, max_length=128)
    profile: str = Field("", max_length=128)


class RegisterMemberForRequest(BaseModel):
    """Registration relayed by the bearer on behalf of ``member``."""

    member: str
    registered: int = Field(
        ..., ge=0, le=2**256 - 1, description="Block number the member signed at"
    )
    eula: str = Field(..., min_length=1, max_length=128)
    profile: str = Field("", max_length=128)
    signature: str = Field(..., description="0x-hex 65-byte EIP-712 signature")
    chain_id: int | None = Field(None, description="Chain id the member signed for")
    verifying_contract: str | None = Field(
        None, description="Registry address the member signed for"
    )


class MemberResponse(BaseModel):
    address: str
    level: str
    eula: str | None
    profile: str | None
    registered_at: int

    @classmethod
    def from_domain(cls, member: Member) -> "MemberResponse":
        return cls(
            address=member.address,
            level=member.level.value,
            eula=member.eula,
            profile=member.profile,
            registered_at=member.registered_at,
        )


class RegisterMemberResponse(BaseModel):
    member: MemberResponse
    events: list[dict]

    @classmethod
    def from_result(
        cls, member: Member, event: MemberRegistered
    ) -> "RegisterMemberResponse":
        return cls(member=MemberResponse.from_domain(member), events=[event_log(event)])
