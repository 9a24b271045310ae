"""Domain models for reg_member — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass

from src.reg_common.enums import MemberLevel


@dataclass
class Member:
    address: str
    level: MemberLevel
    eula: str | None = None
    profile: str | None = None
    registered_at: int = 0   # block number, 0 = never registered

    @classmethod
    def absent(cls, address: str) -> "Member":
        """The implicit NULL-level record of an address that never registered."""
        return cls(address=address, level=MemberLevel.NULL)

    @property
    def is_member(self) -> bool:
        return self.level != MemberLevel.NULL
