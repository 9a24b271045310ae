"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Member
  3xxx: Market
  4xxx: Delegation (signatures, domains)
  5xxx: Escrow (token ledger)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired access token", 401)


# --- 2xxx: Member ---

class NotAMemberError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2001, f"Not a member: {address}", 403)


class AlreadyMemberError(AppError):
    def __init__(self, address: str) -> None:
        super().__init__(2002, f"Already a member: {address}", 409)


class InvalidEulaError(AppError):
    def __init__(self, eula: str) -> None:
        super().__init__(2003, f"EULA does not match the current terms: {eula}", 422)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketNotActiveError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3002, f"Market is not active: {market_id}", 422)


class MarketAlreadyExistsError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3003, f"Market already exists: {market_id}", 409)


class AlreadyJoinedError(AppError):
    def __init__(self, market_id: str, actor: str, actor_type: str) -> None:
        super().__init__(
            3004,
            f"{actor} already joined market {market_id} as {actor_type}",
            409,
        )


class MakerAlreadyBoundError(AppError):
    def __init__(self, maker: str, market_id: str) -> None:
        super().__init__(
            3005, f"Maker {maker} already works for market {market_id}", 409
        )


class InvalidMarketIdError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3006, f"Invalid market id: {detail}", 422)


class InvalidMarketTermsError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3007, f"Invalid market terms: {detail}", 422)


# --- 4xxx: Delegation ---

class InvalidSignatureError(AppError):
    def __init__(self, signer: str) -> None:
        super().__init__(4001, f"Signature does not recover to {signer}", 403)


class InvalidDomainError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4002, f"Signature domain mismatch: {detail}", 403)


class StaleDelegationError(AppError):
    def __init__(self, block_number: int, current_block: int) -> None:
        super().__init__(
            4003,
            f"Delegated call signed at block {block_number} is outside the "
            f"accepted window (current block {current_block})",
            422,
        )


class UnsupportedMessageError(AppError):
    def __init__(self, type_name: str) -> None:
        super().__init__(4004, f"Unsupported delegated message type: {type_name}", 422)


# --- 5xxx: Escrow ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            5001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


class InsufficientApprovalError(AppError):
    def __init__(self, required: int, approved: int) -> None:
        super().__init__(
            5002,
            f"Insufficient approval: required {required}, approved {approved}",
            422,
        )


# --- 9xxx: System ---

class InvalidAddressError(AppError):
    def __init__(self, value: str) -> None:
        super().__init__(9001, f"Invalid address: {value}", 422)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
