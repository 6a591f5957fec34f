"""Administrative instructions: fee configs and pool status."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, auto

from cpswap.config import AmmConfig
from cpswap.pool import PoolState

FEE_RATE_DENOMINATOR_VALUE = 1_000_000
AUTH_SEED = "vault_and_lp_mint_auth_seed"

_U8_MAX = 0xFF
_U16_MAX = 0xFFFF
_U64_MAX = (1 << 64) - 1
_ZERO_KEY = bytes(32)
_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: value for value, char in enumerate(_BASE58_ALPHABET)}


class ErrorCode(Enum):
    INVALID_OWNER = auto()
    INVALID_INPUT = auto()
    CONSTRAINT_ADDRESS = auto()
    REQUIRE_KEYS_NEQ_VIOLATED = auto()
    REQUIRE_GTE_VIOLATED = auto()


class ProgramError(Exception):
    """An instruction rejected by the program."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        super().__init__(message or code.name)
        self.code = code


def decode_pubkey(text: str) -> bytes:
    """Decode a base58 address into its 32 bytes."""
    number = 0
    for char in text:
        try:
            number = number * 58 + _BASE58_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    leading_zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    decoded = bytes(leading_zeros) + body
    if len(decoded) != 32:
        raise ValueError(f"public key must be 32 bytes, got {len(decoded)}")
    return decoded


PROGRAM_ID = decode_pubkey("CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C")
ADMIN_ID = decode_pubkey("GThUX1Atko4tqhN2NaiTazWSeFWMuiUvfFnyJyUghFMJ")
CREATE_POOL_FEE_RECEIVER_ID = decode_pubkey(
    "DNXgeM9EiiaAbaWvwjHj9fQQLAX5ZsfHyvmYUNRAdNC8"
)
DEVNET_PROGRAM_ID = decode_pubkey("CPMDWBwJDtYax9qW7AyRuVC19Cc4L4Vcy4n2BHAbHkCW")
DEVNET_ADMIN_ID = decode_pubkey("adMCyoCgfkg7bQiJ9aBJ59H3BXLY3r5LNLfPpQfMzBe")
DEVNET_CREATE_POOL_FEE_RECEIVER_ID = decode_pubkey(
    "G11FKBRaAkHAKuLCgLM6K6NUc9rTjPAznRCjZifrTQe2"
)


def _check_range(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} out of range: {value}")


def _check_trade_fee_rate(trade_fee_rate: int) -> None:
    if trade_fee_rate >= FEE_RATE_DENOMINATOR_VALUE:
        raise ValueError("trade_fee_rate must be below the fee denominator")


def _check_share_rates(rate: int, other_rate: int, name: str) -> None:
    if rate > FEE_RATE_DENOMINATOR_VALUE:
        raise ValueError(f"{name} exceeds the fee denominator")
    if rate + other_rate > FEE_RATE_DENOMINATOR_VALUE:
        raise ValueError("protocol and fund fee rates together exceed the denominator")


def create_amm_config(
    owner: bytes,
    index: int,
    trade_fee_rate: int,
    protocol_fee_rate: int,
    fund_fee_rate: int,
    create_pool_fee: int,
    bump: int,
) -> AmmConfig:
    """Create a fee config; only the admin may do so and becomes both owners."""
    if owner != ADMIN_ID:
        raise ProgramError(ErrorCode.INVALID_OWNER)
    _check_range("index", index, _U16_MAX)
    _check_range("bump", bump, _U8_MAX)
    for name, value in (
        ("trade_fee_rate", trade_fee_rate),
        ("protocol_fee_rate", protocol_fee_rate),
        ("fund_fee_rate", fund_fee_rate),
        ("create_pool_fee", create_pool_fee),
    ):
        _check_range(name, value, _U64_MAX)
    _check_trade_fee_rate(trade_fee_rate)
    _check_share_rates(protocol_fee_rate, fund_fee_rate, "protocol_fee_rate")
    _check_share_rates(fund_fee_rate, protocol_fee_rate, "fund_fee_rate")
    return AmmConfig(
        bump=bump,
        disable_create_pool=False,
        index=index,
        trade_fee_rate=trade_fee_rate,
        protocol_fee_rate=protocol_fee_rate,
        fund_fee_rate=fund_fee_rate,
        create_pool_fee=create_pool_fee,
        protocol_owner=owner,
        fund_owner=owner,
    )


def _new_owner(remaining_accounts: Sequence) -> bytes:
    if not remaining_accounts:
        raise ValueError("the new owner must be passed as the first remaining account")
    account = remaining_accounts[0]
    key = getattr(account, "key", account)
    if key == _ZERO_KEY:
        raise ProgramError(ErrorCode.REQUIRE_KEYS_NEQ_VIOLATED)
    return key


def update_amm_config(
    signer: bytes,
    amm_config: AmmConfig,
    param: int,
    value: int,
    remaining_accounts: Sequence = (),
) -> None:
    """Change one setting of ``amm_config`` selected by ``param`` (0 to 6)."""
    if signer != ADMIN_ID:
        raise ProgramError(ErrorCode.INVALID_OWNER)
    _check_range("value", value, _U64_MAX)
    if param == 0:
        _check_trade_fee_rate(value)
        amm_config.trade_fee_rate = value
    elif param == 1:
        _check_share_rates(value, amm_config.fund_fee_rate, "protocol_fee_rate")
        amm_config.protocol_fee_rate = value
    elif param == 2:
        _check_share_rates(value, amm_config.protocol_fee_rate, "fund_fee_rate")
        amm_config.fund_fee_rate = value
    elif param == 3:
        amm_config.protocol_owner = _new_owner(remaining_accounts)
    elif param == 4:
        amm_config.fund_owner = _new_owner(remaining_accounts)
    elif param == 5:
        amm_config.create_pool_fee = value
    elif param == 6:
        amm_config.disable_create_pool = value != 0
    else:
        raise ProgramError(ErrorCode.INVALID_INPUT)


def update_pool_status(
    signer: bytes, pool_state: PoolState, status: int, epoch: int
) -> None:
    """Overwrite the pool's status bits; admin only."""
    if signer != ADMIN_ID:
        raise ProgramError(ErrorCode.CONSTRAINT_ADDRESS)
    if status < 0:
        raise ValueError(f"status must be non-negative, got {status}")
    if status > _U8_MAX:
        raise ProgramError(ErrorCode.REQUIRE_GTE_VIOLATED)
    pool_state.set_status(status)
    pool_state.recent_epoch = epoch