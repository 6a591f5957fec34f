"""Collection of the protocol and fund fees a pool has accrued."""

from __future__ import annotations

from dataclasses import dataclass

from cpswap.admin import ADMIN_ID, AUTH_SEED, ErrorCode, ProgramError
from cpswap.config import AmmConfig
from cpswap.pool import PoolState

_U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class CollectedFees:
    """Amounts to send out of the pool vaults and the authority used to sign."""

    amount_0: int
    amount_1: int
    auth_bump: int

    @property
    def signer_seeds(self) -> tuple[bytes, bytes]:
        """Seeds with which the vault authority signs the transfers."""
        return AUTH_SEED.encode(), bytes([self.auth_bump])


def _check_amount(name: str, value: int) -> None:
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer, got {value}")


def _authorize(signer: bytes, owner: bytes) -> None:
    if signer != owner and signer != ADMIN_ID:
        raise ProgramError(ErrorCode.INVALID_OWNER)


def collect_protocol_fee(
    signer: bytes,
    amm_config: AmmConfig,
    pool_state: PoolState,
    amount_0_requested: int,
    amount_1_requested: int,
    epoch: int,
) -> CollectedFees:
    """Take up to the requested amounts out of the pool's protocol fees.

    Only the config's protocol owner or the admin may collect. A request of 0
    for one token collects fees in the other token only.
    """
    _authorize(signer, amm_config.protocol_owner)
    _check_amount("amount_0_requested", amount_0_requested)
    _check_amount("amount_1_requested", amount_1_requested)

    amount_0 = min(amount_0_requested, pool_state.protocol_fees_token_0)
    amount_1 = min(amount_1_requested, pool_state.protocol_fees_token_1)
    pool_state.protocol_fees_token_0 -= amount_0
    pool_state.protocol_fees_token_1 -= amount_1
    pool_state.recent_epoch = epoch
    return CollectedFees(amount_0, amount_1, pool_state.auth_bump)


def collect_fund_fee(
    signer: bytes,
    amm_config: AmmConfig,
    pool_state: PoolState,
    amount_0_requested: int,
    amount_1_requested: int,
    epoch: int,
) -> CollectedFees:
    """Take up to the requested amounts out of the pool's fund fees.

    Only the config's fund owner or the admin may collect. A request of 0
    for one token collects fees in the other token only.
    """
    _authorize(signer, amm_config.fund_owner)
    _check_amount("amount_0_requested", amount_0_requested)
    _check_amount("amount_1_requested", amount_1_requested)

    amount_0 = min(amount_0_requested, pool_state.fund_fees_token_0)
    amount_1 = min(amount_1_requested, pool_state.fund_fees_token_1)
    pool_state.fund_fees_token_0 -= amount_0
    pool_state.fund_fees_token_1 -= amount_1
    pool_state.recent_epoch = epoch
    return CollectedFees(amount_0, amount_1, pool_state.auth_bump)