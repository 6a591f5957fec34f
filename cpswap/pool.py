"""Pool account state and status bit handling."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import ClassVar

POOL_SEED = "pool"
POOL_LP_MINT_SEED = "pool_lp_mint"
POOL_VAULT_SEED = "pool_vault"

Q32 = 1 << 32
U64_MAX = (1 << 64) - 1

_PUBKEY_LEN = 32
_PADDING_LEN = 31
_PUBKEY_FIELDS = (
    "amm_config",
    "pool_creator",
    "token_0_vault",
    "token_1_vault",
    "lp_mint",
    "token_0_mint",
    "token_1_mint",
    "token_0_program",
    "token_1_program",
    "observation_key",
)
_BYTE_FIELDS = (
    "auth_bump",
    "status",
    "lp_mint_decimals",
    "mint_0_decimals",
    "mint_1_decimals",
)
_U64_FIELDS = (
    "lp_supply",
    "protocol_fees_token_0",
    "protocol_fees_token_1",
    "fund_fees_token_0",
    "fund_fees_token_1",
    "open_time",
    "recent_epoch",
)
_LAYOUT = struct.Struct(
    "<" + "32s" * len(_PUBKEY_FIELDS) + "B" * len(_BYTE_FIELDS)
    + "Q" * len(_U64_FIELDS) + f"{_PADDING_LEN}Q"
)


class PoolStatusBitIndex(IntEnum):
    DEPOSIT = 0
    WITHDRAW = 1
    SWAP = 2


class PoolStatusBitFlag(Enum):
    ENABLE = "enable"
    DISABLE = "disable"


@dataclass(frozen=True)
class MintInfo:
    """The parts of a mint account a pool records."""

    key: bytes
    decimals: int
    owner: bytes


def _zero_key() -> bytes:
    return bytes(_PUBKEY_LEN)


@dataclass
class PoolState:
    """State of one constant-product pool.

    ``status`` bits: bit 0 disables deposit, bit 1 withdraw, bit 2 swap.
    """

    amm_config: bytes = field(default_factory=_zero_key)
    pool_creator: bytes = field(default_factory=_zero_key)
    token_0_vault: bytes = field(default_factory=_zero_key)
    token_1_vault: bytes = field(default_factory=_zero_key)
    lp_mint: bytes = field(default_factory=_zero_key)
    token_0_mint: bytes = field(default_factory=_zero_key)
    token_1_mint: bytes = field(default_factory=_zero_key)
    token_0_program: bytes = field(default_factory=_zero_key)
    token_1_program: bytes = field(default_factory=_zero_key)
    observation_key: bytes = field(default_factory=_zero_key)
    auth_bump: int = 0
    status: int = 0
    lp_mint_decimals: int = 0
    mint_0_decimals: int = 0
    mint_1_decimals: int = 0
    lp_supply: int = 0
    protocol_fees_token_0: int = 0
    protocol_fees_token_1: int = 0
    fund_fees_token_0: int = 0
    fund_fees_token_1: int = 0
    open_time: int = 0
    recent_epoch: int = 0
    padding: list[int] = field(default_factory=lambda: [0] * _PADDING_LEN)

    LEN: ClassVar[int] = 8 + 10 * 32 + 1 * 5 + 8 * 7 + 8 * 31

    def initialize(
        self,
        auth_bump: int,
        lp_supply: int,
        open_time: int,
        pool_creator: bytes,
        amm_config: bytes,
        token_0_vault: bytes,
        token_1_vault: bytes,
        token_0_mint: MintInfo,
        token_1_mint: MintInfo,
        lp_mint: MintInfo,
        observation_key: bytes,
        epoch: int,
    ) -> None:
        """Fill in a freshly created pool; fees start at zero."""
        self.amm_config = amm_config
        self.pool_creator = pool_creator
        self.token_0_vault = token_0_vault
        self.token_1_vault = token_1_vault
        self.lp_mint = lp_mint.key
        self.token_0_mint = token_0_mint.key
        self.token_1_mint = token_1_mint.key
        self.token_0_program = token_0_mint.owner
        self.token_1_program = token_1_mint.owner
        self.observation_key = observation_key
        self.auth_bump = auth_bump
        self.lp_mint_decimals = lp_mint.decimals
        self.mint_0_decimals = token_0_mint.decimals
        self.mint_1_decimals = token_1_mint.decimals
        self.lp_supply = lp_supply
        self.protocol_fees_token_0 = 0
        self.protocol_fees_token_1 = 0
        self.fund_fees_token_0 = 0
        self.fund_fees_token_1 = 0
        self.open_time = open_time
        self.recent_epoch = epoch
        self.padding = [0] * _PADDING_LEN

    def set_status(self, status: int) -> None:
        if not 0 <= status <= 0xFF:
            raise ValueError(f"status must fit in one byte, got {status}")
        self.status = status

    def set_status_by_bit(self, bit: PoolStatusBitIndex, flag: PoolStatusBitFlag) -> None:
        mask = 1 << int(bit)
        if flag is PoolStatusBitFlag.DISABLE:
            self.status |= mask
        else:
            self.status &= 0xFF ^ mask

    def get_status_by_bit(self, bit: PoolStatusBitIndex) -> bool:
        """True when the operation behind ``bit`` is in normal (enabled) status."""
        return self.status & (1 << int(bit)) == 0

    def vault_amount_without_fee(self, vault_0: int, vault_1: int) -> tuple[int, int]:
        """Vault balances minus the protocol and fund fees still owed."""
        fees_0 = self.protocol_fees_token_0 + self.fund_fees_token_0
        fees_1 = self.protocol_fees_token_1 + self.fund_fees_token_1
        if fees_0 > U64_MAX or fees_1 > U64_MAX:
            raise ArithmeticError("accumulated fees overflow u64")
        if vault_0 < fees_0 or vault_1 < fees_1:
            raise ArithmeticError("vault amount is smaller than accumulated fees")
        return vault_0 - fees_0, vault_1 - fees_1

    def token_price_x32(self, vault_0: int, vault_1: int) -> tuple[int, int]:
        """Prices of token 0 and token 1 in Q32.32 fixed point."""
        amount_0, amount_1 = self.vault_amount_without_fee(vault_0, vault_1)
        return amount_1 * Q32 // amount_0, amount_0 * Q32 // amount_1

    def pack(self) -> bytes:
        """Serialize the packed account body (without the discriminator)."""
        keys = [getattr(self, name) for name in _PUBKEY_FIELDS]
        for name, key in zip(_PUBKEY_FIELDS, keys):
            if len(key) != _PUBKEY_LEN:
                raise ValueError(f"{name} must be {_PUBKEY_LEN} bytes")
        if len(self.padding) != _PADDING_LEN:
            raise ValueError(f"padding must hold {_PADDING_LEN} values")
        try:
            return _LAYOUT.pack(
                *(bytes(key) for key in keys),
                *(getattr(self, name) for name in _BYTE_FIELDS),
                *(getattr(self, name) for name in _U64_FIELDS),
                *self.padding,
            )
        except struct.error as exc:
            raise ValueError(f"field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> PoolState:
        """Deserialize an account body produced by :meth:`pack`."""
        if len(data) < _LAYOUT.size:
            raise ValueError(f"PoolState needs {_LAYOUT.size} bytes, got {len(data)}")
        values = list(_LAYOUT.unpack_from(data))
        names = _PUBKEY_FIELDS + _BYTE_FIELDS + _U64_FIELDS
        kwargs = dict(zip(names, values))
        return cls(**kwargs, padding=values[len(names):])