"""AMM configuration account state."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

AMM_CONFIG_SEED = "amm_config"

_PUBKEY_LEN = 32
_PADDING_LEN = 16
_LAYOUT = struct.Struct(f"<BBHQQQQ32s32s{_PADDING_LEN}Q")


@dataclass
class AmmConfig:
    """Fee rates and owners shared by the pools created under one config.

    Rates are denominated in hundredths of a bip (10^-6).
    """

    bump: int = 0
    disable_create_pool: bool = False
    index: int = 0
    trade_fee_rate: int = 0
    protocol_fee_rate: int = 0
    fund_fee_rate: int = 0
    create_pool_fee: int = 0
    protocol_owner: bytes = bytes(_PUBKEY_LEN)
    fund_owner: bytes = bytes(_PUBKEY_LEN)
    padding: list[int] = field(default_factory=lambda: [0] * _PADDING_LEN)

    LEN: ClassVar[int] = 8 + 1 + 1 + 2 + 4 * 8 + 32 * 2 + 8 * 16

    def pack(self) -> bytes:
        """Serialize the account body (without the 8-byte discriminator)."""
        for name in ("protocol_owner", "fund_owner"):
            if len(getattr(self, name)) != _PUBKEY_LEN:
                raise ValueError(f"{name} must be {_PUBKEY_LEN} bytes")
        if len(self.padding) != _PADDING_LEN:
            raise ValueError(f"padding must hold {_PADDING_LEN} values")
        try:
            return _LAYOUT.pack(
                self.bump,
                int(bool(self.disable_create_pool)),
                self.index,
                self.trade_fee_rate,
                self.protocol_fee_rate,
                self.fund_fee_rate,
                self.create_pool_fee,
                bytes(self.protocol_owner),
                bytes(self.fund_owner),
                *self.padding,
            )
        except struct.error as exc:
            raise ValueError(f"field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> AmmConfig:
        """Deserialize an account body produced by :meth:`pack`."""
        if len(data) < _LAYOUT.size:
            raise ValueError(
                f"AmmConfig needs {_LAYOUT.size} bytes, got {len(data)}"
            )
        (
            bump,
            disable,
            index,
            trade_fee_rate,
            protocol_fee_rate,
            fund_fee_rate,
            create_pool_fee,
            protocol_owner,
            fund_owner,
            *padding,
        ) = _LAYOUT.unpack_from(data)
        if disable not in (0, 1):
            raise ValueError(f"invalid boolean byte {disable}")
        return cls(
            bump=bump,
            disable_create_pool=bool(disable),
            index=index,
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
            create_pool_fee=create_pool_fee,
            protocol_owner=protocol_owner,
            fund_owner=fund_owner,
            padding=list(padding),
        )