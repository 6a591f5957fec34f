"""Events emitted by liquidity changes and swaps."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass
from typing import ClassVar


def _event_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"event:{name}".encode()).digest()[:8]


def _check_prefix(data: bytes, discriminator: bytes, size: int, name: str) -> None:
    if data[:8] != discriminator:
        raise ValueError(f"data is not a {name}")
    if len(data) < 8 + size:
        raise ValueError(f"{name} needs {8 + size} bytes, got {len(data)}")


def _pack(layout: struct.Struct, *values) -> bytes:
    if len(values[0]) != 32:
        raise ValueError("pool_id must be 32 bytes")
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"field out of range: {exc}") from exc


@dataclass(frozen=True)
class LpChangeEvent:
    """Emitted on deposit (change_type 0) and withdraw (change_type 1)."""

    pool_id: bytes
    lp_amount_before: int
    token_0_vault_before: int
    token_1_vault_before: int
    token_0_amount: int
    token_1_amount: int
    token_0_transfer_fee: int
    token_1_transfer_fee: int
    change_type: int

    DISCRIMINATOR: ClassVar[bytes] = _event_discriminator("LpChangeEvent")
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<32s7QB")

    def encode(self) -> bytes:
        """Discriminator followed by the little-endian field encoding."""
        return self.DISCRIMINATOR + _pack(
            self._LAYOUT,
            bytes(self.pool_id),
            self.lp_amount_before,
            self.token_0_vault_before,
            self.token_1_vault_before,
            self.token_0_amount,
            self.token_1_amount,
            self.token_0_transfer_fee,
            self.token_1_transfer_fee,
            self.change_type,
        )

    @classmethod
    def decode(cls, data: bytes) -> LpChangeEvent:
        _check_prefix(data, cls.DISCRIMINATOR, cls._LAYOUT.size, cls.__name__)
        return cls(*cls._LAYOUT.unpack_from(data, 8))


@dataclass(frozen=True)
class SwapEvent:
    """Emitted on every swap; vault amounts exclude accumulated fees."""

    pool_id: bytes
    input_vault_before: int
    output_vault_before: int
    input_amount: int
    output_amount: int
    input_transfer_fee: int
    output_transfer_fee: int
    base_input: bool

    DISCRIMINATOR: ClassVar[bytes] = _event_discriminator("SwapEvent")
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<32s6QB")

    def encode(self) -> bytes:
        """Discriminator followed by the little-endian field encoding."""
        return self.DISCRIMINATOR + _pack(
            self._LAYOUT,
            bytes(self.pool_id),
            self.input_vault_before,
            self.output_vault_before,
            self.input_amount,
            self.output_amount,
            self.input_transfer_fee,
            self.output_transfer_fee,
            int(bool(self.base_input)),
        )

    @classmethod
    def decode(cls, data: bytes) -> SwapEvent:
        _check_prefix(data, cls.DISCRIMINATOR, cls._LAYOUT.size, cls.__name__)
        *fields, base_input = cls._LAYOUT.unpack_from(data, 8)
        if base_input not in (0, 1):
            raise ValueError(f"invalid boolean byte {base_input}")
        return cls(*fields, base_input=bool(base_input))