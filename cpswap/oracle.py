"""Price observations accumulated for time-weighted oracle queries."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

OBSERVATION_SEED = "observation"
OBSERVATION_NUM = 100
OBSERVATION_UPDATE_DURATION_DEFAULT = 15

_U64_MAX = (1 << 64) - 1
_U128_MAX = (1 << 128) - 1
_PUBKEY_LEN = 32
_PADDING_LEN = 4

_HEADER = struct.Struct("<BH32s")
_PADDING = struct.Struct(f"<{_PADDING_LEN}Q")


def _u128(value: int, name: str) -> bytes:
    if not 0 <= value <= _U128_MAX:
        raise ValueError(f"{name} must fit in an unsigned 128-bit integer")
    return value.to_bytes(16, "little")


@dataclass
class Observation:
    """One cumulative price sample; prices are Q32.32 with 64 bits of overflow room."""

    block_timestamp: int = 0
    cumulative_token_0_price_x32: int = 0
    cumulative_token_1_price_x32: int = 0

    LEN: ClassVar[int] = 8 + 16 + 16

    def _pack(self) -> bytes:
        if not 0 <= self.block_timestamp <= _U64_MAX:
            raise ValueError("block_timestamp must fit in an unsigned 64-bit integer")
        return (
            self.block_timestamp.to_bytes(8, "little")
            + _u128(self.cumulative_token_0_price_x32, "cumulative_token_0_price_x32")
            + _u128(self.cumulative_token_1_price_x32, "cumulative_token_1_price_x32")
        )

    @classmethod
    def _unpack(cls, data: bytes) -> Observation:
        return cls(
            block_timestamp=int.from_bytes(data[0:8], "little"),
            cumulative_token_0_price_x32=int.from_bytes(data[8:24], "little"),
            cumulative_token_1_price_x32=int.from_bytes(data[24:40], "little"),
        )


@dataclass
class ObservationState:
    """Ring buffer of observations for one pool."""

    initialized: bool = False
    observation_index: int = 0
    pool_id: bytes = bytes(_PUBKEY_LEN)
    observations: list[Observation] = field(
        default_factory=lambda: [Observation() for _ in range(OBSERVATION_NUM)]
    )
    padding: list[int] = field(default_factory=lambda: [0] * _PADDING_LEN)

    LEN: ClassVar[int] = (
        8 + 1 + 2 + 32 + (Observation.LEN * OBSERVATION_NUM) + 8 * _PADDING_LEN
    )

    def update(
        self, block_timestamp: int, token_0_price_x32: int, token_1_price_x32: int
    ) -> None:
        """Record the prices in effect since the last observation.

        The first call only stamps the starting time. Later calls are ignored
        unless at least ``OBSERVATION_UPDATE_DURATION_DEFAULT`` seconds have
        passed; the index wraps to 0 after the last slot.
        """
        index = self.observation_index
        if not self.initialized:
            self.initialized = True
            current = self.observations[index]
            current.block_timestamp = block_timestamp
            current.cumulative_token_0_price_x32 = 0
            current.cumulative_token_1_price_x32 = 0
            return

        last = self.observations[index]
        last_timestamp = last.block_timestamp
        last_cumulative_0 = last.cumulative_token_0_price_x32
        last_cumulative_1 = last.cumulative_token_1_price_x32

        delta_time = max(block_timestamp - last_timestamp, 0)
        if delta_time < OBSERVATION_UPDATE_DURATION_DEFAULT:
            return
        delta_0 = token_0_price_x32 * delta_time
        delta_1 = token_1_price_x32 * delta_time
        if delta_0 > _U128_MAX or delta_1 > _U128_MAX:
            raise ArithmeticError("price delta overflows u128")

        next_index = 0 if index == OBSERVATION_NUM - 1 else index + 1
        following = self.observations[next_index]
        following.block_timestamp = block_timestamp
        # Only the low 64 bits carry the sum; the high bits absorb overflow.
        following.cumulative_token_0_price_x32 = (last_cumulative_0 + delta_0) & _U128_MAX
        following.cumulative_token_1_price_x32 = (last_cumulative_1 + delta_1) & _U128_MAX
        self.observation_index = next_index

    def pack(self) -> bytes:
        """Serialize the packed account body (without the discriminator)."""
        if len(self.pool_id) != _PUBKEY_LEN:
            raise ValueError(f"pool_id must be {_PUBKEY_LEN} bytes")
        if len(self.observations) != OBSERVATION_NUM:
            raise ValueError(f"observations must hold {OBSERVATION_NUM} entries")
        if len(self.padding) != _PADDING_LEN:
            raise ValueError(f"padding must hold {_PADDING_LEN} values")
        try:
            header = _HEADER.pack(
                int(bool(self.initialized)), self.observation_index, bytes(self.pool_id)
            )
            tail = _PADDING.pack(*self.padding)
        except struct.error as exc:
            raise ValueError(f"field out of range: {exc}") from exc
        body = b"".join(observation._pack() for observation in self.observations)
        return header + body + tail

    @classmethod
    def unpack(cls, data: bytes) -> ObservationState:
        """Deserialize an account body produced by :meth:`pack`."""
        size = cls.LEN - 8
        if len(data) < size:
            raise ValueError(f"ObservationState needs {size} bytes, got {len(data)}")
        initialized, observation_index, pool_id = _HEADER.unpack_from(data)
        if initialized not in (0, 1):
            raise ValueError(f"invalid boolean byte {initialized}")
        start = _HEADER.size
        observations = [
            Observation._unpack(data[offset:offset + Observation.LEN])
            for offset in range(
                start, start + Observation.LEN * OBSERVATION_NUM, Observation.LEN
            )
        ]
        padding = list(_PADDING.unpack_from(data, start + Observation.LEN * OBSERVATION_NUM))
        return cls(
            initialized=bool(initialized),
            observation_index=observation_index,
            pool_id=pool_id,
            observations=observations,
            padding=padding,
        )