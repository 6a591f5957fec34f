"""Typed, checked access to program-owned account data."""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol, TypeVar

DISCRIMINATOR_LEN = 8


class _AccountState(Protocol):
    def pack(self) -> bytes: ...

    @classmethod
    def unpack(cls, data: bytes) -> Any: ...


StateT = TypeVar("StateT", bound=_AccountState)


class AccountErrorCode(IntEnum):
    ACCOUNT_DISCRIMINATOR_ALREADY_SET = 3000
    ACCOUNT_DISCRIMINATOR_NOT_FOUND = 3001
    ACCOUNT_DISCRIMINATOR_MISMATCH = 3002
    ACCOUNT_NOT_MUTABLE = 3006
    ACCOUNT_OWNED_BY_WRONG_PROGRAM = 3007


class AccountError(Exception):
    """Raised when an account fails an ownership, mutability or layout check."""

    def __init__(
        self, code: AccountErrorCode, pubkeys: tuple[bytes, bytes] | None = None
    ) -> None:
        message = code.name
        if pubkeys is not None:
            message += f" (left={pubkeys[0].hex()}, right={pubkeys[1].hex()})"
        super().__init__(message)
        self.code = code
        self.pubkeys = pubkeys


@dataclass
class AccountInfo:
    """An account: its address, owning program, raw data and writability."""

    key: bytes
    owner: bytes
    data: bytearray = field(default_factory=bytearray)
    is_writable: bool = True


def discriminator(state_type: type) -> bytes:
    """The 8-byte tag that prefixes every account of ``state_type``."""
    return hashlib.sha256(f"account:{state_type.__name__}".encode()).digest()[
        :DISCRIMINATOR_LEN
    ]


def _check_owner(acc_info: AccountInfo, owner: bytes) -> None:
    if acc_info.owner != owner:
        raise AccountError(
            AccountErrorCode.ACCOUNT_OWNED_BY_WRONG_PROGRAM, (acc_info.owner, owner)
        )


def _check_writable(acc_info: AccountInfo) -> None:
    if not acc_info.is_writable:
        raise AccountError(AccountErrorCode.ACCOUNT_NOT_MUTABLE)


def _check_discriminator(state_type: type, acc_info: AccountInfo) -> None:
    if len(acc_info.data) < DISCRIMINATOR_LEN:
        raise AccountError(AccountErrorCode.ACCOUNT_DISCRIMINATOR_NOT_FOUND)
    if bytes(acc_info.data[:DISCRIMINATOR_LEN]) != discriminator(state_type):
        raise AccountError(AccountErrorCode.ACCOUNT_DISCRIMINATOR_MISMATCH)


@contextmanager
def _editing(state_type: type[StateT], acc_info: AccountInfo) -> Iterator[StateT]:
    state = state_type.unpack(bytes(acc_info.data[DISCRIMINATOR_LEN:]))
    yield state
    body = state.pack()
    acc_info.data[DISCRIMINATOR_LEN:DISCRIMINATOR_LEN + len(body)] = body


class AccountLoader:
    """Loads and stores a fixed-layout state object held in an account."""

    def __init__(self, state_type: type, acc_info: AccountInfo) -> None:
        self.state_type = state_type
        self.acc_info = acc_info

    @classmethod
    def try_from(
        cls, state_type: type, acc_info: AccountInfo, owner: bytes
    ) -> AccountLoader:
        """Wrap an initialized account, checking its owner and discriminator."""
        _check_owner(acc_info, owner)
        _check_discriminator(state_type, acc_info)
        return cls(state_type, acc_info)

    @classmethod
    def try_from_unchecked(
        cls, state_type: type, program_id: bytes, acc_info: AccountInfo, owner: bytes
    ) -> AccountLoader:
        """Wrap an account that may not be initialized yet; only the owner is checked."""
        _check_owner(acc_info, owner)
        return cls(state_type, acc_info)

    @contextmanager
    def load_init(self) -> Iterator[Any]:
        """Initialize the account: write the discriminator and edit a fresh state.

        The state is written back when the block exits without an exception.
        """
        _check_writable(self.acc_info)
        data = self.acc_info.data
        if len(data) < DISCRIMINATOR_LEN:
            raise AccountError(AccountErrorCode.ACCOUNT_DISCRIMINATOR_NOT_FOUND)
        if any(data[:DISCRIMINATOR_LEN]):
            raise AccountError(AccountErrorCode.ACCOUNT_DISCRIMINATOR_ALREADY_SET)
        data[:DISCRIMINATOR_LEN] = discriminator(self.state_type)
        with _editing(self.state_type, self.acc_info) as state:
            yield state

    def load(self) -> Any:
        """Return a copy of the stored state for reading."""
        _check_discriminator(self.state_type, self.acc_info)
        return self.state_type.unpack(bytes(self.acc_info.data[DISCRIMINATOR_LEN:]))

    @contextmanager
    def load_mut(self) -> Iterator[Any]:
        """Edit the stored state; changes are saved when the block exits cleanly."""
        _check_writable(self.acc_info)
        _check_discriminator(self.state_type, self.acc_info)
        with _editing(self.state_type, self.acc_info) as state:
            yield state

    @classmethod
    @contextmanager
    def load_data_mut(
        cls, state_type: type, acc_info: AccountInfo, owner: bytes
    ) -> Iterator[Any]:
        """Edit the state of an account directly, checking owner, mutability and tag."""
        _check_owner(acc_info, owner)
        _check_writable(acc_info)
        _check_discriminator(state_type, acc_info)
        with _editing(state_type, acc_info) as state:
            yield state

    def key(self) -> bytes:
        return self.acc_info.key