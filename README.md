# cpswap

Account state and administrative logic for a constant product automated
market maker (AMM). The package models the pool, fee configuration and
price oracle accounts, their fixed-layout little-endian encodings, the
events a pool emits, and the admin operations that change fee settings,
pool status and accrued fees. It has no runtime dependencies.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Modules

- `cpswap.math`: `checked_ceil_div(dividend, divisor)` ceiling-divides two
  unsigned 128-bit values and returns `(quotient, adjusted_divisor)`. When
  the quotient would be zero it returns `(1, 0)` if the dividend is at
  least half the divisor, otherwise `(0, 0)`. It returns `None` on division
  by zero or overflow, and raises `ValueError` for arguments outside the
  u128 range.
- `cpswap.config`: `AmmConfig` holds the trade, protocol and fund fee rates
  (in units of 10^-6), the pool creation fee and the protocol and fund
  owners. `pack()` gives the account body without its discriminator;
  `AmmConfig.unpack(data)` reads it back.
- `cpswap.pool`: `PoolState` holds vaults, mints, decimals, LP supply,
  accrued protocol and fund fees, open time and status bits.
  - `initialize(...)` fills in a new pool from `MintInfo` records and an
    epoch.
  - `set_status`, `set_status_by_bit` and `get_status_by_bit` work with
    `PoolStatusBitIndex` (`DEPOSIT`, `WITHDRAW`, `SWAP`) and
    `PoolStatusBitFlag` (`ENABLE`, `DISABLE`). A set bit disables the
    operation.
  - `vault_amount_without_fee` subtracts the accrued fees from the vault
    balances.
  - `token_price_x32` gives both prices in Q32.32 fixed point.
  - `pack()` and `PoolState.unpack(data)` encode and decode the state.
- `cpswap.oracle`: `ObservationState` is a ring buffer of 100
  `Observation` entries. `update(block_timestamp, token_0_price_x32,
  token_1_price_x32)` stamps the start time on its first call. After that
  it adds `price * elapsed` to the cumulative prices, at most once every
  15 seconds (`OBSERVATION_UPDATE_DURATION_DEFAULT`), and wraps the index
  back to 0 after the last slot. It also has `pack()` and
  `ObservationState.unpack(data)`.
- `cpswap.events`: `LpChangeEvent` and `SwapEvent`. Their `encode()`
  prefixes an 8-byte discriminator, and `decode(data)` checks it.
- `cpswap.account_load`: `AccountInfo` (key, owner, data, writability) and
  `AccountLoader`, which checks the owner, the discriminator and
  writability before it gives out state.
  - `discriminator(state_type)` gives the 8-byte tag for a state class.
  - `load()` returns a copy of the state.
  - `load_mut()` and `load_init()` are context managers. They write the
    state back when the block exits without an exception.
  - `load_init()` refuses an account whose discriminator is already set.
  - Failures raise `AccountError`, which carries an `AccountErrorCode`.
- `cpswap.admin`:
  - `create_amm_config`, `update_amm_config` (param 0 to 6: trade,
    protocol and fund fee rates, protocol owner, fund owner, pool creation
    fee, disable-create-pool) and `update_pool_status`. All of them accept
    only `ADMIN_ID` as signer.
  - Rejected instructions raise `ProgramError` with an `ErrorCode`.
    Out-of-range fee rates raise `ValueError`.
  - `decode_pubkey(text)` decodes a base58 address to 32 bytes.
- `cpswap.collect`: `collect_protocol_fee` and `collect_fund_fee` take up
  to the requested amounts from a pool's accrued fees. The signer must be
  the matching owner in the config or the admin. Each returns a
  `CollectedFees` record with the amounts, the authority bump and
  `signer_seeds`.

## Example

```python
from cpswap.pool import PoolState, PoolStatusBitIndex, PoolStatusBitFlag

pool = PoolState()
pool.set_status(4)                      # disable swaps
assert not pool.get_status_by_bit(PoolStatusBitIndex.SWAP)
pool.set_status_by_bit(PoolStatusBitIndex.SWAP, PoolStatusBitFlag.ENABLE)
assert pool.get_status_by_bit(PoolStatusBitIndex.SWAP)

restored = PoolState.unpack(pool.pack())
assert restored == pool
```

## What it does not do

- The package has no swap, deposit, withdraw or pool-creation logic, and
  no curve or fee calculator.
- It moves no tokens. The fee collection functions only update the pool
  state and report what should be transferred.
- It does not talk to a network or a ledger. Account data lives in
  `AccountInfo` objects that the caller supplies.
- It has no command-line interface.

## Running the tests

```
pytest
```