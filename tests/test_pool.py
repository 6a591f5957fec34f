import pytest

from cpswap.pool import (
    Q32,
    MintInfo,
    PoolState,
    PoolStatusBitFlag,
    PoolStatusBitIndex,
)


def test_pool_state_size():
    assert len(PoolState().pack()) == PoolState.LEN - 8


def test_get_set_status_by_bit():
    pool_state = PoolState()
    pool_state.set_status(4)  # 0000100
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.DEPOSIT) is True
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.WITHDRAW) is True

    # disable -> disable, nothing to change
    pool_state.set_status_by_bit(PoolStatusBitIndex.SWAP, PoolStatusBitFlag.DISABLE)
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is False

    # disable -> enable
    pool_state.set_status_by_bit(PoolStatusBitIndex.SWAP, PoolStatusBitFlag.ENABLE)
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is True

    # enable -> enable, nothing to change
    pool_state.set_status_by_bit(PoolStatusBitIndex.SWAP, PoolStatusBitFlag.ENABLE)
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is True

    # enable -> disable
    pool_state.set_status_by_bit(PoolStatusBitIndex.SWAP, PoolStatusBitFlag.DISABLE)
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is False

    pool_state.set_status(5)  # 0000101
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.DEPOSIT) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.WITHDRAW) is True

    pool_state.set_status(7)  # 0000111
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.DEPOSIT) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.WITHDRAW) is False

    pool_state.set_status(3)  # 0000011
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.SWAP) is True
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.DEPOSIT) is False
    assert pool_state.get_status_by_bit(PoolStatusBitIndex.WITHDRAW) is False


def test_set_status_by_bit_leaves_other_bits():
    pool_state = PoolState(status=0b111)
    pool_state.set_status_by_bit(PoolStatusBitIndex.WITHDRAW, PoolStatusBitFlag.ENABLE)
    assert pool_state.status == 0b101


def test_set_status_rejects_out_of_range():
    with pytest.raises(ValueError):
        PoolState().set_status(256)


def test_vault_amount_without_fee():
    pool_state = PoolState(
        protocol_fees_token_0=10,
        fund_fees_token_0=5,
        protocol_fees_token_1=3,
        fund_fees_token_1=7,
    )
    assert pool_state.vault_amount_without_fee(100, 50) == (85, 40)


def test_vault_amount_without_fee_underflow():
    pool_state = PoolState(protocol_fees_token_0=10, fund_fees_token_0=5)
    with pytest.raises(ArithmeticError):
        pool_state.vault_amount_without_fee(14, 50)


def test_token_price_x32():
    pool_state = PoolState()
    assert pool_state.token_price_x32(100, 400) == (4 * Q32, Q32 // 4)


def test_token_price_x32_zero_vault():
    with pytest.raises(ZeroDivisionError):
        PoolState().token_price_x32(0, 400)


def test_initialize():
    mint_0 = MintInfo(key=b"\x01" * 32, decimals=6, owner=b"\x0a" * 32)
    mint_1 = MintInfo(key=b"\x02" * 32, decimals=9, owner=b"\x0b" * 32)
    lp = MintInfo(key=b"\x03" * 32, decimals=9, owner=b"\x0a" * 32)
    pool_state = PoolState(protocol_fees_token_0=99, fund_fees_token_1=42)
    pool_state.initialize(
        auth_bump=253,
        lp_supply=1000,
        open_time=1_700_000_000,
        pool_creator=b"\x04" * 32,
        amm_config=b"\x05" * 32,
        token_0_vault=b"\x06" * 32,
        token_1_vault=b"\x07" * 32,
        token_0_mint=mint_0,
        token_1_mint=mint_1,
        lp_mint=lp,
        observation_key=b"\x08" * 32,
        epoch=512,
    )
    assert pool_state.token_0_mint == mint_0.key
    assert pool_state.token_1_program == mint_1.owner
    assert pool_state.lp_mint == lp.key
    assert pool_state.mint_0_decimals == 6
    assert pool_state.mint_1_decimals == 9
    assert pool_state.protocol_fees_token_0 == 0
    assert pool_state.fund_fees_token_1 == 0
    assert pool_state.recent_epoch == 512
    assert pool_state.open_time == 1_700_000_000


def test_pack_round_trip():
    pool_state = PoolState(
        amm_config=b"\x11" * 32,
        observation_key=b"\x22" * 32,
        auth_bump=255,
        status=4,
        lp_supply=123456789,
        open_time=42,
    )
    assert PoolState.unpack(pool_state.pack()) == pool_state


def test_unpack_too_short():
    with pytest.raises(ValueError):
        PoolState.unpack(bytes(100))