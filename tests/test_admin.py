import pytest

from cpswap.admin import (
    ADMIN_ID,
    FEE_RATE_DENOMINATOR_VALUE,
    ErrorCode,
    ProgramError,
    create_amm_config,
    decode_pubkey,
    update_amm_config,
    update_pool_status,
)
from cpswap.config import AmmConfig
from cpswap.pool import PoolState, PoolStatusBitIndex

STRANGER = bytes([5]) * 32
NEW_OWNER = bytes([6]) * 32


def _config():
    return create_amm_config(ADMIN_ID, 3, 2500, 120000, 40000, 150, 254)


def test_decode_all_ones_is_zero_key():
    assert decode_pubkey("1" * 32) == bytes(32)


def test_decode_leading_ones_become_zero_bytes():
    assert decode_pubkey("1" * 31 + "2") == bytes(31) + b"\x01"


def test_decode_last_alphabet_character():
    assert decode_pubkey("1" * 31 + "z") == bytes(31) + b"\x39"


def test_decode_rejects_invalid_character():
    with pytest.raises(ValueError):
        decode_pubkey("0" * 32)


def test_decode_rejects_wrong_length():
    with pytest.raises(ValueError):
        decode_pubkey("2")


def test_create_amm_config_sets_fields():
    config = _config()
    assert config.index == 3
    assert config.trade_fee_rate == 2500
    assert config.protocol_fee_rate == 120000
    assert config.fund_fee_rate == 40000
    assert config.create_pool_fee == 150
    assert config.bump == 254
    assert config.protocol_owner == ADMIN_ID
    assert config.fund_owner == ADMIN_ID
    assert config.disable_create_pool is False
    assert AmmConfig.unpack(config.pack()) == config


def test_create_amm_config_requires_admin():
    with pytest.raises(ProgramError) as excinfo:
        create_amm_config(STRANGER, 0, 2500, 0, 0, 0, 255)
    assert excinfo.value.code is ErrorCode.INVALID_OWNER


def test_create_amm_config_trade_fee_must_be_below_denominator():
    with pytest.raises(ValueError):
        create_amm_config(ADMIN_ID, 0, FEE_RATE_DENOMINATOR_VALUE, 0, 0, 0, 255)


def test_create_amm_config_shares_must_fit_denominator():
    with pytest.raises(ValueError):
        create_amm_config(
            ADMIN_ID, 0, 0, FEE_RATE_DENOMINATOR_VALUE, 1, 0, 255
        )
    config = create_amm_config(ADMIN_ID, 0, 0, FEE_RATE_DENOMINATOR_VALUE, 0, 0, 255)
    assert config.protocol_fee_rate == FEE_RATE_DENOMINATOR_VALUE


def test_update_trade_fee_rate():
    config = _config()
    update_amm_config(ADMIN_ID, config, 0, 3000)
    assert config.trade_fee_rate == 3000
    with pytest.raises(ValueError):
        update_amm_config(ADMIN_ID, config, 0, FEE_RATE_DENOMINATOR_VALUE)
    assert config.trade_fee_rate == 3000


def test_update_protocol_and_fund_fee_rates_respect_sum():
    config = _config()
    update_amm_config(ADMIN_ID, config, 1, 200000)
    update_amm_config(ADMIN_ID, config, 2, 50000)
    assert (config.protocol_fee_rate, config.fund_fee_rate) == (200000, 50000)
    with pytest.raises(ValueError):
        update_amm_config(ADMIN_ID, config, 2, FEE_RATE_DENOMINATOR_VALUE)
    assert config.fund_fee_rate == 50000


def test_update_owners_from_remaining_accounts():
    config = _config()
    update_amm_config(ADMIN_ID, config, 3, 0, [NEW_OWNER])
    update_amm_config(ADMIN_ID, config, 4, 0, [STRANGER])
    assert config.protocol_owner == NEW_OWNER
    assert config.fund_owner == STRANGER


def test_update_owner_rejects_default_key():
    config = _config()
    with pytest.raises(ProgramError) as excinfo:
        update_amm_config(ADMIN_ID, config, 4, 0, [bytes(32)])
    assert excinfo.value.code is ErrorCode.REQUIRE_KEYS_NEQ_VIOLATED
    assert config.fund_owner == ADMIN_ID


def test_update_owner_needs_remaining_account():
    config = _config()
    with pytest.raises(ValueError):
        update_amm_config(ADMIN_ID, config, 3, 0, [])


def test_update_create_pool_fee_and_disable_flag():
    config = _config()
    update_amm_config(ADMIN_ID, config, 5, 999)
    update_amm_config(ADMIN_ID, config, 6, 7)
    assert config.create_pool_fee == 999
    assert config.disable_create_pool is True
    update_amm_config(ADMIN_ID, config, 6, 0)
    assert config.disable_create_pool is False


def test_update_unknown_param_is_invalid_input():
    with pytest.raises(ProgramError) as excinfo:
        update_amm_config(ADMIN_ID, _config(), 7, 1)
    assert excinfo.value.code is ErrorCode.INVALID_INPUT


def test_update_requires_admin():
    config = _config()
    with pytest.raises(ProgramError) as excinfo:
        update_amm_config(STRANGER, config, 5, 1)
    assert excinfo.value.code is ErrorCode.INVALID_OWNER
    assert config.create_pool_fee == 150


def test_update_pool_status_sets_status_and_epoch():
    pool = PoolState()
    update_pool_status(ADMIN_ID, pool, 4, 77)
    assert pool.status == 4
    assert pool.recent_epoch == 77
    assert pool.get_status_by_bit(PoolStatusBitIndex.SWAP) is False
    assert pool.get_status_by_bit(PoolStatusBitIndex.DEPOSIT) is True


def test_update_pool_status_rejects_value_above_byte():
    pool = PoolState()
    with pytest.raises(ProgramError) as excinfo:
        update_pool_status(ADMIN_ID, pool, 256, 1)
    assert excinfo.value.code is ErrorCode.REQUIRE_GTE_VIOLATED
    assert pool.status == 0


def test_update_pool_status_requires_admin():
    pool = PoolState()
    with pytest.raises(ProgramError) as excinfo:
        update_pool_status(STRANGER, pool, 1, 1)
    assert excinfo.value.code is ErrorCode.CONSTRAINT_ADDRESS
    assert pool.recent_epoch == 0