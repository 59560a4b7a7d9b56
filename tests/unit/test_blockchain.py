"""
Unit tests for the protocol rules configuration.

Tests cover:
1. Chain id parsing and range checks
2. Monetary policy validation and reward schedule
3. DAO fork block and extra-data window predicates
4. Fork thresholds, optional fields and account start nonce
"""

import pytest
from pydantic import ValidationError

from chainconf.core.blockchain import BlockchainConfig, DaoForkConfig, MonetaryPolicyConfig
from chainconf.core.types import Address
from chainconf.errors import ConfigConstraintError, MalformedConfigValue, MissingConfigKey
from chainconf.utils.extract import ConfigNode

FORK_BLOCK = 1920000


def load(app_node) -> BlockchainConfig:
    return BlockchainConfig.from_config(app_node)


def make_dao(**overrides) -> DaoForkConfig:
    fields = dict(
        fork_block_number=FORK_BLOCK,
        fork_block_hash=b"\x94" * 32,
        block_extra_data=b"dao-hard-fork",
        range=10,
    )
    fields.update(overrides)
    return DaoForkConfig(**fields)


# =============================================================================
# Chain id
# =============================================================================


class TestChainId:
    """Chain id must be a single byte value in [0, 127]."""

    @pytest.mark.parametrize("value,expected", [("0", 0), ("127", 127), ("0x3d", 61), ("0x7f", 127), (1, 1)])
    def test_in_range(self, app_node, blockchain_raw, value, expected):
        blockchain_raw["chain-id"] = value
        assert load(app_node).chain_id == expected

    @pytest.mark.parametrize("value", ["128", "0x80", "-1", "255", 1000])
    def test_out_of_range(self, app_node, blockchain_raw, value):
        blockchain_raw["chain-id"] = value
        with pytest.raises(ConfigConstraintError) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.chain-id"
        assert "[0, 127]" in excinfo.value.constraint

    def test_malformed(self, app_node, blockchain_raw):
        blockchain_raw["chain-id"] = "0x"
        with pytest.raises(MalformedConfigValue):
            load(app_node)

    def test_missing(self, app_node, blockchain_raw):
        del blockchain_raw["chain-id"]
        with pytest.raises(MissingConfigKey):
            load(app_node)

    def test_model_rejects_direct_construction(self, app_node):
        config = load(app_node)
        with pytest.raises(ValidationError):
            BlockchainConfig(**{**config.model_dump(), "chain_id": 128})


# =============================================================================
# Monetary policy
# =============================================================================


class TestMonetaryPolicy:
    """Tests for MonetaryPolicyConfig."""

    @pytest.mark.parametrize("rate", [0.0, 0.2, 1.0])
    def test_valid_rates(self, rate):
        config = MonetaryPolicyConfig(era_duration=5000000, reward_reduction_rate=rate, first_era_block_reward=5)
        assert config.reward_reduction_rate == rate

    @pytest.mark.parametrize("rate", [-0.01, 1.01, 2.0, float("inf")])
    def test_invalid_rates(self, rate):
        with pytest.raises(ValidationError, match="reward-reduction-rate"):
            MonetaryPolicyConfig(era_duration=5000000, reward_reduction_rate=rate, first_era_block_reward=5)

    def test_invalid_rate_fails_load(self, app_node, blockchain_raw):
        blockchain_raw["monetary-policy"]["reward-reduction-rate"] = 1.5
        with pytest.raises(ConfigConstraintError) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.monetary-policy"
        assert "reward-reduction-rate" in excinfo.value.constraint

    def test_missing_namespace_fails_load(self, app_node, blockchain_raw):
        del blockchain_raw["monetary-policy"]
        with pytest.raises(MissingConfigKey) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.monetary-policy"

    def test_loaded_values(self, app_node):
        policy = load(app_node).monetary_policy_config
        assert policy.era_duration == 5000000
        assert policy.reward_reduction_rate == 0.2
        assert policy.first_era_block_reward == 5 * 10**18

    def test_block_reward_schedule(self):
        policy = MonetaryPolicyConfig(
            era_duration=5000000, reward_reduction_rate=0.2, first_era_block_reward=5 * 10**18
        )
        assert policy.block_reward(0) == 5 * 10**18
        assert policy.block_reward(4999999) == 5 * 10**18
        assert policy.block_reward(5000000) == 4 * 10**18
        assert policy.block_reward(10000000) == 32 * 10**17

    def test_full_reduction(self):
        policy = MonetaryPolicyConfig(era_duration=10, reward_reduction_rate=1.0, first_era_block_reward=100)
        assert policy.block_reward(9) == 100
        assert policy.block_reward(10) == 0

    def test_era_requires_positive_duration(self):
        policy = MonetaryPolicyConfig(era_duration=0, reward_reduction_rate=0.5, first_era_block_reward=100)
        with pytest.raises(ValueError):
            policy.era(1)


# =============================================================================
# DAO fork
# =============================================================================


class TestDaoForkPredicates:
    """Tests for the DAO fork activation predicates."""

    def test_is_dao_fork_block_exact(self):
        dao = make_dao()
        assert dao.is_dao_fork_block(FORK_BLOCK)
        assert not dao.is_dao_fork_block(FORK_BLOCK - 1)
        assert not dao.is_dao_fork_block(FORK_BLOCK + 1)

    def test_requires_extra_data_window(self):
        dao = make_dao()
        assert dao.requires_extra_data(1920000)
        assert dao.requires_extra_data(1920009)
        assert not dao.requires_extra_data(1920010)
        assert not dao.requires_extra_data(1919999)

    def test_zero_range_never_requires(self):
        dao = make_dao(range=0)
        for n in (0, FORK_BLOCK - 1, FORK_BLOCK, FORK_BLOCK + 1, 10**30):
            assert not dao.requires_extra_data(n)
            assert dao.get_extra_data(n) is None

    def test_no_extra_data_never_requires(self):
        dao = make_dao(block_extra_data=None)
        assert not dao.requires_extra_data(FORK_BLOCK)
        assert dao.get_extra_data(FORK_BLOCK) is None

    def test_get_extra_data_matches_requires(self):
        dao = make_dao()
        for n in range(FORK_BLOCK - 5, FORK_BLOCK + 15):
            expected = b"dao-hard-fork" if dao.requires_extra_data(n) else None
            assert dao.get_extra_data(n) == expected

    def test_far_away_blocks(self):
        dao = make_dao()
        assert not dao.requires_extra_data(0)
        assert not dao.requires_extra_data(2**256)
        assert not dao.is_dao_fork_block(-1)

    def test_extra_data_block_range(self):
        assert make_dao().extra_data_block_range == range(FORK_BLOCK, FORK_BLOCK + 10)


class TestDaoForkLoading:
    """Tests for reading the dao namespace."""

    def test_loaded(self, app_node):
        dao = load(app_node).dao_fork_config
        assert dao.fork_block_number == FORK_BLOCK
        assert dao.fork_block_hash.hex() == "94365e3a8c0b35089c1d1195081fe7489b528a84b22199c916180db8b28ade7f"
        assert dao.block_extra_data == b"dao-hard-fork"
        assert dao.range == 10
        assert dao.refund_contract is None
        assert dao.drain_list == ()

    def test_absent_dao(self, app_node, blockchain_raw):
        del blockchain_raw["dao"]
        assert load(app_node).dao_fork_config is None

    def test_range_defaults_to_zero(self, app_node, blockchain_raw):
        del blockchain_raw["dao"]["block-extra-data-range"]
        dao = load(app_node).dao_fork_config
        assert dao.range == 0
        assert not dao.requires_extra_data(FORK_BLOCK)

    def test_malformed_range_reads_as_absent(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["block-extra-data-range"] = "ten"
        assert load(app_node).dao_fork_config.range == 0

    def test_refund_and_drain_list(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["refund-contract-address"] = "0xbf4ed7b27f1d666546e30d74d50d173d20bca754"
        blockchain_raw["dao"]["drain-list"] = [
            "0xd4fe7bc31cedb7bfb8a345f31e668033056b2728",
            "0x01",
        ]
        dao = load(app_node).dao_fork_config
        assert dao.refund_contract == Address.from_hex("bf4ed7b27f1d666546e30d74d50d173d20bca754")
        assert len(dao.drain_list) == 2
        assert dao.drain_list[1].raw == b"\x00" * 19 + b"\x01"

    def test_non_list_drain_list_reads_as_empty(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["drain-list"] = "0xd4fe7bc31cedb7bfb8a345f31e668033056b2728"
        assert load(app_node).dao_fork_config.drain_list == ()

    def test_bad_drain_list_entry_fails_load(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["drain-list"] = ["0xd4fe7bc31cedb7bfb8a345f31e668033056b2728", "0xZZ"]
        with pytest.raises(MalformedConfigValue) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.dao.drain-list[1]"

    def test_bad_refund_address_fails_load(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["refund-contract-address"] = "0x" + "ab" * 22
        with pytest.raises(MalformedConfigValue) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.dao.refund-contract-address"

    def test_missing_fork_block_number(self, app_node, blockchain_raw):
        del blockchain_raw["dao"]["fork-block-number"]
        with pytest.raises(MissingConfigKey) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.dao.fork-block-number"

    def test_bad_fork_block_hash(self, app_node, blockchain_raw):
        blockchain_raw["dao"]["fork-block-hash"] = "94365e"
        with pytest.raises(ConfigConstraintError) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.dao.fork-block-hash"


# =============================================================================
# Blockchain
# =============================================================================


class TestBlockchainConfig:
    """Tests for thresholds and remaining fields."""

    def test_thresholds(self, app_node):
        config = load(app_node)
        assert config.frontier_block_number == 0
        assert config.homestead_block_number == 1150000
        assert config.eip106_block_number == 10**18
        assert config.eip150_block_number == 2500000
        assert config.eip155_block_number == 3000000
        assert config.eip160_block_number == 3000000
        assert config.eip161_block_number == 10**18
        assert config.difficulty_bomb_pause_block_number == 3000000
        assert config.difficulty_bomb_continue_block_number == 5000000

    def test_fork_thresholds_order(self, app_node):
        keys = list(load(app_node).fork_thresholds())
        assert keys[0] == "frontier-block-number"
        assert keys[-1] == "difficulty-bomb-continue-block-number"
        assert len(keys) == 9

    def test_unordered_thresholds_accepted(self, app_node, blockchain_raw):
        blockchain_raw["homestead-block-number"] = "9000000"
        blockchain_raw["eip150-block-number"] = "100"
        config = load(app_node)
        assert config.homestead_block_number > config.eip150_block_number

    def test_missing_threshold(self, app_node, blockchain_raw):
        del blockchain_raw["eip155-block-number"]
        with pytest.raises(MissingConfigKey) as excinfo:
            load(app_node)
        assert excinfo.value.path == "chainconf.blockchain.eip155-block-number"

    def test_malformed_threshold(self, app_node, blockchain_raw):
        blockchain_raw["homestead-block-number"] = "1.15e6"
        with pytest.raises(MalformedConfigValue):
            load(app_node)

    def test_optional_fields(self, app_node, blockchain_raw):
        config = load(app_node)
        assert config.max_code_size is None
        assert config.custom_genesis_file is None

        blockchain_raw["max-code-size"] = "24576"
        blockchain_raw["custom-genesis-file"] = "genesis.json"
        config = load(app_node)
        assert config.max_code_size == 24576
        assert config.custom_genesis_file == "genesis.json"

    def test_malformed_max_code_size_reads_as_absent(self, app_node, blockchain_raw):
        blockchain_raw["max-code-size"] = "lots"
        assert load(app_node).max_code_size is None

    def test_account_start_nonce(self, app_node, blockchain_raw):
        blockchain_raw["account-start-nonce"] = str(2**20)
        assert load(app_node).account_start_nonce == 2**20

    @pytest.mark.parametrize("value", ["-1", str(2**256)])
    def test_account_start_nonce_bounds(self, app_node, blockchain_raw, value):
        blockchain_raw["account-start-nonce"] = value
        with pytest.raises(ConfigConstraintError):
            load(app_node)

    def test_gas_tie_breaker(self, app_node, blockchain_raw):
        assert load(app_node).gas_tie_breaker is False
        blockchain_raw["gas-tie-breaker"] = True
        assert load(app_node).gas_tie_breaker is True

    def test_immutable(self, app_node):
        config = load(app_node)
        with pytest.raises(ValidationError):
            config.chain_id = 1

    def test_equal_when_loaded_twice(self, raw_config):
        first = BlockchainConfig.from_config(ConfigNode(raw_config["chainconf"], "chainconf"))
        second = BlockchainConfig.from_config(ConfigNode(raw_config["chainconf"], "chainconf"))
        assert first == second
        assert first is not second
