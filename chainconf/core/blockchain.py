"""
Protocol rules by block height.

Defines:
- BlockchainConfig: fork-activation block numbers, chain id, account start
  nonce and the nested DAO fork and monetary policy groups
- DaoForkConfig: the one-time DAO hard fork and its extra-data window
- MonetaryPolicyConfig: the block reward schedule

Mistakes here do not crash the node, they make it apply the wrong
consensus rules at the wrong height. Thresholds are taken as written; no
ordering between them is enforced.
"""

from fractions import Fraction
from typing import Dict, Optional, Tuple

from pydantic import Field, field_validator

from chainconf.core.base import FrozenConfig
from chainconf.core.types import Address, hex_to_bytes
from chainconf.errors import MalformedConfigValue
from chainconf.utils.extract import (
    ConfigNode,
    optional_big_int,
    optional_int,
    optional_node,
    optional_string,
    optional_string_list,
    required_big_int,
    required_bool,
    required_float,
    required_int,
    required_node,
    required_number,
    required_string,
)
from chainconf.utils.logger import get_logger
from chainconf.utils.validation import (
    HASH_SIZE,
    MAX_CHAIN_ID,
    MAX_UINT256,
    validate_chain_id,
    validate_hex_string,
    validate_uint256,
)

logger = get_logger("blockchain")


# =============================================================================
# Monetary policy
# =============================================================================


class MonetaryPolicyConfig(FrozenConfig):
    """
    Block reward schedule.

    The reward is constant within an era of `era_duration` blocks and is
    reduced by `reward_reduction_rate` at every era boundary.
    """

    era_duration: int
    reward_reduction_rate: float
    first_era_block_reward: int

    @field_validator("reward_reduction_rate")
    @classmethod
    def _check_reduction_rate(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("reward-reduction-rate should be a value in range [0.0, 1.0]")
        return v

    @classmethod
    def from_config(cls, node: ConfigNode) -> "MonetaryPolicyConfig":
        return cls.build(
            node,
            era_duration=required_int(node, "era-duration"),
            reward_reduction_rate=required_float(node, "reward-reduction-rate"),
            first_era_block_reward=required_big_int(node, "first-era-block-reward"),
        )

    def era(self, block_number: int) -> int:
        if self.era_duration <= 0:
            raise ValueError(f"era-duration must be positive to compute eras, got {self.era_duration}")
        return block_number // self.era_duration

    def block_reward(self, block_number: int) -> int:
        """
        Base reward for a block: first_era_block_reward * (1 - rate) ** era.

        Computed with exact fractions and floored, so results do not depend
        on float rounding.
        """
        keep = 1 - Fraction(str(self.reward_reduction_rate))
        return int(self.first_era_block_reward * keep ** self.era(block_number))


# =============================================================================
# DAO fork
# =============================================================================


def _to_address(path: str, value: str) -> Address:
    """Addresses are read leniently but converted strictly."""
    try:
        return Address.from_hex(value)
    except (TypeError, ValueError) as e:
        raise MalformedConfigValue(path, f"expected an address: {e}", e) from e


def _address_list(node: ConfigNode, key: str) -> Tuple[Address, ...]:
    # A non-list value reads as absent; a bad entry fails the load.
    values = optional_string_list(node, key) or ()
    return tuple(_to_address(f"{node.path_of(key)}[{i}]", v) for i, v in enumerate(values))


class DaoForkConfig(FrozenConfig):
    """
    The DAO hard fork descriptor.

    Blocks in [fork_block_number, fork_block_number + range) must carry
    `block_extra_data` when it is configured. With range 0 the window is
    empty and no block ever requires it.
    """

    fork_block_number: int
    fork_block_hash: bytes
    block_extra_data: Optional[bytes] = None
    range: int = 0
    refund_contract: Optional[Address] = None
    drain_list: Tuple[Address, ...] = ()

    @classmethod
    def from_config(cls, node: ConfigNode) -> "DaoForkConfig":
        fork_block_hash = required_string(
            node, "fork-block-hash", lambda v: validate_hex_string(v, "fork-block-hash", HASH_SIZE)
        )
        block_extra_data = optional_string(node, "block-extra-data")
        extra_data_range = optional_int(node, "block-extra-data-range")
        refund = optional_string(node, "refund-contract-address")
        refund_contract = None
        if refund is not None:
            refund_contract = _to_address(node.path_of("refund-contract-address"), refund)

        return cls.build(
            node,
            fork_block_number=required_big_int(node, "fork-block-number"),
            fork_block_hash=hex_to_bytes(fork_block_hash),
            block_extra_data=block_extra_data.encode("utf-8") if block_extra_data is not None else None,
            range=extra_data_range if extra_data_range is not None else 0,
            refund_contract=refund_contract,
            drain_list=_address_list(node, "drain-list"),
        )

    @property
    def extra_data_block_range(self):
        """Half-open window of blocks that must carry the extra data."""
        return range(self.fork_block_number, self.fork_block_number + self.range)

    def is_dao_fork_block(self, block_number: int) -> bool:
        return block_number == self.fork_block_number

    def requires_extra_data(self, block_number: int) -> bool:
        return self.block_extra_data is not None and block_number in self.extra_data_block_range

    def get_extra_data(self, block_number: int) -> Optional[bytes]:
        if self.requires_extra_data(block_number):
            return self.block_extra_data
        return None


# =============================================================================
# Blockchain
# =============================================================================

# (field name, config key) in activation order
FORK_THRESHOLDS = (
    ("frontier_block_number", "frontier-block-number"),
    ("homestead_block_number", "homestead-block-number"),
    ("eip106_block_number", "eip106-block-number"),
    ("eip150_block_number", "eip150-block-number"),
    ("eip155_block_number", "eip155-block-number"),
    ("eip160_block_number", "eip160-block-number"),
    ("eip161_block_number", "eip161-block-number"),
    ("difficulty_bomb_pause_block_number", "difficulty-bomb-pause-block-number"),
    ("difficulty_bomb_continue_block_number", "difficulty-bomb-continue-block-number"),
)


class BlockchainConfig(FrozenConfig):
    """Fork-activation schedule and chain identity."""

    frontier_block_number: int
    homestead_block_number: int
    eip106_block_number: int
    eip150_block_number: int
    eip155_block_number: int
    eip160_block_number: int
    eip161_block_number: int
    max_code_size: Optional[int] = None
    difficulty_bomb_pause_block_number: int
    difficulty_bomb_continue_block_number: int

    custom_genesis_file: Optional[str] = None
    dao_fork_config: Optional[DaoForkConfig] = None
    account_start_nonce: int
    chain_id: int = Field(ge=0, le=MAX_CHAIN_ID)
    monetary_policy_config: MonetaryPolicyConfig
    gas_tie_breaker: bool

    @field_validator("account_start_nonce")
    @classmethod
    def _check_account_start_nonce(cls, v: int) -> int:
        if not 0 <= v <= MAX_UINT256:
            raise ValueError("account-start-nonce must fit in an unsigned 256-bit word")
        return v

    @classmethod
    def from_config(cls, root: ConfigNode) -> "BlockchainConfig":
        node = required_node(root, "blockchain")

        thresholds = {field: required_big_int(node, key) for field, key in FORK_THRESHOLDS}

        dao_node = optional_node(node, "dao")
        dao_fork_config = DaoForkConfig.from_config(dao_node) if dao_node is not None else None

        config = cls.build(
            node,
            **thresholds,
            max_code_size=optional_big_int(node, "max-code-size"),
            custom_genesis_file=optional_string(node, "custom-genesis-file"),
            dao_fork_config=dao_fork_config,
            account_start_nonce=required_big_int(
                node, "account-start-nonce", lambda v: validate_uint256(v, "account-start-nonce")
            ),
            chain_id=required_number(node, "chain-id", validate_chain_id),
            monetary_policy_config=MonetaryPolicyConfig.from_config(required_node(node, "monetary-policy")),
            gas_tie_breaker=required_bool(node, "gas-tie-breaker"),
        )

        logger.debug(
            f"Blockchain config: chain_id={config.chain_id}, "
            f"dao_fork={'yes' if dao_fork_config else 'no'}, "
            f"eip155={config.eip155_block_number}"
        )
        return config

    def fork_thresholds(self) -> Dict[str, int]:
        """Activation block numbers keyed by config name, in declaration order."""
        return {key: getattr(self, field) for field, key in FORK_THRESHOLDS}
