"""
Node subsystem settings: sync, storage, filters, transaction pool, mining.

Each group is a flat namespace of scalars and durations with no
cross-field rules.
"""

from datetime import timedelta

from chainconf.core.base import FrozenConfig
from chainconf.core.types import Address
from chainconf.utils.extract import (
    ConfigNode,
    required_bool,
    required_duration,
    required_int,
    required_node,
    required_string,
    required_value,
)
from chainconf.utils.validation import MAX_HEADER_EXTRA_DATA_SIZE, validate_non_negative


class SyncConfig(FrozenConfig):
    do_fast_sync: bool

    peers_scan_interval: timedelta
    blacklist_duration: timedelta
    start_retry_interval: timedelta
    sync_retry_interval: timedelta
    peer_response_timeout: timedelta
    print_status_interval: timedelta

    max_concurrent_requests: int
    block_headers_per_request: int
    block_bodies_per_request: int
    receipts_per_request: int
    nodes_per_request: int
    min_peers_to_choose_target_block: int
    target_block_offset: int
    persist_state_snapshot_interval: timedelta

    check_for_new_block_interval: timedelta
    branch_resolution_batch_size: int
    block_chain_only_peers_pool_size: int
    branch_resolution_max_requests: int
    fast_sync_throttle: timedelta

    max_queued_block_number_ahead: int
    max_queued_block_number_behind: int

    max_new_block_hash_age: int
    max_new_hashes: int

    @classmethod
    def from_config(cls, root: ConfigNode) -> "SyncConfig":
        node = required_node(root, "sync")
        return cls.build(
            node,
            do_fast_sync=required_bool(node, "do-fast-sync"),
            peers_scan_interval=required_duration(node, "peers-scan-interval"),
            blacklist_duration=required_duration(node, "blacklist-duration"),
            start_retry_interval=required_duration(node, "start-retry-interval"),
            sync_retry_interval=required_duration(node, "sync-retry-interval"),
            peer_response_timeout=required_duration(node, "peer-response-timeout"),
            print_status_interval=required_duration(node, "print-status-interval"),
            max_concurrent_requests=required_int(node, "max-concurrent-requests"),
            block_headers_per_request=required_int(node, "block-headers-per-request"),
            block_bodies_per_request=required_int(node, "block-bodies-per-request"),
            receipts_per_request=required_int(node, "receipts-per-request"),
            nodes_per_request=required_int(node, "nodes-per-request"),
            min_peers_to_choose_target_block=required_int(node, "min-peers-to-choose-target-block"),
            target_block_offset=required_int(node, "target-block-offset"),
            persist_state_snapshot_interval=required_duration(node, "persist-state-snapshot-interval"),
            check_for_new_block_interval=required_duration(node, "check-for-new-block-interval"),
            branch_resolution_batch_size=required_int(node, "branch-resolution-batch-size"),
            block_chain_only_peers_pool_size=required_int(node, "fastsync-block-chain-only-peers-pool"),
            branch_resolution_max_requests=required_int(node, "branch-resolution-max-requests"),
            fast_sync_throttle=required_duration(node, "fastsync-throttle"),
            max_queued_block_number_ahead=required_int(node, "max-queued-block-number-ahead"),
            max_queued_block_number_behind=required_int(node, "max-queued-block-number-behind"),
            max_new_block_hash_age=required_int(node, "max-new-block-hash-age"),
            max_new_hashes=required_int(node, "max-new-hashes"),
        )


class IodbConfig(FrozenConfig):
    path: str


class LevelDbConfig(FrozenConfig):
    create_if_missing: bool
    paranoid_checks: bool
    verify_checksums: bool
    path: str


class DbConfig(FrozenConfig):
    iodb: IodbConfig
    leveldb: LevelDbConfig

    @classmethod
    def from_config(cls, root: ConfigNode) -> "DbConfig":
        node = required_node(root, "db")
        iodb_node = required_node(node, "iodb")
        leveldb_node = required_node(node, "leveldb")
        return cls.build(
            node,
            iodb=IodbConfig.build(iodb_node, path=required_string(iodb_node, "path")),
            leveldb=LevelDbConfig.build(
                leveldb_node,
                create_if_missing=required_bool(leveldb_node, "create-if-missing"),
                paranoid_checks=required_bool(leveldb_node, "paranoid-checks"),
                verify_checksums=required_bool(leveldb_node, "verify-checksums"),
                path=required_string(leveldb_node, "path"),
            ),
        )


class FilterConfig(FrozenConfig):
    filter_timeout: timedelta
    filter_manager_query_timeout: timedelta

    @classmethod
    def from_config(cls, root: ConfigNode) -> "FilterConfig":
        node = required_node(root, "filter")
        return cls.build(
            node,
            filter_timeout=required_duration(node, "filter-timeout"),
            filter_manager_query_timeout=required_duration(node, "filter-manager-query-timeout"),
        )


class TxPoolConfig(FrozenConfig):
    tx_pool_size: int
    pending_tx_manager_query_timeout: timedelta
    transaction_timeout: timedelta

    @classmethod
    def from_config(cls, root: ConfigNode) -> "TxPoolConfig":
        node = required_node(root, "txPool")
        return cls.build(
            node,
            tx_pool_size=required_int(node, "tx-pool-size", lambda v: validate_non_negative(v, "tx-pool-size")),
            pending_tx_manager_query_timeout=required_duration(node, "pending-tx-manager-query-timeout"),
            transaction_timeout=required_duration(node, "transaction-timeout"),
        )


def header_extra_data(raw: str) -> bytes:
    """UTF-8 bytes of the configured string, cut to the header limit."""
    if not isinstance(raw, str):
        raise TypeError(f"expected a string, got {type(raw).__name__}")
    return raw.encode("utf-8")[:MAX_HEADER_EXTRA_DATA_SIZE]


class MiningConfig(FrozenConfig):
    ommers_pool_size: int
    block_cache_size: int
    coinbase: Address
    active_timeout: timedelta
    ommer_pool_query_timeout: timedelta
    header_extra_data: bytes
    mining_enabled: bool
    ethash_dir: str
    mine_rounds: int

    @classmethod
    def from_config(cls, root: ConfigNode) -> "MiningConfig":
        node = required_node(root, "mining")
        return cls.build(
            node,
            coinbase=required_value(node, "coinbase", Address.from_hex, "an address"),
            # key spelling matches deployed config files
            block_cache_size=required_int(node, "block-cashe-size"),
            ommers_pool_size=required_int(node, "ommers-pool-size"),
            active_timeout=required_duration(node, "active-timeout"),
            ommer_pool_query_timeout=required_duration(node, "ommer-pool-query-timeout"),
            header_extra_data=required_value(node, "header-extra-data", header_extra_data, "a string"),
            mining_enabled=required_bool(node, "mining-enabled"),
            ethash_dir=required_string(node, "ethash-dir"),
            mine_rounds=required_int(node, "mine-rounds"),
        )
