"""
Shared fixtures: a complete raw configuration resembling an Ethereum
Classic mainnet node.
"""

import copy

import pytest

from chainconf.utils.extract import ConfigNode

DAO_FORK_BLOCK_HASH = "94365e3a8c0b35089c1d1195081fe7489b528a84b22199c916180db8b28ade7f"

_RAW_CONFIG = {
    "chainconf": {
        "client-id": "chainconf/v0.1",
        "client-version": "chainconf/v0.1",
        "node-key-file": "/tmp/chainconf/nodeId.keys",
        "keystore-dir": "/tmp/chainconf/keystore",
        "shutdown-timeout": "15 seconds",
        "network": {
            "protocol-version": 63,
            "server-address": {"interface": "0.0.0.0", "port": 9076},
            "peer": {
                "connect-retry-delay": "20 seconds",
                "connect-max-retries": 30,
                "disconnect-poison-pill-timeout": "5 seconds",
                "wait-for-hello-timeout": "3 seconds",
                "wait-for-status-timeout": "30 seconds",
                "wait-for-chain-check-timeout": "15 seconds",
                "wait-for-handshake-timeout": "3 seconds",
                "wait-for-tcp-ack-timeout": "5 seconds",
                "max-outgoing-peers": 10,
                "max-incoming-peers": 5,
                "max-pending-peers": 5,
                "network-id": 1,
                "max-blocks-headers-per-message": 200,
                "max-blocks-bodies-per-message": 200,
                "max-receipts-per-message": 200,
                "max-mpt-components-per-message": 400,
                "update-nodes-initial-delay": "5 seconds",
                "update-nodes-interval": "20 seconds",
            },
            "rpc": {
                "mode": "http",
                "enabled": True,
                "interface": "localhost",
                "port": 8546,
                "apis": "eth,web3,net",
                "cors-allowed-origins": [],
                "account-transactions-max-blocks": 50000,
            },
        },
        "sync": {
            "do-fast-sync": True,
            "peers-scan-interval": "3 seconds",
            "blacklist-duration": "200 seconds",
            "start-retry-interval": "5 seconds",
            "sync-retry-interval": "5 seconds",
            "peer-response-timeout": "3 minutes",
            "print-status-interval": "30 seconds",
            "max-concurrent-requests": 50,
            "block-headers-per-request": 200,
            "block-bodies-per-request": 128,
            "receipts-per-request": 60,
            "nodes-per-request": 200,
            "min-peers-to-choose-target-block": 2,
            "target-block-offset": 500,
            "persist-state-snapshot-interval": "1 minute",
            "check-for-new-block-interval": "1 second",
            "branch-resolution-batch-size": 20,
            "fastsync-block-chain-only-peers-pool": 100,
            "branch-resolution-max-requests": 100,
            "fastsync-throttle": "0.1 seconds",
            "max-queued-block-number-ahead": 10,
            "max-queued-block-number-behind": 10,
            "max-new-block-hash-age": 20,
            "max-new-hashes": 64,
        },
        "db": {
            "iodb": {"path": "/tmp/chainconf/iodb/"},
            "leveldb": {
                "create-if-missing": True,
                "paranoid-checks": True,
                "verify-checksums": True,
                "path": "/tmp/chainconf/leveldb/",
            },
        },
        "filter": {
            "filter-timeout": "10 minutes",
            "filter-manager-query-timeout": "3 seconds",
        },
        "txPool": {
            "tx-pool-size": 1000,
            "pending-tx-manager-query-timeout": "5 seconds",
            "transaction-timeout": "2 minutes",
        },
        "mining": {
            "coinbase": "0011223344556677889900112233445566778899",
            "block-cashe-size": 30,
            "ommers-pool-size": 30,
            "active-timeout": "5 seconds",
            "ommer-pool-query-timeout": "5 seconds",
            "header-extra-data": "chainconf",
            "mining-enabled": False,
            "ethash-dir": "/tmp/chainconf/ethash",
            "mine-rounds": 100000,
        },
        "blockchain": {
            "frontier-block-number": "0",
            "homestead-block-number": "1150000",
            "eip106-block-number": "1000000000000000000",
            "eip150-block-number": "2500000",
            "eip155-block-number": "3000000",
            "eip160-block-number": "3000000",
            "eip161-block-number": "1000000000000000000",
            "difficulty-bomb-pause-block-number": "3000000",
            "difficulty-bomb-continue-block-number": "5000000",
            "chain-id": "0x3d",
            "account-start-nonce": "0",
            "gas-tie-breaker": False,
            "dao": {
                "fork-block-number": "1920000",
                "fork-block-hash": DAO_FORK_BLOCK_HASH,
                "block-extra-data": "dao-hard-fork",
                "block-extra-data-range": 10,
            },
            "monetary-policy": {
                "era-duration": 5000000,
                "reward-reduction-rate": 0.2,
                "first-era-block-reward": "5000000000000000000",
            },
        },
        "pruning": {"mode": "archive", "history": 1000},
    }
}


@pytest.fixture
def raw_config():
    """Fresh, mutable copy of a complete raw configuration."""
    return copy.deepcopy(_RAW_CONFIG)


@pytest.fixture
def app_node(raw_config):
    """ConfigNode over the application namespace."""
    return ConfigNode(raw_config["chainconf"], "chainconf")


@pytest.fixture
def blockchain_raw(raw_config):
    """The mutable blockchain namespace inside raw_config."""
    return raw_config["chainconf"]["blockchain"]
