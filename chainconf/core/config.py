"""
Node configuration root.

Aggregates every configuration group into one immutable value, built once
at startup from the raw source and passed explicitly to each subsystem.
There is no module-level instance.
"""

import json
import tomllib
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from chainconf.core.base import FrozenConfig
from chainconf.core.blockchain import BlockchainConfig
from chainconf.core.network import NetworkConfig
from chainconf.core.node import DbConfig, FilterConfig, MiningConfig, SyncConfig, TxPoolConfig
from chainconf.core.pruning import PruningConfig
from chainconf.errors import ConfigError, MalformedConfigValue
from chainconf.utils.extract import (
    ConfigNode,
    optional_string,
    required_duration,
    required_node,
    required_string,
)
from chainconf.utils.logger import get_logger

logger = get_logger("config")

# Top-level application namespace in the raw source
ROOT_NAMESPACE = "chainconf"


class ConfigRoot(FrozenConfig):
    """All node configuration, validated"""

    client_id: str
    client_version: str
    node_key_file: str
    keystore_dir: str
    shutdown_timeout: timedelta
    secure_random_algo: Optional[str] = None

    network: NetworkConfig
    sync: SyncConfig
    db: DbConfig
    filter: FilterConfig
    tx_pool: TxPoolConfig
    mining: MiningConfig
    blockchain: BlockchainConfig
    pruning: PruningConfig

    @classmethod
    def from_mapping(cls, raw: Mapping, namespace: str = ROOT_NAMESPACE) -> "ConfigRoot":
        """
        Build the configuration from a raw hierarchical source.

        Args:
            raw: Nested mappings as produced by a config reader
            namespace: Top-level application namespace to read from

        Returns:
            ConfigRoot

        Raises:
            ConfigError: on the first missing, malformed or invalid value
        """
        node = required_node(ConfigNode(raw), namespace)
        return cls.build(
            node,
            client_id=required_string(node, "client-id"),
            client_version=required_string(node, "client-version"),
            node_key_file=required_string(node, "node-key-file"),
            keystore_dir=required_string(node, "keystore-dir"),
            shutdown_timeout=required_duration(node, "shutdown-timeout"),
            secure_random_algo=optional_string(node, "secure-random-algo"),
            network=NetworkConfig.from_config(node),
            sync=SyncConfig.from_config(node),
            db=DbConfig.from_config(node),
            filter=FilterConfig.from_config(node),
            tx_pool=TxPoolConfig.from_config(node),
            mining=MiningConfig.from_config(node),
            blockchain=BlockchainConfig.from_config(node),
            pruning=PruningConfig.from_config(node),
        )

    def summary(self) -> Dict[str, Dict[str, Any]]:
        """Human readable overview, grouped by section."""
        blockchain = self.blockchain
        dao = blockchain.dao_fork_config
        monetary = blockchain.monetary_policy_config
        pruning = self.pruning.mode

        return {
            "node": {
                "client-id": self.client_id,
                "client-version": self.client_version,
                "shutdown-timeout": str(self.shutdown_timeout),
            },
            "network": {
                "listen": f"{self.network.server.interface}:{self.network.server.port}",
                "protocol-version": self.network.protocol_version,
                "network-id": self.network.peer.network_id,
                "max-peers": f"{self.network.peer.max_outgoing_peers} out / {self.network.peer.max_incoming_peers} in",
                "rpc": f"{self.network.rpc.interface}:{self.network.rpc.port}" if self.network.rpc.enabled else "disabled",
                "rpc-apis": ",".join(self.network.rpc.apis),
            },
            "blockchain": {
                "chain-id": blockchain.chain_id,
                **blockchain.fork_thresholds(),
                "max-code-size": blockchain.max_code_size,
                "dao-fork-block": dao.fork_block_number if dao else None,
                "dao-extra-data-range": dao.range if dao else None,
                "era-duration": monetary.era_duration,
                "reward-reduction-rate": monetary.reward_reduction_rate,
                "first-era-block-reward": monetary.first_era_block_reward,
            },
            "mining": {
                "enabled": self.mining.mining_enabled,
                "coinbase": str(self.mining.coinbase),
            },
            "pruning": {
                "mode": pruning.kind,
                "history": getattr(pruning, "history", None),
            },
        }


def read_raw_source(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a raw configuration file into nested mappings.

    JSON (.json) and TOML (.toml) are supported. No merging, includes or
    environment overlay is applied.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            with path.open("rb") as f:
                return tomllib.load(f)
        if suffix == ".json":
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise MalformedConfigValue(str(path), f"unsupported config format {suffix or '<none>'!r}")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise MalformedConfigValue(str(path), f"cannot parse config file: {e}", e) from e

    if not isinstance(data, dict):
        raise MalformedConfigValue(str(path), "config file must contain an object at the top level")
    return data


def load_config(path: Union[str, Path], namespace: str = ROOT_NAMESPACE) -> ConfigRoot:
    """
    Load configuration from a file.

    Args:
        path: JSON or TOML config file
        namespace: Top-level application namespace

    Returns:
        ConfigRoot instance
    """
    try:
        config = ConfigRoot.from_mapping(read_raw_source(path), namespace)
    except ConfigError as e:
        logger.error(f"Invalid configuration in {path}: {e}")
        raise

    logger.info(
        f"Loaded configuration from {path}: chain_id={config.blockchain.chain_id}, "
        f"pruning={config.pruning.mode.kind}"
    )
    return config
