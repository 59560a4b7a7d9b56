"""Configuration groups and the aggregate root."""

from chainconf.errors import (
    ConfigError,
    MissingConfigKey,
    MalformedConfigValue,
    ConfigConstraintError,
    MalformedNumber,
)
from chainconf.core.types import Address
from chainconf.core.pruning import PruningConfig, ArchivePruning, BasicPruning
from chainconf.core.blockchain import (
    BlockchainConfig,
    DaoForkConfig,
    MonetaryPolicyConfig,
)
from chainconf.core.config import ConfigRoot, load_config, read_raw_source

__all__ = [
    "ConfigError",
    "MissingConfigKey",
    "MalformedConfigValue",
    "ConfigConstraintError",
    "MalformedNumber",
    "Address",
    "PruningConfig",
    "ArchivePruning",
    "BasicPruning",
    "BlockchainConfig",
    "DaoForkConfig",
    "MonetaryPolicyConfig",
    "ConfigRoot",
    "load_config",
    "read_raw_source",
]
