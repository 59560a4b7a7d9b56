"""
Network configuration: listen address, peer management and JSON-RPC.

The RPC group only carries raw CORS origin strings; turning them into an
origin matcher is the RPC server's job.
"""

from datetime import timedelta
from typing import Optional, Tuple

from pydantic import Field

from chainconf.core.base import FrozenConfig
from chainconf.utils.extract import (
    ConfigNode,
    optional_string,
    required_bool,
    required_duration,
    required_int,
    required_node,
    required_string,
    required_value,
    try_extract,
)
from chainconf.utils.logger import get_logger
from chainconf.utils.validation import MAX_PORT, validate_port, validate_rpc_apis

logger = get_logger("network")


class ServerAddress(FrozenConfig):
    interface: str
    port: int = Field(ge=0, le=MAX_PORT)

    @property
    def listen_address(self) -> Tuple[str, int]:
        return self.interface, self.port


class RLPxConfig(FrozenConfig):
    wait_for_handshake_timeout: timedelta
    wait_for_tcp_ack_timeout: timedelta


class FastSyncHostConfig(FrozenConfig):
    """Limits on what this node serves to peers that fast sync from it."""

    max_blocks_headers_per_message: int
    max_blocks_bodies_per_message: int
    max_receipts_per_message: int
    max_mpt_components_per_message: int


class PeerConfig(FrozenConfig):
    connect_retry_delay: timedelta
    connect_max_retries: int
    disconnect_poison_pill_timeout: timedelta
    wait_for_hello_timeout: timedelta
    wait_for_status_timeout: timedelta
    wait_for_chain_check_timeout: timedelta
    max_outgoing_peers: int
    max_incoming_peers: int
    max_pending_peers: int
    network_id: int
    rlpx: RLPxConfig
    fast_sync_host: FastSyncHostConfig
    update_nodes_initial_delay: timedelta
    update_nodes_interval: timedelta

    @classmethod
    def from_config(cls, node: ConfigNode) -> "PeerConfig":
        # rlpx and fast sync host settings live flat in the peer namespace
        rlpx = RLPxConfig.build(
            node,
            wait_for_handshake_timeout=required_duration(node, "wait-for-handshake-timeout"),
            wait_for_tcp_ack_timeout=required_duration(node, "wait-for-tcp-ack-timeout"),
        )
        fast_sync_host = FastSyncHostConfig.build(
            node,
            max_blocks_headers_per_message=required_int(node, "max-blocks-headers-per-message"),
            max_blocks_bodies_per_message=required_int(node, "max-blocks-bodies-per-message"),
            max_receipts_per_message=required_int(node, "max-receipts-per-message"),
            max_mpt_components_per_message=required_int(node, "max-mpt-components-per-message"),
        )
        return cls.build(
            node,
            connect_retry_delay=required_duration(node, "connect-retry-delay"),
            connect_max_retries=required_int(node, "connect-max-retries"),
            disconnect_poison_pill_timeout=required_duration(node, "disconnect-poison-pill-timeout"),
            wait_for_hello_timeout=required_duration(node, "wait-for-hello-timeout"),
            wait_for_status_timeout=required_duration(node, "wait-for-status-timeout"),
            wait_for_chain_check_timeout=required_duration(node, "wait-for-chain-check-timeout"),
            max_outgoing_peers=required_int(node, "max-outgoing-peers"),
            max_incoming_peers=required_int(node, "max-incoming-peers"),
            max_pending_peers=required_int(node, "max-pending-peers"),
            network_id=required_int(node, "network-id"),
            rlpx=rlpx,
            fast_sync_host=fast_sync_host,
            update_nodes_initial_delay=required_duration(node, "update-nodes-initial-delay"),
            update_nodes_interval=required_duration(node, "update-nodes-interval"),
        )


def parse_rpc_apis(raw: str) -> Tuple[str, ...]:
    """Split a comma separated API list, trimmed and lower-cased."""
    if not isinstance(raw, str):
        raise TypeError(f"expected a string, got {type(raw).__name__}")
    return tuple(api.strip().lower() for api in raw.split(","))


def _cors_origins(node: ConfigNode, key: str) -> Tuple[str, ...]:
    """
    CORS origins as raw strings.

    Accepts a list of origins or a single string; "*" stays as written.
    """
    origins, found, _ = try_extract(node, key, _origin_list)
    if found and origins is not None:
        return origins
    return (required_string(node, key),)


def _origin_list(raw) -> Tuple[str, ...]:
    if not isinstance(raw, (list, tuple)) or not all(isinstance(o, str) for o in raw):
        raise TypeError("not a list of origins")
    return tuple(raw)


class RpcConfig(FrozenConfig):
    mode: str
    enabled: bool
    interface: str
    port: int = Field(ge=0, le=MAX_PORT)
    apis: Tuple[str, ...]
    certificate_keystore_path: Optional[str] = None
    certificate_keystore_type: Optional[str] = None
    certificate_password_file: Optional[str] = None
    cors_allowed_origins: Tuple[str, ...]
    account_transactions_max_blocks: int

    @classmethod
    def from_config(cls, node: ConfigNode) -> "RpcConfig":
        apis = required_value(node, "apis", parse_rpc_apis, "a comma separated list of APIs", validate_rpc_apis)
        return cls.build(
            node,
            mode=required_string(node, "mode"),
            enabled=required_bool(node, "enabled"),
            interface=required_string(node, "interface"),
            port=required_int(node, "port", validate_port),
            apis=apis,
            certificate_keystore_path=optional_string(node, "certificate-keystore-path"),
            certificate_keystore_type=optional_string(node, "certificate-keystore-type"),
            certificate_password_file=optional_string(node, "certificate-password-file"),
            cors_allowed_origins=_cors_origins(node, "cors-allowed-origins"),
            account_transactions_max_blocks=required_int(node, "account-transactions-max-blocks"),
        )


class NetworkConfig(FrozenConfig):
    protocol_version: int
    server: ServerAddress
    peer: PeerConfig
    rpc: RpcConfig

    @classmethod
    def from_config(cls, root: ConfigNode) -> "NetworkConfig":
        node = required_node(root, "network")
        server_node = required_node(node, "server-address")
        server = ServerAddress.build(
            server_node,
            interface=required_string(server_node, "interface"),
            port=required_int(server_node, "port", validate_port),
        )
        config = cls.build(
            node,
            protocol_version=required_int(node, "protocol-version"),
            server=server,
            peer=PeerConfig.from_config(required_node(node, "peer")),
            rpc=RpcConfig.from_config(required_node(node, "rpc")),
        )
        logger.debug(
            f"Network config: listen={server.interface}:{server.port}, "
            f"rpc={'on' if config.rpc.enabled else 'off'} apis={','.join(config.rpc.apis)}"
        )
        return config
