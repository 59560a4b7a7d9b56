"""
chainconf - Typed node configuration for an Ethereum Classic style client.

Turns a raw hierarchical key/value source into immutable, validated
configuration groups:
- Network, peer, RPC, sync, storage, filter, tx pool and mining settings
- Pruning mode selection
- The protocol fork-activation schedule, DAO fork window and monetary policy
"""

__version__ = "0.1.0"
