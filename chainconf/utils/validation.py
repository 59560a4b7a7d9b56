"""
Input Validation - Checks applied to operator-supplied configuration values.

Validators return (is_valid, error_message) so the extractor can attach
the offending key path before failing the load.
"""

import re
from typing import Any, Iterable, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20
HASH_SIZE = 32
MAX_HEADER_EXTRA_DATA_SIZE = 32

MIN_CHAIN_ID = 0
MAX_CHAIN_ID = 127
MIN_PORT = 0
MAX_PORT = 65535
MAX_UINT256 = 2**256 - 1

RPC_APIS = ("web3", "eth", "net", "personal", "daedalus")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if min_val is not None and value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_chain_id(value: Any) -> Tuple[bool, str]:
    """Validate a single-byte chain id."""
    valid, _ = validate_integer(value, "chain-id", MIN_CHAIN_ID, MAX_CHAIN_ID)
    if not valid:
        return False, f"chain-id must be a number in range [{MIN_CHAIN_ID}, {MAX_CHAIN_ID}], got {value}"
    return True, ""


def validate_port(value: Any) -> Tuple[bool, str]:
    """Validate a TCP port."""
    return validate_integer(value, "port", MIN_PORT, MAX_PORT)


def validate_uint256(value: Any, name: str = "uint256") -> Tuple[bool, str]:
    """Validate an unsigned 256-bit word."""
    return validate_integer(value, name, 0, MAX_UINT256)


def validate_non_negative(value: Any, name: str) -> Tuple[bool, str]:
    """Validate a count or size that cannot go below zero."""
    return validate_integer(value, name, 0)


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value[:2] in ("0x", "0X") else value

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    if not re.fullmatch(r"[0-9a-fA-F]*", hex_str):
        return False, f"{name} contains invalid hex characters"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


def validate_rpc_apis(apis: Iterable[str]) -> Tuple[bool, str]:
    """Validate that every requested RPC API is one the node serves."""
    invalid = [api for api in apis if api not in RPC_APIS]
    if invalid:
        return False, f"Invalid RPC APIs specified: {','.join(invalid)}"
    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_chain_id",
    "validate_port",
    "validate_uint256",
    "validate_non_negative",
    "validate_hex_string",
    "validate_rpc_apis",
    "ADDRESS_SIZE",
    "HASH_SIZE",
    "MAX_HEADER_EXTRA_DATA_SIZE",
    "MAX_CHAIN_ID",
    "MAX_UINT256",
    "RPC_APIS",
]
