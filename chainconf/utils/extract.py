"""
Typed extraction from a raw hierarchical configuration source.

Two families of helpers sit on top of a single primitive, try_extract():

- required_*(node, key) fail the whole load when the key is absent,
  malformed, or rejected by a validator. The error names the full dotted
  path of the key.
- optional_*(node, key) return None when the key is absent AND when it is
  present but malformed. Existing configuration files rely on this
  collapse, so it is kept; the discarded error is logged at DEBUG level so
  that an operator typo can still be traced.

Validators follow utils.validation and return (is_valid, error_message).
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Callable, Optional, Tuple, TypeVar

from chainconf.errors import (
    ConfigConstraintError,
    MalformedConfigValue,
    MissingConfigKey,
)
from chainconf.utils.logger import get_logger
from chainconf.utils.numeric import parse_big_int, parse_duration, parse_hex_or_dec

logger = get_logger("extract")

T = TypeVar("T")
Validator = Callable[[Any], Tuple[bool, str]]


class ConfigNode:
    """
    A namespace of the raw source, remembering where it sits in the tree.

    Keys may be dotted ("server-address.port"); each segment descends one
    level of nested mappings. A None value counts as absent.
    """

    def __init__(self, data: Mapping, path: str = ""):
        if not isinstance(data, Mapping):
            raise MalformedConfigValue(path or "<root>", f"expected a namespace, got {type(data).__name__}")
        self._data = data
        self.path = path

    def path_of(self, key: str) -> str:
        """Full dotted path of a key below this node."""
        return f"{self.path}.{key}" if self.path else key

    def lookup(self, key: str) -> Tuple[Any, bool]:
        """Return (raw_value, found)."""
        current: Any = self._data
        for segment in key.split("."):
            if not isinstance(current, Mapping) or segment not in current:
                return None, False
            current = current[segment]
        if current is None:
            return None, False
        return current, True

    def has(self, key: str) -> bool:
        return self.lookup(key)[1]

    def __repr__(self) -> str:
        return f"ConfigNode({self.path or '<root>'})"


# =============================================================================
# Conversions
# =============================================================================


def _to_string(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return str(raw)
    raise TypeError(f"expected a string, got {type(raw).__name__}")


def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise TypeError("expected an integer, got bool")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        return parse_big_int(raw.strip())
    raise TypeError(f"expected an integer, got {type(raw).__name__}")


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise TypeError("expected a number, got bool")
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError as e:
            raise ValueError("number too large for a float") from e
    if isinstance(raw, str):
        return float(raw.strip())
    raise TypeError(f"expected a number, got {type(raw).__name__}")


def _to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    raise TypeError(f"expected a boolean, got {type(raw).__name__}")


def _to_big_int(raw: Any) -> int:
    # Fork thresholds are usually quoted so they survive readers that
    # clamp numbers to 64 bits.
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return parse_big_int(_to_string(raw))


def _to_hex_or_dec(raw: Any) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return parse_hex_or_dec(_to_string(raw))


def _to_string_list(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, (list, tuple)):
        return tuple(_to_string(item) for item in raw)
    raise TypeError(f"expected a list, got {type(raw).__name__}")


# =============================================================================
# Primitive
# =============================================================================


def try_extract(
    node: ConfigNode,
    key: str,
    convert: Callable[[Any], T],
) -> Tuple[Optional[T], bool, Optional[Exception]]:
    """
    Extract and convert one value.

    Returns:
        (value, found, error): found is False when the key is absent;
        error is set when the key is present but conversion failed.
    """
    raw, found = node.lookup(key)
    if not found:
        return None, False, None
    try:
        return convert(raw), True, None
    except (TypeError, ValueError, OverflowError) as e:
        return None, True, e


def required_value(
    node: ConfigNode,
    key: str,
    convert: Callable[[Any], T],
    kind: str,
    validator: Optional[Validator] = None,
) -> T:
    """Extract `key` with `convert`; any failure is fatal for the load."""
    path = node.path_of(key)
    value, found, error = try_extract(node, key, convert)
    if not found:
        raise MissingConfigKey(path)
    if error is not None:
        if isinstance(error, MalformedConfigValue):
            raise error
        raise MalformedConfigValue(path, f"expected {kind}: {error}", error)
    if validator is not None:
        valid, message = validator(value)
        if not valid:
            raise ConfigConstraintError(path, message)
    return value


def optional_value(
    node: ConfigNode,
    key: str,
    convert: Callable[[Any], T],
    kind: str,
    validator: Optional[Validator] = None,
) -> Optional[T]:
    """Extract `key` with `convert`; absent and malformed both yield None."""
    path = node.path_of(key)
    value, found, error = try_extract(node, key, convert)
    if found and error is None and validator is not None:
        valid, message = validator(value)
        if not valid:
            error = ConfigConstraintError(path, message)
    if error is not None:
        # Malformed optional values read as absent.
        logger.debug(f"Ignoring malformed optional {kind} at {path}: {error}")
        return None
    return value


# =============================================================================
# Required / optional pairs
# =============================================================================


def required_string(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> str:
    return required_value(node, key, _to_string, "a string", validator)


def optional_string(node: ConfigNode, key: str) -> Optional[str]:
    return optional_value(node, key, _to_string, "a string")


def required_int(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> int:
    return required_value(node, key, _to_int, "an integer", validator)


def optional_int(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> Optional[int]:
    return optional_value(node, key, _to_int, "an integer", validator)


def required_float(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> float:
    return required_value(node, key, _to_float, "a number", validator)


def required_bool(node: ConfigNode, key: str) -> bool:
    return required_value(node, key, _to_bool, "a boolean")


def required_big_int(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> int:
    """Arbitrary precision decimal integer."""
    return required_value(node, key, _to_big_int, "a decimal integer", validator)


def optional_big_int(node: ConfigNode, key: str) -> Optional[int]:
    return optional_value(node, key, _to_big_int, "a decimal integer")


def required_number(node: ConfigNode, key: str, validator: Optional[Validator] = None) -> int:
    """Arbitrary precision integer written in decimal or 0x-prefixed hex."""
    return required_value(node, key, _to_hex_or_dec, "a decimal or hex number", validator)


def required_duration(node: ConfigNode, key: str) -> timedelta:
    return required_value(node, key, parse_duration, "a duration")


def required_string_list(node: ConfigNode, key: str) -> Tuple[str, ...]:
    return required_value(node, key, _to_string_list, "a list of strings")


def optional_string_list(node: ConfigNode, key: str) -> Optional[Tuple[str, ...]]:
    return optional_value(node, key, _to_string_list, "a list of strings")


def required_node(node: ConfigNode, key: str) -> ConfigNode:
    """Sub-namespace; fails when absent or not a mapping."""
    return required_value(node, key, lambda raw: ConfigNode(raw, node.path_of(key)), "a namespace")


def optional_node(node: ConfigNode, key: str) -> Optional[ConfigNode]:
    return optional_value(node, key, lambda raw: ConfigNode(raw, node.path_of(key)), "a namespace")


__all__ = [
    "ConfigNode",
    "try_extract",
    "required_value",
    "optional_value",
    "required_string",
    "optional_string",
    "required_int",
    "optional_int",
    "required_float",
    "required_bool",
    "required_big_int",
    "optional_big_int",
    "required_number",
    "required_duration",
    "required_string_list",
    "optional_string_list",
    "required_node",
    "optional_node",
]
