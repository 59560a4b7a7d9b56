"""
Shared base for immutable configuration groups.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from chainconf.errors import ConfigConstraintError
from chainconf.utils.extract import ConfigNode


class FrozenConfig(BaseModel):
    """
    Immutable, validated configuration group.

    Instances compare by value; two groups built from the same input are
    interchangeable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @classmethod
    def build(cls, node: ConfigNode, **fields: Any):
        """
        Construct from values extracted under `node`.

        Model validation failures are reported against the namespace path
        so they read like any other load error.
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or cls.__name__}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigConstraintError(node.path or "<root>", details, e) from e
