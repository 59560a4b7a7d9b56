"""
State pruning mode selection.

Archive nodes keep every historical state; basic pruning keeps only the
most recent `history` blocks' worth.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from chainconf.core.base import FrozenConfig
from chainconf.errors import ConfigConstraintError
from chainconf.utils.extract import ConfigNode, required_int, required_node, required_string
from chainconf.utils.logger import get_logger
from chainconf.utils.validation import validate_non_negative

logger = get_logger("pruning")

ARCHIVE = "archive"
BASIC = "basic"


class ArchivePruning(FrozenConfig):
    """Retain all historical state."""
    kind: Literal["archive"] = ARCHIVE


class BasicPruning(FrozenConfig):
    """Retain the state of the last `history` blocks."""
    kind: Literal["basic"] = BASIC
    history: int = Field(ge=0)


PruningMode = Annotated[Union[ArchivePruning, BasicPruning], Field(discriminator="kind")]


class PruningConfig(FrozenConfig):
    mode: PruningMode

    @classmethod
    def from_config(cls, root: ConfigNode) -> "PruningConfig":
        node = required_node(root, "pruning")
        mode_name = required_string(node, "mode")

        if mode_name == ARCHIVE:
            mode = ArchivePruning()
        elif mode_name == BASIC:
            history = required_int(node, "history", lambda v: validate_non_negative(v, "history"))
            mode = BasicPruning(history=history)
        else:
            raise ConfigConstraintError(
                node.path_of("mode"),
                f"unknown pruning mode {mode_name!r}, expected {ARCHIVE!r} or {BASIC!r}",
            )

        logger.debug(f"Pruning mode: {mode}")
        return cls.build(node, mode=mode)
