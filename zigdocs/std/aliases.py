"""Alias unwinding.

Many std declarations are plain re-exports (`pub const ArrayList = array_list.ArrayList;`),
which the engine categorizes as aliases. Rendering and member listing always work on the
concrete declaration at the end of the chain.
"""

import logging
from typing import NamedTuple

from zigdocs.std.engine import StdIndex
from zigdocs.types import Category

logger = logging.getLogger(__name__)


class Target(NamedTuple):
    """A concrete (non-alias) declaration."""

    handle: int
    category: Category


def unwind(index: StdIndex, handle: int) -> Target | None:
    """Follow an alias chain to its concrete declaration.

    Returns the handle unchanged when it is not an alias. Returns None when a
    link in the chain has no target or the chain loops back on itself.
    """
    seen: set[int] = set()
    current = handle
    while True:
        category, aliasee = index.categorize(current)
        if category is not Category.ALIAS:
            return Target(current, category)
        if current in seen:
            logger.debug(f"Alias cycle at handle {current} while unwinding {handle}")
            return None
        seen.add(current)
        if aliasee is None:
            logger.debug(f"Alias {current} has no target")
            return None
        current = aliasee
