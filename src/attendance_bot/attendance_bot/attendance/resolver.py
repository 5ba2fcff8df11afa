from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..core.exceptions import ValidationError
from ..schedules.model import ClassRecord

_INDEX_SEPARATORS = re.compile(r"[,\s]+")


def resolve_indices(classes: Sequence[ClassRecord], indices: Iterable[int]) -> list[tuple[int, ClassRecord]]:
    """Pair each 1-based index with its class.

    Indices must already be validated against len(classes).
    """

    return [(index, classes[index - 1]) for index in indices]


def parse_index_args(args: Sequence[str], count: int) -> list[int]:
    """Turn `/attend 1 3,5` style arguments into 1-based indices.

    Tokens that are not numbers or fall outside [1, count] are dropped, as
    are repeats. Raises ValidationError when nothing usable is left.
    """

    indices: list[int] = []
    for arg in args:
        for token in _INDEX_SEPARATORS.split(arg.strip()):
            if not (token.isascii() and token.isdigit()):
                continue
            n = int(token)
            if 1 <= n <= count and n not in indices:
                indices.append(n)

    if not indices:
        raise ValidationError("I couldn't find those class numbers. Use /today to see your schedule.")
    return indices
