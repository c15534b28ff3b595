"""Random input arrays for the visualizer."""
import logging
from typing import List, Optional

import numpy as np

from .settings import ARRAY_SIZE, MIN_VALUE, MAX_VALUE

logger = logging.getLogger(__name__)


def generate(size: int = ARRAY_SIZE,
             min_value: int = MIN_VALUE,
             max_value: int = MAX_VALUE,
             seed: Optional[int] = None,
             rng: Optional[np.random.Generator] = None) -> List[int]:
    """
    Return ``size`` independent uniform integers in ``[min_value, max_value]``.

    Pass ``seed`` (or an existing ``rng``) for a reproducible array. The result
    is a plain list of Python ints so it can be mutated and compared freely.
    """
    if size < 0:
        raise ValueError(f"size must be >= 0, got {size}")
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must not exceed max_value ({max_value})")
    if rng is None:
        rng = np.random.default_rng(seed)
    # integers() excludes the upper bound unless endpoint=True
    values = rng.integers(min_value, max_value, size=size, endpoint=True)
    logger.debug("Generated array of %d values in [%d, %d]", size, min_value, max_value)
    return [int(v) for v in values]
