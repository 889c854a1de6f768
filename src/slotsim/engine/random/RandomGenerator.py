from typing import Optional, Union

import numpy as np
from numpy.random import Generator


class RandomGenerator:
    """
    This class is a wrapper around a random number generator stream managed by the RandomManager to allow
    the generation of antithetic variates.
    """

    def __init__(
        self,
        native_stream: Generator,
        is_antithetic: bool
    ) -> None:
        self._stream = native_stream
        self._antithetic = is_antithetic

    def uniform(self, low: float = 0.0, high: float = 1.0, size=None):
        if self._antithetic:
            if size is None:
                return high + low - self._stream.uniform(low, high)
            else:
                return high + low - self._stream.uniform(low, high, size=size)
        else:
            if size is None:
                return self._stream.uniform(low, high)
            else:
                return self._stream.uniform(low, high, size=size)

    def integers(
        self,
        low: int,
        high: Union[int, np.ndarray],
        size: Optional[int] = None,
    ) -> Union[int, np.ndarray]:
        """
        Generates random integers in the range [low, high)
        using the inverse transform method to support antithetic variates.

        Args:
            low (int): The lower bound (inclusive).
            high (int | ndarray): The upper bound (exclusive). An array gives one
                                  bound per variate and requires size to match.
            size: The number of variates to generate. None returns a single int.

        Returns:
            int | ndarray: the random integer(s).
        """
        if size is None:
            span = int(high) - low
            if span <= 0:
                return low

            # floor(U * N), clamped for the antithetic edge case U=0.0 -> (1-U)=1.0
            offset = int(self.uniform() * span)
            if offset >= span:
                offset = span - 1
            return low + offset

        span = np.broadcast_to(np.asarray(high, dtype=np.int64) - low, (size,))
        offset = np.floor(self.uniform(size=size) * span).astype(np.int64)
        offset = np.minimum(offset, span - 1)
        return low + np.maximum(offset, 0)
