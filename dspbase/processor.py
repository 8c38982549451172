"""
Block filter processor with explicit state continuation.

Filters a long signal chunk by chunk, carrying the final state of each
chunk into the next, so block processing equals whole-signal processing.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from dspbase.coefficients import ArrayF, FilterCoefficients
from dspbase.config import FilterConfig
from dspbase.filtering import filt


@dataclass
class FilterProcessor:
    """
    Chunked LTI filter processor.

    Handles block-based filtering with correct state management for
    offline processing of long multi-column signals.

    Example:
        >>> coeffs = FilterCoefficients(b=[0.2, 0.2], a=[1.0, -0.6])
        >>> proc = FilterProcessor(coeffs)
        >>> y = proc.process(x, block_size=1024)
    """

    coefficients: FilterCoefficients
    config: FilterConfig = field(default_factory=FilterConfig)

    def __post_init__(self):
        """Initialize processor state."""
        self.reset()

    def reset(self):
        """Reset filter memory to zeros."""
        self._state: ArrayF | None = None

    @property
    def state(self) -> ArrayF | None:
        """Final state of the last processed block, None after reset()."""
        return self._state

    def process_block(self, x_block: ArrayF) -> ArrayF:
        """
        Filter one block and keep its final state for the next call.

        Args:
            x_block: Input block (B,) or (B, ...). Trailing shape must stay
                the same between calls.

        Returns:
            Output block, same shape as the input
        """
        y, self._state = filt(
            self.coefficients.b,
            self.coefficients.a,
            x_block,
            self._state,
            return_state=True,
            config=self.config,
        )
        return y

    def process(self, x: ArrayF, block_size: int = 512) -> ArrayF:
        """
        Filter a complete signal in blocks, starting from zero state.

        Args:
            x: Input signal (T,) or (T, ...)
            block_size: Samples per block along axis 0

        Returns:
            Filtered signal
        """
        if block_size < 1:
            raise ValueError(f"block_size must be >= 1, got {block_size}")

        x = np.asarray(x)
        self.reset()

        blocks = [
            self.process_block(x[i:i + block_size])
            for i in range(0, x.shape[0], block_size)
        ]
        if not blocks:
            return filt(self.coefficients.b, self.coefficients.a, x, config=self.config)
        return np.concatenate(blocks, axis=0)

    def get_info(self) -> dict:
        """Get processor configuration info."""
        return {
            'numerator_length': self.coefficients.b.shape[0],
            'denominator_length': self.coefficients.a.shape[0],
            'state_length': self.coefficients.state_length,
            'is_fir': self.coefficients.is_fir,
            'engine': self.config.engine,
        }
