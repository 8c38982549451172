"""Configuration objects for the filtering and convolution engines."""

from dataclasses import dataclass

VALID_ENGINES = ("auto", "numpy", "numba")


@dataclass
class FilterConfig:
    """Configuration for the filtering engine.

    Attributes:
        engine: Recurrence engine. 'numba' runs the compiled kernels,
            'numpy' the reference loops, 'auto' picks Numba for single and
            double precision working dtypes and NumPy for any other dtype.
        verbose: Print the selected engine.
    """
    engine: str = "auto"
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.engine not in VALID_ENGINES:
            raise ValueError(f"engine must be one of {VALID_ENGINES}, got '{self.engine}'")


@dataclass
class ConvolutionConfig:
    """
    Configuration for FFT convolution.

    Parameters
    ----------
    smooth_threshold : int, default=1024
        Output lengths up to this value use a power-of-two transform on the
        1D path; longer outputs use the next 5-smooth length
    verbose : bool, default=False
        Print the selected path and transform size
    """

    smooth_threshold: int = 1024
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.smooth_threshold < 1:
            raise ValueError(f"smooth_threshold must be >= 1, got {self.smooth_threshold}")
