"""
Benchmark for filtering and convolution performance.

Measures:
- Filtering time vs. signal length (NumPy vs Numba engine)
- Filtering time vs. number of columns
- Convolution time vs. input length (1D fast path vs N-D path)
- Throughput (samples/second)

Usage:
    python benchmarks/benchmark_filtering.py
"""

import time
from collections.abc import Callable

import numpy as np

from dspbase import FilterConfig, conv, filt


def benchmark_call(fn: Callable[[], object], n_runs: int = 5) -> tuple[float, float]:
    """
    Benchmark a zero-argument callable.

    Returns:
        (mean_time, std_time) in seconds
    """
    fn()  # JIT warmup

    times = []
    for _ in range(n_runs):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        times.append(elapsed)

    return np.mean(times), np.std(times)


def run_signal_length_benchmark() -> dict:
    """Benchmark filtering time vs. signal length."""
    print("=" * 70)
    print("BENCHMARK 1: Filtering Time vs. Signal Length")
    print("=" * 70)

    b = np.array([0.0675, 0.1349, 0.0675])
    a = np.array([1.0, -1.1430, 0.4128])
    signal_lengths = [1000, 10000, 100000]

    results = {"signal_lengths": signal_lengths, "numpy": [], "numba": []}
    rng = np.random.default_rng(0)

    for T in signal_lengths:
        x = rng.standard_normal(T)
        print(f"\nSignal length: {T}")
        for engine in ("numpy", "numba"):
            if engine == "numpy" and T > 10000:
                results[engine].append(np.nan)
                continue
            config = FilterConfig(engine=engine)
            mean_t, std_t = benchmark_call(lambda: filt(b, a, x, config=config))
            results[engine].append(mean_t)
            print(f"  {engine:6s}: {mean_t * 1000:8.3f} ± {std_t * 1000:.3f} ms "
                  f"({T / mean_t / 1e6:.2f} Msamples/s)")

    return results


def run_column_benchmark() -> dict:
    """Benchmark filtering time vs. number of columns."""
    print("\n" + "=" * 70)
    print("BENCHMARK 2: Filtering Time vs. Number of Columns")
    print("=" * 70)

    b = np.array([0.2, 0.3, 0.2])
    a = np.array([1.0, -0.5, 0.1])
    n_columns = [1, 4, 16, 64]

    results = {"n_columns": n_columns, "times": []}
    rng = np.random.default_rng(1)

    for C in n_columns:
        x = rng.standard_normal((20000, C))
        mean_t, std_t = benchmark_call(lambda: filt(b, a, x))
        results["times"].append(mean_t)
        print(f"  C={C:3d}: {mean_t * 1000:8.3f} ± {std_t * 1000:.3f} ms")

    return results


def run_convolution_benchmark() -> dict:
    """Benchmark 1D fast path against the N-D path on column vectors."""
    print("\n" + "=" * 70)
    print("BENCHMARK 3: Convolution Time vs. Input Length")
    print("=" * 70)

    lengths = [100, 1000, 10000, 100000]
    results = {"lengths": lengths, "fast_1d": [], "nd": []}
    rng = np.random.default_rng(2)

    for n in lengths:
        u = rng.standard_normal(n)
        v = rng.standard_normal(n // 2)
        fast_t, _ = benchmark_call(lambda: conv(u, v))
        nd_t, _ = benchmark_call(lambda: conv(u[:, np.newaxis], v[:, np.newaxis]))
        results["fast_1d"].append(fast_t)
        results["nd"].append(nd_t)
        print(f"  n={n:6d}: 1D {fast_t * 1000:8.3f} ms | N-D {nd_t * 1000:8.3f} ms")

    return results


def main():
    run_signal_length_benchmark()
    run_column_benchmark()
    run_convolution_benchmark()


if __name__ == "__main__":
    main()
