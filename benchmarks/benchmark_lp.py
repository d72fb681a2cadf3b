#!/usr/bin/env python3
"""
critline LP Benchmark: simplex stage against scipy.optimize.linprog (HiGHS)
"""

import time

import numpy as np
from scipy.optimize import linprog

import critline

print(f"critline version: {critline.__version__}")
print()


def generate_lp(n, m, seed=42):
    """Random bounded LP: positive objective, positive constraint matrix."""
    rng = np.random.default_rng(seed)
    c = rng.uniform(0.1, 1.0, n)
    A = rng.uniform(0.0, 1.0, (m, n)) + 0.01
    b = rng.uniform(1.0, 10.0, m)
    return c, A, b


def solve_critline(c, A, b):
    """Maximize c @ x with critline."""
    start = time.perf_counter()
    result = critline.solve_lp(c, A, b, "<=")
    elapsed = time.perf_counter() - start
    return {
        'time': elapsed,
        'objective': result.value,
        'iterations': result.iterations,
    }


def solve_scipy(c, A, b):
    """Maximize c @ x with scipy.optimize.linprog (HiGHS backend)."""
    start = time.perf_counter()
    result = linprog(-c, A_ub=A, b_ub=b, bounds=[(0, None)] * len(c), method='highs')
    elapsed = time.perf_counter() - start
    return {
        'time': elapsed,
        'objective': -result.fun if result.success else float('nan'),
        'iterations': getattr(result, 'nit', 0),
    }


def benchmark_single(n, m, seed=42):
    """Benchmark a single LP instance."""
    print(f"  Generating LP: n={n}, m={m}")
    c, A, b = generate_lp(n, m, seed)

    results = {}

    res = solve_critline(c, A, b)
    results['critline'] = res
    print(f"    critline: {res['time']*1000:8.1f} ms, obj={res['objective']:10.4f}, "
          f"pivots={res['iterations']}")

    res = solve_scipy(c, A, b)
    results['scipy'] = res
    print(f"    SciPy:    {res['time']*1000:8.1f} ms, obj={res['objective']:10.4f}")

    return results


def benchmark_scaling():
    """Benchmark across different problem sizes."""
    print("=" * 70)
    print("LP Scaling Benchmark")
    print("=" * 70)

    sizes = [(10, 5), (50, 25), (100, 50), (200, 100), (400, 200)]

    all_results = []
    for n, m in sizes:
        print(f"\nProblem size: {n} vars, {m} constraints")
        all_results.append((n, m, benchmark_single(n, m)))

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"{'n':>8} {'m':>8} {'critline (ms)':>14} {'SciPy (ms)':>12} {'|diff obj|':>12}")
    print("-" * 70)

    for n, m, res in all_results:
        ours = res['critline']
        ref = res['scipy']
        diff = abs(ours['objective'] - ref['objective'])
        print(f"{n:>8} {m:>8} {ours['time']*1000:>14.1f} {ref['time']*1000:>12.1f} {diff:>12.2e}")


if __name__ == "__main__":
    benchmark_scaling()
