#!/usr/bin/env python3
"""
critline Frontier Benchmark: full CLA frontier against a grid of SLSQP solves
"""

import time

import numpy as np
from scipy.optimize import minimize

import critline

print(f"critline version: {critline.__version__}")
print()


def generate_problem(n, seed=42):
    """Random long-only problem with a factor covariance."""
    rng = np.random.default_rng(seed)
    factors = rng.normal(size=(n, 3)) * 0.1
    cov = factors @ factors.T + np.diag(rng.uniform(0.01, 0.05, n))
    mu = rng.uniform(0.02, 0.15, n)
    return mu, cov


def solve_critline(mu, cov, upper):
    start = time.perf_counter()
    frontier = critline.efficient_frontier(mu, cov, upper=upper)
    elapsed = time.perf_counter() - start
    return {'time': elapsed, 'corners': len(frontier), 'frontier': frontier}


def solve_slsqp_grid(mu, cov, upper, lambdas):
    """One SLSQP solve of the lambda-penalized QP per grid point."""
    n = len(mu)
    bounds = [(0.0, u) for u in upper]
    constraints = [{'type': 'eq', 'fun': lambda w: w.sum() - 1.0}]

    start = time.perf_counter()
    values = []
    for lam in lambdas:
        result = minimize(
            lambda w: 0.5 * w @ cov @ w - lam * mu @ w,
            np.full(n, 1.0 / n),
            method='SLSQP',
            bounds=bounds,
            constraints=constraints,
        )
        values.append(result.fun)
    elapsed = time.perf_counter() - start
    return {'time': elapsed, 'values': values}


def benchmark_single(n, seed=42):
    print(f"  Generating problem: n={n}")
    mu, cov = generate_problem(n, seed)
    upper = np.full(n, max(0.1, 2.0 / n))

    ours = solve_critline(mu, cov, upper)
    frontier = ours['frontier']
    print(f"    critline: {ours['time']*1000:8.1f} ms, corners={ours['corners']}")

    lambdas = [p.lambda_ for p in frontier]
    ref = solve_slsqp_grid(mu, cov, upper, lambdas)
    print(f"    SLSQP:    {ref['time']*1000:8.1f} ms for {len(lambdas)} points")

    gap = max(
        0.5 * p.weights @ cov @ p.weights - p.lambda_ * mu @ p.weights - v
        for p, v in zip(frontier, ref['values'])
    )
    print(f"    worst objective gap (critline - SLSQP): {gap:.2e}")
    return ours, ref


def benchmark_scaling():
    print("=" * 70)
    print("Efficient Frontier Benchmark")
    print("=" * 70)

    results = []
    for n in [10, 25, 50, 100, 200]:
        print(f"\nProblem size: {n} assets")
        results.append((n, *benchmark_single(n)))

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"{'n':>8} {'corners':>8} {'critline (ms)':>14} {'SLSQP (ms)':>12} {'Speedup':>10}")
    print("-" * 70)
    for n, ours, ref in results:
        speedup = ref['time'] / ours['time']
        print(f"{n:>8} {ours['corners']:>8} {ours['time']*1000:>14.1f} "
              f"{ref['time']*1000:>12.1f} {speedup:>10.2f}x")


if __name__ == "__main__":
    benchmark_scaling()
