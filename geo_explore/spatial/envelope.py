# geo_explore/spatial/envelope.py
"""
Monte Carlo simulation envelopes under complete spatial randomness.

For a pattern with n inside points, ``nsim`` uniform patterns of n points
are drawn in the same window and the chosen summary function is computed
for each. At every r the simulated values are sorted; the lower envelope
is the ``nrank``-th smallest and the upper envelope the ``nrank``-th
largest.

Cost grows with ``nsim * len(r) * n``. L counts all pairs within each
radius rather than only nearest neighbours and is markedly slower than
G, so a smaller ``nsim`` is reasonable for L during exploration.
"""

import math
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Optional, Sequence

import numpy as np
import pandas as pd
import shapely
from shapely.geometry.base import BaseGeometry

from geo_explore.abstractions.types import EnvelopeResult, PointPattern, SummaryFunction
from geo_explore.infrastructure.logging import get_logger, log_operation
from .distance_functions import evaluate, theoretical_value

logger = get_logger(__name__)


def default_r(window: BaseGeometry, n_r: int = 128) -> np.ndarray:
    """0 up to a quarter of the shorter side of the window's bounding box."""
    minx, miny, maxx, maxy = window.bounds
    rmax = 0.25 * min(maxx - minx, maxy - miny)
    return np.linspace(0.0, rmax, n_r)


def simulate_csr(window: BaseGeometry, n: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``n`` independent uniform points in ``window`` by rejection sampling."""
    if window.area <= 0:
        raise ValueError("Cannot simulate points in a window with zero area")

    minx, miny, maxx, maxy = window.bounds
    fill_ratio = window.area / ((maxx - minx) * (maxy - miny))

    accepted = []
    remaining = n
    while remaining > 0:
        batch = math.ceil(remaining / fill_ratio * 1.2) + 1
        xs = rng.uniform(minx, maxx, batch)
        ys = rng.uniform(miny, maxy, batch)
        keep = shapely.contains_xy(window, xs, ys)
        points = np.column_stack([xs[keep], ys[keep]])[:remaining]
        accepted.append(points)
        remaining -= len(points)

    return np.vstack(accepted) if accepted else np.empty((0, 2))


def _simulated_curve(window: BaseGeometry, n_points: int, r: np.ndarray,
                     function: SummaryFunction, area: float,
                     seed: np.random.SeedSequence) -> np.ndarray:
    rng = np.random.default_rng(seed)
    coords = simulate_csr(window, n_points, rng)
    return evaluate(function, coords, r, area)


def rank_envelope(simulations: np.ndarray, nrank: int):
    """Lower/upper envelope from an (nsim, len(r)) array of simulated curves.

    Returns:
        Tuple of (lo, hi) arrays
    """
    nsim = simulations.shape[0]
    if not 1 <= nrank <= (nsim + 1) // 2:
        raise ValueError(f"nrank must be between 1 and {(nsim + 1) // 2} for nsim={nsim}")
    ordered = np.sort(simulations, axis=0)
    return ordered[nrank - 1], ordered[nsim - nrank]


def _validate_r(r) -> np.ndarray:
    r = np.asarray(r, dtype=float)
    if r.ndim != 1 or len(r) == 0:
        raise ValueError("r must be a non-empty 1-D sequence")
    if np.any(r < 0) or not np.all(np.isfinite(r)):
        raise ValueError("r must contain finite non-negative distances")
    if np.any(np.diff(r) <= 0):
        raise ValueError("r must be strictly increasing")
    return r


@log_operation("envelope", log_args=True)
def envelope(pattern: PointPattern,
             r: Optional[Sequence[float]] = None,
             function="G",
             nsim: int = 99,
             nrank: int = 1,
             seed: Optional[int] = None,
             n_workers: int = 1) -> EnvelopeResult:
    """
    Observed summary function with CSR value and simulation envelope.

    Simulation ``i`` draws from a generator spawned from ``seed``, so a
    fixed seed gives the same envelope whatever ``n_workers`` is.

    Args:
        pattern: Point pattern (at least 2 inside points)
        r: Strictly increasing distances starting at or near 0
        function: 'G', 'K' or 'L'
        nsim: Number of simulated patterns
        nrank: Rank of the envelope bounds from each extreme
        seed: Seed for the simulations
        n_workers: Worker processes for the simulations (1 = in-process)

    Returns:
        EnvelopeResult with columns obs, theo, lo, hi indexed by r
    """
    function = SummaryFunction.from_value(function)
    if nsim < 1:
        raise ValueError("nsim must be at least 1")
    if not 1 <= nrank <= (nsim + 1) // 2:
        raise ValueError(f"nrank must be between 1 and {(nsim + 1) // 2} for nsim={nsim}")
    if pattern.n_inside < 2:
        raise ValueError("Envelope needs at least 2 points inside the window")

    r = default_r(pattern.window) if r is None else _validate_r(r)
    coords = pattern.coordinates
    n_points = len(coords)
    area = pattern.area

    observed = evaluate(function, coords, r, area)
    theoretical = theoretical_value(function, r, pattern.intensity)

    seeds = np.random.SeedSequence(seed).spawn(nsim)
    args = ([pattern.window] * nsim, [n_points] * nsim, [r] * nsim,
            [function] * nsim, [area] * nsim, seeds)

    logger.info(f"Simulating {nsim} CSR patterns of {n_points} points for {function.value}",
                extra={'context': {'nsim': nsim, 'nrank': nrank, 'n_r': len(r),
                                   'n_workers': n_workers}})

    start_time = time.time()
    if n_workers > 1:
        with ProcessPoolExecutor(max_workers=n_workers) as executor:
            curves = list(executor.map(_simulated_curve, *args))
    else:
        curves = [_simulated_curve(*a) for a in zip(*args)]
    logger.log_performance(f"csr_simulations_{function.value}", time.time() - start_time,
                           items_processed=nsim)

    lo, hi = rank_envelope(np.vstack(curves), nrank)

    table = pd.DataFrame(
        {'obs': observed, 'theo': theoretical, 'lo': lo, 'hi': hi},
        index=pd.Index(r, name='r'),
    )
    return EnvelopeResult(table=table, function=function, nsim=nsim,
                          nrank=nrank, n_points=n_points, seed=seed)
