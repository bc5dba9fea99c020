"""Romberg quadrature for the distance and time integrals."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

from .constants import ROMBERG_MAX_LEVELS, ROMBERG_TOLERANCE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RombergDiagnostics:
    """Bookkeeping for a single :func:`romberg` call."""

    converged: bool
    levels: int
    error_estimate: float
    evaluations: int


def _sum_new_nodes(func: Callable, a: float, h: float, count: int, vectorized: bool) -> float:
    """Sum ``func`` over the ``count`` abscissae ``a + h, a + 3h, ...``."""
    nodes = a + h * np.arange(1, 2 * count, 2, dtype=float)
    if vectorized:
        values = np.asarray(func(nodes), dtype=float)
    else:
        values = np.fromiter((func(float(x)) for x in nodes), dtype=float, count=count)
    return float(np.sum(values))


def romberg(
    func: Callable,
    a: float,
    b: float,
    *,
    tol: float = ROMBERG_TOLERANCE,
    max_levels: int = ROMBERG_MAX_LEVELS,
    vectorized: bool = False,
    full_output: bool = False,
):
    """Integrate ``func`` from ``a`` to ``b`` with Romberg's method.

    Parameters
    ----------
    func:
        Single-argument real function.  With ``vectorized=True`` it is called
        once per level with a numpy array of abscissae.
    a, b:
        Integration limits.
    tol:
        Absolute tolerance on the change of the highest-order estimate
        between two successive levels.
    max_levels:
        Maximum number of table rows; the panel count doubles on each row.
    full_output:
        Also return a :class:`RombergDiagnostics` record.

    Returns
    -------
    float or (float, RombergDiagnostics)
        The integral estimate.  When the table is exhausted before reaching
        ``tol`` the last high-order estimate is returned as-is; only the
        diagnostics record tells the two cases apart.
    """
    a = float(a)
    b = float(b)
    h = b - a
    if vectorized:
        ends = np.asarray(func(np.array([a, b], dtype=float)), dtype=float)
        first = 0.5 * h * float(ends[0] + ends[1])
    else:
        first = 0.5 * h * (float(func(a)) + float(func(b)))

    previous: List[float] = [first]
    estimate = first
    error = first
    evaluations = 2
    panels = 1
    levels = 1
    converged = False

    for level in range(1, max_levels):
        h /= 2.0
        new_nodes = panels
        panels *= 2
        row = [0.5 * previous[0] + h * _sum_new_nodes(func, a, h, new_nodes, vectorized)]
        evaluations += new_nodes
        levels += 1

        weight = 1.0
        for j in range(1, level):
            weight *= 4.0
            row.append(row[j - 1] + (row[j - 1] - previous[j - 1]) / (weight - 1.0))

        estimate = row[-1]
        error = estimate - previous[-1]
        if abs(error) < tol:
            converged = True
            break
        if np.isnan(estimate):
            # NaN propagates through every later row
            break
        previous = row

    if not converged:
        logger.warning(
            "Romberg integration over [%g, %g] stopped after %d levels without "
            "reaching tolerance %g (last change %g)",
            a, b, levels, tol, abs(error),
        )

    if full_output:
        return estimate, RombergDiagnostics(
            converged=converged,
            levels=levels,
            error_estimate=float(abs(error)),
            evaluations=evaluations,
        )
    return estimate


__all__ = ["RombergDiagnostics", "romberg"]
