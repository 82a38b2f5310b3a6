"""Least-squares polynomial fitting for spend trends"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from starling_spend.domain.exceptions import UnderdeterminedFitError

Point = Tuple[float, float]


@dataclass(frozen=True)
class Polynomial:
    """Single-variable polynomial, coefficients in ascending power order"""

    coefficients: Tuple[float, ...]

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def evaluate(self, x: float) -> float:
        # Horner's method
        result = 0.0
        for coefficient in reversed(self.coefficients):
            result = result * x + coefficient
        return result

    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    def residuals(self, points: Sequence[Point]) -> List[float]:
        """Observed minus predicted y for each point"""
        return [y - self.evaluate(x) for x, y in points]


def fit(
    points: Sequence[Point],
    degree: int,
    weights: Optional[Sequence[float]] = None,
) -> Polynomial:
    """
    Fit a polynomial of the given degree by ordinary least squares.

    Builds the design matrix of monomials [1, x, ..., x^d] and solves it
    with numpy's SVD-based lstsq. Optional per-point weights scale each row
    by sqrt(w), giving weighted least squares.

    Raises:
        UnderdeterminedFitError: degree is negative or not below the
            number of distinct x values
        ValueError: weights do not match the points or are negative
    """
    distinct_x = len({float(x) for x, _ in points})
    if degree < 0 or degree >= distinct_x:
        raise UnderdeterminedFitError(
            f"Cannot fit degree {degree} polynomial to {distinct_x} distinct points"
        )

    xs = np.array([x for x, _ in points], dtype=np.float64)
    ys = np.array([y for _, y in points], dtype=np.float64)
    design = np.vander(xs, degree + 1, increasing=True)

    if weights is not None:
        if len(weights) != len(points):
            raise ValueError(f"Expected {len(points)} weights, got {len(weights)}")
        w = np.array(weights, dtype=np.float64)
        if np.any(w < 0):
            raise ValueError("Weights must be non-negative")
        root_w = np.sqrt(w)
        design = design * root_w[:, np.newaxis]
        ys = ys * root_w

    coefficients, _, _, _ = np.linalg.lstsq(design, ys, rcond=None)
    return Polynomial(coefficients=tuple(float(c) for c in coefficients))
