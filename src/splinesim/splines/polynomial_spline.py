# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Polynomial Spline - Piecewise-Polynomial Functions of Time

A PolynomialSpline is a real-vector-valued function of time made of
contiguous, equal-width segments. Segment i covers the interval

    [t0 + i*h, t0 + (i+1)*h),    h = collocation_interval

and holds one polynomial per output coordinate, written in local time
tau = t - (t0 + i*h):

    s_i(tau) = c_0 + c_1*tau + ... + c_{degree-1}*tau**(degree-1)

with each c_k a vector of length ``dimension``.

Splines are used both for control inputs handed to an integrator and for
the trajectories integrators produce. They grow only at the end (``push``,
``concatenate``) and are read with O(1) point evaluation (``at``).

Boundary Policy
---------------
Evaluation outside [t0, t0 + n*h) never fails. The segment *index* is
clamped to [0, n-1] but the local time passed to the polynomial is not:
the first/last polynomial is extrapolated rather than held constant.

>>> spline = PolynomialSpline.first_order_hold([0.0, 1.0], 1.0)
>>> spline.at(3.0)      # last (only) segment evaluated at tau = 3
array([3.])

Usage
-----
>>> from splinesim.splines import PolynomialSpline
>>>
>>> # Empty cubic spline in R^2, built one segment at a time
>>> spline = PolynomialSpline(collocation_interval=0.5, t0=0.0, dimension=2, degree=4)
>>> spline.reserve(10)
>>> spline.push(np.zeros((4, 2)))
>>> spline.at(0.25)
array([0., 0.])
"""

from typing import Optional

import numpy as np

from splinesim.types.core import ArrayLike, ScalarLike
from splinesim.types.trajectories import CoefficientTensor


class PolynomialSpline:
    """
    Piecewise-polynomial function on a uniform time grid.

    Parameters
    ----------
    collocation_interval : float
        Width h of every segment, must be > 0
    t0 : float
        Start time of the first segment
    dimension : int
        Length of the output vector, must be >= 1
    degree : int
        Number of polynomial coefficients per coordinate (4 for a cubic),
        must be >= 1
    segments : Optional[ArrayLike]
        Initial coefficients, shape (n_segments, degree, dimension).
        If None the spline starts empty.

    Raises
    ------
    ValueError
        If a grid parameter is out of range or ``segments`` has the wrong shape

    Examples
    --------
    >>> # u(t) = t/5 on [0, 5), u(t) = 1 + (t-5)/5 on [5, 10)
    >>> u = PolynomialSpline(
    ...     collocation_interval=5.0, t0=0.0, dimension=1, degree=2,
    ...     segments=[[[0.0], [0.2]], [[1.0], [0.2]]],
    ... )
    >>> u.at(7.5)
    array([1.5])
    """

    def __init__(
        self,
        collocation_interval: ScalarLike,
        t0: ScalarLike,
        dimension: int,
        degree: int,
        segments: Optional[ArrayLike] = None,
    ):
        if not collocation_interval > 0:
            raise ValueError(
                f"collocation_interval must be positive, got {collocation_interval}"
            )
        if int(dimension) < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        if int(degree) < 1:
            raise ValueError(f"degree must be >= 1, got {degree}")

        self._collocation_interval = float(collocation_interval)
        self._t0 = float(t0)
        self._dimension = int(dimension)
        self._degree = int(degree)

        # Storage grows geometrically; only the first _size rows are live
        self._coefficients = np.zeros((0, self._degree, self._dimension))
        self._size = 0

        if segments is not None and len(segments) > 0:
            coefficients = np.array(segments, dtype=float)
            expected = (self._degree, self._dimension)
            if coefficients.ndim != 3 or coefficients.shape[1:] != expected:
                raise ValueError(
                    f"segments must have shape (n_segments, {self._degree}, "
                    f"{self._dimension}), got {coefficients.shape}"
                )
            self._coefficients = coefficients
            self._size = coefficients.shape[0]

    # ========================================================================
    # Construction Helpers
    # ========================================================================

    @classmethod
    def first_order_hold(
        cls, knots: ArrayLike, collocation_interval: ScalarLike, t0: ScalarLike = 0.0
    ) -> "PolynomialSpline":
        """
        Build a piecewise-linear spline through equally spaced knot values.

        Knot k is the value at ``t0 + k*collocation_interval``; n+1 knots give
        n linear segments (degree 2).

        Parameters
        ----------
        knots : ArrayLike
            Knot values, shape (n+1,) for scalar signals or (n+1, dimension)
        collocation_interval : float
            Time between consecutive knots
        t0 : float
            Time of the first knot

        Returns
        -------
        PolynomialSpline
            Linear interpolant of the knots

        Examples
        --------
        >>> u = PolynomialSpline.first_order_hold([0.0, 1.0, 2.0], 5.0)
        >>> u.num_segments
        2
        >>> u.at(2.5)
        array([0.5])
        """
        if not collocation_interval > 0:
            raise ValueError(
                f"collocation_interval must be positive, got {collocation_interval}"
            )

        values = np.asarray(knots, dtype=float)
        if values.ndim == 1:
            values = values[:, np.newaxis]
        if values.ndim != 2 or values.shape[0] < 2:
            raise ValueError(
                f"first_order_hold needs at least two knots of shape (dimension,), "
                f"got array of shape {np.shape(knots)}"
            )

        slopes = np.diff(values, axis=0) / float(collocation_interval)
        segments = np.stack([values[:-1], slopes], axis=1)

        return cls(collocation_interval, t0, values.shape[1], 2, segments=segments)

    def copy(self) -> "PolynomialSpline":
        """Independent copy with the same grid and segments."""
        return PolynomialSpline(
            self._collocation_interval,
            self._t0,
            self._dimension,
            self._degree,
            segments=self.segments,
        )

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def degree(self) -> int:
        """Number of polynomial coefficients per coordinate per segment."""
        return self._degree

    @property
    def dimension(self) -> int:
        """Length of the output vector."""
        return self._dimension

    @property
    def collocation_interval(self) -> float:
        """Width of every segment."""
        return self._collocation_interval

    @property
    def t0(self) -> float:
        """Start time of the first segment."""
        return self._t0

    @property
    def num_segments(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        """Number of segments that fit without reallocating."""
        return self._coefficients.shape[0]

    @property
    def t_final(self) -> float:
        """End of the last segment, t0 + n*h."""
        return self._t0 + self._collocation_interval * self._size

    @property
    def segments(self) -> CoefficientTensor:
        """Copy of the coefficients, shape (n_segments, degree, dimension)."""
        return self._coefficients[: self._size].copy()

    # ========================================================================
    # Mutation
    # ========================================================================

    def reserve(self, n: int) -> None:
        """
        Make room for ``n`` more segments.

        Pure capacity hint: nothing observable changes.

        Raises
        ------
        ValueError
            If n < 0
        """
        if n < 0:
            raise ValueError(f"Cannot reserve negative space for spline segments, got {n}")
        self._ensure_capacity(self._size + int(n))

    def push(self, segment: ArrayLike) -> None:
        """
        Append one segment at the end of the spline.

        Parameters
        ----------
        segment : ArrayLike
            Coefficients of shape (degree, dimension); row k multiplies
            local_time**k

        Raises
        ------
        ValueError
            If the segment shape does not match the spline
        """
        coefficients = np.asarray(segment, dtype=float)
        if coefficients.shape != (self._degree, self._dimension):
            raise ValueError(
                f"Segment must have shape ({self._degree}, {self._dimension}), "
                f"got {coefficients.shape}"
            )
        self._ensure_capacity(self._size + 1)
        self._coefficients[self._size] = coefficients
        self._size += 1

    def concatenate(self, other: "PolynomialSpline") -> None:
        """
        Append every segment of ``other``, in order.

        ``other`` is left unchanged. Its t0 is ignored: the appended segments
        simply continue this spline's grid.

        Raises
        ------
        TypeError
            If ``other`` is not a PolynomialSpline
        ValueError
            If dimension, degree or collocation interval differ
        """
        if not isinstance(other, PolynomialSpline):
            raise TypeError(f"Can only concatenate PolynomialSpline, got {type(other).__name__}")
        if other.dimension != self._dimension or other.degree != self._degree:
            raise ValueError(
                f"Cannot concatenate spline of (dimension={other.dimension}, "
                f"degree={other.degree}) onto spline of (dimension={self._dimension}, "
                f"degree={self._degree})"
            )
        # Relative only: an absolute floor would equate any two tiny intervals
        if not np.isclose(other.collocation_interval, self._collocation_interval, atol=0.0):
            raise ValueError(
                f"Collocation intervals differ: {other.collocation_interval} vs "
                f"{self._collocation_interval}"
            )

        # Copy first so that s.concatenate(s) is well defined
        tail = other.segments
        self._ensure_capacity(self._size + tail.shape[0])
        self._coefficients[self._size : self._size + tail.shape[0]] = tail
        self._size += tail.shape[0]

    def _ensure_capacity(self, required: int) -> None:
        capacity = self._coefficients.shape[0]
        if required <= capacity:
            return
        grown = np.zeros((max(required, 2 * capacity), self._degree, self._dimension))
        grown[: self._size] = self._coefficients[: self._size]
        self._coefficients = grown

    # ========================================================================
    # Evaluation
    # ========================================================================

    def at(self, t: ScalarLike) -> np.ndarray:
        """
        Evaluate the spline at time ``t``.

        index = clamp(floor((t - t0) / h), 0, n - 1)
        tau   = (t - t0) - h * index
        value = sum_k segment[index][k] * tau**k

        Only the index is clamped, so times outside [t0, t0 + n*h) are
        extrapolated from the first or last segment.

        Parameters
        ----------
        t : float
            Evaluation time

        Returns
        -------
        np.ndarray
            Value, shape (dimension,)

        Raises
        ------
        RuntimeError
            If the spline has no segments
        """
        if self._size == 0:
            raise RuntimeError("Cannot evaluate an empty spline (no segments)")

        offset = float(t) - self._t0
        index = int(np.clip(np.floor(offset / self._collocation_interval), 0, self._size - 1))
        local_time = offset - self._collocation_interval * index

        powers = np.power(local_time, np.arange(self._degree))
        return powers @ self._coefficients[index]

    def __call__(self, t) -> np.ndarray:
        """
        Vectorized evaluation.

        Parameters
        ----------
        t : float or TimePoints
            Scalar time or 1-D array of times (T,)

        Returns
        -------
        np.ndarray
            (dimension,) for scalar t, (T, dimension) for an array of times
        """
        times = np.asarray(t, dtype=float)
        if times.ndim == 0:
            return self.at(float(times))
        if times.ndim != 1:
            raise ValueError(f"Evaluation times must be scalar or 1-D, got shape {times.shape}")
        if self._size == 0:
            raise RuntimeError("Cannot evaluate an empty spline (no segments)")

        offset = times - self._t0
        index = np.clip(
            np.floor(offset / self._collocation_interval), 0, self._size - 1
        ).astype(int)
        local_time = offset - self._collocation_interval * index

        powers = local_time[:, np.newaxis] ** np.arange(self._degree)
        return np.einsum("tk,tkd->td", powers, self._coefficients[index])

    def derivative(self, order: int = 1) -> "PolynomialSpline":
        """
        Spline of the term-wise time derivative on the same grid.

        Degree drops by one per differentiation but never below 1 (a
        differentiated constant is the zero constant).

        Examples
        --------
        >>> u = PolynomialSpline.first_order_hold([0.0, 1.0, 3.0], 1.0)
        >>> u.derivative().at(1.5)
        array([2.])
        """
        if order < 0:
            raise ValueError(f"Derivative order must be non-negative, got {order}")

        coefficients = self.segments
        for _ in range(order):
            if coefficients.shape[1] == 1:
                coefficients = np.zeros_like(coefficients)
                continue
            powers = np.arange(1, coefficients.shape[1], dtype=float)
            coefficients = coefficients[:, 1:, :] * powers[np.newaxis, :, np.newaxis]

        return PolynomialSpline(
            self._collocation_interval,
            self._t0,
            self._dimension,
            coefficients.shape[1],
            segments=coefficients,
        )

    def to_ppoly(self):
        """
        Convert to ``scipy.interpolate.PPoly``.

        Breakpoints are t0 + k*h, k = 0..n, and extrapolation is enabled,
        which reproduces the boundary policy of ``at``.

        Returns
        -------
        scipy.interpolate.PPoly
            Equivalent piecewise polynomial with trailing axis ``dimension``
        """
        from scipy.interpolate import PPoly

        if self._size == 0:
            raise RuntimeError("Cannot convert an empty spline to PPoly")

        # PPoly wants highest power first, shape (degree, n_segments, dimension)
        c = self._coefficients[: self._size, ::-1, :].transpose(1, 0, 2)
        breakpoints = self._t0 + self._collocation_interval * np.arange(self._size + 1)
        return PPoly(np.ascontiguousarray(c), breakpoints, extrapolate=True)

    # ========================================================================
    # Dunder Methods
    # ========================================================================

    def __len__(self) -> int:
        return self._size

    def __eq__(self, other) -> bool:
        if not isinstance(other, PolynomialSpline):
            return NotImplemented
        return (
            self._dimension == other.dimension
            and self._degree == other.degree
            and self._collocation_interval == other.collocation_interval
            and self._t0 == other.t0
            and np.array_equal(self.segments, other.segments)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"collocation_interval={self._collocation_interval}, t0={self._t0}, "
            f"dimension={self._dimension}, degree={self._degree}, "
            f"num_segments={self._size})"
        )


__all__ = ["PolynomialSpline"]
