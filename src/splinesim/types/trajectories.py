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
Trajectory Types

Types for time grids, spline coefficients and integration results.

Shape Convention
----------------
Time-major ordering, as everywhere else in splinesim:
- t: (T,) time points
- x: (T, nx) state at each time point
- segment coefficients: (degree, dimension), row k multiplies local_time**k
- coefficient tensor: (n_segments, degree, dimension)
"""

from typing import TYPE_CHECKING, Any, Tuple

import numpy as np
from typing_extensions import TypedDict

if TYPE_CHECKING:
    from splinesim.splines.polynomial_spline import PolynomialSpline

# ============================================================================
# Time Types
# ============================================================================

TimePoints = np.ndarray
"""
Array of time instants, shape (T,).
"""

TimeSpan = Tuple[float, float]
"""
Integration interval (t_start, t_end) with t_end > t_start.
"""

# ============================================================================
# Spline Coefficients
# ============================================================================

SegmentCoefficients = np.ndarray
"""
Coefficients of one spline segment, shape (degree, dimension).

Row k holds the coefficient vector of local_time**k.
"""

CoefficientTensor = np.ndarray
"""
Coefficients of a whole spline, shape (n_segments, degree, dimension).
"""

# ============================================================================
# Results
# ============================================================================


class IntegrationResult(TypedDict, total=False):
    """
    Result from fixed-step spline integration.

    Attributes
    ----------
    t : TimePoints
        Sample times (T,)
    x : np.ndarray
        Trajectory sampled at ``t``, shape (T, nx)
    success : bool
        Whether integration succeeded
    message : str
        Status message
    nfev : int
        Number of vector field evaluations during this run
    nsteps : int
        Number of integration steps (= spline segments produced)
    integration_time : float
        Wall-clock time in seconds
    solver : str
        Name of the integrator
    sol : PolynomialSpline
        Dense output: the trajectory spline itself
    """

    t: TimePoints
    x: np.ndarray
    success: bool
    message: str
    nfev: int
    nsteps: int
    integration_time: float
    solver: str
    sol: "PolynomialSpline"


class IntegratorStats(TypedDict):
    """
    Cumulative integrator statistics returned by ``get_stats()``.
    """

    total_steps: int
    total_fev: int
    total_time: float
    total_sims: int
    avg_fev_per_step: float


__all__ = [
    "TimePoints",
    "TimeSpan",
    "SegmentCoefficients",
    "CoefficientTensor",
    "IntegrationResult",
    "IntegratorStats",
]
