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
Integrator Base - Abstract Interface for Spline Integration

Fixed-step integration of a controlled system dx/dt = f(x, u) into a
piecewise-polynomial trajectory.

An integrator wraps a DynamicalSystem and exposes three capabilities:
- flow(): the system's vector field (counted for statistics)
- lipschitz_constant(): the system's Lipschitz bound, for planners
- step(): one polynomial segment of the trajectory (one per subclass)

plus the shared simulation loop sim(), which covers [t0, tf] with equal
steps no wider than ``max_time_step`` and stitches the segments produced by
step() into one PolynomialSpline.

Design Note
-----------
The state carried from one step to the next is the value of the segment just
produced, evaluated at the new time. Continuity of the trajectory is therefore
defined by spline evaluation alone, not by any intermediate value of step().
"""

import time
import warnings
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import numpy as np

from splinesim.splines.polynomial_spline import PolynomialSpline
from splinesim.types.core import ArrayLike, ScalarLike, StateDerivative, StateVector
from splinesim.types.trajectories import (
    IntegrationResult,
    IntegratorStats,
    TimePoints,
    TimeSpan,
)

if TYPE_CHECKING:
    from splinesim.systems.base.dynamical_system import DynamicalSystem


class IntegratorBase(ABC):
    """
    Abstract base class for fixed-step spline integrators.

    All integrators must implement:
    - step(): one trajectory segment over [t1, t2)
    - name: Integrator name for display

    Attributes
    ----------
    segment_degree : int
        Number of polynomial coefficients in the segments step() returns.
        The output spline of sim() is created with this degree.
    order : int
        Order of accuracy of the stepping rule

    Examples
    --------
    >>> integrator = SymplecticEulerIntegrator(DoubleIntegrator(), max_time_step=1.0)
    >>> u = PolynomialSpline.first_order_hold([0.0, 1.0, 2.0], 5.0)
    >>> trajectory = integrator.sim(0.0, 10.0, np.zeros(2), u)
    >>> trajectory.num_segments
    10
    >>> integrator.sim_count
    1
    """

    segment_degree: int = 4
    order: int = 1

    def __init__(self, system: "DynamicalSystem", max_time_step: ScalarLike):
        """
        Initialize integrator.

        Parameters
        ----------
        system : DynamicalSystem
            Continuous-time system to integrate
        max_time_step : float
            Upper bound on the width of every integration step, > 0

        Raises
        ------
        ValueError
            If max_time_step is not positive
        """
        if not max_time_step > 0:
            raise ValueError(f"max_time_step must be positive, got {max_time_step}")

        self.system = system
        self._max_time_step = float(max_time_step)

        # Statistics
        self._stats = {
            "total_steps": 0,
            "total_fev": 0,  # Vector field evaluations
            "total_time": 0.0,
            "total_sims": 0,
        }

    @property
    def max_time_step(self) -> float:
        """Largest step width sim() may use (fixed at construction)."""
        return self._max_time_step

    @property
    def sim_count(self) -> int:
        """Number of completed sim() calls since construction or reset_stats()."""
        return self._stats["total_sims"]

    # ========================================================================
    # System Capabilities
    # ========================================================================

    def flow(self, x: ArrayLike, u: ArrayLike) -> StateDerivative:
        """
        Evaluate the vector field f(x, u) with statistics tracking.

        Raises
        ------
        ValueError
            If x or u do not match the system dimensions
        """
        self._stats["total_fev"] += 1
        return self.system(x, u)

    def lipschitz_constant(self) -> float:
        """Lipschitz constant of the system's vector field."""
        return self.system.lipschitz_constant()

    # ========================================================================
    # Stepping Rule
    # ========================================================================

    @abstractmethod
    def step(
        self,
        x0: StateVector,
        u: PolynomialSpline,
        t1: ScalarLike,
        t2: ScalarLike,
        previous_segment: Optional[PolynomialSpline] = None,
    ) -> PolynomialSpline:
        """
        Produce the trajectory segment starting from x(t1) = x0.

        Parameters
        ----------
        x0 : StateVector
            State at t1, shape (nx,)
        u : PolynomialSpline
            Control input spline, dimension nu
        t1, t2 : float
            Step interval, t1 < t2
        previous_segment : Optional[PolynomialSpline]
            Segment returned by the previous call in the same simulation
            (None for the first step). Single-step rules ignore it.

        Returns
        -------
        PolynomialSpline
            One segment with t0 = t1 and collocation_interval = t2 - t1,
            of degree ``segment_degree``

        Raises
        ------
        ValueError
            If t1 >= t2
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable integrator name."""
        pass

    @staticmethod
    def _validate_interval(t1: ScalarLike, t2: ScalarLike) -> None:
        if not t1 < t2:
            raise ValueError(f"Integration step must be positive, got t1={t1}, t2={t2}")

    def _validate_inputs(self, x0: ArrayLike, u: PolynomialSpline) -> StateVector:
        x0 = np.asarray(x0, dtype=float)
        if x0.shape != (self.system.nx,):
            raise ValueError(
                f"Initial state must have shape ({self.system.nx},), got {x0.shape}"
            )
        if not isinstance(u, PolynomialSpline):
            raise TypeError(f"Control input must be a PolynomialSpline, got {type(u).__name__}")
        if u.dimension != self.system.nu:
            raise ValueError(
                f"Control spline dimension {u.dimension} does not match "
                f"system control dimension {self.system.nu}"
            )
        return x0

    def _validate_solution(self, solution: PolynomialSpline, nx: int, dt: float) -> None:
        if not isinstance(solution, PolynomialSpline):
            raise TypeError(
                f"Solution must be a PolynomialSpline, got {type(solution).__name__}"
            )
        if solution.dimension != nx or solution.degree != self.segment_degree:
            raise ValueError(
                f"Solution spline (dimension={solution.dimension}, degree={solution.degree}) "
                f"does not match integrator output (dimension={nx}, "
                f"degree={self.segment_degree})"
            )
        if not np.isclose(solution.collocation_interval, dt, atol=0.0):
            raise ValueError(
                f"Collocation interval of solution {solution.collocation_interval} "
                f"does not match step size {dt}"
            )

    # ========================================================================
    # Simulation
    # ========================================================================

    def sim(
        self,
        t0: ScalarLike,
        tf: ScalarLike,
        x0: ArrayLike,
        u: PolynomialSpline,
        solution: Optional[PolynomialSpline] = None,
    ) -> PolynomialSpline:
        """
        Integrate from x(t0) = x0 to tf and return the trajectory spline.

        The horizon is split into

            num_steps = ceil((tf - t0) / max_time_step)

        equal steps of width dt = (tf - t0) / num_steps <= max_time_step, so the
        last step ends exactly at tf. Each step contributes one segment.

        Parameters
        ----------
        t0, tf : float
            Simulation interval, tf > t0
        x0 : ArrayLike
            Initial state, shape (nx,)
        u : PolynomialSpline
            Control input spline, dimension nu
        solution : Optional[PolynomialSpline]
            Spline to extend. If None, a new spline with
            collocation_interval = dt and start time t0 is created.

        Returns
        -------
        PolynomialSpline
            Trajectory with num_steps new segments

        Raises
        ------
        ValueError
            If tf <= t0, dimensions do not match the system, or ``solution``
            has a different degree or collocation interval than dt
        TypeError
            If ``u`` or ``solution`` is not a PolynomialSpline
        """
        if not tf > t0:
            raise ValueError(f"Final time must exceed initial time, got t0={t0}, tf={tf}")
        x0 = self._validate_inputs(x0, u)

        start_time = time.time()

        num_steps = int(np.ceil((tf - t0) / self._max_time_step))
        dt = (tf - t0) / num_steps

        if solution is None:
            solution = PolynomialSpline(dt, t0, x0.shape[0], self.segment_degree)
        else:
            self._validate_solution(solution, x0.shape[0], dt)
            if solution.num_segments > 0 and not np.isclose(solution.t_final, t0):
                warnings.warn(
                    f"Extending a trajectory that ends at t={solution.t_final} with a "
                    f"simulation starting at t0={t0}; segments are appended positionally",
                    UserWarning,
                )
        solution.reserve(num_steps)

        state = x0
        t0 = float(t0)
        segment = None

        for k in range(num_steps):
            # Windows from the grid index; accumulating dt drifts at large t0
            t1 = t0 + k * dt
            t2 = t0 + (k + 1) * dt
            segment = self.step(state, u, t1, t2, previous_segment=segment)
            # Segment width t2 - t1 carries rounding of t; the grid is dt
            solution.push(segment.segments[0])
            state = segment.at(t2)

        self._stats["total_time"] += time.time() - start_time
        self._stats["total_sims"] += 1

        return solution

    def integrate(
        self,
        x0: ArrayLike,
        u: PolynomialSpline,
        t_span: TimeSpan,
        t_eval: Optional[TimePoints] = None,
    ) -> IntegrationResult:
        """
        Run sim() over ``t_span`` and sample the trajectory.

        Parameters
        ----------
        x0 : ArrayLike
            Initial state
        u : PolynomialSpline
            Control input spline
        t_span : Tuple[float, float]
            (t_start, t_end)
        t_eval : Optional[ArrayLike]
            Times to sample. If None, the step grid t_start + k*dt,
            k = 0..num_steps.

        Returns
        -------
        IntegrationResult
            TypedDict with samples, diagnostics and the spline as ``sol``

        Examples
        --------
        >>> result = integrator.integrate(np.zeros(2), u, (0.0, 10.0))
        >>> result["x"].shape
        (11, 2)
        """
        start_time = time.time()
        fev_before = self._stats["total_fev"]

        t0, tf = t_span
        solution = self.sim(t0, tf, x0, u)

        if t_eval is None:
            t_points = t0 + solution.collocation_interval * np.arange(solution.num_segments + 1)
            t_points[-1] = tf
        else:
            t_points = np.asarray(t_eval, dtype=float)

        x_traj = solution(t_points)

        elapsed = time.time() - start_time

        result: IntegrationResult = {
            "t": t_points,
            "x": x_traj,
            "success": True,
            "message": f"{self.name} integration completed",
            "nfev": self._stats["total_fev"] - fev_before,
            "nsteps": solution.num_segments,
            "integration_time": elapsed,
            "solver": self.name,
            "sol": solution,
        }

        return result

    # ========================================================================
    # Statistics
    # ========================================================================

    def get_stats(self) -> IntegratorStats:
        """
        Get integration statistics.

        Returns
        -------
        IntegratorStats
            - 'total_steps': Steps taken
            - 'total_fev': Vector field evaluations
            - 'total_time': Time spent in sim()
            - 'total_sims': Completed sim() calls
            - 'avg_fev_per_step': Evaluations per step
        """
        avg_fev = self._stats["total_fev"] / max(1, self._stats["total_steps"])

        return {
            **self._stats,
            "avg_fev_per_step": avg_fev,
        }

    def reset_stats(self):
        """Reset all statistics, including the sim() call counter, to zero."""
        self._stats["total_steps"] = 0
        self._stats["total_fev"] = 0
        self._stats["total_time"] = 0.0
        self._stats["total_sims"] = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"system={self.system!r}, max_time_step={self._max_time_step})"
        )

    def __str__(self) -> str:
        return f"{self.name} (max_time_step={self._max_time_step:.4f})"
