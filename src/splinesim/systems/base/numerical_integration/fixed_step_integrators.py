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
Fixed-Step Integrators

Stepping rules that turn one fixed-width step into one trajectory segment:
- Symplectic ("modified") Euler with cubic interpolation (local error O(h³))

Each rule evaluates the system's vector field a fixed number of times per
step and returns a one-segment PolynomialSpline; IntegratorBase.sim()
stitches the segments together.
"""

from typing import TYPE_CHECKING, List, Optional

import numpy as np

from splinesim.splines.polynomial_spline import PolynomialSpline
from splinesim.systems.base.numerical_integration.integrator_base import IntegratorBase
from splinesim.types.core import ScalarLike, StateVector

if TYPE_CHECKING:
    from splinesim.systems.base.dynamical_system import DynamicalSystem


class SymplecticEulerIntegrator(IntegratorBase):
    """
    Symplectic (modified) Euler integrator with cubic segments.

    Algorithm, for a step of width h = t2 - t1:
        f0 = f(x0,            u(t1))
        x1 = x0 + 0.5*h*f0
        f1 = f(x1,            u(t1 + 0.5*h))
        x2 = x0 + h*f1
        f2 = f(x2,            u(t2))

    and the segment, in local time tau = t - t1:
        x(tau) = x0 + f0*tau
                 + (-2*f0 + 3*f1 - f2)/h * tau**2
                 + (f0 - 2*f1 + f2)/h**2 * tau**3

    Characteristics:
    - Local error: O(h³)
    - Function evaluations: 3 per step
    - Fully explicit
    - x(0) = x0 and x'(0) = f0 exactly; the midpoint and endpoint slopes
      shape the quadratic and cubic terms

    Examples
    --------
    >>> integrator = SymplecticEulerIntegrator(DoubleIntegrator(), max_time_step=0.1)
    >>> u = PolynomialSpline.first_order_hold([0.0, 1.0], 1.0)
    >>> segment = integrator.step(np.zeros(2), u, 0.0, 0.1)
    >>> segment.segments.shape
    (1, 4, 2)
    """

    segment_degree = 4
    order = 2

    def __init__(self, system: "DynamicalSystem", max_time_step: ScalarLike):
        super().__init__(system, max_time_step)

    def step(
        self,
        x0: StateVector,
        u: PolynomialSpline,
        t1: ScalarLike,
        t2: ScalarLike,
        previous_segment: Optional[PolynomialSpline] = None,
    ) -> PolynomialSpline:
        """
        Take one modified Euler step and return its cubic segment.

        Parameters
        ----------
        x0 : StateVector
            State at t1
        u : PolynomialSpline
            Control input spline
        t1, t2 : float
            Step interval, t1 < t2
        previous_segment : Optional[PolynomialSpline]
            Ignored (single-step rule)

        Returns
        -------
        PolynomialSpline
            Single cubic segment valid on [t1, t2)
        """
        self._validate_interval(t1, t2)
        x0 = np.asarray(x0, dtype=float)

        h = t2 - t1
        f0 = self.flow(x0, u.at(t1))
        x1 = x0 + 0.5 * h * f0
        f1 = self.flow(x1, u.at(t1 + 0.5 * h))
        x2 = x0 + h * f1
        f2 = self.flow(x2, u.at(t2))

        # Cubic through x0 with slope f0 at t1, blending in f1 and f2
        cubic = np.stack(
            [
                x0,
                f0,
                (-2.0 * f0 + 3.0 * f1 - f2) / h,
                (f0 - 2.0 * f1 + f2) / (h * h),
            ]
        )

        self._stats["total_steps"] += 1

        return PolynomialSpline(
            h, t1, x0.shape[0], self.segment_degree, segments=cubic[np.newaxis]
        )

    @property
    def name(self) -> str:
        return "Symplectic Euler (Cubic)"


# ============================================================================
# Utility: Quick Integrator Creation
# ============================================================================

_METHOD_MAP = {
    "symplectic_euler": SymplecticEulerIntegrator,
}

_ALIASES = {
    "modified_euler": "symplectic_euler",
    "semi_implicit_euler": "symplectic_euler",
}


def list_integrators() -> List[str]:
    """Canonical names accepted by create_integrator()."""
    return sorted(_METHOD_MAP)


def create_integrator(
    method: str, system: "DynamicalSystem", max_time_step: ScalarLike
) -> IntegratorBase:
    """
    Quick factory for stepping rules.

    Parameters
    ----------
    method : str
        'symplectic_euler' (aliases: 'modified_euler', 'semi_implicit_euler')
    system : DynamicalSystem
        System to integrate
    max_time_step : float
        Upper bound on the step width used by sim()

    Returns
    -------
    IntegratorBase
        Configured integrator

    Raises
    ------
    ValueError
        If the method is unknown

    Examples
    --------
    >>> integrator = create_integrator('modified_euler', DoubleIntegrator(), 0.5)
    >>> integrator.name
    'Symplectic Euler (Cubic)'
    """
    key = method.lower().replace("-", "_").replace(" ", "_")
    key = _ALIASES.get(key, key)

    if key not in _METHOD_MAP:
        raise ValueError(
            f"Unknown method '{method}'. Choose from: {list_integrators()} "
            f"(aliases: {sorted(_ALIASES)})"
        )

    return _METHOD_MAP[key](system, max_time_step)


# ============================================================================
# Module Exports
# ============================================================================

__all__ = [
    "SymplecticEulerIntegrator",
    "create_integrator",
    "list_integrators",
]
