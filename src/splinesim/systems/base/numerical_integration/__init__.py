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
Numerical Integration
=====================

Fixed-step integrators that return the solution of dx/dt = f(x, u) as a
PolynomialSpline.

>>> from splinesim.systems.base.numerical_integration import create_integrator
>>>
>>> integrator = create_integrator('symplectic_euler', system, max_time_step=0.1)
>>> trajectory = integrator.sim(0.0, 10.0, x0, u_spline)
>>> trajectory.at(3.3)
"""

from .fixed_step_integrators import (
    SymplecticEulerIntegrator,
    create_integrator,
    list_integrators,
)
from .integrator_base import IntegratorBase

__all__ = [
    # Base class
    "IntegratorBase",
    # Fixed-step integrators
    "SymplecticEulerIntegrator",
    # Factory
    "create_integrator",
    "list_integrators",
]
