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
splinesim
=========

Fixed-step integration of controlled ODEs dx/dt = f(x, u) into
piecewise-polynomial trajectories.

>>> import numpy as np
>>> from splinesim import DoubleIntegrator, PolynomialSpline, SymplecticEulerIntegrator
>>>
>>> u = PolynomialSpline.first_order_hold([0.0, 1.0, 2.0], collocation_interval=5.0)
>>> integrator = SymplecticEulerIntegrator(DoubleIntegrator(), max_time_step=1.0)
>>> trajectory = integrator.sim(0.0, 10.0, np.zeros(2), u)
>>> trajectory.num_segments
10
"""

from splinesim.splines import PolynomialSpline
from splinesim.systems.base import DynamicalSystem
from splinesim.systems.base.numerical_integration import (
    IntegratorBase,
    SymplecticEulerIntegrator,
    create_integrator,
    list_integrators,
)
from splinesim.systems.builtin import DoubleIntegrator, LinearSystem

__version__ = "0.1.0"

__all__ = [
    "PolynomialSpline",
    "DynamicalSystem",
    "IntegratorBase",
    "SymplecticEulerIntegrator",
    "create_integrator",
    "list_integrators",
    "DoubleIntegrator",
    "LinearSystem",
]
