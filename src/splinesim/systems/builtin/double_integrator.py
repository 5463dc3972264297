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
Double Integrator - Point Mass Under Force Control

State x = [position, velocity], control u = [acceleration]:

    d(position)/dt = velocity
    d(velocity)/dt = u
"""

import numpy as np

from splinesim.systems.base.dynamical_system import DynamicalSystem
from splinesim.types.core import ControlVector, StateDerivative, StateVector


class DoubleIntegrator(DynamicalSystem):
    """
    Double integrator x'' = u in first-order form.

    The vector field (x2, u) is linear in x with Jacobian [[0, 1], [0, 0]],
    whose spectral norm is 1.

    Examples
    --------
    >>> system = DoubleIntegrator()
    >>> system(np.array([0.0, 2.0]), np.array([0.5]))
    array([2. , 0.5])
    """

    def __init__(self):
        super().__init__(nx=2, nu=1)

    def flow(self, x: StateVector, u: ControlVector) -> StateDerivative:
        return np.array([x[1], u[0]])

    def lipschitz_constant(self) -> float:
        return 1.0
