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
Linear Time-Invariant System

    dx/dt = A x + B u
"""

from typing import Optional

import numpy as np

from splinesim.systems.base.dynamical_system import DynamicalSystem
from splinesim.types.core import ArrayLike, ControlVector, StateDerivative, StateVector


class LinearSystem(DynamicalSystem):
    """
    Linear time-invariant system dx/dt = A x + B u.

    Parameters
    ----------
    A : ArrayLike
        State matrix (nx, nx)
    B : ArrayLike
        Input matrix (nx, nu)
    lipschitz : Optional[float]
        Lipschitz constant to report. Defaults to the spectral norm of A,
        which is the tightest bound in the Euclidean norm.

    Raises
    ------
    ValueError
        If A is not square or B has the wrong number of rows

    Examples
    --------
    >>> # Damped oscillator
    >>> system = LinearSystem(A=[[0.0, 1.0], [-1.0, -0.1]], B=[[0.0], [1.0]])
    >>> system.nx, system.nu
    (2, 1)
    """

    def __init__(self, A: ArrayLike, B: ArrayLike, lipschitz: Optional[float] = None):
        A = np.atleast_2d(np.asarray(A, dtype=float))
        B = np.atleast_2d(np.asarray(B, dtype=float))

        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError(f"A must be square, got shape {A.shape}")
        if B.ndim != 2 or B.shape[0] != A.shape[0]:
            raise ValueError(f"B must have shape ({A.shape[0]}, nu), got {B.shape}")

        super().__init__(nx=A.shape[0], nu=B.shape[1])
        self.A = A
        self.B = B
        self._lipschitz = float(np.linalg.norm(A, 2)) if lipschitz is None else float(lipschitz)

    def flow(self, x: StateVector, u: ControlVector) -> StateDerivative:
        return self.A @ x + self.B @ u

    def lipschitz_constant(self) -> float:
        return self._lipschitz
