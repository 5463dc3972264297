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
Dynamical System - Abstract Vector Field

Defines the contract a continuous-time system must satisfy to be integrated:

    dx/dt = f(x, u)

Subclasses implement ``flow`` (the vector field) and ``lipschitz_constant``
(a bound on how fast f changes with x, consumed by external planners).
Calling the system validates the state/control dimensions around ``flow``,
so integrators never see mismatched vectors.
"""

from abc import ABC, abstractmethod

import numpy as np

from splinesim.types.core import ArrayLike, ControlVector, StateDerivative, StateVector


class DynamicalSystem(ABC):
    """
    Abstract base class for controlled continuous-time systems.

    Parameters
    ----------
    nx : int
        State dimension, >= 1
    nu : int
        Control dimension, >= 1

    Examples
    --------
    >>> class Decay(DynamicalSystem):
    ...     def __init__(self):
    ...         super().__init__(nx=1, nu=1)
    ...     def flow(self, x, u):
    ...         return -x + u
    ...     def lipschitz_constant(self):
    ...         return 1.0
    >>>
    >>> Decay()(np.array([2.0]), np.array([0.0]))
    array([-2.])
    """

    def __init__(self, nx: int, nu: int):
        if int(nx) < 1:
            raise ValueError(f"State dimension nx must be >= 1, got {nx}")
        if int(nu) < 1:
            raise ValueError(f"Control dimension nu must be >= 1, got {nu}")
        self.nx = int(nx)
        self.nu = int(nu)

    @abstractmethod
    def flow(self, x: StateVector, u: ControlVector) -> StateDerivative:
        """
        Vector field dx/dt = f(x, u).

        Must be a pure function of its two inputs.

        Parameters
        ----------
        x : StateVector
            State, shape (nx,)
        u : ControlVector
            Control, shape (nu,)

        Returns
        -------
        StateDerivative
            dx/dt, shape (nx,)
        """
        pass

    @abstractmethod
    def lipschitz_constant(self) -> float:
        """
        Upper bound on the rate of change of f with respect to x.

        No side effects. Exposed for planners that size steps or safety
        margins from it; integration itself does not use it.
        """
        pass

    def __call__(self, x: ArrayLike, u: ArrayLike) -> StateDerivative:
        """
        Evaluate ``flow`` with dimension checks on both sides.

        Raises
        ------
        ValueError
            If x, u or the returned derivative have the wrong shape
        """
        x = np.asarray(x, dtype=float)
        u = np.asarray(u, dtype=float)

        if x.shape != (self.nx,):
            raise ValueError(f"Expected state of shape ({self.nx},), got {x.shape}")
        if u.shape != (self.nu,):
            raise ValueError(f"Expected control of shape ({self.nu},), got {u.shape}")

        dx = np.asarray(self.flow(x, u), dtype=float)
        if dx.shape != (self.nx,):
            raise ValueError(
                f"{self.__class__.__name__}.flow returned shape {dx.shape}, "
                f"expected ({self.nx},)"
            )
        return dx

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nx={self.nx}, nu={self.nu})"
