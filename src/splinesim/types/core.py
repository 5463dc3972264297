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
Core Types - Fundamental Building Blocks

Defines the basic array aliases used throughout splinesim:
- Semantic vector types (state, control, state derivative)
- Scalar types for times and step sizes
- Function signatures for vector fields

All numerical work is done with NumPy float64 arrays. The aliases carry
meaning for readers and type checkers; they do not convert anything.

Usage
-----
>>> from splinesim.types.core import StateVector, ControlVector
>>>
>>> def flow(x: StateVector, u: ControlVector) -> StateVector:
...     return np.array([x[1], u[0]])
"""

from typing import Union

import numpy as np

# ============================================================================
# Basic Array Types
# ============================================================================

ArrayLike = Union[np.ndarray, list, tuple]
"""
Anything ``np.asarray`` turns into a float array.

Public entry points accept ArrayLike and convert once; internal code works
on ``np.ndarray`` only.
"""

ScalarLike = Union[float, int, np.floating, np.integer]
"""
Real scalar (time, step size, Lipschitz constant).
"""

# ============================================================================
# Semantic Vector Types
# ============================================================================

StateVector = np.ndarray
"""
State vector x, shape (nx,).

Length is fixed by the dynamical system and must stay the same across all
calls within one simulation.
"""

ControlVector = np.ndarray
"""
Control input vector u, shape (nu,).
"""

StateDerivative = np.ndarray
"""
Time derivative dx/dt = f(x, u), shape (nx,).
"""

__all__ = [
    "ArrayLike",
    "ScalarLike",
    "StateVector",
    "ControlVector",
    "StateDerivative",
]
