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
Type aliases and result types shared across splinesim.
"""

from .core import (
    ArrayLike,
    ControlVector,
    ScalarLike,
    StateDerivative,
    StateVector,
)
from .trajectories import (
    CoefficientTensor,
    IntegrationResult,
    IntegratorStats,
    SegmentCoefficients,
    TimePoints,
    TimeSpan,
)

__all__ = [
    "ArrayLike",
    "ScalarLike",
    "StateVector",
    "ControlVector",
    "StateDerivative",
    "TimePoints",
    "TimeSpan",
    "SegmentCoefficients",
    "CoefficientTensor",
    "IntegrationResult",
    "IntegratorStats",
]
