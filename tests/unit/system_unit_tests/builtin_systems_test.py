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
Unit Tests for DynamicalSystem and Built-in Systems
===================================================

Tests cover:
1. Abstract interface and dimension validation
2. DoubleIntegrator vector field and Lipschitz constant
3. LinearSystem construction and Lipschitz constant
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from splinesim.systems.base.dynamical_system import DynamicalSystem
from splinesim.systems.builtin import DoubleIntegrator, LinearSystem

# ============================================================================
# Test Class 1: DynamicalSystem Base
# ============================================================================


class BadShapeSystem(DynamicalSystem):
    """Returns a derivative of the wrong length"""

    def __init__(self):
        super().__init__(nx=2, nu=1)

    def flow(self, x, u):
        return np.zeros(3)

    def lipschitz_constant(self):
        return 0.0


class TestDynamicalSystemBase:
    """Test the abstract base class"""

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            DynamicalSystem(1, 1)

    @pytest.mark.parametrize("nx, nu", [(0, 1), (1, 0)])
    def test_dimensions_validated(self, nx, nu):
        class Trivial(DynamicalSystem):
            def flow(self, x, u):
                return x

            def lipschitz_constant(self):
                return 0.0

        with pytest.raises(ValueError):
            Trivial(nx, nu)

    def test_wrong_state_shape(self):
        with pytest.raises(ValueError, match="state"):
            DoubleIntegrator()(np.zeros(3), np.zeros(1))

    def test_wrong_control_shape(self):
        with pytest.raises(ValueError, match="control"):
            DoubleIntegrator()(np.zeros(2), np.zeros(2))

    def test_wrong_flow_output_shape(self):
        with pytest.raises(ValueError, match="BadShapeSystem.flow"):
            BadShapeSystem()(np.zeros(2), np.zeros(1))

    def test_accepts_lists(self):
        assert_allclose(DoubleIntegrator()([1.0, 2.0], [3.0]), [2.0, 3.0])

    def test_repr(self):
        assert repr(DoubleIntegrator()) == "DoubleIntegrator(nx=2, nu=1)"


# ============================================================================
# Test Class 2: DoubleIntegrator
# ============================================================================


class TestDoubleIntegrator:
    """Test x'' = u"""

    def test_dimensions(self):
        system = DoubleIntegrator()

        assert system.nx == 2
        assert system.nu == 1

    def test_flow(self):
        system = DoubleIntegrator()

        assert_array_equal(system.flow(np.array([5.0, -1.0]), np.array([0.25])), [-1.0, 0.25])

    def test_lipschitz_constant(self):
        assert DoubleIntegrator().lipschitz_constant() == 1.0


# ============================================================================
# Test Class 3: LinearSystem
# ============================================================================


class TestLinearSystem:
    """Test dx = A x + B u"""

    def test_flow(self):
        system = LinearSystem(A=[[0.0, 1.0], [-1.0, 0.0]], B=[[0.0], [2.0]])

        assert_allclose(system(np.array([1.0, 2.0]), np.array([0.5])), [2.0, 0.0])

    def test_default_lipschitz_is_spectral_norm(self):
        A = np.array([[1.0, 2.0], [0.0, -3.0]])
        system = LinearSystem(A, np.eye(2))

        assert system.lipschitz_constant() == pytest.approx(np.linalg.norm(A, 2))

    def test_custom_lipschitz(self):
        system = LinearSystem(np.eye(2), np.ones((2, 1)), lipschitz=7.5)

        assert system.lipschitz_constant() == 7.5

    def test_double_integrator_equivalent(self):
        linear = LinearSystem([[0.0, 1.0], [0.0, 0.0]], [[0.0], [1.0]])
        x, u = np.array([0.3, -0.7]), np.array([1.1])

        assert_allclose(linear(x, u), DoubleIntegrator()(x, u))
        assert linear.lipschitz_constant() == pytest.approx(1.0)

    def test_non_square_A_rejected(self):
        with pytest.raises(ValueError, match="square"):
            LinearSystem(np.ones((2, 3)), np.ones((2, 1)))

    def test_B_row_mismatch_rejected(self):
        with pytest.raises(ValueError, match="B must have shape"):
            LinearSystem(np.eye(2), np.ones((3, 1)))
