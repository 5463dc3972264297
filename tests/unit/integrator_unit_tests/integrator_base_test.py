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
Unit Tests for IntegratorBase
=============================

Tests the abstract base class for spline integrators, including:
1. Abstract interface enforcement
2. Initialization and validation
3. flow / lipschitz_constant delegation
4. Step count and step width of sim()
5. Interval and dimension validation
6. State hand-over between steps
7. Extending an existing trajectory
8. integrate() result dictionary
9. Statistics and the sim() call counter
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from splinesim.splines.polynomial_spline import PolynomialSpline
from splinesim.systems.base.dynamical_system import DynamicalSystem
from splinesim.systems.base.numerical_integration.integrator_base import IntegratorBase

# ============================================================================
# Mock Systems and Integrators
# ============================================================================


class MockSystem(DynamicalSystem):
    """Simple linear dynamics: dx = -x + u"""

    def __init__(self, nx=1):
        super().__init__(nx=nx, nu=1)

    def flow(self, x, u):
        return -x + u[0]

    def lipschitz_constant(self):
        return 1.0


class ForwardEulerSegments(IntegratorBase):
    """Minimal concrete integrator: linear segment x0 + f(x0, u(t1)) * tau."""

    segment_degree = 2

    def __init__(self, system, max_time_step):
        super().__init__(system, max_time_step)
        self.calls = []

    def step(self, x0, u, t1, t2, previous_segment=None):
        self._validate_interval(t1, t2)
        self.calls.append((np.array(x0), t1, t2, previous_segment))

        f = self.flow(x0, u.at(t1))
        self._stats["total_steps"] += 1
        return PolynomialSpline(t2 - t1, t1, len(x0), 2, segments=[[x0, f]])

    @property
    def name(self):
        return "Forward Euler (Linear)"


def zero_control(t_end=10.0):
    return PolynomialSpline.first_order_hold([0.0, 0.0], t_end)


# ============================================================================
# Test Class 1: Abstract Interface
# ============================================================================


class TestAbstractInterface:
    """Test that IntegratorBase enforces its abstract methods"""

    def test_cannot_instantiate_base(self):
        with pytest.raises(TypeError):
            IntegratorBase(MockSystem(), 0.1)

    def test_missing_step_is_abstract(self):
        class NoStep(IntegratorBase):
            @property
            def name(self):
                return "No step"

        with pytest.raises(TypeError):
            NoStep(MockSystem(), 0.1)

    def test_missing_name_is_abstract(self):
        class NoName(IntegratorBase):
            def step(self, x0, u, t1, t2, previous_segment=None):
                return None

        with pytest.raises(TypeError):
            NoName(MockSystem(), 0.1)


# ============================================================================
# Test Class 2: Initialization
# ============================================================================


class TestInitialization:
    """Test construction and configuration"""

    def test_stores_configuration(self):
        system = MockSystem()
        integrator = ForwardEulerSegments(system, 0.25)

        assert integrator.system is system
        assert integrator.max_time_step == 0.25
        assert integrator.sim_count == 0

    @pytest.mark.parametrize("max_time_step", [0.0, -0.1])
    def test_nonpositive_step_rejected(self, max_time_step):
        with pytest.raises(ValueError, match="max_time_step"):
            ForwardEulerSegments(MockSystem(), max_time_step)

    def test_max_time_step_is_read_only(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.25)

        with pytest.raises(AttributeError):
            integrator.max_time_step = 1.0

    def test_repr_and_str(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.25)

        assert "ForwardEulerSegments" in repr(integrator)
        assert "max_time_step=0.25" in repr(integrator)
        assert "Forward Euler" in str(integrator)


# ============================================================================
# Test Class 3: System Capabilities
# ============================================================================


class TestSystemCapabilities:
    """Test flow() and lipschitz_constant() delegation"""

    def test_flow_delegates_to_system(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        assert_allclose(integrator.flow(np.array([2.0]), np.array([0.5])), [-1.5])

    def test_flow_counts_evaluations(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        for _ in range(5):
            integrator.flow(np.array([1.0]), np.array([0.0]))

        assert integrator.get_stats()["total_fev"] == 5

    def test_flow_dimension_mismatch(self):
        integrator = ForwardEulerSegments(MockSystem(nx=2), 0.1)

        with pytest.raises(ValueError, match="state"):
            integrator.flow(np.array([1.0]), np.array([0.0]))

    def test_lipschitz_constant(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        assert integrator.lipschitz_constant() == 1.0
        assert integrator.sim_count == 0


# ============================================================================
# Test Class 4: Step Grid
# ============================================================================


class TestStepGrid:
    """Test number and width of steps taken by sim()"""

    @pytest.mark.parametrize(
        "t0, tf, max_time_step, expected_steps",
        [
            (0.0, 10.0, 1.0, 10),
            (0.0, 1.0, 0.3, 4),
            (2.0, 3.5, 0.5, 3),
            (0.0, 1.0, 2.0, 1),
            (-1.0, 1.0, 0.7, 3),
        ],
    )
    def test_segment_count_and_width(self, t0, tf, max_time_step, expected_steps):
        integrator = ForwardEulerSegments(MockSystem(), max_time_step)
        trajectory = integrator.sim(t0, tf, np.array([1.0]), zero_control(tf))

        dt = (tf - t0) / expected_steps
        assert trajectory.num_segments == expected_steps
        assert trajectory.collocation_interval == pytest.approx(dt)
        assert trajectory.collocation_interval <= max_time_step
        assert trajectory.t0 == t0
        assert trajectory.t_final == pytest.approx(tf)

    def test_step_windows_cover_horizon(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.3)
        integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())

        windows = [(t1, t2) for _, t1, t2, _ in integrator.calls]
        assert windows[0][0] == 0.0
        assert windows[-1][1] == pytest.approx(1.0)
        for (_, end), (start, _) in zip(windows[:-1], windows[1:]):
            assert start == pytest.approx(end)

    @pytest.mark.parametrize(
        "t0, max_time_step",
        [(1.7e9, 1e-3), (1e10, 1e-3), (1e12, 1e-2)],
    )
    def test_large_start_time(self, t0, max_time_step):
        integrator = ForwardEulerSegments(MockSystem(), max_time_step)
        tf = t0 + 0.1
        trajectory = integrator.sim(t0, tf, np.array([1.0]), zero_control())

        num_steps = int(np.ceil((tf - t0) / max_time_step))
        dt = (tf - t0) / num_steps
        assert trajectory.num_segments == num_steps
        assert trajectory.collocation_interval == dt
        assert trajectory.t0 == t0
        for k, (_, t1, t2, _) in enumerate(integrator.calls):
            assert t1 == t0 + k * dt
            assert t2 == t0 + (k + 1) * dt
        assert np.all(np.isfinite(trajectory.segments))

    def test_output_degree_matches_stepping_rule(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        trajectory = integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())

        assert trajectory.degree == 2
        assert trajectory.dimension == 1


# ============================================================================
# Test Class 5: Validation
# ============================================================================


class TestValidation:
    """Test precondition violations"""

    @pytest.mark.parametrize("t0, tf", [(1.0, 1.0), (2.0, 1.0)])
    def test_malformed_horizon(self, t0, tf):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        with pytest.raises(ValueError, match="Final time"):
            integrator.sim(t0, tf, np.array([1.0]), zero_control())

    @pytest.mark.parametrize("t1, t2", [(1.0, 1.0), (1.0, 0.5)])
    def test_malformed_step(self, t1, t2):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        with pytest.raises(ValueError, match="positive"):
            integrator.step(np.array([1.0]), zero_control(), t1, t2)

    def test_initial_state_dimension(self):
        integrator = ForwardEulerSegments(MockSystem(nx=2), 0.1)

        with pytest.raises(ValueError, match="Initial state"):
            integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())

    def test_control_dimension(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        control = PolynomialSpline.first_order_hold(np.zeros((2, 2)), 1.0)

        with pytest.raises(ValueError, match="Control spline dimension"):
            integrator.sim(0.0, 1.0, np.array([1.0]), control)

    def test_control_must_be_spline(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        with pytest.raises(TypeError):
            integrator.sim(0.0, 1.0, np.array([1.0]), lambda t: np.zeros(1))

    def test_failed_sim_not_counted(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)

        with pytest.raises(ValueError):
            integrator.sim(1.0, 0.0, np.array([1.0]), zero_control())

        assert integrator.sim_count == 0


# ============================================================================
# Test Class 6: State Hand-Over
# ============================================================================


class TestStateHandOver:
    """Next step starts from the previous segment evaluated at the new time"""

    def test_initial_state_passed_unchanged(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        integrator.sim(0.0, 0.5, np.array([3.0]), zero_control())

        assert_array_equal(integrator.calls[0][0], [3.0])

    def test_state_is_previous_segment_at_new_time(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        trajectory = integrator.sim(0.0, 0.5, np.array([1.0]), zero_control())

        segments = trajectory.segments
        h = trajectory.collocation_interval
        for k in range(1, trajectory.num_segments):
            expected = segments[k - 1, 0] + segments[k - 1, 1] * h
            assert_allclose(integrator.calls[k][0], expected, rtol=1e-12)

    def test_previous_segment_forwarded(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.25)
        integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())

        assert integrator.calls[0][3] is None
        for _, _, _, previous in integrator.calls[1:]:
            assert isinstance(previous, PolynomialSpline)
            assert previous.num_segments == 1

    def test_forward_euler_decay_values(self):
        """x_{k+1} = (1 - h) x_k for dx = -x"""
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        trajectory = integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())

        assert_allclose(trajectory.at(1.0), [0.9**10], rtol=1e-10)


# ============================================================================
# Test Class 7: Extending an Existing Trajectory
# ============================================================================


class TestExtendSolution:
    """Test sim() with a caller-supplied solution spline"""

    def test_contiguous_extension(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        control = zero_control()

        trajectory = integrator.sim(0.0, 1.0, np.array([1.0]), control)
        x1 = trajectory.at(1.0)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            returned = integrator.sim(1.0, 2.0, x1, control, solution=trajectory)

        assert returned is trajectory
        assert trajectory.num_segments == 4
        assert_allclose(trajectory.at(2.0), [0.5**4], rtol=1e-12)

    def test_non_contiguous_extension_warns(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        control = zero_control()
        trajectory = integrator.sim(0.0, 1.0, np.array([1.0]), control)

        with pytest.warns(UserWarning, match="positionally"):
            integrator.sim(3.0, 4.0, np.array([1.0]), control, solution=trajectory)

        assert trajectory.num_segments == 4

    def test_incompatible_grid_raises(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        existing = PolynomialSpline(0.3, 0.0, 1, 2)

        with pytest.raises(ValueError, match="Collocation"):
            integrator.sim(0.0, 1.0, np.array([1.0]), zero_control(), solution=existing)

    def test_incompatible_degree_raises(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        existing = PolynomialSpline(0.5, 0.0, 1, 4)

        with pytest.raises(ValueError, match="does not match integrator output"):
            integrator.sim(0.0, 1.0, np.array([1.0]), zero_control(), solution=existing)
        assert existing.num_segments == 0

    def test_empty_solution_is_filled(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        existing = PolynomialSpline(0.5, 0.0, 1, 2)
        integrator.sim(0.0, 1.0, np.array([1.0]), zero_control(), solution=existing)

        assert existing.num_segments == 2


# ============================================================================
# Test Class 8: integrate()
# ============================================================================


class TestIntegrate:
    """Test the IntegrationResult wrapper"""

    def test_result_fields(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        result = integrator.integrate(np.array([1.0]), zero_control(), (0.0, 1.0))

        for key in ["t", "x", "success", "message", "nfev", "nsteps",
                    "integration_time", "solver", "sol"]:
            assert key in result

        assert result["success"] is True
        assert result["solver"] == integrator.name
        assert result["nsteps"] == 10
        assert result["nfev"] == 10
        assert isinstance(result["sol"], PolynomialSpline)

    def test_default_grid(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.3)
        result = integrator.integrate(np.array([1.0]), zero_control(), (0.0, 1.0))

        assert result["t"].shape == (5,)
        assert result["x"].shape == (5, 1)
        assert result["t"][0] == 0.0
        assert result["t"][-1] == 1.0
        assert_array_equal(result["x"][0], [1.0])

    def test_custom_t_eval(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        t_eval = np.linspace(0.0, 1.0, 7)
        result = integrator.integrate(np.array([1.0]), zero_control(), (0.0, 1.0), t_eval=t_eval)

        assert_array_equal(result["t"], t_eval)
        assert_allclose(result["x"], result["sol"](t_eval))

    def test_nfev_is_per_run(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.1)
        integrator.integrate(np.array([1.0]), zero_control(), (0.0, 1.0))
        result = integrator.integrate(np.array([1.0]), zero_control(), (0.0, 1.0))

        assert result["nfev"] == 10
        assert integrator.get_stats()["total_fev"] == 20


# ============================================================================
# Test Class 9: Statistics
# ============================================================================


class TestStatistics:
    """Test statistics tracking and the call counter"""

    def test_sim_count_increments(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.5)
        for expected in range(1, 4):
            integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())
            assert integrator.sim_count == expected

    def test_stats_fields(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.25)
        integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())
        stats = integrator.get_stats()

        assert stats["total_steps"] == 4
        assert stats["total_fev"] == 4
        assert stats["total_sims"] == 1
        assert stats["avg_fev_per_step"] == pytest.approx(1.0)
        assert stats["total_time"] >= 0.0

    def test_reset_stats(self):
        integrator = ForwardEulerSegments(MockSystem(), 0.25)
        integrator.sim(0.0, 1.0, np.array([1.0]), zero_control())
        integrator.reset_stats()

        stats = integrator.get_stats()
        assert stats["total_steps"] == 0
        assert stats["total_fev"] == 0
        assert stats["total_sims"] == 0
        assert integrator.sim_count == 0

    def test_counters_are_per_instance(self):
        first = ForwardEulerSegments(MockSystem(), 0.5)
        second = ForwardEulerSegments(MockSystem(), 0.5)
        first.sim(0.0, 1.0, np.array([1.0]), zero_control())

        assert first.sim_count == 1
        assert second.sim_count == 0
