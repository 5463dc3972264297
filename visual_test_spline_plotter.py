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
Visual Test Suite for Spline Plotter

Generates HTML files for visual inspection of simulated spline trajectories.

Usage:
    python visual_test_spline_plotter.py

Output:
    Creates HTML files in ./visual_tests/spline_plotter/
"""

from pathlib import Path

import numpy as np

from splinesim import DoubleIntegrator, LinearSystem, PolynomialSpline, SymplecticEulerIntegrator
from splinesim.visualization import SplinePlotter


def setup_output_directory():
    """Create output directory for visual tests."""
    output_dir = Path("visual_tests/spline_plotter")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def visual_1_double_integrator_ramp(output_dir):
    """Test 1: Double integrator driven by a piecewise-linear ramp."""
    print("Generating Test 1: Double integrator under ramp input...")

    u = PolynomialSpline.first_order_hold([0.0, 1.0, 2.0], collocation_interval=5.0)
    integrator = SymplecticEulerIntegrator(DoubleIntegrator(), max_time_step=1.0)
    trajectory = integrator.sim(0.0, 10.0, np.zeros(2), u)

    fig = SplinePlotter().plot_simulation(
        trajectory, u,
        state_names=["Position", "Velocity"],
        control_names=["Acceleration"],
        title="Test 1: Double Integrator (max_time_step = 1.0)",
    )

    fig.write_html(output_dir / "01_double_integrator_ramp.html")
    print("  ✓ Saved: 01_double_integrator_ramp.html")


def visual_2_extrapolation(output_dir):
    """Test 2: Evaluation past the end of the trajectory."""
    print("Generating Test 2: Extrapolation past the horizon...")

    u = PolynomialSpline.first_order_hold([0.0, 1.0, 2.0], collocation_interval=5.0)
    integrator = SymplecticEulerIntegrator(DoubleIntegrator(), max_time_step=1.0)
    trajectory = integrator.sim(0.0, 10.0, np.zeros(2), u)

    fig = SplinePlotter().plot_spline(
        trajectory, t_span=(-2.0, 14.0),
        state_names=["Position", "Velocity"],
        title="Test 2: Extrapolation Outside [0, 10]",
    )

    fig.write_html(output_dir / "02_extrapolation.html")
    print("  ✓ Saved: 02_extrapolation.html")


def visual_3_damped_oscillator(output_dir):
    """Test 3: Damped oscillator, coarse vs fine steps."""
    print("Generating Test 3: Damped oscillator...")

    system = LinearSystem(A=[[0.0, 1.0], [-4.0, -0.4]], B=[[0.0], [1.0]])
    u = PolynomialSpline.first_order_hold([0.0, 0.0], collocation_interval=10.0)

    for dt in [0.5, 0.05]:
        integrator = SymplecticEulerIntegrator(system, max_time_step=dt)
        trajectory = integrator.sim(0.0, 10.0, np.array([1.0, 0.0]), u)

        fig = SplinePlotter(theme="publication").plot_spline(
            trajectory,
            state_names=["Position", "Velocity"],
            show_knots=dt > 0.1,
            title=f"Test 3: Damped Oscillator (max_time_step = {dt})",
        )

        filename = f"03_damped_oscillator_dt_{str(dt).replace('.', 'p')}.html"
        fig.write_html(output_dir / filename)
        print(f"  ✓ Saved: {filename}")


def main():
    """Run all visual tests."""
    print("=" * 70)
    print("Spline Plotter Visual Test Suite")
    print("=" * 70)
    print()

    output_dir = setup_output_directory()
    print(f"Output directory: {output_dir.absolute()}\n")

    visual_1_double_integrator_ramp(output_dir)
    visual_2_extrapolation(output_dir)
    visual_3_damped_oscillator(output_dir)

    print("\n" + "=" * 70)
    print("✓ All visual tests generated successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
