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
Spline Plotter - Time-Domain Visualization of Splines

Interactive Plotly figures for PolynomialSpline trajectories and control
inputs.

Main Class
----------
SplinePlotter
    plot_spline() : One subplot per coordinate, with segment knots marked
    plot_simulation() : Trajectory and control input on a shared time axis

Usage
-----
>>> from splinesim.visualization import SplinePlotter
>>>
>>> plotter = SplinePlotter()
>>> fig = plotter.plot_spline(trajectory, state_names=['Position', 'Velocity'])
>>> fig.show()
>>>
>>> fig = plotter.plot_simulation(trajectory, u_spline)
>>> fig.write_html('simulation.html')
"""

from typing import List, Optional, Tuple, Union

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from splinesim.splines.polynomial_spline import PolynomialSpline
from splinesim.visualization.themes import ColorSchemes, PlotThemes


class SplinePlotter:
    """
    Time-domain plots of PolynomialSpline objects.

    Parameters
    ----------
    theme : str or dict
        Default theme for every figure (see PlotThemes); each plot method
        accepts a ``theme`` keyword that overrides it
    """

    def __init__(self, theme: Union[str, dict] = "default"):
        self.theme = theme

    def plot_spline(
        self,
        spline: PolynomialSpline,
        t_span: Optional[Tuple[float, float]] = None,
        n_points: int = 200,
        state_names: Optional[List[str]] = None,
        show_knots: bool = True,
        title: str = "Spline",
        theme: Optional[Union[str, dict]] = None,
    ) -> go.Figure:
        """
        Plot every coordinate of a spline against time.

        Parameters
        ----------
        spline : PolynomialSpline
            Spline to plot (must have at least one segment)
        t_span : Optional[Tuple[float, float]]
            Time window; defaults to (t0, t_final). Times outside the
            spline's domain are extrapolated like any other evaluation.
        n_points : int
            Number of evaluation points
        state_names : Optional[List[str]]
            Subplot titles, one per coordinate
        show_knots : bool
            If True, mark segment boundaries inside the window
        title : str
            Figure title
        theme : Optional[Union[str, dict]]
            Theme for this figure; None uses the plotter's theme

        Returns
        -------
        go.Figure
            Figure with ``spline.dimension`` rows

        Raises
        ------
        ValueError
            If the spline is empty or state_names has the wrong length
        """
        theme = self.theme if theme is None else theme
        self._check_spline(spline)
        names = self._resolve_names(state_names, spline.dimension, prefix="x")

        fig = make_subplots(
            rows=spline.dimension, cols=1, shared_xaxes=True, subplot_titles=names
        )
        colors = self._get_colors(theme, spline.dimension)
        self._add_spline_traces(fig, spline, t_span, n_points, names, colors, 1, show_knots)

        fig.update_xaxes(title_text="Time", row=spline.dimension, col=1)
        fig.update_layout(title=title, height=max(300, 250 * spline.dimension))

        return PlotThemes.apply_theme(fig, theme)

    def plot_simulation(
        self,
        trajectory: PolynomialSpline,
        control: PolynomialSpline,
        n_points: int = 200,
        state_names: Optional[List[str]] = None,
        control_names: Optional[List[str]] = None,
        show_knots: bool = True,
        title: str = "Simulation",
        theme: Optional[Union[str, dict]] = None,
    ) -> go.Figure:
        """
        Plot a trajectory and its control input over the trajectory's span.

        States occupy the top rows, controls the bottom rows; all rows share
        the time axis (t0, t_final) of the trajectory.

        Examples
        --------
        >>> trajectory = integrator.sim(0.0, 10.0, x0, u)
        >>> fig = SplinePlotter().plot_simulation(trajectory, u)
        """
        theme = self.theme if theme is None else theme
        self._check_spline(trajectory)
        self._check_spline(control)

        x_names = self._resolve_names(state_names, trajectory.dimension, prefix="x")
        u_names = self._resolve_names(control_names, control.dimension, prefix="u")
        n_rows = trajectory.dimension + control.dimension
        t_span = (trajectory.t0, trajectory.t_final)

        fig = make_subplots(
            rows=n_rows, cols=1, shared_xaxes=True, subplot_titles=x_names + u_names
        )
        colors = self._get_colors(theme, n_rows)

        self._add_spline_traces(
            fig, trajectory, t_span, n_points, x_names,
            colors[: trajectory.dimension], 1, show_knots,
        )
        self._add_spline_traces(
            fig, control, t_span, n_points, u_names,
            colors[trajectory.dimension :], trajectory.dimension + 1, show_knots,
        )

        fig.update_xaxes(title_text="Time", row=n_rows, col=1)
        fig.update_layout(title=title, height=max(300, 200 * n_rows))

        return PlotThemes.apply_theme(fig, theme)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _check_spline(spline: PolynomialSpline) -> None:
        if spline.num_segments == 0:
            raise ValueError("Cannot plot an empty spline")

    @staticmethod
    def _resolve_names(names: Optional[List[str]], dimension: int, prefix: str) -> List[str]:
        if names is None:
            return [f"{prefix}{i + 1}" for i in range(dimension)]
        if len(names) != dimension:
            raise ValueError(f"Expected {dimension} names, got {len(names)}")
        return list(names)

    @staticmethod
    def _get_colors(theme: Union[str, dict], n_colors: int) -> List[str]:
        scheme = PlotThemes.get_theme(theme).get("color_scheme", "plotly")
        return ColorSchemes.get_colors(scheme, n_colors)

    @staticmethod
    def _add_spline_traces(
        fig: go.Figure,
        spline: PolynomialSpline,
        t_span: Optional[Tuple[float, float]],
        n_points: int,
        names: List[str],
        colors: List[str],
        first_row: int,
        show_knots: bool,
    ) -> None:
        t_start, t_end = t_span if t_span is not None else (spline.t0, spline.t_final)
        t = np.linspace(t_start, t_end, n_points)
        values = spline(t)

        knots = spline.t0 + spline.collocation_interval * np.arange(spline.num_segments + 1)
        knots = knots[(knots >= t_start) & (knots <= t_end)]
        knot_values = spline(knots) if knots.size > 0 else None

        for i, name in enumerate(names):
            row = first_row + i
            fig.add_trace(
                go.Scatter(
                    x=t, y=values[:, i], mode="lines", name=name,
                    line=dict(color=colors[i], width=2),
                ),
                row=row, col=1,
            )
            if show_knots and knot_values is not None:
                fig.add_trace(
                    go.Scatter(
                        x=knots, y=knot_values[:, i], mode="markers",
                        name=f"{name} knots", showlegend=False,
                        marker=dict(color=colors[i], size=6, symbol="circle-open"),
                    ),
                    row=row, col=1,
                )


__all__ = ["SplinePlotter"]
