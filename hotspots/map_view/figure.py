"""Plotly rendering of the hex map view."""

from typing import TYPE_CHECKING

import plotly.graph_objects as go

from hotspots.map_view.layers import drone_radar_color, drone_radar_radius
from hotspots.map_view.markers import DroneRadar

if TYPE_CHECKING:
    from hotspots.map_view.view import HexMapView


def create_figure(view: "HexMapView", title: str | None = None) -> go.Figure:
    """
    Create an interactive plotly map for the current view state.

    The base map uses the view's MapLibre style; coverage, child overlays
    and the selected hex outline are map layers, and drone radars are a
    marker trace. The camera matches the view's surface.

    Args:
        view: Map view to render
        title: Figure title (defaults to the current path)

    Returns:
        Plotly Figure object ready for display
    """
    fig = go.Figure()

    if view.drones:
        _add_drone_radars_to_figure(fig, view.drones)

    for child in view.children:
        if hasattr(child, "traces"):
            for trace in child.traces(view):
                fig.add_trace(trace)

    lat, lng = view.surface.get_center()
    width, height = view.surface.size
    fig.update_layout(
        title=title or f"Hotspots: {view.router.path}",
        map=dict(
            style=view.map_style(),
            center=dict(lat=lat, lon=lng),
            zoom=view.surface.get_zoom(),
            layers=view.overlay_layers(),
        ),
        width=width,
        height=height,
        showlegend=bool(view.drones),
        legend=dict(yanchor="top", y=0.99, xanchor="left", x=0.01),
        margin=dict(l=0, r=0, t=40, b=0),
    )

    return fig


def _add_drone_radars_to_figure(fig: go.Figure, drones: list[DroneRadar]) -> None:
    """Add drone radar markers with hover information."""
    hover_texts = [
        f"<b>{drone.name or drone.id}</b><br>"
        f"Status: {drone.status}<br>"
        f"Concentration: {drone.concentration:.2f}<br>"
        f"Hex: {drone.hex_id or '-'}"
        for drone in drones
    ]

    fig.add_trace(
        go.Scattermap(
            lat=[drone.lat for drone in drones],
            lon=[drone.lng for drone in drones],
            mode="markers",
            marker=dict(
                # plotly sizes are diameters
                size=[2 * drone_radar_radius(drone.concentration) for drone in drones],
                color=[drone_radar_color(drone.status) for drone in drones],
                opacity=0.8,
            ),
            customdata=[drone.id for drone in drones],
            hovertext=hover_texts,
            hoverinfo="text",
            name="Drone Radars",
        )
    )


def show_figure(fig: go.Figure) -> None:
    """Display figure in browser."""
    fig.show()


def export_html(fig: go.Figure, output_path: str) -> None:
    """Export figure as standalone HTML file."""
    fig.write_html(output_path, include_plotlyjs=True, full_html=True)
