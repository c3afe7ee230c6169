from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
import pyvista as pv
from numpy.typing import ArrayLike

from craterfit.constants import _MARKER_RADIUS, _SCENE_RADIUS, FloatLike

if TYPE_CHECKING:
    from craterfit.core.geometry import CraterCavity
    from craterfit.core.session import Session

_UP = (0.0, 1.0, 0.0)
_CRATER_COLOR = "#222222"
_MARKER_COLOR = "#888888"


def host_mesh(host_radius: FloatLike = _SCENE_RADIUS, resolution: int = 64) -> pv.PolyData:
    """
    The host sphere, centered on the origin.
    """
    return pv.Sphere(radius=host_radius, theta_resolution=resolution, phi_resolution=resolution, direction=_UP)


def cavity_mesh(cavity: CraterCavity, resolution: int = 64) -> pv.PolyData:
    """
    The crater cavity clipped to the inside of the host sphere.

    Parameters
    ----------
    cavity : CraterCavity
        The placement of the half sphere.
    resolution : int, default 64
        Number of divisions in both the azimuthal and the polar direction.

    Returns
    -------
    pyvista.PolyData
        The curved surface of the half sphere, with every point farther than `host_radius + epsilon` from the host center
        removed. The distance of each point from the host center is stored in the "host_distance" point array.
    """
    mesh = pv.Sphere(
        radius=cavity.radius,
        center=cavity.center,
        direction=_UP,
        theta_resolution=resolution,
        phi_resolution=resolution,
        start_phi=90.0,
        end_phi=180.0,
    )
    mesh.point_data["host_distance"] = np.linalg.norm(mesh.points, axis=1)
    return mesh.clip_scalar(scalars="host_distance", value=cavity.host_radius + cavity.epsilon, invert=True)


def marker_mesh(position: ArrayLike = (0.0, 0.0, 0.0), radius: FloatLike = _MARKER_RADIUS) -> pv.PolyData:
    """
    The falling marker.
    """
    return pv.Sphere(radius=radius, center=np.asarray(position, dtype=np.float64), theta_resolution=32, phi_resolution=32)


def show(
    session: Session,
    dt: FloatLike = 1.0 / 60.0,
    autoplay: bool = True,
    off_screen: bool = False,
    screenshot: str | Path | None = None,
    **kwargs: Any,
) -> pv.Plotter:
    """
    Draw the host sphere, the crater and the falling marker, and animate the impact.

    Press "p" to drop the marker and "r" to reset it.

    Parameters
    ----------
    session : Session
        The session to draw.
    dt : FloatLike, default 1/60
        Seconds of animation per rendered frame.
    autoplay : bool, default True
        If True, the marker is dropped as soon as the window opens.
    off_screen : bool, default False
        If True, a single frame is rendered without opening a window.
    screenshot : str or Path, optional
        If set, the rendered frame is saved to this file.
    **kwargs : Any
        Additional keyword arguments passed to `pyvista.Plotter`.

    Returns
    -------
    pyvista.Plotter
    """
    plotter = pv.Plotter(off_screen=off_screen, **kwargs)
    plotter.add_mesh(
        host_mesh(session.host_radius),
        color=session.target.color,
        opacity=0.5,
        smooth_shading=True,
    )
    cavity = cavity_mesh(session.cavity())
    cavity_actor = plotter.add_mesh(cavity, color=_CRATER_COLOR)
    marker_actor = plotter.add_mesh(marker_mesh(), color=_MARKER_COLOR)

    def _draw(frame):
        marker_actor.position = tuple(frame.marker_position)
        marker_actor.visibility = frame.marker_visible
        cavity_actor.visibility = frame.crater_visible

    def _step(_):
        _draw(session.advance(dt))
        plotter.render()

    def _play():
        session.play()
        _draw(session.frame())

    def _reset():
        session.reset()
        _draw(session.frame())

    _draw(session.frame())
    plotter.camera_position = [(0.0, 6.0, 8.0), (0.0, 0.0, 0.0), _UP]

    if off_screen:
        plotter.show(screenshot=screenshot, auto_close=False)
        return plotter

    plotter.add_key_event("p", _play)
    plotter.add_key_event("r", _reset)
    if autoplay:
        session.play()
    plotter.add_timer_event(max_steps=1_000_000, duration=max(1, int(dt * 1000)), callback=_step)
    plotter.show(screenshot=screenshot)
    return plotter
