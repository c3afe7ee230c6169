from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import ArrayLike

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from craterfit.core.session import Session

_MODEL_STYLES = {
    "power": {"color": "tab:orange", "linestyle": "-"},
    "linear": {"color": "tab:green", "linestyle": "--"},
}


def plot_fit_comparison(
    session: Session,
    heights: ArrayLike | None = None,
    ax: Axes | None = None,
    imagefile: str | Path | None = None,
    show_extrapolation: bool = False,
    **kwargs: Any,
) -> Axes:
    """
    Plot the experimental samples together with every available fit model.

    Parameters
    ----------
    session : Session
        The session whose samples are plotted.
    heights : ArrayLike, optional
        The heights in meters at which the fits are drawn. Default is 50 heights spanning the sample range.
    ax : matplotlib.axes.Axes, optional
        The axes to draw on. A new figure is created if None.
    imagefile : str or Path, optional
        If set, the figure is saved to this file.
    show_extrapolation : bool, default False
        If True, the fits are drawn out to the session's target height on log-log axes, and the extrapolated depth of
        each model is marked.
    **kwargs : Any
        Additional keyword arguments passed to `Axes.plot` for the fit curves.

    Returns
    -------
    matplotlib.axes.Axes
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    if heights is None and show_extrapolation and len(session.samples) > 0:
        hmin = session.samples.heights.min()
        heights = np.geomspace(hmin, max(session.target_height, hmin), 100)
    curves = session.compare(heights)
    heights = curves.pop("height")

    ax.scatter(session.samples.heights, session.samples.depths, color="k", zorder=3, label="Samples")
    for name, depth in curves.items():
        style = {**_MODEL_STYLES.get(name, {}), **kwargs}
        ax.plot(heights, depth, label=f"{name} fit", **style)
        if show_extrapolation:
            result = session.extrapolate(name)
            ax.scatter(
                [result.target_height],
                [result.depth],
                marker="*",
                s=80,
                color=style.get("color"),
                zorder=4,
            )

    if show_extrapolation:
        ax.set_xscale("log")
        ax.set_yscale("log")
    ax.set_xlabel("Height (m)")
    ax.set_ylabel("Depth (cm)")
    ax.set_title("Impact depth fits")
    ax.legend()

    if imagefile is not None:
        ax.figure.savefig(imagefile, bbox_inches="tight")

    return ax
