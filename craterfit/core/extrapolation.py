from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from ..components.fitmodel import FitModel, FitResult
from ..constants import _MIN_CRATER_RADIUS, _TARGET_HEIGHT, FloatLike
from ..utils.general_utils import format_large_units
from .base import DataError, InsufficientDataError
from .sample import Sample, SampleTable, as_sample_table


@dataclass(frozen=True, slots=True)
class Extrapolation:
    """
    Predicted crater depth and radius at a target height.

    The depth is in the same units as the sample depths (cm). The radius is in scene units.
    """

    target_height: float
    depth: float
    radius: float
    fit_model: str
    fit: FitResult | None = None

    def __str__(self) -> str:
        return (
            f"<Extrapolation: {self.fit_model}>\n"
            f"Target height: {format_large_units(self.target_height, quantity='length')}\n"
            f"Estimated crater depth: {max(self.depth, 0.0) / 100.0:.3f} m\n"
            f"Estimated crater radius: {self.radius:.3f} scene units"
        )

    @property
    def is_fallback(self) -> bool:
        """True when there were not enough samples to fit the model."""
        return self.fit is None


def crater_radius_estimate(
    depths: Iterable[FloatLike],
    predicted_depth: FloatLike,
    min_radius: FloatLike = _MIN_CRATER_RADIUS,
) -> float:
    """
    Estimate the crater radius from the sample depths and the predicted depth.

    The radius is the mean of the square roots of the sample depths scaled by the square root of the predicted depth,
    floored at `min_radius`. This is an empirical rule of thumb with no physical derivation.

    Parameters
    ----------
    depths : Iterable of FloatLike
        The sample depths.
    predicted_depth : FloatLike
        The predicted depth at the target height. Negative values are treated as zero.
    min_radius : FloatLike
        The smallest radius that will be returned.

    Returns
    -------
    float
    """
    depths = np.asarray(list(depths), dtype=np.float64)
    if depths.size == 0 or math.isnan(predicted_depth):
        return float(min_radius)
    radius_k = np.mean(np.sqrt(depths))
    return float(max(min_radius, radius_k * math.sqrt(max(predicted_depth, 0.0))))


def compute_extrapolation(
    samples: SampleTable | Iterable[Sample],
    target_height: FloatLike = _TARGET_HEIGHT,
    fit_model: str | FitModel | None = None,
    min_radius: FloatLike = _MIN_CRATER_RADIUS,
) -> Extrapolation:
    """
    Predict the crater depth and radius for an impact from the target height.

    Parameters
    ----------
    samples : SampleTable or Iterable of Sample
        The experimental samples.
    target_height : FloatLike, default 100 km
        The drop height in meters at which to predict the crater.
    fit_model : str or FitModel, optional
        The fit model to use. Default is the power law.
    min_radius : FloatLike, default 0.2
        Floor on the estimated radius in scene units.

    Returns
    -------
    Extrapolation
        With fewer than two samples, the depth is zero and the radius is `min_radius`.

    Raises
    ------
    DataError
        If the target height is not a positive finite number, or if the samples do not contain two distinct heights.
    """
    if not math.isfinite(target_height) or target_height <= 0:
        raise DataError(f"target_height must be a positive finite number, got {target_height}")
    fit_model = FitModel.maker(fit_model)
    samples = as_sample_table(samples)

    try:
        fit = fit_model.fit(samples)
    except InsufficientDataError:
        return Extrapolation(
            target_height=float(target_height),
            depth=0.0,
            radius=float(min_radius),
            fit_model=fit_model.name,
        )

    depth = float(fit_model.evaluate(fit, target_height))
    if math.isnan(depth):
        raise DataError(f"The {fit_model.name} fit does not give a valid depth at {target_height} m")
    radius = crater_radius_estimate(samples.depths, depth, min_radius=min_radius)
    return Extrapolation(
        target_height=float(target_height),
        depth=depth,
        radius=radius,
        fit_model=fit_model.name,
        fit=fit,
    )
