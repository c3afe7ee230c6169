from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from craterfit.components.fitmodel import FitModel, FitResult
from craterfit.constants import FloatLike


@FitModel.register("power")
class PowerLaw(FitModel):
    """
    Power-law model, depth = exp(intercept) * height**slope, fit by ordinary least squares on (ln height, ln depth).

    Parameters
    ----------
    **kwargs : Any
        Additional keyword arguments.
    """

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)

    def transform(self, heights: NDArray[np.float64], depths: NDArray[np.float64]) -> tuple[NDArray, NDArray]:
        return np.log(heights), np.log(depths)

    def evaluate(self, fit: FitResult, heights: FloatLike | ArrayLike) -> np.float64 | NDArray[np.float64]:
        """
        Evaluate the power law at the given heights.

        Parameters
        ----------
        fit : FitResult
            The result of a power-law fit.
        heights : FloatLike or ArrayLike
            Positive drop heights in meters.

        Returns
        -------
        np.float64 or NDArray[np.float64]
            The depth in centimeters.
        """
        h = self._validate_heights(heights, positive=True)
        depth = np.exp(fit.intercept) * np.power(h, fit.slope)
        return np.float64(depth) if np.isscalar(heights) else depth
