from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from craterfit.components.fitmodel import FitModel, FitResult
from craterfit.constants import FloatLike


@FitModel.register("linear")
class Linear(FitModel):
    """
    Linear model, depth = slope * height + intercept, fit by ordinary least squares on the raw samples.

    Parameters
    ----------
    **kwargs : Any
        Additional keyword arguments.
    """

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)

    def transform(self, heights: NDArray[np.float64], depths: NDArray[np.float64]) -> tuple[NDArray, NDArray]:
        return heights, depths

    def evaluate(self, fit: FitResult, heights: FloatLike | ArrayLike) -> np.float64 | NDArray[np.float64]:
        h = self._validate_heights(heights)
        depth = fit.slope * h + fit.intercept
        return np.float64(depth) if np.isscalar(heights) else depth
