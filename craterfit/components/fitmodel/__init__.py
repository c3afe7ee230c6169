from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from craterfit.constants import _DEFAULT_FIT_MODEL, FloatLike
from craterfit.core.base import (
    ComponentBase,
    DataError,
    DegenerateFitError,
    InsufficientDataError,
    import_components,
)
from craterfit.core.sample import Sample, SampleTable, as_sample_table


@dataclass(frozen=True, slots=True)
class FitResult:
    """
    The slope and intercept of a least-squares fit, in the coordinates that the model fits in.
    """

    model: str
    slope: float
    intercept: float
    n: int

    def __str__(self) -> str:
        return f"<FitResult: {self.model}>\nSlope: {self.slope:.6g}\nIntercept: {self.intercept:.6g}\nSamples: {self.n}"


class FitModel(ComponentBase):
    """
    The abstract base class for all fit models. A fit model maps a drop height to a predicted impact depth using an ordinary
    least-squares fit to the experimental samples.

    Subclasses define the coordinate transform applied to the samples before the fit and the function used to evaluate the fit.

    Parameters
    ----------
    **kwargs : Any
        Additional keyword arguments.
    """

    _registry: dict[str, type[FitModel]] = {}

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)

    @classmethod
    def maker(cls, fit_model: str | FitModel | type[FitModel] | None = None, **kwargs: Any) -> FitModel:
        """
        Initialize a fit model based on the provided name or class.

        Parameters
        ----------
        fit_model : str, FitModel, or None, default=None
            The name of the fit model to initialize. If None, the power-law model is used.
        **kwargs : Any
            Additional keyword arguments.

        Returns
        -------
        FitModel
            An instance of the specified fit model.

        Raises
        ------
        KeyError
            If the specified fit model name is not found in the registry.
        TypeError
            If the specified fit model is not a string or a subclass of FitModel.
        """
        if fit_model is None:
            fit_model = _DEFAULT_FIT_MODEL
        return super().maker(component=fit_model, **kwargs)

    @abstractmethod
    def transform(self, heights: NDArray[np.float64], depths: NDArray[np.float64]) -> tuple[NDArray, NDArray]: ...
    @abstractmethod
    def evaluate(self, fit: FitResult, heights: FloatLike | ArrayLike) -> np.float64 | NDArray[np.float64]: ...

    def fit(self, samples: SampleTable | Iterable[Sample]) -> FitResult:
        """
        Fit the model to the samples.

        Parameters
        ----------
        samples : SampleTable or Iterable of Sample
            The experimental samples. Their order does not matter.

        Returns
        -------
        FitResult

        Raises
        ------
        InsufficientDataError
            If there are fewer than two samples.
        DegenerateFitError
            If fewer than two distinct heights are present.
        """
        samples = as_sample_table(samples)
        n = len(samples)
        if n < 2:
            raise InsufficientDataError(f"At least 2 samples are required to fit the {self.name} model, got {n}")
        heights = samples.heights
        if np.unique(heights).size < 2:
            raise DegenerateFitError(f"The {self.name} model needs at least 2 distinct heights")
        x, y = self.transform(heights, samples.depths)
        slope, intercept = _least_squares(x, y)
        return FitResult(model=self.name, slope=slope, intercept=intercept, n=n)

    def predict(
        self, samples: SampleTable | Iterable[Sample], heights: FloatLike | ArrayLike
    ) -> np.float64 | NDArray[np.float64]:
        """
        Predict the impact depth at one or more heights.

        Parameters
        ----------
        samples : SampleTable or Iterable of Sample
            The experimental samples.
        heights : FloatLike or ArrayLike
            The drop heights in meters.

        Returns
        -------
        np.float64 or NDArray[np.float64]
            The predicted depth in centimeters. This is zero everywhere when there are fewer than two samples.

        Raises
        ------
        DegenerateFitError
            If fewer than two distinct heights are present.
        """
        try:
            fit = self.fit(samples)
        except InsufficientDataError:
            if np.isscalar(heights):
                return np.float64(0.0)
            return np.zeros_like(np.asarray(heights, dtype=np.float64))
        return self.evaluate(fit, heights)

    @staticmethod
    def _validate_heights(heights: FloatLike | ArrayLike, positive: bool = False) -> NDArray[np.float64]:
        h = np.asarray(heights, dtype=np.float64)
        if not np.all(np.isfinite(h)):
            raise DataError("heights must be finite")
        if positive and np.any(h <= 0):
            raise DataError("heights must be positive")
        return h


def _least_squares(x: NDArray[np.float64], y: NDArray[np.float64]) -> tuple[float, float]:
    """
    Closed-form ordinary least-squares slope and intercept of y on x.
    """
    n = x.size
    sum_x = np.sum(x)
    sum_y = np.sum(y)
    sum_xx = np.sum(x * x)
    sum_xy = np.sum(x * y)
    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0 or not np.isfinite(denominator):
        raise DegenerateFitError("The least-squares denominator is zero")
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


import_components(__name__, __path__)
