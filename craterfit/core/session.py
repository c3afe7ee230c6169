from __future__ import annotations

import warnings
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import yaml
from numpy.typing import ArrayLike, NDArray

from ..components.fitmodel import FitModel
from ..components.target import Target
from ..constants import (
    _CONFIG_FILE_NAME,
    _CRATER_SCALE,
    _MIN_CRATER_RADIUS,
    _SCENE_RADIUS,
    _TARGET_HEIGHT,
    FloatLike,
    PairOfFloats,
)
from ..utils.general_utils import _set_properties, format_large_units, parameter
from .animation import ImpactSequencer, ImpactState
from .base import CraterfitBase, DataError
from .extrapolation import Extrapolation, compute_extrapolation
from .geometry import CraterCavity, SceneGeometry, clamp_to_scene
from .sample import Sample, SampleTable


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Everything the renderer needs to draw one animation frame.
    """

    state: ImpactState
    marker_position: NDArray[np.float64]
    marker_visible: bool
    crater_visible: bool
    geometry: SceneGeometry


class Session(CraterfitBase):
    """
    An interactive extrapolation session. It owns the sample table, the chosen fit model, the target body and the impact
    animation, and it is the only object that mutates them.

    Parameters
    ----------
    samples : Iterable of Sample or (height, depth) pairs, optional
        The initial experimental samples. Default is the pair (1 m, 0.5 cm), (2 m, 2 cm).
    fit_model : str or FitModel, optional
        The fit model used to extrapolate. Default is "power".
    target : str or Target, optional
        The body drawn as the host sphere. Default is "Earth".
    target_height : FloatLike, optional
        The drop height in meters at which the crater is predicted. Default is 100 km.
    host_radius : FloatLike, optional
        Radius of the host sphere in scene units. Default is 2.0.
    crater_scale : FloatLike, optional
        Fraction of the host diameter that bounds the drawn crater size. Default is 0.35.
    min_radius : FloatLike, optional
        Floor on the estimated crater radius in scene units. Default is 0.2.
    simdir : str | Path
        The project directory where the configuration file is stored. Defaults to the current working directory if None.
    resume_old : bool, optional
        If True and a configuration file exists in `simdir`, the session is restored from it. Arguments passed explicitly
        take precedence over the file.
    **kwargs : Any
        Additional keyword arguments passed to the target constructor.
    """

    def __init__(
        self,
        *,  # Enforce keyword-only arguments
        samples: Iterable[Sample | PairOfFloats] | None = None,
        fit_model: FitModel | str | None = None,
        target: Target | str | None = None,
        target_height: FloatLike | None = None,
        host_radius: FloatLike | None = None,
        crater_scale: FloatLike | None = None,
        min_radius: FloatLike | None = None,
        simdir: str | Path | None = None,
        resume_old: bool = False,
        **kwargs: Any,
    ):
        super().__init__(simdir=simdir, **kwargs)
        object.__setattr__(self, "_samples", SampleTable())
        object.__setattr__(self, "_fit_model", None)
        object.__setattr__(self, "_target", None)
        object.__setattr__(self, "_target_height", _TARGET_HEIGHT)
        object.__setattr__(self, "_host_radius", _SCENE_RADIUS)
        object.__setattr__(self, "_crater_scale", _CRATER_SCALE)
        object.__setattr__(self, "_min_radius", _MIN_CRATER_RADIUS)

        config_file = self.config_file if resume_old and self.config_file.exists() else None

        _, unmatched = _set_properties(
            self,
            samples=samples,
            fit_model=fit_model,
            target_height=target_height,
            host_radius=host_radius,
            crater_scale=crater_scale,
            min_radius=min_radius,
            config_file=config_file,
        )
        # An explicit target replaces the saved one entirely, including its size and color
        saved_target_config = unmatched.pop("target_config", {})
        if target is None:
            target_config = {**saved_target_config, **kwargs}
            target = target_config.pop("name", None)
            if target is None and self._target is not None:
                target = self._target.name
        else:
            target_config = kwargs
        self._target = Target.maker(target, **target_config)

        if self._fit_model is None:
            self._fit_model = FitModel.maker(None)

        # Validates the crater_scale against the target and host size
        clamp_to_scene(0.0, 0.0, host_radius=self.host_radius, target=self.target, crater_scale=self.crater_scale)

        self._sequencer = ImpactSequencer(host_radius=self.host_radius)

    def __str__(self) -> str:
        result = self.extrapolate()
        return (
            f"<Session: {self.fit_model.name}>\n"
            f"Target: {self.target.name}\n"
            f"Samples: {len(self.samples)}\n"
            f"Extrapolated impact from {format_large_units(self.target_height, quantity='length')}\n"
            f"Estimated crater depth: {max(result.depth, 0.0) / 100.0:.3f} m\n"
            f"Animation: {self.state.value}"
        )

    # Sample table commands
    def add_sample(self, height: FloatLike, depth: FloatLike) -> Sample:
        """
        Append a sample to the table.

        Raises
        ------
        DataError
            If height or depth is not a positive finite number. The table is left unchanged.
        """
        return self._samples.add(height, depth)

    def edit_sample(self, index: int, height: FloatLike | None = None, depth: FloatLike | None = None) -> Sample:
        """
        Change the height and/or depth of an existing sample.

        Raises
        ------
        DataError
            If the new values are not positive finite numbers. The table is left unchanged.
        IndexError
            If index is out of range.
        """
        return self._samples.edit(index, height=height, depth=depth)

    def delete_sample(self, index: int) -> Sample:
        return self._samples.delete(index)

    def reset_samples(self) -> None:
        """Restore the default pair of samples."""
        self._samples.reset()

    # Regression and geometry queries
    def extrapolate(self, fit_model: FitModel | str | None = None) -> Extrapolation:
        """
        Predict the crater at the target height.

        Parameters
        ----------
        fit_model : FitModel or str, optional
            Fit model to use instead of the session's current one.

        Returns
        -------
        Extrapolation
            If the samples cannot be fit, a warning is issued and the zero-depth fallback is returned.
        """
        fit_model = self.fit_model if fit_model is None else FitModel.maker(fit_model)
        try:
            return compute_extrapolation(
                self._samples,
                target_height=self.target_height,
                fit_model=fit_model,
                min_radius=self.min_radius,
            )
        except DataError as e:
            warnings.warn(f"Falling back to an empty crater: {e}", RuntimeWarning, stacklevel=2)
            return Extrapolation(
                target_height=self.target_height,
                depth=0.0,
                radius=self.min_radius,
                fit_model=fit_model.name,
            )

    def scene_geometry(self, fit_model: FitModel | str | None = None) -> SceneGeometry:
        """
        The clamped crater size in scene units for the current samples.
        """
        result = self.extrapolate(fit_model)
        return clamp_to_scene(
            result.depth,
            result.radius,
            host_radius=self.host_radius,
            target=self.target,
            crater_scale=self.crater_scale,
        )

    def cavity(self, fit_model: FitModel | str | None = None) -> CraterCavity:
        return CraterCavity(geometry=self.scene_geometry(fit_model), host_radius=self.host_radius)

    def compare(self, heights: ArrayLike | None = None, num: int = 50) -> dict[str, NDArray[np.float64]]:
        """
        Predict the depth with every available fit model at once, for comparative plotting.

        Parameters
        ----------
        heights : ArrayLike, optional
            Heights in meters at which to evaluate the fits. If None, `num` heights spanning the sample range are used.
        num : int, default 50
            Number of heights used when `heights` is None.

        Returns
        -------
        dict[str, NDArray[np.float64]]
            The heights under the key "height" and the predicted depths under each fit model's name. A model that cannot be
            fit gives an array of NaN.
        """
        if heights is None:
            heights = self.chart_heights(num)
        heights = np.asarray(heights, dtype=np.float64)
        curves = {"height": heights}
        for name in FitModel.available():
            try:
                curves[name] = np.asarray(FitModel.maker(name).predict(self._samples, heights), dtype=np.float64)
            except DataError as e:
                warnings.warn(f"Cannot plot the {name} fit: {e}", RuntimeWarning, stacklevel=2)
                curves[name] = np.full_like(heights, np.nan)
        return curves

    def compare_geometry(self) -> dict[str, SceneGeometry]:
        """
        Independently clamped scene geometry for every available fit model.
        """
        return {name: self.scene_geometry(name) for name in FitModel.available()}

    def chart_heights(self, num: int = 50) -> NDArray[np.float64]:
        """
        Evenly spaced heights covering the range of the sample heights.
        """
        height_range = self._samples.height_range
        if height_range is None:
            return np.array([], dtype=np.float64)
        return np.linspace(height_range[0], height_range[1], num)

    # Animation commands
    def play(self) -> ImpactState:
        return self._sequencer.play()

    def reset(self) -> ImpactState:
        return self._sequencer.reset()

    def advance(self, dt: FloatLike) -> Frame:
        """
        Advance the animation by one frame and return what should be drawn.

        Parameters
        ----------
        dt : FloatLike
            Seconds elapsed since the previous frame.

        Returns
        -------
        Frame
        """
        self._sequencer.advance(dt)
        return self.frame()

    def frame(self) -> Frame:
        return Frame(
            state=self._sequencer.state,
            marker_position=self._sequencer.position,
            marker_visible=self._sequencer.marker_visible,
            crater_visible=self._sequencer.crater_visible,
            geometry=self.scene_geometry(),
        )

    # Output
    def to_config(self, save_to_file: bool = True, **kwargs: Any) -> dict:
        """
        Converts the session parameters to types that can be used in yaml.safe_dump and optionally saves them to the
        configuration file in the project directory.

        Parameters
        ----------
        save_to_file : bool, optional
            If True, the configuration will be saved to a file. Default is True.
        **kwargs : Any
            Additional keyword arguments for subclasses.

        Returns
        -------
        dict[str, Any]
            A dictionary of the session's parameters that can be serialized to YAML.
        """
        config = super().to_config(remove_common_args=True)
        config["samples"] = self._samples.to_list()
        config["fit_model"] = self.fit_model.name
        config.pop("target", None)
        entry = Target._catalogue.get(self.target.name)
        if entry is not None and entry["radius"] == self.target.radius and entry["color"] == self.target.color:
            config["target"] = self.target.name
        else:
            config["target_config"] = {
                "name": self.target.name,
                "radius": self.target.radius,
                "color": self.target.color,
            }

        if save_to_file:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(config, f, indent=4)

        return config

    def plot_comparison(self, **kwargs: Any):
        """
        Plot both fit models against the samples. See :func:`craterfit.utils.plotting.plot_fit_comparison`.
        """
        from ..utils.plotting import plot_fit_comparison

        return plot_fit_comparison(self, **kwargs)

    def show(self, **kwargs: Any) -> None:
        """
        Open an interactive 3D view of the impact. See :func:`craterfit.utils.render.show`.
        """
        from ..utils.render import show

        show(self, **kwargs)

    # Parameters
    @parameter
    def samples(self) -> SampleTable:
        """
        The experimental samples.

        Returns
        -------
        SampleTable
        """
        return self._samples

    @samples.setter
    def samples(self, value):
        if isinstance(value, SampleTable):
            self._samples = value
        else:
            self._samples = SampleTable(value)

    @parameter
    def fit_model(self) -> FitModel:
        """
        The fit model used to extrapolate the samples.

        Returns
        -------
        FitModel
        """
        return self._fit_model

    @fit_model.setter
    def fit_model(self, value):
        self._fit_model = FitModel.maker(value)

    @parameter
    def target(self) -> Target:
        """
        The body drawn as the host sphere.

        Returns
        -------
        Target
        """
        return self._target

    @target.setter
    def target(self, value):
        self._target = Target.maker(value)

    @parameter
    def target_height(self) -> float:
        """
        The drop height in meters at which the crater is predicted.
        """
        return self._target_height

    @target_height.setter
    def target_height(self, value):
        if not isinstance(value, FloatLike) or not np.isfinite(value) or value <= 0:
            raise ValueError("target_height must be a positive number")
        self._target_height = float(value)

    @parameter
    def host_radius(self) -> float:
        """
        Radius of the host sphere in scene units.
        """
        return self._host_radius

    @host_radius.setter
    def host_radius(self, value):
        if not isinstance(value, FloatLike) or value <= 0:
            raise ValueError("host_radius must be a positive number")
        # The animation keeps its state; only the impact threshold moves
        if hasattr(self, "_sequencer"):
            self._sequencer.host_radius = value
        self._host_radius = float(value)

    @parameter
    def crater_scale(self) -> float:
        """
        Fraction of the host diameter that bounds the drawn crater size.
        """
        return self._crater_scale

    @crater_scale.setter
    def crater_scale(self, value):
        if not isinstance(value, FloatLike) or value <= 0:
            raise ValueError("crater_scale must be a positive number")
        self._crater_scale = float(value)

    @parameter
    def min_radius(self) -> float:
        """
        Floor on the estimated crater radius in scene units.
        """
        return self._min_radius

    @min_radius.setter
    def min_radius(self, value):
        if not isinstance(value, FloatLike) or value <= 0:
            raise ValueError("min_radius must be a positive number")
        self._min_radius = float(value)

    @property
    def sequencer(self) -> ImpactSequencer:
        return self._sequencer

    @property
    def state(self) -> ImpactState:
        return self._sequencer.state

    @property
    def config_file(self) -> Path:
        """
        The path to the configuration file for the session.
        """
        return self.simdir / _CONFIG_FILE_NAME
