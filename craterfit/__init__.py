"""
Copyright 2025 - David Minton
This file is part of Craterfit.
Craterfit is free software: you can redistribute it and/or modify it under the terms of the GNU General Public License
as published by the Free Software Foundation, either version 3 of the License, or (at your option) any later version.
Craterfit is distributed in the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty
of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
You should have received a copy of the GNU General Public License along with Craterfit.
If not, see: https://www.gnu.org/licenses.
"""

import warnings

from ._version import version as __version__
from .components.fitmodel import FitModel, FitResult
from .components.target import Target
from .core.animation import ImpactSequencer, ImpactState
from .core.base import DataError, DegenerateFitError, InsufficientDataError
from .core.extrapolation import Extrapolation, compute_extrapolation, crater_radius_estimate
from .core.geometry import CraterCavity, SceneGeometry, clamp_to_scene, max_crater_size
from .core.sample import Sample, SampleTable
from .core.session import Frame, Session

__all__ = [
    "CraterCavity",
    "DataError",
    "DegenerateFitError",
    "Extrapolation",
    "FitModel",
    "FitResult",
    "Frame",
    "ImpactSequencer",
    "ImpactState",
    "InsufficientDataError",
    "Sample",
    "SampleTable",
    "SceneGeometry",
    "Session",
    "Target",
    "clamp_to_scene",
    "compute_extrapolation",
    "crater_radius_estimate",
    "max_crater_size",
    "__version__",
]


# The power law fit extrapolates far outside of the sample range, where overflow to inf is expected and is clamped later
warnings.filterwarnings("ignore", category=RuntimeWarning, message="overflow encountered in power")
warnings.filterwarnings("ignore", category=DeprecationWarning, module="pyvista")
