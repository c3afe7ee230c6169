from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..constants import _DEFAULT_SAMPLES, FloatLike, PairOfFloats
from ..utils.general_utils import format_large_units
from .base import DataError


@dataclass(frozen=True, slots=True)
class Sample:
    """
    One experimental observation: the drop height in meters and the resulting impact depth in centimeters.
    """

    height: float
    depth: float

    def __post_init__(self):
        for field in ("height", "depth"):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, FloatLike):
                raise DataError(f"{field} must be a number, not {type(value).__name__}")
            if not math.isfinite(value) or value <= 0:
                raise DataError(f"{field} must be a positive finite number, got {value}")
            object.__setattr__(self, field, float(value))

    def __str__(self) -> str:
        return f"Height: {format_large_units(self.height, quantity='length')}, Depth: {format_large_units(self.depth, quantity='depth')}"

    @classmethod
    def maker(cls, sample: Sample | PairOfFloats | dict) -> Sample:
        """
        Build a Sample from another Sample, a (height, depth) pair, or a dict with 'height' and 'depth' keys.

        Raises
        ------
        DataError
            If the values are not positive finite numbers.
        TypeError
            If the input is not one of the accepted forms.
        """
        if isinstance(sample, Sample):
            return sample
        if isinstance(sample, dict):
            if "height" in sample and "depth" in sample:
                return cls(height=sample["height"], depth=sample["depth"])
        elif isinstance(sample, (tuple, list, np.ndarray)) and len(sample) == 2:
            return cls(height=sample[0], depth=sample[1])
        raise TypeError(
            "sample must be a Sample, a (height, depth) pair, or a dict with 'height' and 'depth' keys"
        )


class SampleTable:
    """
    An ordered, editable sequence of experimental samples.

    The order of the samples only matters for display. Every value is validated before it is stored, so a rejected command
    leaves the table unchanged.

    Parameters
    ----------
    samples : Iterable of Sample or (height, depth) pairs, optional
        The initial content of the table. If None, the table starts with the default pair of samples.
    """

    def __init__(self, samples: Iterable[Sample | PairOfFloats | dict] | None = None):
        if samples is None:
            samples = _DEFAULT_SAMPLES
        self._samples = [Sample.maker(s) for s in samples]

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SampleTable):
            return NotImplemented
        return self._samples == other._samples

    def __str__(self) -> str:
        lines = [f"{'Height (m)':>12} {'Depth (cm)':>12}"]
        for s in self._samples:
            lines.append(f"{s.height:>12g} {s.depth:>12g}")
        return "\n".join(lines)

    def add(self, height: FloatLike, depth: FloatLike) -> Sample:
        """
        Append a new sample to the end of the table.

        Returns
        -------
        Sample
            The sample that was stored.

        Raises
        ------
        DataError
            If height or depth is not a positive finite number.
        """
        sample = Sample(height=height, depth=depth)
        self._samples.append(sample)
        return sample

    def edit(self, index: int, height: FloatLike | None = None, depth: FloatLike | None = None) -> Sample:
        """
        Replace the height and/or depth of an existing sample.

        Parameters
        ----------
        index : int
            Position of the sample in the table.
        height : FloatLike, optional
            New height in meters. The current value is kept if None.
        depth : FloatLike, optional
            New depth in centimeters. The current value is kept if None.

        Raises
        ------
        IndexError
            If index is out of range.
        DataError
            If the new values are not positive finite numbers.
        """
        old = self._samples[index]
        sample = Sample(
            height=old.height if height is None else height,
            depth=old.depth if depth is None else depth,
        )
        self._samples[index] = sample
        return sample

    def delete(self, index: int) -> Sample:
        """Remove and return the sample at the given position."""
        return self._samples.pop(index)

    def clear(self) -> None:
        self._samples.clear()

    def reset(self) -> None:
        """Restore the default pair of samples."""
        self._samples = [Sample.maker(s) for s in _DEFAULT_SAMPLES]

    def to_list(self) -> list[list[float]]:
        return [[s.height, s.depth] for s in self._samples]

    @property
    def heights(self) -> NDArray[np.float64]:
        """Sample heights in meters."""
        return np.array([s.height for s in self._samples], dtype=np.float64)

    @property
    def depths(self) -> NDArray[np.float64]:
        """Sample depths in centimeters."""
        return np.array([s.depth for s in self._samples], dtype=np.float64)

    @property
    def height_range(self) -> tuple[float, float] | None:
        if not self._samples:
            return None
        heights = self.heights
        return float(heights.min()), float(heights.max())


def as_sample_table(samples: SampleTable | Iterable[Sample | PairOfFloats | dict] | None) -> SampleTable:
    """
    Return the input unchanged if it is already a SampleTable, otherwise wrap it in a new one.

    An empty iterable gives an empty table. None gives the default table.
    """
    if isinstance(samples, SampleTable):
        return samples
    return SampleTable(samples)
