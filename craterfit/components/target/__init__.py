from __future__ import annotations

from typing import Any

from craterfit.constants import _DEFAULT_TARGET, FloatLike
from craterfit.core.base import ComponentBase
from craterfit.utils.general_utils import (
    _create_catalogue,
    _set_properties,
    format_large_units,
    parameter,
)


class Target(ComponentBase):
    """
    Represents the body that is struck by the falling marker.

    The real-world size of the target is only used to convert between meters and scene units, which bounds how large the
    crater may be drawn on the host sphere.
    """

    _catalogue_header = ["name", "radius", "color"]
    _catalogue_values = [
        ("Mercury", 2439.40e3, "#9c9288"),
        ("Venus", 6051.84e3, "#e6c47a"),
        ("Earth", 6371.01e3, "#2a7fff"),
        ("Moon", 1737.53e3, "#a8a8a8"),
        ("Mars", 3389.92e3, "#c1440e"),
        ("Ceres", 469.70e3, "#8c8479"),
        ("Vesta", 262.70e3, "#9e9a8e"),
        ("Europa", 1560.80e3, "#d9cfb8"),
        ("Titan", 2575.50e3, "#d8a54b"),
        ("Pluto", 1188.30e3, "#d6b89a"),
    ]
    _catalogue = _create_catalogue(_catalogue_header, _catalogue_values)

    def __init__(
        self,
        name: str,
        radius: FloatLike | None = None,
        diameter: FloatLike | None = None,
        color: str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize the target object, setting properties from the provided arguments.

        Parameters
        ----------
        name : str
            Name of the target body.
        radius : FloatLike or None
            Radius of the target body in m.
        diameter : FloatLike or None
            Diameter of the target body in m.
        color : str or None
            Color used to draw the host sphere.
        **kwargs : Any
            Additional keyword argumments that could be set by the user.

        Notes
        -----
        - The `radius` and `diameter` parameters are mutually exclusive. Only one of them should be provided.
        - Parameters set explicitly using keyword arguments will override those drawn from the catalogue.
        """
        super().__init__(**kwargs)
        object.__setattr__(self, "_name", None)
        object.__setattr__(self, "_radius", None)
        object.__setattr__(self, "_color", "#2a7fff")

        # ensure that only either diamter of radius is passed
        size_values_set = sum(x is not None for x in [diameter, radius])
        if size_values_set > 1:
            raise ValueError("Only one of diameter or radius may be set")
        if diameter is not None:
            radius = diameter / 2.0

        catalogue = kwargs.pop("catalogue", self.__class__._catalogue)

        _set_properties(
            self,
            name=name,
            radius=radius,
            color=color,
            catalogue=catalogue,
            key=name,
        )
        if self.name is None or self.radius is None:
            raise ValueError(f"Invalid Target: '{name}' is not in the catalogue and no radius was given")

    def __str__(self) -> str:
        diameter = format_large_units(self.diameter, quantity="length")
        return f"<Target: {self.name}>\nDiameter: {diameter}"

    @parameter
    def radius(self) -> float | None:
        """
        Radius of the target body in m.
        """
        return self._radius

    @radius.setter
    def radius(self, value: FloatLike):
        if value is None or value <= 0:
            raise ValueError("Radius must be positive")
        self._radius = float(value)

    @property
    def diameter(self) -> float | None:
        if self._radius is not None:
            return 2 * self._radius

    @property
    def name(self):
        """
        The name of the target body.

        Returns
        -------
        str
        """
        return self._name

    @name.setter
    def name(self, value):
        if not isinstance(value, str) and value is not None:
            raise TypeError("name must be a string or None")
        self._name = value

    @parameter
    def color(self):
        """
        The color used to draw the host sphere.

        Returns
        -------
        str
        """
        return self._color

    @color.setter
    def color(self, value):
        if not isinstance(value, str):
            raise TypeError("color must be a string")
        self._color = value

    @property
    def catalogue_key(self):
        """
        The key used to identify the property used as the key in a catalogue.
        """
        return "name"

    @property
    def catalogue(self) -> str:
        lines = []
        header = "|".join([f"{h:<11}" for h in self.__class__._catalogue_header])
        lines.append(header)
        lines.append(len(header) * "-")
        for name, entry in self.__class__._catalogue.items():
            line = ""
            for k, v in entry.items():
                val = format_large_units(v, quantity="length") if k == "radius" else v
                line += f"|{val:<11}"
            lines.append(f"{name:<11}{line}")
        return "\n".join(lines)

    def scene_scale(self, scene_radius: FloatLike) -> float:
        """
        The number of scene units per meter when the target is drawn as a sphere of the given radius.

        Parameters
        ----------
        scene_radius : FloatLike
            Radius of the host sphere in scene units.

        Returns
        -------
        float
        """
        if scene_radius <= 0:
            raise ValueError("scene_radius must be positive")
        return float(scene_radius) / self.radius

    @classmethod
    def maker(
        cls: type[Target],
        target: Target | str | None = None,
        radius: FloatLike | None = None,
        diameter: FloatLike | None = None,
        color: str | None = None,
        **kwargs: Any,
    ) -> Target:
        """
        Initialize the target object, setting properties from the provided arguments.

        Parameters
        ----------
        target : str, Target, or None
            Name of the target body or a Target object. Default is "Earth".
        radius : FloatLike or None
            Radius of the target body in m.
        diameter : FloatLike or None
            Diameter of the target body in m.
        color : str or None
            Color used to draw the host sphere.
        **kwargs : Any
            Additional keyword argumments that could be set by the user.

        Raises
        ------
        ValueError
            If `target` is a Target object and any of the other arguments are also given.
        TypeError
            If `target` is not a string or a Target object.
        """
        if target is None:
            target = _DEFAULT_TARGET
        if isinstance(target, str):
            target = cls(name=target, radius=radius, diameter=diameter, color=color, **kwargs)
        elif isinstance(target, Target):
            overrides = {"radius": radius, "diameter": diameter, "color": color, **kwargs}
            overrides = [k for k, v in overrides.items() if v is not None]
            if overrides:
                raise ValueError(f"Cannot apply {', '.join(overrides)} to an existing Target object")
        else:
            raise TypeError("target must be a string or a Target object")
        target._component_name = target.name

        return target
