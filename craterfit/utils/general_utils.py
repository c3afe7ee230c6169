from pathlib import Path
from typing import Any
from warnings import warn

import yaml


class Parameter(property):
    """
    A property descriptor that tracks user-defined properties.  This class is a subclass of the built-in property class and is used
    to create properties in a class that can be set and retrieved. It also tracks whether the property has been set by the user,
    allowing for parameters to be exported to a YAML configuration file.
    """

    def __init__(self, fget, fset=None, fdel=None, doc=None):
        super().__init__(fget, fset, fdel, doc)
        self.name = fget.__name__

    def setter(self, fset):
        def wrapped(instance, value):
            if not hasattr(instance, "_user_defined"):
                instance._user_defined = set()
            instance._user_defined.add(self.name)
            fset(instance, value)

        return Parameter(self.fget, wrapped, self.fdel, self.__doc__)


def parameter(fget=None):
    """
    A decorator to mark a property as a user-settable parameter.
    Can be used with or without parentheses.
    """
    if fget is None:

        def decorator(fget):
            return Parameter(fget)

        return decorator
    else:
        return Parameter(fget)


def _set_properties(
    obj,
    catalogue: dict | None = None,
    key: str | None = None,
    config_file: str | Path | None = None,
    **kwargs: Any,
):
    """
    Set properties of an object from various sources.

    Properties can be read from a YAML file, a pre-defined catalogue, or directly passed as keyword arguments.

    Parameters
    ----------
    obj : object
        The object whose properties are to be set.
    catalogue : dict, optional
        A dictionary representing a catalogue of properties. It must be in the form of a nested dict. If provided, it will be used to set properties.
    key : str, optional
        The key to look up in the catalogue. It must be provided if the catalogue is provided.
    config_file : str or Path, optional
        The path to a YAML file containing properties. If provided, it will be used to set properties.
    **kwargs : dict
        Keyword arguments that are set directly.

    Returns
    -------
    matched : dict
        A dictionary of properties that were successfully set on the object.
    unmatched : dict
        A dictionary of properties that were not set, either due to being None or not matching any known properties.

    Notes
    -----
    The order of property precedence is:
    1. Direct keyword arguments (kwargs).
    2. Pre-defined catalogue.
    3. YAML file.
    Properties set by kwargs override those set by the catalogue or config_file.
    """

    def _set_properties_from_arguments(obj, **kwargs):
        matched = {}
        unmatched = {}
        cls = type(obj)
        for key, value in kwargs.items():
            if value is None:
                continue
            param = getattr(cls, key, None)
            if isinstance(param, (property, Parameter)) and getattr(param, "fset", None) is not None:
                setattr(obj, key, value)
                matched[key] = value
            else:
                unmatched[key] = value
        return matched, unmatched

    def _set_properties_from_catalogue(obj, catalogue, key, **kwargs):
        if "catalogue_key" in dir(obj):
            catalogue_key = getattr(obj, "catalogue_key")
        else:
            raise ValueError(
                "The object does not have a catalogue_key property, and therefore is not set up to receive catalogue entries."
            )
        if catalogue_key in kwargs:
            key = kwargs.pop(catalogue_key)

        if not isinstance(catalogue, dict):
            raise ValueError("Catalogue must be a dictionary")

        for k, v in catalogue.items():
            if not isinstance(v, dict):
                raise ValueError(f"Value for key '{k}' in catalogue must be a dictionary")

        if key not in catalogue:
            return {}, {}

        properties = dict(catalogue[key])
        properties[catalogue_key] = key
        for k in properties:
            kwargs.pop(k, None)
        return _set_properties_from_arguments(obj, **properties, **kwargs)

    def _set_properties_from_file(obj, config_file, **kwargs):
        try:
            with open(config_file, "r") as f:
                properties = yaml.safe_load(f) or {}
        except Exception as e:
            warn(f"Could not read the file {config_file}.\n{e}", RuntimeWarning, stacklevel=3)
            return {}, {}
        merged = {**properties, **{k: v for k, v in kwargs.items() if v is not None}}
        return _set_properties_from_arguments(obj, **merged)

    matched = {}
    unmatched = {}
    if config_file:
        m, u = _set_properties_from_file(obj, config_file=config_file, **kwargs)
        matched.update(m)
        unmatched.update(u)

    if catalogue:
        m, u = _set_properties_from_catalogue(obj, catalogue=catalogue, key=key, **kwargs)
        matched.update(m)
        unmatched.update(u)

    m, u = _set_properties_from_arguments(obj, **kwargs)
    matched.update(m)
    unmatched.update(u)

    # if there are any keys in unmatched that are also present in matched, remove them from unmatched
    for key in matched.keys():
        if key in unmatched:
            del unmatched[key]

    return matched, unmatched


def _create_catalogue(header, values):
    """
    Create a catalogue of properties keyed on the first column of each row.

    Parameters
    ----------
    header : list[str]
        The column names. The first one is used as the catalogue key.
    values : list[tuple]
        One tuple per catalogue entry.

    Returns
    -------
    dict[str, dict]
        A nested dictionary with one entry per row.
    """
    catalogue = {tab[0]: dict(zip(header, tab, strict=True)) for tab in values}

    # Remove the first key from each dictionary in the catalogue
    for k in list(catalogue):
        del catalogue[k][header[0]]

    return catalogue


def format_large_units(value: float, threshold: float = 1000.0, quantity: str = "length") -> str:
    """
    Format a value and automatically shift units based on threshold.
    """
    if quantity == "length":
        units = ["m", "km"]
    elif quantity == "depth":
        units = ["cm", "m", "km"]
    else:
        raise ValueError(f"Unknown quantity: {quantity}")

    if value is None:
        return "N/A"

    unit_index = 0
    if quantity == "depth" and value >= 100.0:
        value /= 100.0
        unit_index = 1
    while unit_index + 1 < len(units) and value >= threshold:
        value /= threshold
        unit_index += 1

    if value >= 100:
        fmt = "{:.0f} {}"
    elif value >= 10:
        fmt = "{:.1f} {}"
    elif value >= 1:
        fmt = "{:.2f} {}"
    else:
        fmt = "{:.3g} {}"
    return fmt.format(value, units[unit_index])
