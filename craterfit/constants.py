import numpy as np

# Custom type aliases for better readability
FloatLike = float | int | np.number
PairOfFloats = tuple[float, float] | list[float] | np.ndarray

# Default filenames and paths
_CONFIG_FILE_NAME = "craterfit.yaml"

# Experimental inputs: drop height in meters, impact depth in centimeters
_DEFAULT_SAMPLES = [(1.0, 0.5), (2.0, 2.0)]
_DEFAULT_FIT_MODEL = "power"
_DEFAULT_TARGET = "Earth"

# Height of the edge of the atmosphere in meters
_TARGET_HEIGHT = 100.0e3

# Scene geometry. The host sphere is drawn with this radius in scene units
_SCENE_RADIUS = 2.0
# Divisor converting an input depth in cm into scene units
_DEPTH_SCALE = 100.0
# Smallest renderable crater dimension in scene units
_MIN_SCENE_SIZE = 0.01
# Floor on the estimated crater radius in scene units
_MIN_CRATER_RADIUS = 0.2
# Multiplier on the host's diameter bounding how large the crater may be drawn
_CRATER_SCALE = 0.35
# Tolerance used when discarding cavity points outside of the host sphere
_CLIP_EPSILON = 1.0e-3

# Falling marker
_MARKER_START_HEIGHT = 8.0
_MARKER_SPEED = 8.0
_MARKER_RADIUS = 0.25
_IMPACT_OFFSET = 0.2


# Optional: controlled public API
__all__ = []
