from __future__ import annotations

from typing import TypeAlias

import numpy as np
from jaxtyping import Float

Vec2: TypeAlias = Float[np.ndarray, "2"]
Points: TypeAlias = Float[np.ndarray, "N 2"]
Lengths: TypeAlias = Float[np.ndarray, "M"]
Params: TypeAlias = Float[np.ndarray, "K"]
