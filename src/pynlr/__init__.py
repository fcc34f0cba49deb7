# Copyright 2024-2025 pynlr authors. All rights reserved.

from typing import Any, TypeAlias, TypeVar

import numpy as np
from numpy.typing import ArrayLike

from pynlr.__about__ import __version__

# Some type aliases for the array module.
_ScalarType = TypeVar("ScalarType", bound=np.generic, covariant=True)
_DType = np.dtype[_ScalarType]
NDArray: TypeAlias = np.ndarray[Any, _DType]


__all__ = [
    "__version__",
    "ArrayLike",
    "NDArray",
]
