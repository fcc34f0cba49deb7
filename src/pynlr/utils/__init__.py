# Copyright 2024-2025 pynlr authors. All rights reserved.

from pynlr.utils.finite_difference_stencils import (
    gradient_finite_difference_3pt,
    gradient_finite_difference_5pt,
    hessian_finite_difference_3pt,
)
from pynlr.utils.print_utils import add_str_header, boxify

__all__ = [
    "gradient_finite_difference_3pt",
    "gradient_finite_difference_5pt",
    "hessian_finite_difference_3pt",
    "add_str_header",
    "boxify",
]
