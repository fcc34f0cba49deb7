# Copyright 2024-2025 pynlr authors. All rights reserved.

import tomllib
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SolverConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["dense", "scipy"] = "scipy"


class PynlrConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # --- Linear algebra -------------------------------------------------------
    solver: SolverConfig = SolverConfig()

    # --- Statistics -----------------------------------------------------------
    # significance level used for the confidence intervals of the statistics report
    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)


def parse_config(config: dict | str) -> PynlrConfig:
    if isinstance(config, str):
        with open(config, "rb") as f:
            config = tomllib.load(f)

    return PynlrConfig(**config)
