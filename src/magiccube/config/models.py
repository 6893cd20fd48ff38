"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, magiccube.toml only contains
overrides. An empty file (or none at all) reproduces the stock fractal.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- magiccube.toml sections ---


class FractalConfig(BaseModel):
    """[fractal] section — the definition loaded at startup."""

    model_config = {"frozen": True}

    matrix: str = "1,0|0,1"
    depth: int = Field(default=0, ge=0)
    base_scale: float = Field(default=4.0, gt=0)
    base_position: tuple[float, float, float] = (0.0, 0.0, 0.0)


class LimitsConfig(BaseModel):
    """[limits] section — resource guards applied before any expansion."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=8, ge=0)
    max_leaves: int = Field(default=1_000_000, ge=1)


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    default_sink: str = "count"
    obj_precision: int = Field(default=6, ge=0, le=17)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".magiccube/plugins"


class MagicCubeConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    fractal: FractalConfig = Field(default_factory=FractalConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
