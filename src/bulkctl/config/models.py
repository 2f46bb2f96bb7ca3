"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, bulkctl.toml only contains
overrides.  A typical file needs only ``[block] size``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class BlockConfig(BaseModel):
    """[block] section."""

    model_config = {"frozen": True}

    size: int | None = Field(default=None, gt=0)
    log_dir: Path = Path(".")
    tag: str = Field(default="bulk", min_length=1)

