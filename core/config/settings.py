"""
PDV Core Config - Runtime Settings
====================================
Operator-tunable values read from the environment.

    PDV_LOW_STOCK_THRESHOLD   stock below this is flagged (default 10)
    PDV_DATA_DIR              directory holding the state file
    PDV_STATE_FILE            state file name (default pdv-state.json)
    PDV_CURRENCY              ISO 4217 code used by report formatting
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from core.errors import ValidationError

DEFAULT_LOW_STOCK_THRESHOLD = 10
DEFAULT_STATE_FILE = "pdv-state.json"
DEFAULT_CURRENCY = "BRL"


@dataclass(frozen=True)
class PdvSettings:
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    data_dir: Path = Path(".")
    state_file: str = DEFAULT_STATE_FILE
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.low_stock_threshold, int) or self.low_stock_threshold < 0:
            raise ValidationError("low_stock_threshold must be non-negative integer.")
        if not self.currency or len(self.currency) != 3:
            raise ValidationError("currency must be 3-letter ISO 4217 code.")

    @property
    def state_path(self) -> Path:
        return Path(self.data_dir) / self.state_file

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PdvSettings":
        env = os.environ if environ is None else environ
        raw_threshold = env.get("PDV_LOW_STOCK_THRESHOLD")
        try:
            threshold = (
                int(raw_threshold) if raw_threshold is not None
                else DEFAULT_LOW_STOCK_THRESHOLD
            )
        except ValueError:
            raise ValidationError(
                f"PDV_LOW_STOCK_THRESHOLD must be an integer, got '{raw_threshold}'."
            ) from None
        return cls(
            low_stock_threshold=threshold,
            data_dir=Path(env.get("PDV_DATA_DIR", ".")),
            state_file=env.get("PDV_STATE_FILE", DEFAULT_STATE_FILE),
            currency=env.get("PDV_CURRENCY", DEFAULT_CURRENCY).upper(),
        )
