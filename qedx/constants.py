"""
Physical constants and numerical settings for QEDX.

Units: GeV (natural units c = 1), cross sections in microbarns.

Defaults are CODATA 2018 values. A JSON file named by the environment
variable QEDX_CONSTANTS may override any field; it is read once, at import,
and the resulting CONSTANTS instance is shared read-only by the whole
process.
"""

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONSTANTS_ENV_VAR = "QEDX_CONSTANTS"


@dataclass(frozen=True)
class PhysicalConstants:
    alpha_qed: float = 1 / 137.035999084      # fine-structure constant
    hbarc_sqr: float = 389.379372             # (hbar c)^2 in GeV^2 microbarn
    electron_mass: float = 0.51099895000e-3   # GeV
    muon_mass: float = 0.1056583755           # GeV
    resolution: float = 1e-12                 # relative tolerance for vector comparisons
    debug_checks: bool = True                 # advisory |M|^2 sanity check
    imag_tolerance: float = 1e-8              # relative rounding allowance in the amplitude check


def load_constants(path: Optional[Path] = None) -> PhysicalConstants:
    """
    Build the constants, merging overrides from a JSON file if one is given
    (or named by $QEDX_CONSTANTS). Unknown keys are ignored; an unreadable
    file falls back to the defaults.
    """
    defaults = PhysicalConstants()
    if path is None:
        env_path = os.getenv(CONSTANTS_ENV_VAR)
        if not env_path:
            return defaults
        path = Path(env_path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded: Dict[str, Any] = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load constants from {path}: {e}. Using defaults.")
        return defaults

    known = {f.name for f in fields(PhysicalConstants)}
    unknown = sorted(set(loaded) - known)
    if unknown:
        logger.warning(f"Ignoring unknown constants in {path}: {unknown}")
    return replace(defaults, **{k: v for k, v in loaded.items() if k in known})


CONSTANTS = load_constants()
