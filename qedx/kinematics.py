"""
Kinematics helpers for QEDX: spatial three-vectors and Minkowski four-vectors.

Units: GeV (natural units c = 1). Metric signature (+,-,-,-).

Components may be real or complex. Complex vectors carry photon
polarizations; everything that needs a physical norm (invariant, boosts to
rest) expects real components.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union
import numpy as np

from .constants import CONSTANTS

logger = logging.getLogger(__name__)

Scalar = Union[float, complex]


class InvalidInvariantError(ValueError):
    """Raised when a timelike quantity is requested from a spacelike vector."""


def _scalar(value) -> Scalar:
    """Plain Python float or complex from a numpy (or Python) number."""
    return complex(value) if np.iscomplexobj(value) else float(value)


def _components(array, n: int, kind: str) -> list:
    arr = np.asarray(array)
    if arr.shape != (n,):
        raise ValueError(f"{kind} needs {n} components, got shape {arr.shape}")
    return [_scalar(c) for c in arr]


# -----------------------------
# ThreeVector
# -----------------------------
@dataclass
class ThreeVector:
    x: Scalar = 0.0
    y: Scalar = 0.0
    z: Scalar = 0.0

    @classmethod
    def from_array(cls, array: Sequence[Scalar]) -> "ThreeVector":
        return cls(*_components(array, 3, "ThreeVector"))

    def to_array(self) -> np.ndarray:
        dtype = complex if self.is_complex else float
        return np.array([self.x, self.y, self.z], dtype=dtype)

    @property
    def is_complex(self) -> bool:
        return any(np.iscomplexobj(c) for c in (self.x, self.y, self.z))

    def __getitem__(self, index: int) -> Scalar:
        if not 0 <= index <= 2:
            raise IndexError(f"ThreeVector index {index} out of range [0, 2]")
        return (self.x, self.y, self.z)[index]

    def get(self, index: int) -> Scalar:
        """Tolerant accessor: logs and falls back to the x component."""
        try:
            return self[index]
        except IndexError as e:
            logger.error(f"{e}; returning x component")
            return self.x

    def length_sqr(self) -> float:
        a = self.to_array()
        return float(np.vdot(a, a).real)

    def length(self) -> float:
        return math.sqrt(self.length_sqr())

    def resolution(self) -> float:
        scale = self.length()
        return CONSTANTS.resolution * scale if scale > 0 else CONSTANTS.resolution

    def dot(self, other: "ThreeVector") -> Scalar:
        """Bilinear product (no complex conjugation)."""
        return _scalar(np.dot(self.to_array(), other.to_array()))

    def cross(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector.from_array(np.cross(self.to_array(), other.to_array()))

    def unit(self) -> "ThreeVector":
        norm = self.length()
        if norm == 0:
            raise ValueError("Cannot take the direction of a null vector.")
        return ThreeVector.from_array(self.to_array() / norm)

    def distance_to(self, other: "ThreeVector") -> float:
        return float(np.linalg.norm(self.to_array() - other.to_array()))

    def polar_angle(self) -> float:
        return math.atan2(math.hypot(self.x, self.y), self.z)

    def azimuth(self) -> float:
        return math.atan2(self.y, self.x)

    def conj(self) -> "ThreeVector":
        return ThreeVector.from_array(np.conj(self.to_array()))

    def rotate(self, rotation) -> "ThreeVector":
        return rotation @ self

    def __eq__(self, other) -> bool:
        if not isinstance(other, ThreeVector):
            return NotImplemented
        return self.distance_to(other) < max(self.resolution(), other.resolution())

    def __add__(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector.from_array(self.to_array() + other.to_array())

    def __sub__(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector.from_array(self.to_array() - other.to_array())

    def __neg__(self) -> "ThreeVector":
        return ThreeVector.from_array(-self.to_array())

    def __mul__(self, factor: Scalar) -> "ThreeVector":
        return ThreeVector.from_array(self.to_array() * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: Scalar) -> "ThreeVector":
        return ThreeVector.from_array(self.to_array() / factor)


@dataclass(eq=False)
class UnitVector(ThreeVector):
    """A real ThreeVector normalized to unit length when it is built."""

    def __post_init__(self):
        norm = math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)
        if norm == 0:
            raise ValueError("UnitVector cannot be built from a null vector.")
        self.x, self.y, self.z = self.x / norm, self.y / norm, self.z / norm


# -----------------------------
# FourVector
# -----------------------------
@dataclass
class FourVector:
    E: Scalar = 0.0
    px: Scalar = 0.0
    py: Scalar = 0.0
    pz: Scalar = 0.0

    @classmethod
    def from_array(cls, array: Sequence[Scalar]) -> "FourVector":
        return cls(*_components(array, 4, "FourVector"))

    @classmethod
    def from_three(cls, t: Scalar, vect: ThreeVector) -> "FourVector":
        return cls(t, vect.x, vect.y, vect.z)

    def to_array(self) -> np.ndarray:
        dtype = complex if self.is_complex else float
        return np.array([self.E, self.px, self.py, self.pz], dtype=dtype)

    @property
    def is_complex(self) -> bool:
        return any(np.iscomplexobj(c) for c in (self.E, self.px, self.py, self.pz))

    @property
    def p(self) -> np.ndarray:
        return self.to_array()[1:]

    @property
    def vect(self) -> ThreeVector:
        return ThreeVector(self.px, self.py, self.pz)

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.p))

    def __getitem__(self, index: int) -> Scalar:
        if not 0 <= index <= 3:
            raise IndexError(f"FourVector index {index} out of range [0, 3]")
        return (self.E, self.px, self.py, self.pz)[index]

    def get(self, index: int) -> Scalar:
        """Tolerant accessor: logs and falls back to the time component."""
        try:
            return self[index]
        except IndexError as e:
            logger.error(f"{e}; returning time component")
            return self.E

    def _scale(self) -> float:
        return float(np.linalg.norm(self.to_array()))

    def resolution(self) -> float:
        scale = self._scale()
        return CONSTANTS.resolution * scale if scale > 0 else CONSTANTS.resolution

    def invariant_sqr(self) -> Scalar:
        return self.E * self.E - self.px * self.px - self.py * self.py - self.pz * self.pz

    def invariant(self) -> float:
        """
        Invariant mass sqrt(E^2 - p^2).

        Negative invariant-squared within the vector's resolution of zero is
        numerical noise around the light cone and gives 0. The allowance is
        resolution() below 1 GeV and resolution() * scale above it, where
        rounding in E^2 - p^2 grows with the square of the scale. Anything
        more negative raises InvalidInvariantError.
        """
        inv2 = self.invariant_sqr()
        if inv2 > 0:
            return math.sqrt(inv2)
        if inv2 >= -self.resolution() * max(1.0, self._scale()):
            return 0.0
        raise InvalidInvariantError(
            f"invariant() invoked on a vector with negative norm (m^2 = {inv2:.6e})"
        )

    def scalar_prod(self, other: "FourVector") -> Scalar:
        """Minkowski inner product with (+,-,-,-) signature."""
        return self.E * other.E - self.px * other.px - self.py * other.py - self.pz * other.pz

    def distance_to(self, other: "FourVector") -> float:
        return float(np.linalg.norm(self.to_array() - other.to_array()))

    def boost(self, beta) -> "FourVector":
        """
        Transform into the frame moving with velocity beta.

        beta may be a LorentzBoost, a ThreeVector or any 3-sequence.
        """
        from .lorentz import LorentzBoost
        op = beta if isinstance(beta, LorentzBoost) else LorentzBoost.from_beta(beta)
        return op @ self

    def boost_along(self, axis: ThreeVector, rapidity: float) -> "FourVector":
        from .lorentz import LorentzBoost
        return LorentzBoost.from_rapidity(axis, rapidity) @ self

    def boost_to_rest(self, p: "FourVector") -> "FourVector":
        """Express this vector in the rest frame of four-momentum p."""
        from .lorentz import LorentzBoost
        return LorentzBoost.to_rest_frame_of(p) @ self

    def boost_from_rest(self, p: "FourVector") -> "FourVector":
        """Inverse of boost_to_rest: rest frame of p back to the current frame."""
        from .lorentz import LorentzBoost
        return LorentzBoost.to_rest_frame_of(p).inverse() @ self

    def transform(self, xform) -> "FourVector":
        return xform @ self

    def conj(self) -> "FourVector":
        return FourVector.from_array(np.conj(self.to_array()))

    def __eq__(self, other) -> bool:
        if not isinstance(other, FourVector):
            return NotImplemented
        return self.distance_to(other) < max(self.resolution(), other.resolution())

    def __add__(self, other: "FourVector") -> "FourVector":
        return FourVector(self.E + other.E, self.px + other.px, self.py + other.py, self.pz + other.pz)

    def __sub__(self, other: "FourVector") -> "FourVector":
        return FourVector(self.E - other.E, self.px - other.px, self.py - other.py, self.pz - other.pz)

    def __neg__(self) -> "FourVector":
        return FourVector(-self.E, -self.px, -self.py, -self.pz)

    def __mul__(self, factor: Scalar) -> "FourVector":
        return FourVector(self.E * factor, self.px * factor, self.py * factor, self.pz * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: Scalar) -> "FourVector":
        return FourVector(self.E / factor, self.px / factor, self.py / factor, self.pz / factor)

    def __repr__(self) -> str:
        return f"FourVector(E={self.E:.6f}, px={self.px:.6f}, py={self.py:.6f}, pz={self.pz:.6f})"


# -----------------------------
# Isotropic direction
# -----------------------------
def isotropic_direction(rng: Optional[np.random.Generator] = None) -> ThreeVector:
    rng = rng or np.random.default_rng()
    u = rng.uniform(-1.0, 1.0)
    phi = rng.uniform(0.0, 2.0 * math.pi)
    sint = math.sqrt(max(0.0, 1.0 - u * u))
    return ThreeVector(sint * math.cos(phi), sint * math.sin(phi), u)
