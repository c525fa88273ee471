"""
Lorentz transformations acting on QEDX four-vectors.

A LorentzTransform is a 4x4 real matrix applied with the @ operator:

    boost = LorentzBoost.from_beta((0.0, 0.0, 0.6))
    p_rest = boost @ p          # FourVector
    total = rot @ boost         # composition, applied right to left

LorentzBoost and ThreeRotation are the same matrix value with a structure
checked once, when they are built. Nothing mutates a transform after
construction; every operation returns a new one. The product of two
rotations is a rotation, but the product of two non-collinear boosts is
only a LorentzTransform (it carries a Thomas rotation).

Boost convention: the boost built from velocity beta takes vectors into the
frame that moves with beta, so the time-space entries are -gamma*beta.
"""

from __future__ import annotations
import math
from typing import Sequence, Tuple, Union
import numpy as np

from .kinematics import FourVector, ThreeVector, UnitVector

METRIC = np.diag([1.0, -1.0, -1.0, -1.0])

_TOLERANCE = 1e-9


def _three_array(value: Union[ThreeVector, Sequence[float]]) -> np.ndarray:
    arr = value.to_array() if isinstance(value, ThreeVector) else np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr.astype(float)


class LorentzTransform:
    """General 4x4 real matrix operator on four-vectors."""

    def __init__(self, matrix=None):
        m = np.identity(4) if matrix is None else np.array(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"LorentzTransform needs a 4x4 matrix, got shape {m.shape}")
        self._matrix = m

    @classmethod
    def _trusted(cls, matrix: np.ndarray):
        """Wrap a matrix already known to have this class's structure."""
        obj = cls.__new__(cls)
        LorentzTransform.__init__(obj, matrix)
        return obj

    @classmethod
    def from_array(cls, array) -> "LorentzTransform":
        return LorentzTransform(array)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    def to_array(self) -> np.ndarray:
        return self._matrix.copy()

    def __getitem__(self, index: Tuple[int, int]) -> float:
        return float(self._matrix[index])

    # -------------------- Structure checks --------------------

    def is_lorentz(self, tol: float = _TOLERANCE) -> bool:
        """M^T G M == G within a tolerance scaled by the largest entry."""
        m = self._matrix
        scale = max(1.0, float(np.max(np.abs(m)))) ** 2
        return bool(np.allclose(m.T @ METRIC @ m, METRIC, rtol=0.0, atol=tol * scale))

    def is_boost(self, tol: float = _TOLERANCE) -> bool:
        m = self._matrix
        scale = max(1.0, float(np.max(np.abs(m))))
        return (self.is_lorentz(tol)
                and bool(np.allclose(m, m.T, rtol=0.0, atol=tol * scale))
                and m[0, 0] > 0)

    def is_rotation(self, tol: float = _TOLERANCE) -> bool:
        m = self._matrix
        return (self.is_lorentz(tol)
                and abs(m[0, 0] - 1.0) < tol
                and bool(np.allclose(m[0, 1:], 0.0, atol=tol))
                and bool(np.allclose(m[1:, 0], 0.0, atol=tol))
                and np.linalg.det(m[1:, 1:]) > 0)

    def allclose(self, other: "LorentzTransform", atol: float = _TOLERANCE) -> bool:
        return bool(np.allclose(self._matrix, other._matrix, rtol=0.0, atol=atol))

    # -------------------- Algebra --------------------

    def transpose(self) -> "LorentzTransform":
        return LorentzTransform(self._matrix.T)

    def inverse(self) -> "LorentzTransform":
        try:
            return LorentzTransform(np.linalg.inv(self._matrix))
        except np.linalg.LinAlgError as e:
            raise ValueError(f"LorentzTransform is singular: {e}") from e

    def __matmul__(self, other):
        if isinstance(other, LorentzTransform):
            return LorentzTransform(self._matrix @ other._matrix)
        if isinstance(other, FourVector):
            return FourVector.from_array(self._matrix @ other.to_array())
        return NotImplemented

    def __repr__(self) -> str:
        rows = ", ".join("[" + ", ".join(f"{v:.6f}" for v in row) + "]" for row in self._matrix)
        return f"{type(self).__name__}([{rows}])"


# -----------------------------
# Boosts
# -----------------------------
class LorentzBoost(LorentzTransform):
    """Pure boost: symmetric matrix with gamma >= 1 in the time-time entry."""

    def __init__(self, matrix=None):
        super().__init__(matrix)
        if matrix is not None and not self.is_boost():
            raise ValueError("Matrix is not a pure Lorentz boost.")

    @classmethod
    def from_beta(cls, beta: Union[ThreeVector, Sequence[float]]) -> "LorentzBoost":
        b = _three_array(beta)
        beta2 = float(b @ b)
        if beta2 >= 1.0:
            raise ValueError("beta^2 < 1 required.")
        m = np.identity(4)
        if beta2 > 0.0:
            gamma = 1.0 / math.sqrt(1.0 - beta2)
            m[0, 0] = gamma
            m[0, 1:] = m[1:, 0] = -gamma * b
            m[1:, 1:] += (gamma - 1.0) * np.outer(b, b) / beta2
        return cls._trusted(m)

    @classmethod
    def from_rapidity(cls, axis: Union[ThreeVector, Sequence[float]], rapidity: float) -> "LorentzBoost":
        """Boost along axis by rapidity; exact even where tanh(rapidity) rounds to 1."""
        n = _three_array(UnitVector(*_three_array(axis)))
        ch, sh = math.cosh(rapidity), math.sinh(rapidity)
        m = np.identity(4)
        m[0, 0] = ch
        m[0, 1:] = m[1:, 0] = -sh * n
        m[1:, 1:] += (ch - 1.0) * np.outer(n, n)
        return cls._trusted(m)

    @classmethod
    def from_gamma(cls, axis: Union[ThreeVector, Sequence[float]], gamma: float) -> "LorentzBoost":
        """Boost along axis with Lorentz factor gamma >= 1."""
        if gamma < 1.0:
            raise ValueError(f"gamma >= 1 required, got {gamma}")
        return cls.from_rapidity(axis, math.acosh(gamma))

    @classmethod
    def to_rest_frame_of(cls, p: FourVector) -> "LorentzBoost":
        """Boost taking four-momentum p to its rest frame (beta = p/E)."""
        mass = p.invariant()
        if mass == 0.0 or p.E <= 0:
            raise ValueError(f"{p} has no rest frame.")
        v = p.p
        m = np.identity(4)
        m[0, 0] = p.E / mass
        m[0, 1:] = m[1:, 0] = -v / mass
        m[1:, 1:] += np.outer(v, v) / (mass * (p.E + mass))
        return cls._trusted(m)

    def beta(self) -> ThreeVector:
        return ThreeVector.from_array(-self._matrix[0, 1:] / self._matrix[0, 0])

    def gamma(self) -> float:
        return float(self._matrix[0, 0])

    def rapidity(self) -> float:
        return math.acosh(max(self.gamma(), 1.0))

    def transpose(self) -> "LorentzBoost":
        return LorentzBoost._trusted(self._matrix.copy())

    def inverse(self) -> "LorentzBoost":
        # boost with the velocity reversed
        return LorentzBoost._trusted(METRIC @ self._matrix @ METRIC)


# -----------------------------
# Rotations
# -----------------------------
def _rz(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _ry(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def _embed(r: np.ndarray) -> np.ndarray:
    m = np.identity(4)
    m[1:, 1:] = r
    return m


class ThreeRotation(LorentzTransform):
    """Spatial rotation: identity on time, orthogonal 3x3 block on space."""

    def __init__(self, matrix=None):
        if matrix is not None and np.shape(matrix) == (3, 3):
            matrix = _embed(np.asarray(matrix, dtype=float))
        super().__init__(matrix)
        if matrix is not None and not self.is_rotation():
            raise ValueError("Matrix is not a proper spatial rotation.")

    @classmethod
    def from_axis_angle(cls, axis: Union[ThreeVector, Sequence[float]], angle: float) -> "ThreeRotation":
        """Rodrigues' formula for a right-handed rotation by angle about axis."""
        nx, ny, nz = _three_array(UnitVector(*_three_array(axis)))
        k = np.array([[0.0, -nz, ny], [nz, 0.0, -nx], [-ny, nx, 0.0]])
        r = np.identity(3) + math.sin(angle) * k + (1.0 - math.cos(angle)) * (k @ k)
        return cls._trusted(_embed(r))

    @classmethod
    def from_rotation_vector(cls, vec: Union[ThreeVector, Sequence[float]]) -> "ThreeRotation":
        """Rotation about vec by an angle equal to its length."""
        v = _three_array(vec)
        angle = float(np.linalg.norm(v))
        if angle == 0.0:
            return cls._trusted(np.identity(4))
        return cls.from_axis_angle(v, angle)

    @classmethod
    def from_euler(cls, phi: float, theta: float, psi: float) -> "ThreeRotation":
        """z-y-z Euler angles: R = Rz(phi) Ry(theta) Rz(psi)."""
        return cls._trusted(_embed(_rz(phi) @ _ry(theta) @ _rz(psi)))

    def axis_angle(self) -> Tuple[UnitVector, float]:
        """Axis and angle in [0, pi]. The identity reports the z axis."""
        r = self._matrix[1:, 1:]
        v = np.array([r[2, 1] - r[1, 2], r[0, 2] - r[2, 0], r[1, 0] - r[0, 1]])
        cos_a = (np.trace(r) - 1.0) / 2.0
        angle = math.atan2(float(np.linalg.norm(v)) / 2.0, cos_a)
        if cos_a >= 0.0:
            if not np.any(v):
                return UnitVector(0.0, 0.0, 1.0), 0.0
            return UnitVector(*v), angle
        # near pi the antisymmetric part vanishes; read n n^T off the symmetric part
        nn = ((r + r.T) / 2.0 - cos_a * np.identity(3)) / (1.0 - cos_a)
        i = int(np.argmax(np.diag(nn)))
        n = nn[:, i] / math.sqrt(nn[i, i])
        if n @ v < 0:
            n = -n
        return UnitVector(*n), angle

    def euler(self) -> Tuple[float, float, float]:
        """
        z-y-z Euler angles (phi, theta, psi) with theta in [0, pi].

        At gimbal lock (theta = 0 or pi) only phi +- psi is defined; psi is
        reported as 0 and the whole rotation is carried by phi.
        """
        r = self._matrix[1:, 1:]
        sin_t = math.hypot(r[0, 2], r[1, 2])
        theta = math.atan2(sin_t, r[2, 2])
        if sin_t > 1e-12:
            phi = math.atan2(r[1, 2], r[0, 2])
            psi = math.atan2(r[2, 1], -r[2, 0])
        elif r[2, 2] > 0:
            phi, psi = math.atan2(r[1, 0], r[0, 0]), 0.0
        else:
            phi, psi = math.atan2(-r[1, 0], -r[0, 0]), 0.0
        return phi, theta, psi

    def transpose(self) -> "ThreeRotation":
        return ThreeRotation._trusted(self._matrix.T.copy())

    def inverse(self) -> "ThreeRotation":
        return self.transpose()

    def __matmul__(self, other):
        if isinstance(other, ThreeRotation):
            return ThreeRotation._trusted(self._matrix @ other._matrix)
        if isinstance(other, ThreeVector):
            return ThreeVector.from_array(self._matrix[1:, 1:] @ other.to_array())
        return super().__matmul__(other)
