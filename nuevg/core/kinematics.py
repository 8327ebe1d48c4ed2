"""Four-vector algebra and two-body kinematics helpers.

All quantities are in GeV with metric (+, -, -, -).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class FourVector:
    """Immutable Lorentz four-vector (px, py, pz, E).

    Used both for 4-momenta [GeV] and 4-positions (x, y, z, t).
    """

    px: float
    py: float
    pz: float
    E: float

    @classmethod
    def from_array(cls, values) -> "FourVector":
        px, py, pz, E = (float(v) for v in values)
        return cls(px, py, pz, E)

    @classmethod
    def from_momentum(cls, p3, mass: float) -> "FourVector":
        """Build an on-shell 4-momentum from a 3-momentum and a mass."""
        p3 = np.asarray(p3, dtype=float)
        E = math.sqrt(float(np.dot(p3, p3)) + mass * mass)
        return cls(float(p3[0]), float(p3[1]), float(p3[2]), E)

    @classmethod
    def at_rest(cls, mass: float) -> "FourVector":
        return cls(0.0, 0.0, 0.0, mass)

    @property
    def energy(self) -> float:
        return self.E

    @property
    def p3(self) -> np.ndarray:
        return np.array([self.px, self.py, self.pz])

    @property
    def p(self) -> float:
        return math.sqrt(self.px * self.px + self.py * self.py + self.pz * self.pz)

    @property
    def mass2(self) -> float:
        return self.E * self.E - self.p * self.p

    @property
    def mass(self) -> float:
        # Clamp tiny negative values from rounding
        return math.sqrt(max(self.mass2, 0.0))

    @property
    def direction(self) -> np.ndarray:
        """Unit 3-vector along the momentum (z axis for a particle at rest)."""
        p = self.p
        if p == 0.0:
            return np.array([0.0, 0.0, 1.0])
        return self.p3 / p

    @property
    def beta(self) -> np.ndarray:
        return self.p3 / self.E

    def as_array(self) -> np.ndarray:
        return np.array([self.px, self.py, self.pz, self.E])

    def dot(self, other: "FourVector") -> float:
        return self.E * other.E - (
            self.px * other.px + self.py * other.py + self.pz * other.pz
        )

    def __add__(self, other: "FourVector") -> "FourVector":
        return FourVector(
            self.px + other.px, self.py + other.py, self.pz + other.pz, self.E + other.E,
        )

    def __sub__(self, other: "FourVector") -> "FourVector":
        return FourVector(
            self.px - other.px, self.py - other.py, self.pz - other.pz, self.E - other.E,
        )

    def boost(self, beta) -> "FourVector":
        """Lorentz boost by velocity vector beta (|beta| < 1)."""
        beta = np.asarray(beta, dtype=float)
        b2 = float(np.dot(beta, beta))
        if b2 == 0.0:
            return self
        if b2 >= 1.0:
            raise ValueError(f"Boost velocity must satisfy |beta| < 1, got {math.sqrt(b2)}")
        gamma = 1.0 / math.sqrt(1.0 - b2)
        p3 = self.p3
        bp = float(np.dot(beta, p3))
        gamma2 = (gamma - 1.0) / b2
        new_p3 = p3 + gamma2 * bp * beta + gamma * beta * self.E
        new_E = gamma * (self.E + bp)
        return FourVector(float(new_p3[0]), float(new_p3[1]), float(new_p3[2]), float(new_E))

    def __str__(self) -> str:
        return f"(px={self.px:.4g}, py={self.py:.4g}, pz={self.pz:.4g}, E={self.E:.4g})"


def orthonormal_frame(direction) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Right-handed frame (u, v, w) with w along the given direction."""
    w = np.asarray(direction, dtype=float)
    w = w / np.linalg.norm(w)
    helper = np.array([1.0, 0.0, 0.0]) if abs(w[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = np.cross(helper, w)
    u /= np.linalg.norm(u)
    v = np.cross(w, u)
    return u, v, w


def rotate_to_direction(cos_theta: float, phi: float, axis) -> np.ndarray:
    """Unit vector at polar angle theta and azimuth phi around the given axis."""
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    u, v, w = orthonormal_frame(axis)
    return sin_theta * math.cos(phi) * u + sin_theta * math.sin(phi) * v + cos_theta * w


def two_body_momentum(M: float, m1: float, m2: float) -> float:
    """Momentum of either daughter in the rest frame of a decaying mass M.

    Returns 0 when the decay is kinematically closed.
    """
    if M <= m1 + m2:
        return 0.0
    term = (M * M - (m1 + m2) ** 2) * (M * M - (m1 - m2) ** 2)
    return math.sqrt(term) / (2.0 * M)


def isotropic_two_body_decay(
    parent: FourVector, m1: float, m2: float, rng: np.random.Generator,
) -> tuple[FourVector, FourVector]:
    """Isotropic two-body decay of `parent` into masses m1 and m2 (lab frame)."""
    M = parent.mass
    p_star = two_body_momentum(M, m1, m2)
    cos_theta = rng.uniform(-1.0, 1.0)
    phi = rng.uniform(0.0, 2.0 * math.pi)
    n = rotate_to_direction(cos_theta, phi, [0.0, 0.0, 1.0])
    d1 = FourVector.from_momentum(p_star * n, m1)
    d2 = FourVector.from_momentum(-p_star * n, m2)
    beta = parent.beta
    return d1.boost(beta), d2.boost(beta)
