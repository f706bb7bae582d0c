"""Geometry primitives, solved landmarks and generated rig data."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional


@dataclass(frozen=True)
class Vector3:
    """An immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vector3:
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vector3:
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def distance_squared(self, other: Vector3) -> float:
        """Squared Euclidean distance to another vector."""
        d = self - other
        return d.x * d.x + d.y * d.y + d.z * d.z

    def distance(self, other: Vector3) -> float:
        """Euclidean distance to another vector."""
        return math.sqrt(self.distance_squared(other))


def _as_vector(value: Vector3 | Iterable[float]) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3(*value)


@dataclass(frozen=True)
class Transform:
    """Location, rotation (quaternion x, y, z, w) and scale; identity by default."""

    location: Vector3 = field(default_factory=Vector3)
    rotation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))


@dataclass
class StaticMesh:
    """A named static mesh described by its vertex positions."""

    name: str
    vertices: tuple[Vector3, ...] = ()

    def __post_init__(self) -> None:
        self.vertices = tuple(_as_vector(v) for v in self.vertices)


@dataclass
class SolvedLandmark:
    """A landmark name with the transform the solver found for it."""

    name: Optional[str] = None
    transform: Transform = field(default_factory=Transform)


@dataclass
class LandmarkSolveResult:
    """Outcome of solving a template's landmarks on a mesh."""

    success: bool = False
    landmarks: list[SolvedLandmark] = field(default_factory=list)

    def find(self, name: str) -> Optional[SolvedLandmark]:
        """Return the first landmark with the given name, or None."""
        return next((lm for lm in self.landmarks if lm.name == name), None)


@dataclass
class GeneratedBone:
    """A bone placed during rig generation, in mesh space."""

    bone_name: Optional[str] = None
    transform: Transform = field(default_factory=Transform)


@dataclass
class GeneratedRigData:
    """Everything produced by one rig generation run."""

    skeleton: Any = None
    skeletal_mesh: Any = None
    control_rig: Any = None
    landmarks: list[SolvedLandmark] = field(default_factory=list)
    generated_bones: list[GeneratedBone] = field(default_factory=list)
    source_static_mesh_name: Optional[str] = None