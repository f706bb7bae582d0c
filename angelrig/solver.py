"""Heuristic landmark solving from a static mesh's vertex cloud."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .landmarks import (
    LandmarkSolveResult,
    SolvedLandmark,
    StaticMesh,
    Transform,
    Vector3,
)
from .template import LandmarkType, RigTemplate

_KINDA_SMALL_NUMBER = 1.0e-4
_CENTER_PULL = 0.7


def center_of_mass(vertices: Iterable[Vector3]) -> Vector3:
    """Average of the given vertices; the origin if there are none."""
    total = Vector3()
    count = 0
    for vertex in vertices:
        total = total + vertex
        count += 1
    return total / count if count else Vector3()


def _lerp(a: float, b: float, alpha: float) -> float:
    return a + (b - a) * alpha


def _pull_to_center(point: Vector3, center: Vector3) -> Vector3:
    return Vector3(
        _lerp(point.x, center.x, _CENTER_PULL),
        _lerp(point.y, center.y, _CENTER_PULL),
        point.z,
    )


def _extremes(band: Sequence[Vector3]) -> Optional[tuple[Vector3, Vector3]]:
    """Lowest-X and highest-X vertices in the band, first occurrence winning."""
    if not band:
        return None
    left = right = band[0]
    for vertex in band[1:]:
        if vertex.x < left.x:
            left = vertex
        if vertex.x > right.x:
            right = vertex
    return left, right


def compute_humanoid_landmarks(
    vertices: Iterable[Vector3],
) -> dict[LandmarkType, Vector3]:
    """Estimate humanoid landmark positions from height bands of the vertex cloud."""
    verts = list(vertices)
    positions: dict[LandmarkType, Vector3] = {}
    if not verts:
        return positions

    low = Vector3(min(v.x for v in verts), min(v.y for v in verts), min(v.z for v in verts))
    high = Vector3(max(v.x for v in verts), max(v.y for v in verts), max(v.z for v in verts))

    height = high.z - low.z
    if height <= _KINDA_SMALL_NUMBER:
        return positions

    center = (low + high) * 0.5

    def pct(v: Vector3) -> float:
        return (v.z - low.z) / height

    def band(source: Iterable[Vector3], lo: float, hi: float) -> list[Vector3]:
        return [v for v in source if lo <= pct(v) <= hi]

    pelvis_verts = band(verts, 0.25, 0.45)
    torso_verts = band(verts, 0.35, 0.70)
    shoulder_verts = band(verts, 0.70, 0.90)
    hip_verts = band(verts, 0.35, 0.55)
    knee_verts = band(verts, 0.15, 0.35)
    ankle_verts = band(verts, 0.00, 0.15)
    head_verts = [v for v in verts if pct(v) >= 0.85]

    pelvis = center
    if pelvis_verts:
        pelvis = _pull_to_center(center_of_mass(pelvis_verts), center)
    positions[LandmarkType.PELVIS] = pelvis

    if torso_verts:
        lower = band(torso_verts, 0.35, 0.50)
        spine_start = center_of_mass(lower) if lower else pelvis
        spine_start = _pull_to_center(spine_start, center)

        upper = band(torso_verts, 0.55, 0.75)
        spine_end = center_of_mass(upper) if upper else spine_start
        spine_end = _pull_to_center(spine_end, center)

        positions[LandmarkType.SPINE_START] = spine_start
        positions[LandmarkType.SPINE_END] = spine_end
        positions[LandmarkType.NECK_BASE] = Vector3(
            spine_end.x, spine_end.y, min(high.z, spine_end.z + height * 0.05)
        )

    if head_verts:
        positions[LandmarkType.HEAD_CENTER] = _pull_to_center(
            center_of_mass(head_verts), center
        )

    pairs = (
        (shoulder_verts, LandmarkType.SHOULDER_L, LandmarkType.SHOULDER_R),
        (hip_verts, LandmarkType.HIP_L, LandmarkType.HIP_R),
        (knee_verts, LandmarkType.KNEE_L, LandmarkType.KNEE_R),
        (ankle_verts, LandmarkType.ANKLE_L, LandmarkType.ANKLE_R),
    )
    for band_verts, left_type, right_type in pairs:
        found = _extremes(band_verts)
        if found is not None:
            positions[left_type], positions[right_type] = found

    return positions


class HeuristicBoneSolver:
    """Solves a template's landmarks from mesh geometry using height-band heuristics."""

    def solve_landmarks(
        self, mesh: Optional[StaticMesh], template: Optional[RigTemplate]
    ) -> LandmarkSolveResult:
        """Place every landmark of the template; unknown ones go to the vertex centroid."""
        if mesh is None or template is None or not mesh.vertices:
            return LandmarkSolveResult()

        vertices = mesh.vertices
        positions = compute_humanoid_landmarks(vertices)
        centroid = center_of_mass(vertices)

        landmarks = [
            SolvedLandmark(
                name=definition.name,
                transform=Transform(positions.get(definition.type, centroid)),
            )
            for definition in template.landmark_definitions
        ]
        return LandmarkSolveResult(success=True, landmarks=landmarks)


def detect_landmarks(
    mesh: Optional[StaticMesh], template: Optional[RigTemplate]
) -> LandmarkSolveResult:
    """Detect landmarks on a mesh with the heuristic solver."""
    if mesh is None or template is None:
        return LandmarkSolveResult()
    return HeuristicBoneSolver().solve_landmarks(mesh, template)