"""Rig generation pipeline: single-mesh generation, batch processing and the wizard workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .assets import (
    AssetRegistry,
    ControlRig,
    SkeletalMesh,
    Skeleton,
    build_skeletal_mesh,
    build_skeleton,
    generate_control_rig,
    make_unique_asset_path,
    short_name,
)
from .landmarks import (
    GeneratedBone,
    GeneratedRigData,
    LandmarkSolveResult,
    StaticMesh,
    Transform,
    Vector3,
)
from .solver import detect_landmarks
from .template import RigTemplate

log = logging.getLogger(__name__)

DEFAULT_BASE_FOLDER = "/Game/AngelStudio/Generated"


class RigGenerationError(Exception):
    """Raised when a stage of rig generation fails; stage names the failing step."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


@dataclass
class RigAssets:
    """The assets produced for one mesh."""

    skeleton: Skeleton
    skeletal_mesh: SkeletalMesh
    control_rig: ControlRig
    rig_data: GeneratedRigData


@dataclass
class BatchRigItem:
    """One mesh queued for batch rigging."""

    mesh: Optional[StaticMesh] = None
    output_path: str = ""


def build_generated_bones(
    template: RigTemplate, landmarks: LandmarkSolveResult
) -> list[GeneratedBone]:
    """Place each template bone at the first landmark it uses, or at identity if not found."""
    bones = []
    for definition in template.bone_definitions:
        found = landmarks.find(definition.landmarks_used[0]) if definition.landmarks_used else None
        transform = found.transform if found is not None else Transform()
        bones.append(GeneratedBone(bone_name=definition.bone_name, transform=transform))
    return bones


def generate_rig_assets(
    registry: AssetRegistry,
    mesh: Optional[StaticMesh],
    template: Optional[RigTemplate],
    landmarks: LandmarkSolveResult,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> RigAssets:
    """Build skeleton, skeletal mesh, control rig and rig data for a mesh."""
    if mesh is None or template is None:
        raise RigGenerationError("a mesh and a template are required", "input")

    paths = {
        suffix: make_unique_asset_path(registry, base_folder, f"{mesh.name}_{suffix}")
        for suffix in ("Skeleton", "SkelMesh", "ControlRig", "RigData")
    }
    packages = {suffix: registry.create_package(path) for suffix, path in paths.items()}

    try:
        skeleton = build_skeleton(
            packages["Skeleton"], template, landmarks, short_name(paths["Skeleton"])
        )
    except ValueError as exc:
        raise RigGenerationError(f"Skeleton build failed for {mesh.name}", "skeleton") from exc

    try:
        skeletal_mesh = build_skeletal_mesh(
            packages["SkelMesh"], mesh, skeleton, short_name(paths["SkelMesh"]), registry
        )
    except ValueError as exc:
        raise RigGenerationError(
            f"Skeletal mesh build failed for {mesh.name}", "skeletal_mesh"
        ) from exc

    try:
        control_rig = generate_control_rig(
            packages["ControlRig"], template, skeleton, short_name(paths["ControlRig"]), registry
        )
    except ValueError as exc:
        raise RigGenerationError(
            f"Control Rig build failed for {mesh.name}", "control_rig"
        ) from exc

    rig_data = GeneratedRigData(
        skeleton=skeleton,
        skeletal_mesh=skeletal_mesh,
        control_rig=control_rig,
        landmarks=list(landmarks.landmarks),
        generated_bones=build_generated_bones(template, landmarks),
        source_static_mesh_name=mesh.name,
    )
    packages["RigData"].add(rig_data)
    registry.asset_created(rig_data)

    return RigAssets(skeleton, skeletal_mesh, control_rig, rig_data)


class BatchRigProcessor:
    """Rigs many meshes in turn, reporting progress after each one."""

    def __init__(
        self,
        registry: Optional[AssetRegistry] = None,
        base_folder: str = DEFAULT_BASE_FOLDER,
    ) -> None:
        self.registry = registry if registry is not None else AssetRegistry()
        self.base_folder = base_folder
        self.on_progress: list[Callable[[float], None]] = []

    def _report(self, progress: float) -> None:
        for listener in self.on_progress:
            listener(progress)

    def _process(self, mesh: Optional[StaticMesh], template: RigTemplate) -> RigAssets:
        if mesh is None:
            raise RigGenerationError("Skipping null mesh in batch.", "input")
        landmarks = detect_landmarks(mesh, template)
        if not landmarks.success:
            raise RigGenerationError(f"Landmark detection failed for {mesh.name}", "landmarks")
        return generate_rig_assets(self.registry, mesh, template, landmarks, self.base_folder)

    def run_batch(
        self, items: Iterable[BatchRigItem], template: Optional[RigTemplate]
    ) -> list[RigAssets]:
        """Rig every item's mesh; failures are logged and skipped. Returns what was built."""
        queue = list(items)
        if template is None or not queue:
            log.warning("Batch aborted: invalid template or empty items.")
            self._report(1.0)
            return []

        total = len(queue)
        results = []
        for index, item in enumerate(queue, start=1):
            try:
                assets = self._process(item.mesh, template)
            except RigGenerationError as exc:
                log.warning("%s", exc)
            else:
                results.append(assets)
                log.info("Rig generated for %s", item.mesh.name)
            self._report(index / total)
        return results


_STAGE_STATUS = {
    "skeleton": "Skeleton build failed.",
    "skeletal_mesh": "SkelMesh build failed.",
    "control_rig": "ControlRig build failed.",
}


class RigWizard:
    """Interactive workflow: detect landmarks on a mesh, then generate its rig assets."""

    def __init__(
        self,
        registry: Optional[AssetRegistry] = None,
        templates: Optional[Iterable[RigTemplate]] = None,
        base_folder: str = DEFAULT_BASE_FOLDER,
    ) -> None:
        self.registry = registry if registry is not None else AssetRegistry()
        self.base_folder = base_folder
        self.templates: list[RigTemplate] = (
            list(templates) if templates is not None
            else self.registry.assets_of_type(RigTemplate)
        )
        self.current_template: Optional[RigTemplate] = self.templates[0] if self.templates else None
        self.status = "Idle"
        self.landmark_lines: list[str] = []
        self.debug_points: list[Vector3] = []
        self.cached_landmarks = LandmarkSolveResult()
        self.cached_mesh: Optional[StaticMesh] = None

    @property
    def template_label(self) -> str:
        """Name of the current template, or a placeholder when there is none."""
        if self.current_template is None:
            return "No Template"
        return self.current_template.template_name or ""

    def detect(self, mesh: Optional[StaticMesh]) -> LandmarkSolveResult:
        """Detect landmarks on the mesh with the current template and list them."""
        self.landmark_lines.clear()
        self.cached_mesh = mesh
        if mesh is None or self.current_template is None:
            self.status = "No mesh or template."
            return LandmarkSolveResult()

        self.cached_landmarks = detect_landmarks(mesh, self.current_template)
        if not self.cached_landmarks.success:
            self.status = "Detection failed."
            return self.cached_landmarks

        self.status = "Landmarks detected."
        self.debug_points.clear()
        for landmark in self.cached_landmarks.landmarks:
            pos = landmark.transform.location
            self.landmark_lines.append(
                f"{landmark.name} : ({pos.x:.1f}, {pos.y:.1f}, {pos.z:.1f})"
            )
            self.debug_points.append(pos)
        return self.cached_landmarks

    def generate_assets(self) -> RigAssets:
        """Generate rig assets from the last successful detection."""
        if (
            self.cached_mesh is None
            or not self.cached_landmarks.success
            or self.current_template is None
        ):
            self.status = "Detect landmarks first."
            raise RigGenerationError(self.status, "input")

        try:
            assets = generate_rig_assets(
                self.registry,
                self.cached_mesh,
                self.current_template,
                self.cached_landmarks,
                self.base_folder,
            )
        except RigGenerationError as exc:
            self.status = _STAGE_STATUS.get(exc.stage, str(exc))
            raise
        self.status = "Assets generated."
        return assets

    def clear(self) -> None:
        """Forget the listed landmarks and debug points."""
        self.debug_points.clear()
        self.landmark_lines.clear()
        self.status = "Cleared."