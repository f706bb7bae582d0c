"""In-memory asset registry and builders for skeletons, skeletal meshes and control rigs."""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .landmarks import GeneratedBone, GeneratedRigData, LandmarkSolveResult, StaticMesh, Vector3
from .template import RigTemplate

log = logging.getLogger(__name__)

WEIGHT_SAMPLE_LIMIT = 25


@dataclass(eq=False)
class Package:
    """A named container for assets; marked dirty when its contents change."""

    name: str
    objects: list[Any] = field(default_factory=list)
    dirty: bool = False

    def add(self, asset: Any) -> Any:
        """Store an asset in this package, point it back here and mark the package dirty."""
        self.objects.append(asset)
        if hasattr(asset, "package"):
            asset.package = self
        self.dirty = True
        return asset


class AssetRegistry:
    """Tracks created packages and the assets announced as created."""

    def __init__(self) -> None:
        self._packages: dict[str, Package] = {}
        self._assets: list[Any] = []

    @property
    def assets(self) -> tuple[Any, ...]:
        """All registered assets, in creation order."""
        return tuple(self._assets)

    def create_package(self, name: str) -> Package:
        """Return the package with this name, creating it if needed."""
        package = self._packages.get(name)
        if package is None:
            package = self._packages[name] = Package(name)
        return package

    def package_exists(self, name: str) -> bool:
        """Whether a package with this name has been created."""
        return name in self._packages

    def asset_created(self, asset: Any) -> None:
        """Register an asset; registering the same object twice has no effect."""
        if not any(existing is asset for existing in self._assets):
            self._assets.append(asset)

    def assets_of_type(self, kind: type) -> list[Any]:
        """Registered assets that are instances of the given type."""
        return [asset for asset in self._assets if isinstance(asset, kind)]


@dataclass(eq=False)
class Skeleton:
    """A skeleton asset; its bone tree is not yet populated."""

    name: str
    package: Optional[Package] = field(default=None, repr=False)


@dataclass(eq=False)
class SkeletalMesh:
    """A skeletal mesh bound to a skeleton, with a sampled vertex-to-bone mapping."""

    name: str
    skeleton: Optional[Skeleton] = None
    sample_weights: dict[int, str] = field(default_factory=dict)
    package: Optional[Package] = field(default=None, repr=False)


@dataclass(eq=False)
class ControlRig:
    """A control rig asset, optionally duplicated from a template rig."""

    name: str
    data: dict[str, Any] = field(default_factory=dict)
    duplicated_from: Optional[str] = None
    package: Optional[Package] = field(default=None, repr=False)


def short_name(package_name: str) -> str:
    """The last path component of a package name."""
    return package_name.rsplit("/", 1)[-1]


def make_unique_asset_path(registry: AssetRegistry, base_folder: str, asset_name: str) -> str:
    """A package path under base_folder not yet in use, suffixed _1, _2, ... if needed."""
    path = f"{base_folder}/{asset_name}"
    candidate = path
    suffix = 1
    while registry.package_exists(candidate):
        candidate = f"{path}_{suffix}"
        suffix += 1
    return candidate


def find_nearest_bone_index(position: Vector3, bones: Sequence[GeneratedBone]) -> Optional[int]:
    """Index of the bone closest to position; the first wins ties; None if no bones."""
    best_index: Optional[int] = None
    best_distance = math.inf
    for index, bone in enumerate(bones):
        distance = position.distance_squared(bone.transform.location)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def build_skeleton(
    package: Optional[Package],
    template: Optional[RigTemplate],
    landmarks: Optional[LandmarkSolveResult],
    name: str,
) -> Skeleton:
    """Create an empty skeleton asset in the package from solved landmarks."""
    if package is None or template is None or landmarks is None or not landmarks.success:
        raise ValueError("a package, a template and successfully solved landmarks are required")
    return package.add(Skeleton(name))


def build_skeletal_mesh(
    package: Optional[Package],
    source_mesh: Optional[StaticMesh],
    skeleton: Optional[Skeleton],
    name: str,
    registry: AssetRegistry,
) -> SkeletalMesh:
    """Create a skeletal mesh bound to skeleton and sample a nearest-bone weighting."""
    if package is None or source_mesh is None or skeleton is None:
        raise ValueError("invalid inputs: a package, a source mesh and a skeleton are required")

    mesh = SkeletalMesh(name, skeleton=skeleton)

    vertices = source_mesh.vertices
    if vertices:
        log.info("Pseudo weighting %d vertices.", len(vertices))
        bones = next(
            (
                data.generated_bones
                for data in registry.assets_of_type(GeneratedRigData)
                if data.skeletal_mesh is None or data.skeletal_mesh is mesh
            ),
            [],
        )
        if not bones:
            log.info("No generated bones found for weighting (rig data not yet created).")
        else:
            for index, vertex in enumerate(vertices[:WEIGHT_SAMPLE_LIMIT]):
                bone_index = find_nearest_bone_index(vertex, bones)
                if bone_index is not None:
                    mesh.sample_weights[index] = bones[bone_index].bone_name
                    log.debug("Vert %d -> Bone %s", index, bones[bone_index].bone_name)
            log.info("Pseudo weighting complete (sample logged).")

    package.add(mesh)
    registry.asset_created(mesh)
    return mesh


def generate_control_rig(
    package: Optional[Package],
    template: Optional[RigTemplate],
    skeleton: Optional[Skeleton],
    name: str,
    registry: AssetRegistry,
) -> ControlRig:
    """Duplicate the template's control rig into the package, or create an empty one."""
    if package is None or template is None or skeleton is None:
        raise ValueError("a package, a template and a skeleton are required")

    source = template.control_rig_template
    if isinstance(source, ControlRig):
        rig = ControlRig(name, data=copy.deepcopy(source.data), duplicated_from=source.name)
    else:
        rig = ControlRig(name)

    package.add(rig)
    registry.asset_created(rig)
    return rig