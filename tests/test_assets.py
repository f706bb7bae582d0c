import pytest

from angelrig.assets import (
    WEIGHT_SAMPLE_LIMIT,
    AssetRegistry,
    ControlRig,
    Package,
    SkeletalMesh,
    Skeleton,
    build_skeletal_mesh,
    build_skeleton,
    find_nearest_bone_index,
    generate_control_rig,
    make_unique_asset_path,
    short_name,
)
from angelrig.landmarks import (
    GeneratedBone,
    GeneratedRigData,
    LandmarkSolveResult,
    StaticMesh,
    Transform,
    Vector3,
)
from angelrig.template import RigTemplate

BASE = "/Game/AngelStudio/Generated"


def _bone(name, z):
    return GeneratedBone(name, Transform(Vector3(0.0, 0.0, z)))


def test_short_name_takes_last_component():
    assert short_name(BASE + "/Hero_Skeleton") == "Hero_Skeleton"
    assert short_name("Plain") == "Plain"


def test_create_package_is_idempotent():
    registry = AssetRegistry()
    first = registry.create_package(BASE + "/A")
    assert registry.create_package(BASE + "/A") is first
    assert registry.package_exists(BASE + "/A")
    assert not registry.package_exists(BASE + "/B")


def test_make_unique_asset_path_appends_suffixes():
    registry = AssetRegistry()
    first = make_unique_asset_path(registry, BASE, "Hero_Skeleton")
    assert first == BASE + "/Hero_Skeleton"
    registry.create_package(first)
    second = make_unique_asset_path(registry, BASE, "Hero_Skeleton")
    assert second == BASE + "/Hero_Skeleton_1"
    registry.create_package(second)
    assert make_unique_asset_path(registry, BASE, "Hero_Skeleton") == BASE + "/Hero_Skeleton_2"


def test_asset_registry_filters_by_type_and_ignores_duplicates():
    registry = AssetRegistry()
    skeleton = Skeleton("S")
    rig = ControlRig("R")
    registry.asset_created(skeleton)
    registry.asset_created(rig)
    registry.asset_created(skeleton)
    assert registry.assets_of_type(Skeleton) == [skeleton]
    assert registry.assets_of_type(ControlRig) == [rig]
    assert len(registry.assets) == 2


def test_find_nearest_bone_index():
    bones = [_bone("a", 0.0), _bone("b", 50.0), _bone("c", 100.0)]
    assert find_nearest_bone_index(Vector3(0, 0, 60), bones) == 1
    assert find_nearest_bone_index(Vector3(0, 0, -5), bones) == 0
    assert find_nearest_bone_index(Vector3(0, 0, 0), []) is None


def test_find_nearest_bone_index_first_wins_ties():
    bones = [_bone("a", 0.0), _bone("b", 10.0)]
    assert find_nearest_bone_index(Vector3(0, 0, 5), bones) == 0


def test_build_skeleton_places_asset_in_package():
    package = Package(BASE + "/Hero_Skeleton")
    skeleton = build_skeleton(package, RigTemplate(), LandmarkSolveResult(success=True), "Hero_Skeleton")
    assert skeleton.name == "Hero_Skeleton"
    assert skeleton.package is package
    assert package.objects == [skeleton]
    assert package.dirty


def test_build_skeleton_rejects_failed_landmarks():
    with pytest.raises(ValueError):
        build_skeleton(Package("p"), RigTemplate(), LandmarkSolveResult(success=False), "S")
    with pytest.raises(ValueError):
        build_skeleton(None, RigTemplate(), LandmarkSolveResult(success=True), "S")


def test_build_skeletal_mesh_registers_and_binds_skeleton():
    registry = AssetRegistry()
    skeleton = Skeleton("S")
    package = registry.create_package(BASE + "/Hero_SkelMesh")
    mesh = build_skeletal_mesh(package, StaticMesh("Hero", [(0, 0, 0)]), skeleton, "Hero_SkelMesh", registry)
    assert mesh.skeleton is skeleton
    assert mesh.package is package
    assert registry.assets_of_type(SkeletalMesh) == [mesh]
    assert mesh.sample_weights == {}


def test_build_skeletal_mesh_samples_weights_from_unbound_rig_data():
    registry = AssetRegistry()
    registry.asset_created(GeneratedRigData(generated_bones=[_bone("low", 0.0), _bone("high", 100.0)]))
    vertices = [(0.0, 0.0, 4.0 * i) for i in range(30)]
    mesh = build_skeletal_mesh(
        Package("p"), StaticMesh("Hero", vertices), Skeleton("S"), "Hero_SkelMesh", registry
    )
    assert set(mesh.sample_weights) == set(range(WEIGHT_SAMPLE_LIMIT))
    assert mesh.sample_weights[0] == "low"
    assert mesh.sample_weights[WEIGHT_SAMPLE_LIMIT - 1] == "high"


def test_build_skeletal_mesh_ignores_rig_data_bound_to_other_mesh():
    registry = AssetRegistry()
    registry.asset_created(
        GeneratedRigData(skeletal_mesh=SkeletalMesh("other"), generated_bones=[_bone("low", 0.0)])
    )
    mesh = build_skeletal_mesh(
        Package("p"), StaticMesh("Hero", [(0, 0, 0)]), Skeleton("S"), "M", registry
    )
    assert mesh.sample_weights == {}


def test_build_skeletal_mesh_requires_inputs():
    with pytest.raises(ValueError):
        build_skeletal_mesh(Package("p"), None, Skeleton("S"), "M", AssetRegistry())


def test_generate_control_rig_duplicates_template_rig():
    registry = AssetRegistry()
    source = ControlRig("Base", data={"controls": ["root_ctrl"]})
    template = RigTemplate(control_rig_template=source)
    package = registry.create_package(BASE + "/Hero_ControlRig")
    rig = generate_control_rig(package, template, Skeleton("S"), "Hero_ControlRig", registry)
    assert rig.name == "Hero_ControlRig"
    assert rig.data == source.data
    assert rig.data is not source.data
    assert rig.duplicated_from == "Base"
    assert registry.assets_of_type(ControlRig) == [rig]
    assert package.dirty


def test_generate_control_rig_falls_back_to_empty_rig():
    registry = AssetRegistry()
    rig = generate_control_rig(Package("p"), RigTemplate(), Skeleton("S"), "R", registry)
    assert rig.data == {}
    assert rig.duplicated_from is None
    assert registry.assets_of_type(ControlRig) == [rig]


def test_generate_control_rig_requires_skeleton():
    with pytest.raises(ValueError):
        generate_control_rig(Package("p"), RigTemplate(), None, "R", AssetRegistry())