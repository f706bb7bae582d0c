# angelrig

Heuristic landmark detection and rig asset generation for humanoid meshes.

Given the vertex positions of a static mesh, `angelrig` estimates where the
pelvis, spine, neck, head, shoulders, hips, knees and ankles lie, then turns
those landmarks into a skeleton, a skeletal mesh, a control rig and a
generated-rig data record, all tracked in an in-memory asset registry.

## Installation

```
pip install angelrig
```

The package has no runtime dependencies.

## Detecting landmarks

```python
from angelrig.landmarks import StaticMesh, Vector3
from angelrig.template import default_humanoid_template
from angelrig.solver import detect_landmarks

mesh = StaticMesh(name="Hero", vertices=[Vector3(0, 0, 0), Vector3(10, 0, 180)])
template = default_humanoid_template()

result = detect_landmarks(mesh, template)
if result.success:
    pelvis = result.find("PelvisCenter")
    print(pelvis.transform.location)
```

`StaticMesh` also accepts plain `(x, y, z)` tuples as vertices.

Landmarks are placed by height bands of the vertex cloud (Z is up):

- the pelvis at the centre of mass of the 25–45 % band, pulled 70 % of the
  way towards the bounding-box centre in X and Y;
- the spine start and end at the 35–50 % and 55–75 % bands, pulled the same
  way, and the neck base 5 % of the height above the spine end;
- the head at the top 15 %;
- shoulders (70–90 %), hips (35–55 %), knees (15–35 %) and ankles (0–15 %)
  at the lowest-X (left) and highest-X (right) vertices of their bands.

A landmark the template defines but the heuristics do not place falls back to
the mesh's vertex centroid. A mesh with no vertices, or a missing mesh or
template, gives a result with `success` set to `False`. The lower-level
pieces are available as `compute_humanoid_landmarks(vertices)`,
`center_of_mass(vertices)` and `HeuristicBoneSolver().solve_landmarks(mesh, template)`.

## Generating rig assets

```python
from angelrig.assets import AssetRegistry
from angelrig.pipeline import BatchRigItem, BatchRigProcessor, RigWizard

registry = AssetRegistry()

wizard = RigWizard(registry, [template])
wizard.detect(mesh)
assets = wizard.generate_assets()
print(wizard.status)                      # "Assets generated."
print(assets.rig_data.generated_bones)

processor = BatchRigProcessor(registry)
processor.on_progress.append(lambda p: print(f"{p:.0%}"))
built = processor.run_batch([BatchRigItem(mesh=mesh)], template)
```

`generate_rig_assets(registry, mesh, template, landmarks)` does the work for a
single mesh and returns a `RigAssets` holding the `Skeleton`, `SkeletalMesh`,
`ControlRig` and `GeneratedRigData`. Assets are named after the source mesh
(`Hero_Skeleton`, `Hero_SkelMesh`, `Hero_ControlRig`, `Hero_RigData`) under
`/Game/AngelStudio/Generated`; `_1`, `_2`, … is appended when a package name is
already taken. Each generated bone is placed at the first landmark its
definition uses, or at the identity transform if that landmark was not solved.

A failure in any step raises `RigGenerationError`, whose `stage` names the
step. `RigWizard` records a status message as well (for example
`"Detect landmarks first."`). `BatchRigProcessor.run_batch` logs failures,
skips the item, calls every `on_progress` listener with the fraction done after
each item, and returns the `RigAssets` it built; with no template or no items it
reports `1.0` and returns an empty list.

The skeletal mesh builder samples the first 25 vertices against the bones of
any registered rig data and stores the nearest bone per vertex in
`SkeletalMesh.sample_weights`. If the template's `control_rig_template` is a
`ControlRig`, its data is copied into the new rig; otherwise an empty rig is
created.

## Templates and profiles

`default_humanoid_template()` returns the built-in humanoid template with
thirteen landmarks and fourteen bones. Build your own `RigTemplate` from
`LandmarkDefinition` and `BoneDefinition` entries (using `LandmarkType`,
`DetectionHint` and `BonePlacementMethod`), and describe variants with
`RigProfile`.

## What it does not do

- Meshes are given as vertex lists; no mesh file formats are read or written.
- The `Skeleton` it builds has no bone hierarchy, and the `SkeletalMesh` holds
  no geometry — only the skeleton binding and the sampled weighting.
- The `AssetRegistry` lives in memory; nothing is saved to disk.
- There is no command-line tool or graphical interface.

## Running the tests

```
pip install -e .[test]
pytest
```