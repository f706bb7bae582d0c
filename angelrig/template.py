"""Rig templates: landmark kinds, bone definitions and the default humanoid layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class _DisplayEnum(Enum):
    """Enum whose members carry an ordinal value and a human-readable name."""

    def __new__(cls, value: int, display_name: str):
        member = object.__new__(cls)
        member._value_ = value
        member.display_name = display_name
        return member


class LandmarkType(_DisplayEnum):
    """Anatomical landmark kinds a solver may locate."""

    UNKNOWN = (0, "Unknown")
    PELVIS = (1, "Pelvis Center")
    SPINE_START = (2, "Spine Start")
    SPINE_END = (3, "Spine End")
    NECK_BASE = (4, "Neck Base")
    HEAD_CENTER = (5, "Head Center")
    SHOULDER_L = (6, "Left Shoulder")
    SHOULDER_R = (7, "Right Shoulder")
    ELBOW_L = (8, "Left Elbow")
    ELBOW_R = (9, "Right Elbow")
    WRIST_L = (10, "Left Wrist")
    WRIST_R = (11, "Right Wrist")
    HIP_L = (12, "Left Hip")
    HIP_R = (13, "Right Hip")
    KNEE_L = (14, "Left Knee")
    KNEE_R = (15, "Right Knee")
    ANKLE_L = (16, "Left Ankle")
    ANKLE_R = (17, "Right Ankle")
    WING_ROOT_L = (18, "Left Wing Root")
    WING_ROOT_R = (19, "Right Wing Root")
    TAIL_BASE = (20, "Tail Base")


class DetectionHint(_DisplayEnum):
    """Hint about where on the mesh a landmark should be searched for."""

    NONE = (0, "None")
    CENTER_MASS = (1, "Center Mass")
    UPPER_BODY = (2, "Upper Body")
    LOWER_BODY = (3, "Lower Body")
    EXTREMITY = (4, "Extremity")
    SYMMETRIC_PAIR = (5, "Symmetric Pair")


class BonePlacementMethod(_DisplayEnum):
    """How a bone is positioned relative to its landmarks."""

    AT_LANDMARK = (0, "At Landmark")
    BETWEEN_LANDMARKS = (1, "Between Landmarks")
    INTERPOLATED_CHAIN = (2, "Interpolated Chain")


@dataclass
class LandmarkDefinition:
    """A named landmark a template expects to be solved."""

    name: Optional[str] = None
    type: LandmarkType = LandmarkType.UNKNOWN
    detection_hint: DetectionHint = DetectionHint.NONE


@dataclass
class BoneDefinition:
    """A bone in a template, its parent and the landmarks that place it."""

    bone_name: Optional[str] = None
    parent_bone_name: Optional[str] = None
    landmarks_used: list[str] = field(default_factory=list)
    placement_method: BonePlacementMethod = BonePlacementMethod.AT_LANDMARK
    chain_segments: int = 1

    def __post_init__(self) -> None:
        if self.chain_segments < 1:
            raise ValueError(
                f"chain_segments must be at least 1, got {self.chain_segments}"
            )


@dataclass
class RigTemplate:
    """Describes the bones, landmarks and control rig used to rig a mesh."""

    template_name: Optional[str] = None
    landmark_definitions: list[LandmarkDefinition] = field(default_factory=list)
    bone_definitions: list[BoneDefinition] = field(default_factory=list)
    control_rig_template: Any = None
    default_spine_segments: int = 3
    default_tail_segments: int = 0


@dataclass
class RigProfile:
    """Per-creature overrides applied on top of a base template."""

    base_template: Optional[RigTemplate] = None
    spine_segments_override: int = -1
    tail_segments_override: int = -1
    has_wings: bool = False
    is_quadruped: bool = False


HUMANOID_TEMPLATE_NAME = "HumanoidDefaultTemplate"

_HUMANOID_LANDMARKS = (
    ("PelvisCenter", LandmarkType.PELVIS, DetectionHint.CENTER_MASS),
    ("SpineStart", LandmarkType.SPINE_START, DetectionHint.UPPER_BODY),
    ("SpineEnd", LandmarkType.SPINE_END, DetectionHint.UPPER_BODY),
    ("NeckBase", LandmarkType.NECK_BASE, DetectionHint.UPPER_BODY),
    ("HeadCenter", LandmarkType.HEAD_CENTER, DetectionHint.UPPER_BODY),
    ("ShoulderL", LandmarkType.SHOULDER_L, DetectionHint.SYMMETRIC_PAIR),
    ("ShoulderR", LandmarkType.SHOULDER_R, DetectionHint.SYMMETRIC_PAIR),
    ("HipL", LandmarkType.HIP_L, DetectionHint.SYMMETRIC_PAIR),
    ("HipR", LandmarkType.HIP_R, DetectionHint.SYMMETRIC_PAIR),
    ("KneeL", LandmarkType.KNEE_L, DetectionHint.LOWER_BODY),
    ("KneeR", LandmarkType.KNEE_R, DetectionHint.LOWER_BODY),
    ("AnkleL", LandmarkType.ANKLE_L, DetectionHint.LOWER_BODY),
    ("AnkleR", LandmarkType.ANKLE_R, DetectionHint.LOWER_BODY),
)

_HUMANOID_BONES = (
    ("root", None, "PelvisCenter"),
    ("pelvis", "root", "PelvisCenter"),
    ("spine_01", "pelvis", "SpineStart"),
    ("spine_02", "spine_01", "SpineEnd"),
    ("neck", "spine_02", "NeckBase"),
    ("head", "neck", "HeadCenter"),
    ("clavicle_l", "spine_02", "ShoulderL"),
    ("clavicle_r", "spine_02", "ShoulderR"),
    ("thigh_l", "pelvis", "HipL"),
    ("thigh_r", "pelvis", "HipR"),
    ("calf_l", "thigh_l", "KneeL"),
    ("calf_r", "thigh_r", "KneeR"),
    ("foot_l", "calf_l", "AnkleL"),
    ("foot_r", "calf_r", "AnkleR"),
)


def default_humanoid_template() -> RigTemplate:
    """Build a fresh copy of the default humanoid rig template."""
    return RigTemplate(
        template_name=HUMANOID_TEMPLATE_NAME,
        landmark_definitions=[
            LandmarkDefinition(name, kind, hint)
            for name, kind, hint in _HUMANOID_LANDMARKS
        ],
        bone_definitions=[
            BoneDefinition(
                bone_name=bone,
                parent_bone_name=parent,
                landmarks_used=[landmark],
                placement_method=BonePlacementMethod.AT_LANDMARK,
                chain_segments=1,
            )
            for bone, parent, landmark in _HUMANOID_BONES
        ],
    )