from typing import Dict, Optional, Tuple

from ..layout import BodyPart, MODEL_PARTS, dimensions_for
from .mapper import HitResult
from .primitives import Node, Vec3

# Joint names, keyed by the part they drive.
JOINTS: Dict[BodyPart, str] = {
    BodyPart.BODY: "BodyJoint",
    BodyPart.HEAD: "HeadJoint",
    BodyPart.RIGHT_ARM: "RightArmJoint",
    BodyPart.LEFT_ARM: "LeftArmJoint",
    BodyPart.RIGHT_LEG: "RightLegJoint",
    BodyPart.LEFT_LEG: "LeftLegJoint",
}


class ModelRig:
    """
    The classic (4px arm) preview model as a node hierarchy.

    Coordinate System (model space, origin at ground centre):
    X: Left (-X) to Right (+X)
    Y: Down (0) to Up (+Y)
    Z: Back (-Z) to Front (+Z)

    Every part node sits at the centre of its box, so a point transformed
    into part space is directly the centred local coordinate the mapper
    expects.
    """

    def __init__(self):
        self.root = Node("root")
        self.parts: Dict[BodyPart, Node] = {}

        # Hip pivot: bottom of the body.
        body_joint = Node("BodyJoint", parent=self.root)
        body_joint.origin = (0, 12, 0)

        # Neck pivot: top of the body.
        head_joint = Node("HeadJoint", parent=body_joint)
        head_joint.origin = (0, 12, 0)

        # Shoulders: top centre of each arm.
        r_arm_joint = Node("RightArmJoint", parent=body_joint)
        r_arm_joint.origin = (6, 12, 0)
        l_arm_joint = Node("LeftArmJoint", parent=body_joint)
        l_arm_joint.origin = (-6, 12, 0)

        # Hips: top centre of each leg.
        r_leg_joint = Node("RightLegJoint", parent=body_joint)
        r_leg_joint.origin = (2, 0, 0)
        l_leg_joint = Node("LeftLegJoint", parent=body_joint)
        l_leg_joint.origin = (-2, 0, 0)

        self._add_part(BodyPart.BODY, body_joint, (0, 6, 0))
        self._add_part(BodyPart.HEAD, head_joint, (0, 4, 0))
        self._add_part(BodyPart.RIGHT_ARM, r_arm_joint, (0, -6, 0))
        self._add_part(BodyPart.LEFT_ARM, l_arm_joint, (0, -6, 0))
        self._add_part(BodyPart.RIGHT_LEG, r_leg_joint, (0, -6, 0))
        self._add_part(BodyPart.LEFT_LEG, l_leg_joint, (0, -6, 0))

    def _add_part(self, part: BodyPart, joint: Node, centre: Vec3):
        node = Node(part.name.lower(), parent=joint)
        node.origin = centre
        self.parts[part] = node

    def joint(self, part: BodyPart) -> Node:
        return self.root.find(JOINTS[part])

    def set_rotation(self, part: BodyPart, rotation: Vec3):
        """Rotates the joint driving a part (Euler degrees)."""
        self.joint(part).rotation = rotation

    def to_local_hit(self, part: BodyPart, world_point: Vec3, world_normal: Vec3) -> HitResult:
        node = self.parts[part]
        local = node.world_to_local_point(*world_point)
        normal = node.world_to_local_direction(*world_normal)
        return HitResult(part, normal, local)

    def part_at(self, world_point: Vec3, epsilon: float = 0.001) -> Optional[Tuple[BodyPart, Vec3]]:
        """
        Finds the model part whose box contains a world point (surface
        included), returning it with the centred local coordinate.
        """
        for part in MODEL_PARTS:
            w, h, d = dimensions_for(part)
            lx, ly, lz = self.parts[part].world_to_local_point(*world_point)
            if abs(lx) <= w / 2 + epsilon and abs(ly) <= h / 2 + epsilon and abs(lz) <= d / 2 + epsilon:
                return part, (lx, ly, lz)
        return None
