import math
from typing import List, Tuple, Optional

Vec3 = Tuple[float, float, float]

# Row-major 4x4 affine matrix, flattened to 16 floats.
Matrix = Tuple[float, ...]


def multiply_matrix(a: Matrix, b: Matrix) -> Matrix:
    return tuple(
        sum(a[row * 4 + k] * b[k * 4 + col] for k in range(4))
        for row in range(4)
        for col in range(4)
    )


def translation_matrix(x: float, y: float, z: float) -> Matrix:
    return (
        1.0, 0.0, 0.0, x,
        0.0, 1.0, 0.0, y,
        0.0, 0.0, 1.0, z,
        0.0, 0.0, 0.0, 1.0
    )


def _axis_rotation(axis: str, degrees: float) -> Matrix:
    c, s = math.cos(math.radians(degrees)), math.sin(math.radians(degrees))
    if axis == "x":
        rows = ((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c))
    elif axis == "y":
        rows = ((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c))
    else:
        rows = ((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0))
    return rows[0] + (0.0,) + rows[1] + (0.0,) + rows[2] + (0.0,) + (0.0, 0.0, 0.0, 1.0)


def rotation_matrix(rx: float, ry: float, rz: float) -> Matrix:
    """Euler angles in degrees, applied X then Y then Z (M = Rz * Ry * Rx)."""
    return multiply_matrix(
        _axis_rotation("z", rz),
        multiply_matrix(_axis_rotation("y", ry), _axis_rotation("x", rx)),
    )


def invert_affine_matrix(m: Matrix) -> Matrix:
    # Rigid transforms only: inv([R | T]) = [R^T | -R^T * T]
    rt = [[m[col * 4 + row] for col in range(3)] for row in range(3)]
    t = (m[3], m[7], m[11])
    inv_t = [-sum(rt[row][k] * t[k] for k in range(3)) for row in range(3)]
    return (
        rt[0][0], rt[0][1], rt[0][2], inv_t[0],
        rt[1][0], rt[1][1], rt[1][2], inv_t[1],
        rt[2][0], rt[2][1], rt[2][2], inv_t[2],
        0.0, 0.0, 0.0, 1.0
    )


def transform_point(m: Matrix, x: float, y: float, z: float) -> Vec3:
    return tuple(m[row * 4] * x + m[row * 4 + 1] * y + m[row * 4 + 2] * z + m[row * 4 + 3] for row in range(3))


def transform_direction(m: Matrix, x: float, y: float, z: float) -> Vec3:
    # Translation does not apply to normals.
    return tuple(m[row * 4] * x + m[row * 4 + 1] * y + m[row * 4 + 2] * z for row in range(3))


class Node:
    def __init__(self, name: str, parent: Optional['Node'] = None):
        self.name = name
        self.parent = parent
        self.children: List['Node'] = []

        self.origin: Vec3 = (0.0, 0.0, 0.0)  # Pivot relative to parent
        self.rotation: Vec3 = (0.0, 0.0, 0.0)  # Euler degrees (X, Y, Z)

        if parent:
            parent.add_child(self)

    def add_child(self, child: 'Node'):
        if child not in self.children:
            self.children.append(child)
            child.parent = self

    def find(self, name: str) -> Optional['Node']:
        if self.name == name:
            return self
        for child in self.children:
            found = child.find(name)
            if found:
                return found
        return None

    def get_local_matrix(self) -> Matrix:
        # T * R
        return multiply_matrix(translation_matrix(*self.origin), rotation_matrix(*self.rotation))

    def get_world_matrix(self) -> Matrix:
        local = self.get_local_matrix()
        if self.parent:
            return multiply_matrix(self.parent.get_world_matrix(), local)
        return local

    def world_to_local_point(self, wx: float, wy: float, wz: float) -> Vec3:
        return transform_point(invert_affine_matrix(self.get_world_matrix()), wx, wy, wz)

    def world_to_local_direction(self, dx: float, dy: float, dz: float) -> Vec3:
        return transform_direction(invert_affine_matrix(self.get_world_matrix()), dx, dy, dz)
