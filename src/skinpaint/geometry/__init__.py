from .mapper import HitResult, select_face, map_hit_to_uv, map_hit_to_pixel, map_hit
from .rig import ModelRig
