import numpy as np
from ..utils.transforms import normalize

class Camera:
    def __init__(self, position, at, up=(0.0, 1.0, 0.0)):
        self.position = np.asarray(position, dtype=np.float32)
        self.at = np.asarray(at, dtype=np.float32)
        self.direction = normalize(self.at - self.position)
        self.up = np.asarray(up, dtype=np.float32)

    @classmethod
    def from_config(cls, cfg):
        return cls(cfg.position, cfg.at, cfg.up)

    def to_dict(self):
        return {k: getattr(self, k).tolist() for k in ("position", "at", "direction", "up")}

    def __repr__(self):
        return f"Camera(position={self.position.tolist()}, at={self.at.tolist()}, up={self.up.tolist()})"
