import numpy as np

# unit quad in the z=0 plane, centered at the origin
QUAD_VERTICES = np.array([
    [-.5,  .5, 0.0],
    [ .5,  .5, 0.0],
    [-.5, -.5, 0.0],
    [ .5, -.5, 0.0],
], dtype=np.float32)

QUAD_INDICES = np.array([
    (0, 2, 3),
    (3, 1, 0),
], dtype=np.uint32)

QUAD_TEXCOORDS = np.array([
    [0.0, 1.0],
    [1.0, 1.0],
    [0.0, 0.0],
    [1.0, 0.0],
], dtype=np.float32)

for _a in (QUAD_VERTICES, QUAD_INDICES, QUAD_TEXCOORDS):
    _a.setflags(write=False)

def make_checkerboard(dim=8, light=0.8, dark=0.2):
    """
    (dim, dim, 3) float32 gray texels indexed [h, w]:
    light where h + w is even, dark where it is odd.
    """
    H, W = np.indices((dim, dim))
    even = ((H + W) & 1) == 0
    gray = np.where(even, np.float32(light), np.float32(dark)).astype(np.float32)
    return np.repeat(gray[:, :, None], 3, axis=2)

def checkerboard_to_rgb8(tex):
    """Quantize float texels in [0, 1] to uint8 RGB for image export."""
    return (np.clip(tex, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
