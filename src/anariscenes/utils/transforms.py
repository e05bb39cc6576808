import numpy as np

def translate(t):
    T = np.eye(4, dtype=np.float32); T[:3,3] = np.asarray(t, dtype=np.float32); return T

def rotate(angle_rad, axis):
    """4x4 rotation of angle_rad about axis (right-handed, axis need not be unit)."""
    a = np.asarray(axis, dtype=np.float32)
    a = a / np.linalg.norm(a)
    c = np.float32(np.cos(angle_rad)); s = np.float32(np.sin(angle_rad))
    K = np.array([[0,-a[2],a[1]],[a[2],0,-a[0]],[-a[1],a[0],0]], dtype=np.float32)
    R = c*np.eye(3, dtype=np.float32) + (1-c)*np.outer(a, a) + s*K
    T = np.eye(4, dtype=np.float32); T[:3,:3] = R
    return T

def to_mat4x3(T):
    """
    Pack the affine part of a 4x4 matrix column-major, as (4, 3):
    rows 0..2 are the basis columns, row 3 the translation.
    """
    return np.ascontiguousarray(T[:3,:4].T, dtype=np.float32)

def from_mat4x3(M):
    T = np.eye(4, dtype=np.float32); T[:3,:4] = np.asarray(M, dtype=np.float32).T; return T

def transform_pts(M, V):
    """Apply a packed (4, 3) affine to (N, 3) points."""
    M = np.asarray(M, dtype=np.float32)
    return (np.asarray(V, dtype=np.float32) @ M[:3] + M[3][None,:]).astype(np.float32)

def normalize(v):
    v = np.asarray(v, dtype=np.float32)
    return (v / np.linalg.norm(v)).astype(np.float32)
