"""
Parameter ownership helpers.

transfer: the parent takes the only remaining reference, the caller's handle is dropped.
borrow:   the parent takes its own reference, the caller keeps theirs.
"""
from contextlib import contextmanager

def transfer(device, obj, name, value):
    device.set_parameter(obj, name, value)
    device.release(value)

def borrow(device, obj, name, value):
    device.set_parameter(obj, name, value)

@contextmanager
def scoped(device, *handles):
    """Release handles when the block exits."""
    try:
        yield handles
    finally:
        for h in handles:
            device.release(h)
