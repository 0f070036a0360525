"""Small integer helpers."""


def mylog(x: int) -> int:
    """Return ``i`` such that ``2 ** i == x``, for ``0 <= i < 64``."""
    for i in range(64):
        if 1 << i == x:
            return i
    raise ValueError(f"{x} is not a power of two below 2**64")