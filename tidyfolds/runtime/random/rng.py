from __future__ import annotations
import hashlib
from typing import Optional


class RngManager:
    """
    Single source of truth for randomness in a resampling run.
    Creates named, order-independent child seeds by hashing, e.g.
    child_seed("vfold/repeat0") for the first repeat.
    No global RNG state is read or written.
    """
    def __init__(self, seed: Optional[int]):
        # Keep a small, well-defined representation
        self._root = 0 if seed is None else int(seed) & 0xFFFFFFFF

    @property
    def root(self) -> int:
        return self._root

    def _mix(self, name: str) -> int:
        # Stable across runs and Python versions
        h = hashlib.sha256(f"{self._root}:{name}".encode("utf-8")).digest()
        # 32 bits: sklearn random_state accepts ints in [0, 2**32)
        return int.from_bytes(h[:4], "little", signed=False)

    def child_seed(self, name: str) -> int:
        return self._mix(name)

    def repeat_seeds(self, n: int, base_name: str = "vfold/repeat") -> list[int]:
        return [self.child_seed(f"{base_name}{i}") for i in range(n)]


def resolve_seed(seed: Optional[int], *, fallback: int = 0) -> int:
    """Return a deterministic seed.

    Seeds are optional throughout the API; when absent we still want
    repeatable behavior, hence a stable fallback.
    """

    return int(seed) if seed is not None else int(fallback)
