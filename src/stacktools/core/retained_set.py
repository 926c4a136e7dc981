"""Thread-safe product -> version mapping of everything that must survive cleanup."""

import threading


class FrozenRetainedSetError(RuntimeError):
    """Raised when inserting into a RetainedSet after resolution has finished."""


class RetainedSet:
    """Concurrent mapping from product name to the single version to keep.

    Each product key is written at most once; the first writer wins. The only
    mutation is insert_if_absent(), which is atomic with respect to other
    threads. After freeze() the mapping is read-only.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: dict[str, str] = {}
        self._frozen = False

    def insert_if_absent(self, product: str, version: str) -> bool:
        """Insert product -> version unless product is already present.

        Returns:
            True if this call inserted the product, False if it was already owned

        Raises:
            FrozenRetainedSetError: If the set has been frozen
        """
        with self._lock:
            if self._frozen:
                raise FrozenRetainedSetError(
                    f"Cannot insert {product} {version}: retained set is frozen"
                )
            if product in self._versions:
                return False
            self._versions[product] = version
            return True

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        with self._lock:
            return self._frozen

    def get(self, product: str) -> str | None:
        with self._lock:
            return self._versions.get(product)

    def products(self) -> list[str]:
        with self._lock:
            return list(self._versions)

    def items(self) -> list[tuple[str, str]]:
        """Snapshot of (product, version) pairs sorted by product."""
        with self._lock:
            return sorted(self._versions.items())

    def as_dict(self) -> dict[str, str]:
        with self._lock:
            return dict(self._versions)

    def __contains__(self, product: object) -> bool:
        with self._lock:
            return product in self._versions

    def __len__(self) -> int:
        with self._lock:
            return len(self._versions)
