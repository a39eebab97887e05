"""In-memory stand-ins for the file store and preferences collaborators."""

from typing import Any, Dict, List, Optional, Set

from calendar_events.errors import StoreAccessError


class InMemoryFileStore:
    def __init__(self, files: Optional[Dict[str, str]] = None, has_access: bool = True):
        self.files: Dict[str, str] = dict(files or {})
        self.access = has_access
        self.failing_writes: Set[str] = set()
        self.unreadable: Set[str] = set()
        self.writes: List[str] = []
        self.removals: List[str] = []

    def _check(self) -> None:
        if not self.access:
            raise StoreAccessError("No directory access")

    def has_access(self) -> bool:
        return self.access

    def get_root(self) -> Optional[str]:
        return "/memory" if self.access else None

    async def list_keys(self) -> List[str]:
        self._check()
        return sorted(k for k in self.files if k.endswith(".md"))

    async def read(self, key: str) -> Optional[str]:
        self._check()
        if key in self.unreadable:
            raise OSError(f"Permission denied: {key}")
        return self.files.get(key)

    async def write(self, key: str, content: str) -> bool:
        self._check()
        if key in self.failing_writes:
            return False
        self.files[key] = content
        self.writes.append(key)
        return True

    async def remove(self, key: str) -> bool:
        self._check()
        self.removals.append(key)
        return self.files.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        self._check()
        return key in self.files


class InMemoryPreferences:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.values: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
