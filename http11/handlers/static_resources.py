"""Static resource providers resolving logical paths to bytes."""

from pathlib import Path
from typing import Mapping, Protocol

from http11.domain.request_context import get_logger

RESOURCE_LOGGER = get_logger("handlers.resources")


class ResourceNotFound(Exception):
    """Raised when a logical path has no backing resource."""


class StaticResources(Protocol):
    """Anything that can turn ``/index.html`` into bytes."""

    def load(self, path: str) -> bytes: ...


class DirectoryResources:
    """Serve resources from a directory, refusing paths that escape it."""

    def __init__(self, directory: str) -> None:
        self._root = Path(directory).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a logical path onto a file inside the root directory."""
        if "\x00" in path:
            raise ResourceNotFound(path)
        relative_part = path.lstrip("/")
        if not relative_part or ".." in Path(relative_part).parts:
            raise ResourceNotFound(path)

        target = (self._root / relative_part).resolve()
        if self._root not in target.parents:
            raise ResourceNotFound(path)
        return target

    def load(self, path: str) -> bytes:
        target = self.resolve(path)
        if not target.is_file():
            raise ResourceNotFound(path)
        payload = target.read_bytes()
        RESOURCE_LOGGER.debug(
            "Static resource loaded",
            extra={
                "event": "resource_loaded",
                "route": path,
                "bytes_out": len(payload),
            },
        )
        return payload


class MemoryResources:
    """Serve resources from an in-memory mapping of path to bytes."""

    def __init__(self, resources: Mapping[str, bytes]) -> None:
        self._resources = dict(resources)

    def load(self, path: str) -> bytes:
        try:
            return self._resources[path]
        except KeyError as exc:
            raise ResourceNotFound(path) from exc
