"""Page registry: which department owns a given admin URL path."""

import posixpath
from typing import Dict, List, Mapping, Optional
from urllib.parse import unquote

from .departments import DEPARTMENT_PATHS, Department


def _normalize(path: str) -> str:
    """Canonical form of a URL path: decoded, dot segments collapsed, no trailing slash."""
    path = path.split("?", 1)[0].split("#", 1)[0]

    # Decode until stable so "%252e%252e" cannot survive as a literal segment
    decoded = unquote(path)
    while decoded != path:
        path, decoded = decoded, unquote(decoded)

    path = posixpath.normpath("/" + path)
    # normpath keeps a leading "//"
    return "/" + path.lstrip("/")


class PageRegistry:
    """
    Maps URL path prefixes to the department that owns them.

    Resolution uses the longest registered prefix that matches on a path
    segment boundary, so "/admin/editorial/posts" belongs to the department
    registered for "/admin/editorial" but "/admin/editorially" does not.
    """

    def __init__(self, routes: Optional[Mapping[str, Department]] = None):
        self._routes: Dict[str, Department] = {}
        for prefix, department in (routes or {}).items():
            self.register(prefix, department)

    @classmethod
    def default(cls) -> "PageRegistry":
        """Registry built from the department route base paths."""
        return cls({path: department for department, path in DEPARTMENT_PATHS.items()})

    def register(self, prefix: str, department: Department) -> None:
        self._routes[_normalize(prefix)] = Department(department)

    def resolve(self, page_path: str) -> Optional[Department]:
        """Return the owning department, or None if no prefix matches."""
        path = _normalize(page_path)
        best: Optional[str] = None
        for prefix in self._routes:
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                if best is None or len(prefix) > len(best):
                    best = prefix
        return self._routes[best] if best is not None else None

    def pages(self) -> List[str]:
        """All registered path prefixes, sorted."""
        return sorted(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
