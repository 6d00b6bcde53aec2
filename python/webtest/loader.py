"""
loader.py - load a test script into a namespace of harness bindings.

Loading is its own phase: a loader only reports whether the script could be
fetched and compiled, and whether its top-level code raised. Running the tests the script registered is
the harness' job and happens afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

try:
    from pyscript import fetch
except ImportError:  # pragma: no cover - non-browser usage
    fetch = None


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading one script.

    ``ok`` is False when the script could not be read or compiled. A script
    that compiled but raised while running its top-level code still counts as
    loaded: ``ok`` stays True and ``error`` carries the message, so whatever it
    registered before raising still runs.
    """

    ok: bool
    error: Optional[str] = None


class ScriptLoadError(Exception):
    """The script source could not be retrieved."""


class SourceLoader:
    """
    Base loader: read source, compile, execute in the given namespace.

    Subclasses implement ``read_source``. Errors while reading, compiling or
    executing the script are reported through the LoadResult instead of
    being raised.
    """

    async def read_source(self, path: str) -> str:
        raise NotImplementedError

    async def load(self, path: str, namespace: Dict[str, Any]) -> LoadResult:
        try:
            source = await self.read_source(path)
            code = compile(source, path, "exec")
        except Exception as e:
            return LoadResult(ok=False, error=_describe(e))

        namespace.setdefault("__name__", _module_name(path))
        namespace.setdefault("__file__", path)
        try:
            exec(code, namespace)
        except Exception as e:
            return LoadResult(ok=True, error=_describe(e))
        return LoadResult(ok=True)


class FetchLoader(SourceLoader):
    """Fetch the script from the server hosting the harness page."""

    def __init__(self, base_url: str = ""):
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def read_source(self, path: str) -> str:
        if fetch is None:
            raise ScriptLoadError("pyscript fetch is not available outside the browser")
        url = self.url_for(path)
        resp = await fetch(url)
        if not resp.ok:
            raise ScriptLoadError(f"Failed to load {url}: HTTP {resp.status}")
        return await resp.text()


class FileLoader(SourceLoader):
    """Read the script from a local directory (non-browser runs)."""

    def __init__(self, root):
        self.root = Path(root)

    async def read_source(self, path: str) -> str:
        script = self.root / path
        if not script.is_file():
            raise ScriptLoadError(f"Failed to load {path}: no such file")
        return script.read_text(encoding="utf-8")


def _module_name(path: str) -> str:
    return Path(path).with_suffix("").as_posix().replace("/", ".")


def _describe(exc: Exception) -> str:
    if isinstance(exc, ScriptLoadError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"
