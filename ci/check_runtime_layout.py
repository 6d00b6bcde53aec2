#!/usr/bin/env python3
"""Validate the webtest runtime layout and PyScript mappings for CI."""

from __future__ import annotations

import re
import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

HARNESS_PAGE = "pages/webtest.html"
REQUIRED_PATHS = [
    HARNESS_PAGE,
    "pyscript.toml",
    "python/runners/webtest_app.py",
    "tests/webtest",
]
# Elements the harness looks up by id at runtime.
REQUIRED_IDS = ("frame", "output")

SCRIPT_TAG_RE = re.compile(r"<script\b[^>]*>", re.IGNORECASE)
ATTR_RE = re.compile(r'([a-zA-Z_:][a-zA-Z0-9_:\-]*)\s*=\s*["\']([^"\']+)["\']')


def rel_to_root(path_str: str) -> Path:
    normalized = path_str.strip()
    if normalized.startswith("http://") or normalized.startswith("https://"):
        return Path("__external__")
    if normalized.startswith("/"):
        normalized = normalized[1:]
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return ROOT / normalized


def collect_script_refs(html_path: Path) -> tuple[list[str], list[str]]:
    py_srcs: list[str] = []
    py_configs: list[str] = []
    content = html_path.read_text(encoding="utf-8")

    for match in SCRIPT_TAG_RE.finditer(content):
        attrs = {k.lower(): v for k, v in ATTR_RE.findall(match.group(0))}
        if attrs.get("type", "").lower() != "py":
            continue

        src = attrs.get("src")
        if src:
            py_srcs.append(src)

        config = attrs.get("config")
        if config:
            py_configs.append(config)

    return py_srcs, py_configs


def missing_element_ids(html_path: Path) -> list[str]:
    content = html_path.read_text(encoding="utf-8")
    return [
        elem_id
        for elem_id in REQUIRED_IDS
        if not re.search(rf'\bid\s*=\s*["\']{elem_id}["\']', content)
    ]


def main() -> int:
    missing: list[str] = []

    for rel in REQUIRED_PATHS:
        if not (ROOT / rel).exists():
            missing.append(rel)

    pyscript_path = ROOT / "pyscript.toml"
    if not pyscript_path.exists():
        print("Missing pyscript.toml")
        return 1

    cfg = tomllib.loads(pyscript_path.read_text(encoding="utf-8"))

    files_map = cfg.get("files", {})
    if not isinstance(files_map, dict):
        print("Invalid pyscript.toml: [files] must be a table")
        return 1

    packages = cfg.get("packages", [])
    if not isinstance(packages, list):
        print("Invalid pyscript.toml: packages must be a list")
        return 1

    missing_mapped_files = 0
    for src in files_map:
        source_path = rel_to_root(str(src))
        if not source_path.exists():
            missing.append(str(src))
            missing_mapped_files += 1

    harness_sources = sorted((ROOT / "python" / "webtest").glob("*.py"))
    mapped = {rel_to_root(str(src)).resolve() for src in files_map}
    unmapped = [p for p in harness_sources if p.resolve() not in mapped]
    for path in unmapped:
        missing.append(f"pyscript.toml [files]: {path.relative_to(ROOT)}")

    html_refs_checked = 0
    html_path = ROOT / HARNESS_PAGE
    if html_path.exists():
        srcs, configs = collect_script_refs(html_path)
        for src in srcs:
            src_path = rel_to_root(src)
            if src_path.name != "__external__" and not src_path.exists():
                missing.append(f"{HARNESS_PAGE}: {src}")
            html_refs_checked += 1

        for cfg_path in configs:
            config_path = rel_to_root(cfg_path)
            if config_path.name != "__external__" and not config_path.exists():
                missing.append(f"{HARNESS_PAGE}: {cfg_path}")

        for elem_id in missing_element_ids(html_path):
            missing.append(f"{HARNESS_PAGE}: #{elem_id}")

    if missing:
        print("Runtime layout check failed. Missing paths:")
        for path in sorted(set(missing)):
            print(f"- {path}")
        return 1

    print("Runtime layout check passed")
    print(f"Mapped files checked: {len(files_map)}")
    print(f"Harness modules mapped: {len(harness_sources)}")
    print(f"PyScript script refs checked: {html_refs_checked}")
    print(f"Packages requested: {', '.join(str(p) for p in packages) or '<none>'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
