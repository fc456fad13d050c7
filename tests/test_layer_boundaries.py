"""Architecture boundary checks between pure, runtime and orchestration layers."""

from __future__ import annotations

import ast
import importlib.util
from pathlib import Path

_PACKAGE = Path(__file__).resolve().parents[1] / "strukscan"

# Pure layers parse and model data; they never reach runtime IO or outer surfaces.
_FORBIDDEN = {
    "domain": ("strukscan.receipt", "strukscan.runtime", "strukscan.application", "strukscan.cli"),
    "receipt": ("strukscan.runtime", "strukscan.application", "strukscan.cli"),
    "runtime": ("strukscan.application", "strukscan.cli"),
}


def _module_name_for_file(path: Path) -> str:
    parts = list(path.relative_to(_PACKAGE.parent).with_suffix("").parts)
    if parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def _imports(path: Path) -> list[str]:
    module_name = _module_name_for_file(path)
    package = module_name if path.name == "__init__.py" else module_name.rsplit(".", 1)[0]
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))

    result: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            result.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level == 0:
                if node.module:
                    result.append(node.module)
                continue
            result.append(importlib.util.resolve_name("." * node.level + (node.module or ""), package))
    return result


def test_layer_import_boundaries() -> None:
    violations: list[str] = []
    for layer, forbidden in _FORBIDDEN.items():
        for path in sorted((_PACKAGE / layer).rglob("*.py")):
            for mod in _imports(path):
                if any(mod == prefix or mod.startswith(f"{prefix}.") for prefix in forbidden):
                    violations.append(f"{path.relative_to(_PACKAGE.parent)}: {mod}")
    assert not violations, "Layer import violations:\n" + "\n".join(violations)
