from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path

RDIST_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def _source_files(base: Path) -> list[Path]:
    return [
        p
        for p in sorted(base.rglob("*.py"))
        if "__pycache__" not in p.parts and p.relative_to(RDIST_ROOT).parts[0] != "test"
    ]


def _imports(path: Path) -> list[ImportRef]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    refs: list[ImportRef] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            refs.extend(ImportRef(alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            refs.append(ImportRef(node.module, node.lineno))
    return refs


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _offenders(package: str, forbidden: tuple[str, ...]) -> list[str]:
    out: list[str] = []
    for file_path in _source_files(RDIST_ROOT / package):
        rel = file_path.relative_to(RDIST_ROOT)
        for item in _imports(file_path):
            if any(_matches(item.module, f) for f in forbidden):
                out.append(f"{rel}:{item.line}: forbidden import '{item.module}'")
    return out


def test_bundle_is_independent_of_transport_and_presentation() -> None:
    offenders = _offenders("bundle", ("rdist.sdk", "rdist.cli", "rdist.output", "rich", "typer"))
    assert not offenders, "bundle layering violations:\n" + "\n".join(offenders)


def test_sdk_does_not_import_cli() -> None:
    offenders = _offenders("sdk", ("rdist.cli", "typer"))
    assert not offenders, "sdk -> cli dependency violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited_to_console() -> None:
    offenders: list[str] = []
    for file_path in _source_files(RDIST_ROOT):
        rel = file_path.relative_to(RDIST_ROOT).as_posix()
        if rel == "output/console.py":
            continue
        for item in _imports(file_path):
            if _matches(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")
    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)
