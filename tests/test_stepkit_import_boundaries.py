import ast
import subprocess
import sys
import textwrap
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
FORBIDDEN = ("repoconfig",)


def _imported_modules(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    names: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module is not None:
            names.append(node.module)
    return names


def test_stepkit_source_does_not_import_repoconfig():
    offenders = [
        f"{path.relative_to(REPO_ROOT)}: {name}"
        for path in sorted((REPO_ROOT / "stepkit").rglob("*.py"))
        for name in _imported_modules(path)
        if name.startswith(FORBIDDEN)
    ]
    assert offenders == []


def test_importing_stepkit_does_not_load_repoconfig():
    code = textwrap.dedent(
        f"""\
        import importlib
        import pkgutil
        import sys

        import stepkit

        for module in pkgutil.walk_packages(stepkit.__path__, "stepkit."):
            importlib.import_module(module.name)

        loaded = sorted(name for name in sys.modules if name.startswith({FORBIDDEN!r}))
        if loaded:
            raise SystemExit(f"stepkit pulled in: {{loaded}}")
        """
    )

    proc = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        cwd=str(REPO_ROOT),
    )
    assert proc.returncode == 0, proc.stderr or proc.stdout
