import ast
import unittest
from pathlib import Path


def _iter_py_files(root: Path) -> list[Path]:
    return sorted(
        p
        for p in root.rglob("*.py")
        if "__pycache__" not in p.parts
    )


def _find_forbidden_imports(py_file: Path, forbidden_roots: tuple[str, ...]) -> list[str]:
    """
    Static guardrail: enforce layer boundaries without importing the modules.

    AST parsing (not regex) avoids false positives from comments/strings.
    """
    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except SyntaxError as exc:
        return [f"SyntaxError while parsing {py_file}: {exc}"]

    offenders: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.name.split(".")[0] in forbidden_roots:
                    offenders.append(f"import {alias.name}")
        elif isinstance(node, ast.ImportFrom):
            if node.module is None:
                continue
            if node.module.split(".")[0] in forbidden_roots:
                offenders.append(f"from {node.module} import ...")
    return offenders


class TestLayerBoundaryImports(unittest.TestCase):
    def _assert_layer_clean(self, layer: str, forbidden: tuple[str, ...]) -> None:
        repo_root = Path(__file__).resolve().parents[1]
        layer_root = repo_root / "backend" / layer
        self.assertTrue(layer_root.exists(), msg=f"Expected layer dir: {layer_root}")

        violations: list[str] = []
        for py_file in _iter_py_files(layer_root):
            offenders = _find_forbidden_imports(py_file, forbidden)
            if offenders:
                violations.append(f"{py_file.relative_to(repo_root)}: {offenders}")

        self.assertFalse(
            violations,
            msg=f"`backend/{layer}` must not import {forbidden}.\n" + "\n".join(violations),
        )

    def test_domain_is_pure(self) -> None:
        self._assert_layer_clean("domain", ("infrastructure", "server", "application", "config"))

    def test_application_does_not_import_server_or_config(self) -> None:
        self._assert_layer_clean("application", ("server", "config"))

    def test_infrastructure_does_not_import_server_or_config(self) -> None:
        # Infra receives DSNs/pool sizes from the wiring layer instead of reading service config.
        self._assert_layer_clean("infrastructure", ("server", "config"))
