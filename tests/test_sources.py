"""Every module must compile cleanly, without SyntaxWarning/DeprecationWarning."""

import warnings
from pathlib import Path

import pytest

import vidscribe

PACKAGE_DIR = Path(vidscribe.__file__).parent
MODULES = sorted(PACKAGE_DIR.rglob("*.py"))


@pytest.mark.parametrize("path", MODULES, ids=lambda p: str(p.relative_to(PACKAGE_DIR)))
def test_compiles_without_warnings(path):
    source = path.read_text(encoding="utf-8")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, str(path), "exec")
