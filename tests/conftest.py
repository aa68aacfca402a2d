from pathlib import Path

import pytest
from hypothesis import settings

from paranoid_space.config import ENV_MAX_DEPTH

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("paranoid-space-tests", database=None)
settings.load_profile("paranoid-space-tests")


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test in an empty directory without environment overrides."""
    monkeypatch.delenv(ENV_MAX_DEPTH, raising=False)
    monkeypatch.chdir(tmp_path)


def write_file(path: Path, content: str) -> Path:
    """Write UTF-8 content without newline translation."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path
