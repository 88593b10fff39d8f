import os
from pathlib import Path
from typing import Dict

import pytest

from misesetup.core.context import ActionContext
from misesetup.utils.config import input_defaults


def parse_file_commands(path: Path) -> Dict[str, str]:
    """Parse a GITHUB_OUTPUT/GITHUB_STATE/GITHUB_ENV style file"""
    if not path.exists():
        return {}

    lines = path.read_text(encoding="utf-8").splitlines()
    commands = {}
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        end = lines.index(delimiter, i + 1)
        commands[name] = "\n".join(lines[i + 1:end])
        i = end + 1
    return commands


@pytest.fixture
def runner_dir(tmp_path):
    path = tmp_path / "runner"
    path.mkdir()
    return path


@pytest.fixture
def workdir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def env(tmp_path, runner_dir):
    return {
        "PATH": os.pathsep.join(["/usr/local/bin", "/usr/bin"]),
        "GITHUB_OUTPUT": str(runner_dir / "output"),
        "GITHUB_STATE": str(runner_dir / "state"),
        "GITHUB_ENV": str(runner_dir / "env"),
        "GITHUB_PATH": str(runner_dir / "path"),
        "MISE_DATA_DIR": str(tmp_path / "data"),
        "MISE_SETUP_CACHE_DIR": str(tmp_path / "store"),
    }


@pytest.fixture
def context(env, workdir):
    return ActionContext(env=env, cwd=str(workdir), defaults=input_defaults())


@pytest.fixture
def outputs(runner_dir):
    return lambda: parse_file_commands(runner_dir / "output")


@pytest.fixture
def state(runner_dir):
    return lambda: parse_file_commands(runner_dir / "state")


@pytest.fixture
def exported(runner_dir):
    return lambda: parse_file_commands(runner_dir / "env")


@pytest.fixture
def added_paths(runner_dir):
    def read():
        path = runner_dir / "path"
        if not path.exists():
            return []
        return path.read_text(encoding="utf-8").splitlines()

    return read
