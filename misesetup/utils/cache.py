#!/usr/bin/env python3

import os
import hashlib
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .system import get_real_home

# Default paths
CACHE_DIR = os.path.join(get_real_home(), ".cache/mise-setup")
CACHE_DIR_ENV = "MISE_SETUP_CACHE_DIR"
BLOCK_SIZE = 64 * 1024


def get_cache_dir(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the cache store directory, honouring MISE_SETUP_CACHE_DIR"""
    env = os.environ if env is None else env
    return env.get(CACHE_DIR_ENV) or CACHE_DIR


def ensure_cache_dir(cache_dir: str) -> None:
    """Ensure the cache directory exists"""
    os.makedirs(os.path.join(cache_dir, "entries"), exist_ok=True)


def get_entry_path(cache_dir: str, key: str) -> str:
    """Path of the archive stored for a cache key"""
    # Keys are free text, so use a hash of the key as the filename
    key_hash = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return os.path.join(cache_dir, "entries", f"{key_hash}.tar.gz")


def _file_digest(path: Path) -> bytes:
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(BLOCK_SIZE), b""):
            hasher.update(block)
    return hasher.digest()


def find_files(patterns: Iterable[str], root: str) -> List[Path]:
    """Find regular files under root matching any of the glob patterns"""
    root_path = Path(root).resolve()
    matches = set()
    for pattern in patterns:
        for path in root_path.glob(pattern):
            if path.is_file():
                matches.add(path)
    return sorted(matches)


def hash_files(patterns: Iterable[str], root: str) -> str:
    """
    Hash the contents of every file matching the patterns.

    Each file is hashed on its own and the digests are combined in path
    order, so the result does not depend on pattern order or on which
    pattern matched a file. Returns an empty string when nothing matches.
    """
    files = find_files(patterns, root)
    if not files:
        return ""

    result = hashlib.sha256()
    for path in files:
        result.update(_file_digest(path))
    return result.hexdigest()


def restore_cache(paths: List[str], key: str, cache_dir: str) -> Optional[str]:
    """
    Restore the entry stored for key into paths.

    Returns the key that was restored, or None when there is no entry.
    """
    entry_path = get_entry_path(cache_dir, key)
    if not os.path.isfile(entry_path):
        return None

    with tempfile.TemporaryDirectory() as temp_dir:
        with tarfile.open(entry_path, "r:gz") as tar:
            tar.extractall(temp_dir, filter="tar")

        for index, path in enumerate(paths):
            src = os.path.join(temp_dir, str(index))
            if not os.path.isdir(src):
                continue
            os.makedirs(path, exist_ok=True)
            shutil.copytree(src, path, symlinks=True, dirs_exist_ok=True)

    return key


def save_cache(paths: List[str], key: str, cache_dir: str) -> bool:
    """
    Store paths under key.

    Entries are immutable: returns False without writing anything when an
    entry for key already exists.
    """
    ensure_cache_dir(cache_dir)
    entry_path = get_entry_path(cache_dir, key)
    if os.path.exists(entry_path):
        return False

    fd, temp_path = tempfile.mkstemp(
        dir=os.path.dirname(entry_path), suffix=".tmp"
    )
    os.close(fd)
    try:
        with tarfile.open(temp_path, "w:gz") as tar:
            for index, path in enumerate(paths):
                if os.path.isdir(path):
                    tar.add(path, arcname=str(index))
        os.replace(temp_path, entry_path)
    except BaseException:
        os.remove(temp_path)
        raise

    return True

