#!/usr/bin/env python3

import os
import sys
import platform
from typing import Mapping, Optional

# Machine names as reported by the kernel, mapped to the names used in
# mise release assets
ARCH_MAPPING = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armv7",
    "armv7": "armv7",
}


def get_real_home() -> str:
    """Get the real user's home directory even when running with sudo"""
    if "SUDO_USER" in os.environ and os.environ.get("HOME") == "/root":
        real_user = os.environ["SUDO_USER"]
        return os.path.expanduser(f"~{real_user}")
    return os.path.expanduser("~")


def get_os(system_platform: Optional[str] = None) -> str:
    """Return the OS name used in download URLs and cache keys"""
    system_platform = system_platform or sys.platform
    if system_platform == "darwin":
        return "macos"
    return system_platform


def get_arch(machine: Optional[str] = None) -> str:
    """Return the architecture name used in download URLs and cache keys"""
    machine = (machine or platform.machine()).lower()
    return ARCH_MAPPING.get(machine, machine)


def mise_dir(env: Mapping[str, str], state_dir: Optional[str] = None) -> str:
    """
    Locate the mise data directory:
    1. Directory recorded in the run state
    2. MISE_DATA_DIR
    3. $XDG_DATA_HOME/mise
    4. %LOCALAPPDATA%\\mise on Windows
    5. ~/.local/share/mise
    """
    if state_dir:
        return state_dir

    if env.get("MISE_DATA_DIR"):
        return env["MISE_DATA_DIR"]

    if env.get("XDG_DATA_HOME"):
        return os.path.join(env["XDG_DATA_HOME"], "mise")

    if sys.platform == "win32" and env.get("LOCALAPPDATA"):
        return os.path.join(env["LOCALAPPDATA"], "mise")

    return os.path.join(get_real_home(), ".local", "share", "mise")
