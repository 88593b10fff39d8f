#!/usr/bin/env python3

import os
import json
from typing import Optional

from .context import ActionContext
from .manager import MiseManager
from ..utils.cache import get_cache_dir, hash_files, restore_cache, save_cache
from ..utils.config import (
    CACHE_KEY_PATTERNS,
    DEFAULT_CACHE_KEY_PREFIX,
    MISE_TOML_FILE,
    TOOL_VERSIONS_FILE,
)
from ..utils.system import mise_dir


def write_file(context: ActionContext, path: str, body: str) -> None:
    """Write body verbatim to path, replacing any existing file"""
    with context.group(f"Writing {path}"):
        context.info(f"Body:\n{body}")
        with open(os.path.join(context.cwd, path), "w", encoding="utf-8") as f:
            f.write(body)


def set_tool_versions(context: ActionContext) -> None:
    tool_versions = context.get_input("tool_versions")
    if tool_versions:
        write_file(context, TOOL_VERSIONS_FILE, tool_versions)


def set_mise_toml(context: ActionContext) -> None:
    toml = context.get_input("mise_toml")
    if toml:
        write_file(context, MISE_TOML_FILE, toml)


def cache_key(context: ActionContext, manager: MiseManager) -> str:
    """Build the primary cache key from the prefix, platform and config files"""
    file_hash = hash_files(CACHE_KEY_PATTERNS, context.workspace)
    prefix = context.get_input("cache_key_prefix") or DEFAULT_CACHE_KEY_PREFIX
    return f"{prefix}-{manager.os}-{manager.arch}-{file_hash}"


def restore_mise_cache(context: ActionContext, manager: MiseManager) -> Optional[str]:
    """
    Restore the mise data directory from the cache store.

    The key, directory and save flag are recorded as run state for the
    post-run save step whether or not the restore hits. Returns the
    restored key, or None on a miss.
    """
    with context.group("Restoring mise cache"):
        cache_path = manager.data_dir
        primary_key = cache_key(context, manager)

        context.save_state("CACHE", context.get_boolean_input("cache_save"))
        context.save_state("PRIMARY_KEY", primary_key)
        context.save_state("MISE_DIR", cache_path)

        restored_key = restore_cache(
            [cache_path], primary_key, get_cache_dir(context.env)
        )
        context.set_output("cache-hit", bool(restored_key))

        if not restored_key:
            context.notice(f"mise cache not found for {primary_key}")
            return None

        context.save_state("CACHE_KEY", restored_key)
        context.success(f"mise cache restored from key: {restored_key}")
        return restored_key


def set_env_if_unset(context: ActionContext, name: str, value: str) -> None:
    if not context.env.get(name):
        set_env(context, name, value)


def set_env(context: ActionContext, name: str, value: str) -> None:
    context.info(f"Setting {name}={value}")
    context.export_variable(name, value)


def get_experimental(context: ActionContext) -> bool:
    return context.get_input("experimental") == "true"


def set_env_vars_pre_install(context: ActionContext) -> None:
    """Set the variables mise needs to run unattended"""
    with context.group("Setting env vars for mise"):
        set_env_if_unset(context, "MISE_TRUSTED_CONFIG_PATHS", context.cwd)
        set_env_if_unset(context, "MISE_YES", "1")
        set_env_if_unset(
            context, "MISE_EXPERIMENTAL", "1" if get_experimental(context) else "0"
        )


def set_env_vars(context: ActionContext, manager: MiseManager) -> None:
    """Apply the environment reported by `mise env --json`"""
    env_output = manager.env()

    with context.group("Setting env vars"):
        if env_output.exit_code != 0:
            raise RuntimeError(f"Failed to run mise env: {env_output.stderr}")

        env_vars = json.loads(env_output.stdout)
        if not isinstance(env_vars, dict):
            raise ValueError("mise env --json did not return a JSON object")

        for key, value in env_vars.items():
            if key != "PATH":
                set_env(context, key, str(value))
                continue
            for path_element in str(value).split(os.pathsep):
                if not path_element:
                    continue
                context.info(f"Adding {path_element} to PATH")
                context.add_path(path_element)


def run_action(context: ActionContext, manager: Optional[MiseManager] = None) -> None:
    """Main step: install mise and prepare the job environment"""
    manager = manager or MiseManager(context)
    try:
        set_tool_versions(context)
        set_mise_toml(context)

        if context.get_boolean_input("cache"):
            restore_mise_cache(context, manager)
        else:
            context.set_output("cache-hit", False)

        version = context.get_input("version")
        manager.setup(version)
        set_env_vars_pre_install(context)
        manager.version()
        if context.get_boolean_input("install"):
            manager.install()
        set_env_vars(context, manager)
    except Exception as e:
        context.set_failed(str(e))


def save_mise_cache(context: ActionContext) -> None:
    """Post step: store the mise data directory under the primary key"""
    try:
        if context.get_state("CACHE") != "true":
            context.info("Skipping saving cache")
            return

        primary_key = context.get_state("PRIMARY_KEY")
        restored_key = context.get_state("CACHE_KEY")
        cache_path = mise_dir(context.env, context.get_state("MISE_DIR"))

        if not primary_key:
            context.warning("Error retrieving key from state.")
            return

        if restored_key == primary_key:
            context.info(
                f"Cache hit occurred on the primary key {primary_key}, not saving cache."
            )
            return

        if not os.path.isdir(cache_path):
            context.warning(
                f"Path Validation Error: {cache_path} does not exist, not saving cache."
            )
            return

        if save_cache([cache_path], primary_key, get_cache_dir(context.env)):
            context.success(f"Cache saved from {cache_path} with key: {primary_key}")
        else:
            context.notice(
                f"Cache entry for {primary_key} already exists, not saving cache."
            )
    except Exception as e:
        context.set_failed(str(e))
