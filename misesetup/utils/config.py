#!/usr/bin/env python3

import os
import yaml
from typing import Dict, List, Optional, Union

# Type definitions
ManifestDict = Dict[str, Union[str, Dict[str, Dict[str, Union[str, bool]]]]]

# Default paths
DEFAULT_MANIFEST_PATH = os.path.join(os.path.dirname(__file__), "defaults.yaml")
DEFAULT_CACHE_KEY_PREFIX = "mise-v0"
DOWNLOAD_HOST = "https://mise.jdx.dev"
TOOL_NAME = "mise"
TOOL_VERSIONS_FILE = ".tool-versions"
MISE_TOML_FILE = ".mise.toml"

# Files whose contents make up the cache key
CACHE_KEY_PATTERNS: List[str] = [
    "**/.config/mise/config.toml",
    "**/.mise.*.toml",
    "**/.mise.toml",
    "**/.mise/config.toml",
    "**/.tool-versions",
]

# YAML 1.2 core schema booleans, as accepted by the runner
TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def load_manifest(manifest_path: str = DEFAULT_MANIFEST_PATH) -> ManifestDict:
    """Load the action manifest describing inputs and outputs"""
    try:
        with open(manifest_path, "r", encoding="utf-8") as file:
            manifest = yaml.safe_load(file) or {}

        if "inputs" not in manifest or manifest["inputs"] is None:
            manifest["inputs"] = {}

        return manifest
    except FileNotFoundError:
        raise FileNotFoundError(f"Manifest file not found at: {manifest_path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}")


def input_defaults(manifest: Optional[ManifestDict] = None) -> Dict[str, str]:
    """Map every declared input to its default value"""
    if manifest is None:
        manifest = load_manifest()

    defaults = {}
    for name, details in manifest["inputs"].items():
        default = (details or {}).get("default", "")
        defaults[name] = "" if default is None else str(default)
    return defaults


def input_env_name(name: str) -> str:
    """Environment variable the runner uses to pass an input"""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean input the same way the runner toolkit does"""
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise TypeError(
        f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
        f"Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )
