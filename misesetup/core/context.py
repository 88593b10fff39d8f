#!/usr/bin/env python3

import os
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, MutableMapping, Optional, Union

from colorama import Fore, Style

from ..utils.config import input_defaults, input_env_name, parse_bool

Value = Union[str, bool, int]


def to_command_value(value: Value) -> str:
    """Render a value the way the runner expects it in file commands"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def escape_data(value: str) -> str:
    """Escape a workflow command message"""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value"""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionContext:
    """
    Everything the action does to its runner goes through this object:
    reading inputs and state, writing outputs, state, exported variables
    and PATH entries, and log output.

    By default it works on the real process environment. Tests pass their
    own mapping and working directory.
    """

    def __init__(
        self,
        env: Optional[MutableMapping[str, str]] = None,
        cwd: Optional[str] = None,
        defaults: Optional[Dict[str, str]] = None,
    ):
        self.env = os.environ if env is None else env
        self.cwd = cwd or os.getcwd()
        self.defaults = input_defaults() if defaults is None else defaults
        self.failed = False
        self.exit_code = 0

    @property
    def workspace(self) -> str:
        """Root directory for globbing configuration files"""
        return self.env.get("GITHUB_WORKSPACE") or self.cwd

    # Inputs and state

    def get_input(self, name: str) -> str:
        """Get an input value, falling back to the manifest default"""
        env_name = input_env_name(name)
        if env_name in self.env:
            return self.env[env_name].strip()
        return self.defaults.get(name, "").strip()

    def get_boolean_input(self, name: str) -> bool:
        return parse_bool(name, self.get_input(name))

    def get_state(self, name: str) -> str:
        return self.env.get(f"STATE_{name}", "")

    # Runner commands

    def _issue_file_command(self, command: str, message: str) -> bool:
        file_path = self.env.get(f"GITHUB_{command}")
        if not file_path:
            return False
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(f"{message}\n")
        return True

    def _key_value_message(self, name: str, value: Value) -> str:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        converted = to_command_value(value)
        if delimiter in name or delimiter in converted:
            raise ValueError(
                f"Unexpected input: name or value contains the delimiter {delimiter}"
            )
        return f"{name}<<{delimiter}\n{converted}\n{delimiter}"

    def _issue_command(self, command: str, message: str, **properties: str) -> None:
        props = ",".join(
            f"{k}={escape_property(v)}" for k, v in properties.items()
        )
        head = f"::{command} {props}" if props else f"::{command}"
        print(f"{head}::{escape_data(message)}")

    def set_output(self, name: str, value: Value) -> None:
        if not self._issue_file_command(
            "OUTPUT", self._key_value_message(name, value)
        ):
            self._issue_command("set-output", to_command_value(value), name=name)

    def save_state(self, name: str, value: Value) -> None:
        if not self._issue_file_command(
            "STATE", self._key_value_message(name, value)
        ):
            self._issue_command("save-state", to_command_value(value), name=name)

    def export_variable(self, name: str, value: Value) -> None:
        """Set a variable for this process and every later step"""
        converted = to_command_value(value)
        self.env[name] = converted
        if not self._issue_file_command(
            "ENV", self._key_value_message(name, converted)
        ):
            self._issue_command("set-env", converted, name=name)

    def add_path(self, path: str) -> None:
        """Prepend a directory to PATH for this process and every later step"""
        if not self._issue_file_command("PATH", path):
            self._issue_command("add-path", path)
        current = self.env.get("PATH", "")
        self.env["PATH"] = f"{path}{os.pathsep}{current}" if current else path

    # Logging

    def info(self, message: str) -> None:
        print(message)

    def success(self, message: str) -> None:
        print(f"{Fore.GREEN}{message}{Style.RESET_ALL}")

    def notice(self, message: str) -> None:
        print(f"{Fore.YELLOW}{message}{Style.RESET_ALL}")

    def debug(self, message: str) -> None:
        self._issue_command("debug", message)

    def warning(self, message: str) -> None:
        self._issue_command("warning", message)

    def error(self, message: str) -> None:
        self._issue_command("error", message)

    def set_failed(self, message: str) -> None:
        """Report the run as failed; the CLI exits with exit_code"""
        self.failed = True
        self.exit_code = 1
        self.error(message)

    def start_group(self, title: str) -> None:
        self._issue_command("group", title)

    def end_group(self) -> None:
        self._issue_command("endgroup", "")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        self.start_group(title)
        try:
            yield
        finally:
            self.end_group()
