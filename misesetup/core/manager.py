#!/usr/bin/env python3

import os
import shutil
import stat
import subprocess
from dataclasses import dataclass
from typing import List, Optional

import requests

from .context import ActionContext
from ..utils.config import DOWNLOAD_HOST, TOOL_NAME
from ..utils.system import get_arch, get_os, mise_dir


@dataclass
class ExecOutput:
    """Captured result of a mise invocation"""

    exit_code: int
    stdout: str
    stderr: str


class MiseManager:
    """Downloads the mise binary and runs it"""

    def __init__(
        self,
        context: ActionContext,
        system_os: Optional[str] = None,
        arch: Optional[str] = None,
    ):
        self.context = context
        self.os = system_os or get_os()
        self.arch = arch or get_arch()

    @property
    def data_dir(self) -> str:
        return mise_dir(self.context.env, self.context.get_state("MISE_DIR"))

    @property
    def bin_dir(self) -> str:
        return os.path.join(self.data_dir, "bin")

    @property
    def binary_path(self) -> str:
        return os.path.join(self.bin_dir, TOOL_NAME)

    def download_url(self, version: Optional[str] = None) -> str:
        """Build the release URL for this platform"""
        if version:
            return (
                f"{DOWNLOAD_HOST}/v{version}/"
                f"{TOOL_NAME}-v{version}-{self.os}-{self.arch}"
            )
        return f"{DOWNLOAD_HOST}/{TOOL_NAME}-latest-{self.os}-{self.arch}"

    def _download(self, url: str, destination: str) -> int:
        """Stream url to destination, returning the number of bytes written"""
        response = requests.get(url, stream=True)
        response.raise_for_status()

        written = 0
        with open(destination, "wb") as f:
            for data in response.iter_content(chunk_size=64 * 1024):
                f.write(data)
                written += len(data)
        return written

    def setup(self, version: Optional[str] = None) -> str:
        """Install mise into the data directory and put it on PATH"""
        title = f"Setup mise@{version}" if version else "Setup mise"
        with self.context.group(title):
            url = self.download_url(version)
            os.makedirs(self.bin_dir, exist_ok=True)

            self.context.info(f"Downloading {url}")
            size = self._download(url, self.binary_path)
            self.context.info(f"Downloaded {size} bytes to {self.binary_path}")

            mode = os.stat(self.binary_path).st_mode
            os.chmod(
                self.binary_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
            )

            self.context.add_path(self.bin_dir)
            self.context.success(f"Added {self.bin_dir} to PATH")
        return self.binary_path

    def _resolve_binary(self) -> str:
        binary = shutil.which(TOOL_NAME, path=self.context.env.get("PATH"))
        if not binary:
            raise FileNotFoundError(f"Unable to locate executable file: {TOOL_NAME}")
        return binary

    def run(self, args: List[str], check: bool = True) -> ExecOutput:
        """
        Run mise with args inside install_dir (the current directory when
        unset), echoing its output to the log.

        Raises RuntimeError on a non-zero exit code unless check is False.
        """
        command = " ".join(args)
        with self.context.group(f"Running {TOOL_NAME} {command}"):
            cwd = self.context.get_input("install_dir") or self.context.cwd
            binary = self._resolve_binary()
            self.context.debug(f"Resolved {TOOL_NAME} to {binary}, cwd {cwd}")
            result = subprocess.run(
                [binary] + args,
                cwd=cwd,
                env=dict(self.context.env),
                capture_output=True,
                text=True,
            )
            if result.stdout:
                self.context.info(result.stdout.rstrip("\n"))
            if result.stderr:
                self.context.info(result.stderr.rstrip("\n"))

        output = ExecOutput(result.returncode, result.stdout, result.stderr)
        if check and output.exit_code != 0:
            raise RuntimeError(
                f"{TOOL_NAME} {command} failed with exit code {output.exit_code}"
                + (f": {output.stderr.strip()}" if output.stderr.strip() else "")
            )
        return output

    def version(self) -> ExecOutput:
        return self.run(["--version"])

    def install(self) -> ExecOutput:
        return self.run(["install"])

    def env(self) -> ExecOutput:
        return self.run(["env", "--json"], check=False)
