"""Custom build hook for Hatchling to generate build info."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface


class CustomBuildHook(BuildHookInterface):
    """Embed the git commit into riko/_build_info.py for `riko --version`."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        target = Path(self.root) / "riko" / "_build_info.py"
        commit = self._run_git(["rev-parse", "HEAD"])
        date = self._run_git(["show", "-s", "--format=%cI", "HEAD"])
        target.write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append("riko/_build_info.py")

    def _run_git(self, args: list[str]) -> str | None:
        try:
            out = subprocess.check_output(["git", *args], cwd=self.root, stderr=subprocess.DEVNULL)
        except (subprocess.CalledProcessError, FileNotFoundError, OSError):
            # A build outside a git checkout just has no commit info
            return None
        return out.decode().strip() or None
