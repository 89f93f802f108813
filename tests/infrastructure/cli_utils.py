"""
Utilities for working with CLI in tests.
"""

import json
import os
import re
import subprocess
import sys
from pathlib import Path
from typing import Optional


def run_cli(root: Path, *args: str, stdin: Optional[str] = None) -> subprocess.CompletedProcess:
    """
    Runs stache.cli with specified arguments in the given directory.

    Args:
        root: Working directory for command execution
        *args: Command line arguments for stache.cli
        stdin: Text passed to the process standard input

    Returns:
        CompletedProcess with execution results
    """
    env = os.environ.copy()
    env.pop("STACHE_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "stache.cli", *args],
        cwd=root, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    """
    Parses a JSON string, automatically removing ANSI escape codes.
    """
    clean = re.sub(r'\x1b\[[0-9;]*m', '', s)
    return json.loads(clean)


__all__ = ["run_cli", "jload"]
