"""
FFprobe path resolution and command execution utilities.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)

# Common Windows FFmpeg install locations
_WINDOWS_FFPROBE_PATHS = [
    r"C:\Program Files\ffmpeg\bin\ffprobe.exe",
    r"C:\ffmpeg\bin\ffprobe.exe",
]


def get_ffprobe_path() -> str:
    """Resolve ffprobe executable path. Checks FFPROBE_PATH, PATH, then known locations."""
    override = os.environ.get("FFPROBE_PATH")
    if override:
        return override

    path = shutil.which("ffprobe")
    if path:
        return path

    for candidate in _WINDOWS_FFPROBE_PATHS:
        if os.path.exists(candidate):
            logger.info("Found FFprobe at: %s", candidate)
            return candidate

    return "ffprobe"


def run_ffprobe(args: list[str], *, timeout: int = 30) -> subprocess.CompletedProcess[str]:
    """Run an FFprobe command.

    Raises RuntimeError on a non-zero exit code.
    """
    cmd = [get_ffprobe_path(), *args]
    logger.debug("Running: %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    if result.returncode != 0:
        raise RuntimeError(f"FFprobe failed (rc={result.returncode}): {result.stderr[:500]}")
    return result


def probe_container(video_path: str, *, timeout: int = 30) -> dict:
    """Read container format and stream headers as a dict without decoding frames."""
    result = run_ffprobe([
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        video_path,
    ], timeout=timeout)
    return json.loads(result.stdout or "{}")
