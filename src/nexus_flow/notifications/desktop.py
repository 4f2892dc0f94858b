"""Best-effort native desktop notifications."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)


def _escape_applescript(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class DesktopNotifier:
    """Shows notifications through osascript (macOS) or notify-send (Linux).

    ``send`` raises on delivery failure; callers decide whether to care.
    """

    def __init__(self, enabled: bool = True, app_name: str = "Nexus Flow"):
        self.enabled = enabled
        self.app_name = app_name

    @property
    def available(self) -> bool:
        if sys.platform == "darwin":
            return shutil.which("osascript") is not None
        return shutil.which("notify-send") is not None

    def _command(self, title: str, message: str) -> list[str]:
        if sys.platform == "darwin":
            script = (
                f'display notification "{_escape_applescript(message)}" '
                f'with title "{_escape_applescript(self.app_name)}" '
                f'subtitle "{_escape_applescript(title)}"'
            )
            return ["osascript", "-e", script]
        return ["notify-send", "--app-name", self.app_name, title, message]

    def send(self, title: str, message: str) -> bool:
        """Deliver one notification. Returns False when disabled or unsupported."""
        if not self.enabled or not self.available:
            return False

        result = subprocess.run(
            self._command(title, message),
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            raise RuntimeError(f"Notifier exited with {result.returncode}: {result.stderr.strip()}")
        return True
