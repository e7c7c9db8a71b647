"""Per-user local data directory shared by the CLI and the host."""

import os
import sys
from pathlib import Path

from src.config import settings
from src.exceptions import DirectoryUnavailableError


def default_base_dir() -> Path:
    """
    Return the OS-specific per-user local application data location.

    Returns:
        %LOCALAPPDATA% on Windows, ~/Library/Application Support on macOS,
        $XDG_DATA_HOME or ~/.local/share elsewhere
    """
    if os.name == "nt":
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata)
        return Path.home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home)
    return Path.home() / ".local" / "share"


class LocalAppData:
    """
    Directory holding persisted keys and configuration.

    The directory is created on every access if it is missing, so callers
    never have to check for it first.
    """

    def __init__(
        self,
        base_dir: Path | str | None = None,
        app_name: str | None = None,
        directory: Path | str | None = None,
    ) -> None:
        """
        Initialize LocalAppData.

        Args:
            base_dir: Parent directory; the OS default when omitted
            app_name: Name of the application subdirectory
            directory: Exact state directory; overrides base_dir and app_name
        """
        if directory is not None:
            self.directory = Path(directory).expanduser().absolute()
            return
        base = Path(base_dir) if base_dir is not None else default_base_dir()
        self.directory = (
            base.expanduser() / (app_name or settings.app_dir_name)
        ).absolute()

    def get_directory(self) -> Path:
        """
        Return the state directory, creating it and its parents if absent.

        Returns:
            Absolute path of the directory

        Raises:
            DirectoryUnavailableError: If the filesystem refuses creation
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryUnavailableError(
                str(self.directory), exc.strerror or str(exc)
            ) from exc
        return self.directory

    def get_path(self, filename: str) -> Path:
        """
        Build the path of a file inside the state directory.

        Args:
            filename: File name relative to the state directory

        Returns:
            Absolute path of the file (the file itself is not created)
        """
        return self.get_directory() / filename


def default_local_app_data() -> LocalAppData:
    """Build the LocalAppData described by the current settings."""
    if settings.state_dir:
        return LocalAppData(directory=settings.state_dir)
    return LocalAppData()


def get_directory() -> Path:
    """Return the configured state directory, creating it if needed."""
    return default_local_app_data().get_directory()


def get_path(filename: str) -> Path:
    """Return the path of ``filename`` inside the configured state directory."""
    return default_local_app_data().get_path(filename)
