from __future__ import annotations

import os
from pathlib import Path

TOOL_NAME = "osiris-platform"
TOOL_VERSION = "0.1.0"
MANIFEST_VERSION = 1
DEFAULT_MANIFEST_PATH = "./osiris-platform.toml"
DEFAULT_APPLICATION_PATH = "."
DEFAULT_VERSION_CODE = 1
DEFAULT_VERSION_NAME = "0.1.0"
DEFAULT_GRADLE = "gradle"
GENERATED_MARKER = f"Generated by {TOOL_NAME}"


class OsirisPlatformError(Exception):
    pass


class ManifestParseError(OsirisPlatformError):
    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        self.detail = message
        if path is not None:
            super().__init__(f"Cannot parse platform manifest '{path}': {message}")
        else:
            super().__init__(f"Cannot parse platform manifest: {message}")


class ManifestValidationError(OsirisPlatformError):
    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid platform manifest: '{key}' {reason}")


class MissingKeyError(OsirisPlatformError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Manifest configuration missing '{key}'")


class UnknownPlatformError(OsirisPlatformError):
    def __init__(self, platform_id: str) -> None:
        self.platform_id = platform_id
        super().__init__(f"No platform with ID '{platform_id}'")


class PlatformAlreadyPresentError(OsirisPlatformError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Platform code already present at '{path}'")


class PlatformDirectoryError(OsirisPlatformError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Failed to access platform directory '{path}'")


class DirectoryCreationError(OsirisPlatformError):
    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Failed to create directory '{path}' ({error})")


class FileUpdateError(OsirisPlatformError):
    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Failed to update '{path}' ({error})")


class FileRemovalError(OsirisPlatformError):
    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Failed to remove '{path}' ({error})")


class ExecError(OsirisPlatformError):
    def __init__(self, command: str, error: OSError) -> None:
        self.command = command
        self.error = error
        super().__init__(f"Failed to invoke '{command}' ({error})")


class BuildFailedError(OsirisPlatformError):
    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(f"Platform build failed (exit status {returncode})")


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(path, exc) from exc


def update_file(path: Path, content: str) -> str:
    # Rewrites only on change so mtimes survive no-op updates; always fsyncs.
    existed = path.exists()
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o666)
        with os.fdopen(fd, "r+", encoding="utf-8", newline="") as handle:
            old_content = handle.read()
            changed = old_content != content
            if changed:
                handle.seek(0)
                handle.truncate()
                handle.write(content)
                handle.flush()
            os.fsync(handle.fileno())
    except UnicodeDecodeError as exc:
        raise FileUpdateError(path, OSError(f"existing content is not valid UTF-8: {exc}")) from exc
    except OSError as exc:
        raise FileUpdateError(path, exc) from exc

    if not existed:
        return "created"
    return "updated" if changed else "unchanged"


def unlink_file(path: Path) -> str:
    try:
        path.unlink()
    except FileNotFoundError:
        return "absent"
    except OSError as exc:
        raise FileRemovalError(path, exc) from exc
    return "removed"
