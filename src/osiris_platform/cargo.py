from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from ._core_base import OsirisPlatformError


class CargoMetadataError(OsirisPlatformError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Cannot query cargo metadata: {message}")


class CargoStandaloneError(CargoMetadataError):
    def __init__(self) -> None:
        super().__init__("Not running as cargo sub-command")


class CargoExecError(CargoMetadataError):
    def __init__(self, command: str, error: OSError) -> None:
        self.command = command
        self.error = error
        super().__init__(f"Execution of '{command}' could not commence ({error})")


class CargoFailedError(CargoMetadataError):
    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(f"Cargo failed executing (exit status {returncode})")


class CargoEncodingError(CargoMetadataError):
    def __init__(self, error: UnicodeDecodeError) -> None:
        self.error = error
        super().__init__(f"Cargo returned invalid unicode data ({error})")


class CargoJsonError(CargoMetadataError):
    def __init__(self, error: json.JSONDecodeError) -> None:
        self.error = error
        super().__init__(f"Cargo returned invalid JSON data ({error})")


class CargoDataError(CargoMetadataError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Cargo metadata lacks required field '{key}'")


def parse_metadata(stdout: bytes) -> dict[str, Any]:
    try:
        text = stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CargoEncodingError(exc) from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CargoJsonError(exc) from exc
    if not isinstance(payload, dict):
        raise CargoDataError("target_directory")
    return payload


@dataclass(frozen=True)
class CargoMetadata:
    target_directory: Path

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CargoMetadata:
        target_directory = payload.get("target_directory")
        if not isinstance(target_directory, str) or not target_directory:
            raise CargoDataError("target_directory")
        return cls(target_directory=Path(target_directory))

    @classmethod
    def query(
        cls,
        path: Path,
        env: Mapping[str, str] | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> CargoMetadata:
        # Cargo exports its own binary as CARGO to external sub-commands.
        env = os.environ if env is None else env
        cargo = env.get("CARGO")
        if not cargo:
            raise CargoStandaloneError()

        command = [cargo, "metadata", "--format-version", "1", "--no-deps"]
        try:
            proc = runner(command, cwd=str(path), stdout=subprocess.PIPE)
        except OSError as exc:
            raise CargoExecError(cargo, exc) from exc
        if proc.returncode != 0:
            raise CargoFailedError(proc.returncode)
        return cls.from_payload(parse_metadata(proc.stdout))
