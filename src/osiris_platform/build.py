from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Sequence

from . import android as android_templates
from ._core_base import (
    DEFAULT_GRADLE,
    BuildFailedError,
    ExecError,
    ensure_dir,
)
from .cargo import CargoMetadata
from .emerge import check_platform_dir, emerge
from .manifest import Manifest, RawPlatform

BuildRunner = Callable[[Sequence[str], Mapping[str, str]], int]


def run_build_tool(args: Sequence[str], env: Mapping[str, str]) -> int:
    # Output streams are inherited, the build tool talks to the user directly.
    proc = subprocess.run(list(args), env=dict(env))
    return proc.returncode


def osiris_dir(metadata: CargoMetadata, kind: str, platform: RawPlatform) -> Path:
    return metadata.target_directory / "osiris" / kind / platform.id


def find_persistent_platform_dir(manifest: Manifest, platform: RawPlatform) -> Path | None:
    path = manifest.absolute_path(platform.platform_path())
    if not check_platform_dir(path, update=True):
        return None
    return path


def gradle_command(
    gradle: str,
    platform_dir: Path,
    build_dir: Path,
    properties: list[tuple[str, str]],
) -> list[str]:
    # Gradle makes output directories part of the project configuration, so
    # they are redirected explicitly into the build directory.
    command = [
        gradle,
        "build",
        "--no-daemon",
        "--no-scan",
        "--no-watch-fs",
        "--parallel",
        "--quiet",
        "--project-dir",
        str(platform_dir),
        "--project-cache-dir",
        str(build_dir / "gradle-cache"),
        "--project-prop",
        f"osiris.build.dir={build_dir / 'gradle-build'}",
    ]
    for key, value in properties:
        command.extend(["--project-prop", f"{key}={value}"])
    return command


def build(
    manifest: Manifest,
    metadata: CargoMetadata,
    platform: RawPlatform,
    runner: BuildRunner = run_build_tool,
    gradle: str = DEFAULT_GRADLE,
    env: Mapping[str, str] | None = None,
) -> bool:
    """Build `platform`, returning False if there was nothing to build."""
    android = platform.android()
    if android is None:
        return False

    view_application = manifest.view_application()
    view_android = android.view(manifest.raw)

    platform_dir = find_persistent_platform_dir(manifest, platform)
    if platform_dir is None:
        platform_dir = osiris_dir(metadata, "platform", platform)
        ensure_dir(platform_dir)
        emerge(manifest, platform, path_override=platform_dir, update=True)

    build_dir = osiris_dir(metadata, "build", platform)
    ensure_dir(build_dir)

    command = gradle_command(
        gradle,
        platform_dir,
        build_dir,
        android_templates.gradle_project_properties(view_application, view_android),
    )
    build_env = dict(os.environ if env is None else env)
    build_env["ANDROID_HOME"] = view_android.sdk_path

    try:
        returncode = runner(command, build_env)
    except OSError as exc:
        raise ExecError(gradle, exc) from exc
    if returncode != 0:
        raise BuildFailedError(returncode)
    return True
