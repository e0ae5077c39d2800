"""Persistent platform integration, written through `update_file()`."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import android as android_templates
from ._core_base import (
    PlatformAlreadyPresentError,
    PlatformDirectoryError,
    ensure_dir,
    unlink_file,
    update_file,
)
from .manifest import AndroidConfiguration, Manifest, RawPlatform

# Kotlin-DSL twins of the generated Groovy scripts. Gradle must not see both.
OBSOLETE_ANDROID_FILES = (
    "settings.gradle.kts",
    "build.gradle.kts",
)


@dataclass(frozen=True)
class ArtifactResult:
    path: Path
    status: str


def _update(results: list[ArtifactResult], path: Path, content: str) -> None:
    results.append(ArtifactResult(path=path, status=update_file(path, content)))


def _unlink(results: list[ArtifactResult], path: Path) -> None:
    results.append(ArtifactResult(path=path, status=unlink_file(path)))


def resolve_platform_dir(manifest: Manifest, platform: RawPlatform, path_override: Path | None) -> Path:
    if path_override is not None:
        return Path(path_override)
    return manifest.absolute_path(platform.platform_path())


def check_platform_dir(path: Path, update: bool) -> bool:
    """Return whether `path` exists, failing if it must not be written to."""
    try:
        is_dir = path.is_dir()
        exists = is_dir or path.exists()
    except OSError as exc:
        raise PlatformDirectoryError(path) from exc
    if not exists:
        return False
    if not is_dir:
        raise PlatformDirectoryError(path)
    if not update:
        raise PlatformAlreadyPresentError(path)
    return True


def emerge_android(
    manifest: Manifest,
    android: AndroidConfiguration,
    path: Path,
    exists: bool,
) -> list[ArtifactResult]:
    # Resolve before touching the file system, missing keys must not leave
    # half-created directories behind.
    view_application = manifest.view_application()
    view_android = android.view(manifest.raw)

    if not exists:
        ensure_dir(path)

    results: list[ArtifactResult] = []
    _update(results, path / "gradle.properties", android_templates.render_gradle_properties())
    _update(results, path / "local.properties", android_templates.render_local_properties(view_android))
    _update(results, path / "settings.gradle", android_templates.render_settings_gradle(view_application))
    _update(results, path / "build.gradle", android_templates.render_build_gradle(view_android))
    for name in OBSOLETE_ANDROID_FILES:
        _unlink(results, path / name)

    main_dir = path / "src" / "main"
    ensure_dir(main_dir)
    _update(results, main_dir / "AndroidManifest.xml", android_templates.render_android_manifest())

    layout_dir = main_dir / "res" / "layout"
    ensure_dir(layout_dir)
    _update(results, layout_dir / "activity_main.xml", android_templates.render_activity_main_layout())

    values_dir = main_dir / "res" / "values"
    ensure_dir(values_dir)
    _update(results, values_dir / "strings.xml", android_templates.render_strings(view_application))
    _update(results, values_dir / "themes.xml", android_templates.render_themes())

    java_dir = main_dir / "java" / android_templates.namespace_path(view_android.namespace)
    ensure_dir(java_dir)
    _update(results, java_dir / "MainActivity.java", android_templates.render_main_activity(view_android))

    return results


def emerge(
    manifest: Manifest,
    platform: RawPlatform,
    path_override: Path | None = None,
    update: bool = False,
) -> list[ArtifactResult]:
    """Emerge `platform`, refusing an existing directory unless `update` is set."""
    path = resolve_platform_dir(manifest, platform, path_override)
    exists = check_platform_dir(path, update)

    android = platform.android()
    if android is not None:
        return emerge_android(manifest, android, path, exists)

    if not exists:
        ensure_dir(path)
    return []
