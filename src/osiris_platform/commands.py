from __future__ import annotations

import argparse
from pathlib import Path

from ._core_base import UnknownPlatformError
from .build import build
from .cargo import CargoMetadata
from .emerge import emerge
from .manifest import Manifest, RawPlatform


def load_manifest(args: argparse.Namespace) -> Manifest:
    return Manifest.parse_path(Path(args.manifest))


def resolve_platform(manifest: Manifest, platform_id: str) -> RawPlatform:
    platform = manifest.platform_by_id(platform_id)
    if platform is None:
        raise UnknownPlatformError(platform_id)
    return platform


def resolve_metadata(manifest: Manifest, target_dir: str | None) -> CargoMetadata:
    if target_dir:
        return CargoMetadata(target_directory=Path(target_dir).absolute())
    view_application = manifest.view_application()
    return CargoMetadata.query(manifest.absolute_path(view_application.path))


def command_emerge(args: argparse.Namespace) -> int:
    manifest = load_manifest(args)
    platform = resolve_platform(manifest, args.platform)

    results = emerge(manifest, platform, path_override=None, update=bool(args.update))
    if not results:
        print(f"[{platform.id}] emerge: no platform configuration, nothing to write")
    for result in results:
        print(f"[{platform.id}] emerge: {result.path}={result.status}")
    return 0


def command_build(args: argparse.Namespace) -> int:
    manifest = load_manifest(args)
    platform = resolve_platform(manifest, args.platform)
    metadata = resolve_metadata(manifest, args.target_dir)

    if not build(manifest, metadata, platform, gradle=args.gradle):
        print(f"[{platform.id}] build: no platform configuration, nothing to build")
    return 0
