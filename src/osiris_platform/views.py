"""Resolved views over raw manifest tables.

A view applies defaults, derived values and precedence rules to a raw table
and fails with `MissingKeyError` on the first required key that is absent.
Views are rebuilt on every request and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass

from ._core_base import (
    DEFAULT_APPLICATION_PATH,
    DEFAULT_VERSION_CODE,
    DEFAULT_VERSION_NAME,
    MissingKeyError,
)
from .manifest import AndroidConfiguration, RawApplication, RawManifest


def symbolize(value: str) -> str:
    chars = [ch if ch.isascii() and (ch.isalnum() or ch == "_") else "_" for ch in value]
    if not chars or chars[0].isdigit():
        chars.insert(0, "_")
    return "".join(chars)


@dataclass(frozen=True)
class ViewApplication:
    id: str
    id_symbol: str
    name: str
    path: str
    package: str
    package_symbol: str


@dataclass(frozen=True)
class ViewPlatformAndroid:
    namespace: str
    application_id: str
    min_sdk: int
    target_sdk: int
    compile_sdk: int
    ndk_level: int
    version_code: int
    version_name: str
    sdk_path: str


def view_application(application: RawApplication | None) -> ViewApplication:
    if application is None or application.id is None:
        raise MissingKeyError(".id")
    if application.package is None:
        raise MissingKeyError(".package")

    return ViewApplication(
        id=application.id,
        id_symbol=symbolize(application.id),
        name=application.name if application.name is not None else application.id,
        path=application.path if application.path is not None else DEFAULT_APPLICATION_PATH,
        package=application.package,
        package_symbol=symbolize(application.package),
    )


def resolve_sdk_versions(
    min_sdk: int | None,
    target_sdk: int | None,
    compile_sdk: int | None,
) -> tuple[int, int, int]:
    """Resolve `(min, target, compile)` from whichever of them are given.

    Missing values are backfilled along `min <= target <= compile`: a missing
    target follows compile (or min), a missing compile follows target (or
    min), and a missing min follows target (or compile).
    """
    if min_sdk is None and target_sdk is None and compile_sdk is None:
        raise MissingKeyError(".min-sdk")

    if target_sdk is None:
        target_sdk = compile_sdk if compile_sdk is not None else min_sdk
    if compile_sdk is None:
        compile_sdk = target_sdk
    if min_sdk is None:
        min_sdk = target_sdk
    return min_sdk, target_sdk, compile_sdk


def view_platform_android(android: AndroidConfiguration, raw: RawManifest) -> ViewPlatformAndroid:
    # No default for the namespace, it names the generated java packages.
    if android.namespace is None:
        raise MissingKeyError(".namespace")

    application_id = android.application_id
    if application_id is None and raw.application is not None:
        application_id = raw.application.id
    if application_id is None:
        raise MissingKeyError(".application-id")

    min_sdk, target_sdk, compile_sdk = resolve_sdk_versions(
        android.min_sdk,
        android.target_sdk,
        android.compile_sdk,
    )

    if android.ndk_level is None:
        raise MissingKeyError(".ndk-level")
    version_code = android.version_code if android.version_code is not None else DEFAULT_VERSION_CODE
    version_name = android.version_name if android.version_name is not None else DEFAULT_VERSION_NAME
    if android.sdk_path is None:
        raise MissingKeyError(".sdk-path")

    return ViewPlatformAndroid(
        namespace=android.namespace,
        application_id=application_id,
        min_sdk=min_sdk,
        target_sdk=target_sdk,
        compile_sdk=compile_sdk,
        ndk_level=android.ndk_level,
        version_code=version_code,
        version_name=version_name,
        sdk_path=android.sdk_path,
    )
