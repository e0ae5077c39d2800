"""Platform manifest parsing and validation.

The manifest is a TOML document, usually `osiris-platform.toml` next to the
application sources. Parsing happens in two steps: `parse_raw()` decodes the
document into the `Raw*` types and checks nothing but field types, then
`validate()` enforces the semantic rules and yields a `Manifest`.
"""
from __future__ import annotations

import tomllib
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ._core_base import (
    MANIFEST_VERSION,
    ManifestParseError,
    ManifestValidationError,
)

if TYPE_CHECKING:
    from .views import ViewApplication, ViewPlatformAndroid

U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class RawApplication:
    # Only alphanumerics plus `-`, `_`; must never change over the life of the
    # application.
    id: str | None = None
    name: str | None = None
    path: str | None = None
    package: str | None = None

    def view(self) -> ViewApplication:
        from .views import view_application

        return view_application(self)


class PlatformConfiguration:
    kind = ""

    def as_android(self) -> AndroidConfiguration | None:
        return None


@dataclass(frozen=True)
class AndroidConfiguration(PlatformConfiguration):
    # One-to-one mappings of their Android application SDK equivalents.
    application_id: str | None = None
    namespace: str | None = None
    compile_sdk: int | None = None
    min_sdk: int | None = None
    target_sdk: int | None = None
    ndk_level: int | None = None
    version_code: int | None = None
    version_name: str | None = None
    sdk_path: str | None = None

    kind = "android"

    def as_android(self) -> AndroidConfiguration | None:
        return self

    def view(self, raw: RawManifest) -> ViewPlatformAndroid:
        from .views import view_platform_android

        return view_platform_android(self, raw)


@dataclass(frozen=True)
class RawPlatform:
    id: str
    path: str | None = None
    configuration: PlatformConfiguration | None = None

    def android(self) -> AndroidConfiguration | None:
        if self.configuration is None:
            return None
        return self.configuration.as_android()

    def platform_path(self) -> str:
        if self.path is not None:
            return self.path
        return f"./platform/{self.id}"


@dataclass(frozen=True)
class RawManifest:
    version: int
    application: RawApplication | None = None
    platforms: tuple[RawPlatform, ...] = ()

    def platform_by_id(self, platform_id: str) -> RawPlatform | None:
        # Duplicate IDs are accepted; the first entry wins.
        for platform in self.platforms:
            if platform.id == platform_id:
                return platform
        return None


def _type_error(context: str, expected: str, value: Any) -> ManifestParseError:
    return ManifestParseError(f"'{context}' must be {expected}, got {type(value).__name__}")


def _optional_str(table: dict[str, Any], key: str, context: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _type_error(f"{context}.{key}", "a string", value)
    return value


def _optional_u32(table: dict[str, Any], key: str, context: str) -> int | None:
    value = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _type_error(f"{context}.{key}", "an integer", value)
    if value < 0 or value > U32_MAX:
        raise ManifestParseError(f"'{context}.{key}' is out of range: {value}")
    return value


def _optional_table(table: dict[str, Any], key: str, context: str) -> dict[str, Any] | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise _type_error(f"{context}{key}", "a table", value)
    return value


def _parse_application(table: dict[str, Any]) -> RawApplication:
    return RawApplication(
        id=_optional_str(table, "id", "application"),
        name=_optional_str(table, "name", "application"),
        path=_optional_str(table, "path", "application"),
        package=_optional_str(table, "package", "application"),
    )


def _parse_android(table: dict[str, Any], context: str) -> AndroidConfiguration:
    return AndroidConfiguration(
        application_id=_optional_str(table, "application-id", context),
        namespace=_optional_str(table, "namespace", context),
        compile_sdk=_optional_u32(table, "compile-sdk", context),
        min_sdk=_optional_u32(table, "min-sdk", context),
        target_sdk=_optional_u32(table, "target-sdk", context),
        ndk_level=_optional_u32(table, "ndk-level", context),
        version_code=_optional_u32(table, "version-code", context),
        version_name=_optional_str(table, "version-name", context),
        sdk_path=_optional_str(table, "sdk-path", context),
    )


PLATFORM_CONFIGURATION_PARSERS = {
    AndroidConfiguration.kind: _parse_android,
}


def platform_kind(name: str) -> str | None:
    # Platform kinds are matched ignoring ASCII case: `Android` selects `android`.
    if not name.isascii():
        return None
    kind = name.lower()
    return kind if kind in PLATFORM_CONFIGURATION_PARSERS else None


def _parse_platform(table: Any, index: int) -> RawPlatform:
    context = f"platform[{index}]"
    if not isinstance(table, dict):
        raise _type_error(context, "a table", table)

    platform_id = table.get("id")
    if platform_id is None:
        raise ManifestParseError(f"'{context}.id' is required")
    if not isinstance(platform_id, str):
        raise _type_error(f"{context}.id", "a string", platform_id)

    configuration: PlatformConfiguration | None = None
    configured_key = ""
    for key in table:
        kind = platform_kind(key)
        if kind is None:
            continue
        sub_table = _optional_table(table, key, f"{context}.")
        if sub_table is None:
            continue
        if configuration is not None:
            raise ManifestParseError(
                f"'{context}' configures both '{configured_key}' and '{key}'"
            )
        configuration = PLATFORM_CONFIGURATION_PARSERS[kind](sub_table, f"{context}.{key}")
        configured_key = key

    return RawPlatform(
        id=platform_id,
        path=_optional_str(table, "path", context),
        configuration=configuration,
    )


def parse_raw(content: str) -> RawManifest:
    try:
        document = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(str(exc)) from exc

    # Only the type is checked here; validate() rejects every value but 1.
    version = document.get("version")
    if version is None:
        raise ManifestParseError("'version' is required")
    if isinstance(version, bool) or not isinstance(version, int):
        raise _type_error("version", "an integer", version)

    application_table = _optional_table(document, "application", "")
    application = _parse_application(application_table) if application_table is not None else None

    platform_entries = document.get("platform", [])
    if not isinstance(platform_entries, list):
        raise _type_error("platform", "an array of tables", platform_entries)
    platforms = tuple(_parse_platform(entry, index) for index, entry in enumerate(platform_entries))

    return RawManifest(version=version, application=application, platforms=platforms)


def _is_alphanumeric(ch: str) -> bool:
    # Vowel signs and similar marks are alphabetic in scripts such as
    # Devanagari, but str.isalnum() only covers letters and numbers.
    return ch.isalnum() or unicodedata.category(ch) in ("Mn", "Mc")


def is_identifier(value: str) -> bool:
    # Any unicode alphanumeric is accepted, even if external tools might choke.
    return bool(value) and all(_is_alphanumeric(ch) or ch in "-_" for ch in value)


def _is_control(ch: str) -> bool:
    code = ord(ch)
    return code < 0x20 or 0x7F <= code <= 0x9F


def is_quotable(value: str) -> bool:
    return all(not _is_control(ch) and ch not in "\\'\"" for ch in value)


def is_single_line_path(value: str) -> bool:
    return all(not _is_control(ch) and ch != "\n" for ch in value)


def validate(raw: RawManifest, base_dir: Path | None = None) -> Manifest:
    # Any other version is defined to be incompatible.
    if raw.version != MANIFEST_VERSION:
        raise ManifestValidationError(
            "version",
            f"must be {MANIFEST_VERSION}, got {raw.version}",
        )

    application = raw.application
    if application is not None:
        if application.id is not None and not is_identifier(application.id):
            raise ManifestValidationError(
                "application.id",
                "must be a non-empty identifier of alphanumerics, '-' and '_'",
            )
        if application.name is not None and not is_quotable(application.name):
            raise ManifestValidationError(
                "application.name",
                "must not contain quotes, backslashes or control characters",
            )

    for index, platform in enumerate(raw.platforms):
        android = platform.android()
        if android is None:
            continue
        context = f"platform[{index}].android"
        quotable_fields = (
            ("application-id", android.application_id),
            ("namespace", android.namespace),
            ("version-name", android.version_name),
        )
        for key, value in quotable_fields:
            if value is not None and not is_quotable(value):
                raise ManifestValidationError(
                    f"{context}.{key}",
                    "must not contain quotes, backslashes or control characters",
                )
        if android.sdk_path is not None and not is_single_line_path(android.sdk_path):
            raise ManifestValidationError(
                f"{context}.sdk-path",
                "must not contain newlines or control characters",
            )

    return Manifest(raw=raw, base_dir=base_dir)


@dataclass(frozen=True)
class Manifest:
    """A verified manifest. Construct it via `validate()` or the `parse_*` helpers."""

    raw: RawManifest
    base_dir: Path | None = None

    @classmethod
    def parse_str(cls, content: str, base_dir: Path | None = None) -> Manifest:
        return validate(parse_raw(content), base_dir=base_dir)

    @classmethod
    def parse_path(cls, path: Path) -> Manifest:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestParseError(f"unable to read file ({exc})", path=path) from exc
        try:
            raw = parse_raw(content)
        except ManifestParseError as exc:
            raise ManifestParseError(exc.detail, path=path) from exc
        return validate(raw, base_dir=path.parent)

    def absolute_path(self, relative: str | Path) -> Path:
        base = self.base_dir if self.base_dir is not None else Path.cwd()
        return (base / relative).absolute()

    def platform_by_id(self, platform_id: str) -> RawPlatform | None:
        return self.raw.platform_by_id(platform_id)

    def view_application(self) -> ViewApplication:
        from .views import view_application

        return view_application(self.raw.application)
