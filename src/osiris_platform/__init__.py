from ._core_base import (
    TOOL_VERSION,
    BuildFailedError,
    DirectoryCreationError,
    ExecError,
    FileRemovalError,
    FileUpdateError,
    ManifestParseError,
    ManifestValidationError,
    MissingKeyError,
    OsirisPlatformError,
    PlatformAlreadyPresentError,
    PlatformDirectoryError,
    UnknownPlatformError,
    unlink_file,
    update_file,
)
from .build import build, run_build_tool
from .cargo import CargoMetadata, CargoMetadataError
from .emerge import ArtifactResult, emerge
from .manifest import (
    AndroidConfiguration,
    Manifest,
    PlatformConfiguration,
    RawApplication,
    RawManifest,
    RawPlatform,
    is_identifier,
    is_quotable,
    parse_raw,
    validate,
)
from .views import ViewApplication, ViewPlatformAndroid, resolve_sdk_versions, symbolize

__version__ = TOOL_VERSION

__all__ = [
    "AndroidConfiguration",
    "ArtifactResult",
    "BuildFailedError",
    "CargoMetadata",
    "CargoMetadataError",
    "DirectoryCreationError",
    "ExecError",
    "FileRemovalError",
    "FileUpdateError",
    "Manifest",
    "ManifestParseError",
    "ManifestValidationError",
    "MissingKeyError",
    "OsirisPlatformError",
    "PlatformAlreadyPresentError",
    "PlatformConfiguration",
    "PlatformDirectoryError",
    "RawApplication",
    "RawManifest",
    "RawPlatform",
    "UnknownPlatformError",
    "ViewApplication",
    "ViewPlatformAndroid",
    "build",
    "emerge",
    "is_identifier",
    "is_quotable",
    "parse_raw",
    "resolve_sdk_versions",
    "run_build_tool",
    "symbolize",
    "unlink_file",
    "update_file",
    "validate",
]
