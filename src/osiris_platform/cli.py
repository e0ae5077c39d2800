from __future__ import annotations

import argparse
import sys

from ._core_base import (
    DEFAULT_GRADLE,
    DEFAULT_MANIFEST_PATH,
    TOOL_NAME,
    TOOL_VERSION,
    OsirisPlatformError,
)
from .commands import command_build, command_emerge


def build_parser(prog: str = TOOL_NAME) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Osiris Platform Tooling: manage the platform integration of applications.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {TOOL_VERSION}")
    parser.add_argument(
        "--manifest",
        default=DEFAULT_MANIFEST_PATH,
        metavar="PATH",
        help=f"Path to the platform manifest relative to the working directory (default: {DEFAULT_MANIFEST_PATH}).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build artifacts for the specified platform.")
    build.add_argument("--platform", required=True, metavar="ID", help="ID of the target platform to operate on.")
    build.add_argument(
        "--target-dir",
        metavar="DIR",
        help="Build scratch directory. Defaults to the cargo target directory from 'cargo metadata'.",
    )
    build.add_argument("--gradle", default=DEFAULT_GRADLE, metavar="BIN", help="Gradle executable to invoke.")
    build.set_defaults(func=command_build)

    emerge = sub.add_parser("emerge", help="Create a persisting platform integration.")
    emerge.add_argument("--platform", required=True, metavar="ID", help="ID of the target platform to operate on.")
    emerge.add_argument(
        "--update",
        action="store_true",
        help="Allow updating an existing platform integration.",
    )
    emerge.set_defaults(func=command_emerge)

    return parser


def main(argv: list[str] | None = None, prog: str = TOOL_NAME) -> int:
    parser = build_parser(prog)
    args = parser.parse_args(argv)

    try:
        return int(args.func(args))
    except OsirisPlatformError as exc:
        print(f"{TOOL_NAME} error: {exc}", file=sys.stderr)
        return 1


def cargo_main(argv: list[str] | None = None) -> int:
    # Cargo runs `cargo-osiris osiris <args>` for `cargo osiris <args>`.
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "osiris":
        args = args[1:]
    return main(args, prog="cargo osiris")


def run() -> None:
    raise SystemExit(main())


def run_cargo() -> None:
    raise SystemExit(cargo_main())


if __name__ == "__main__":
    run()
