from __future__ import annotations

import json
import subprocess
import tempfile
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
import osiris_platform  # noqa: E402
from osiris_platform import cargo as osiris_cargo  # noqa: E402

MANIFEST = """
version = 1
[application]
id = "app"
name = "My App"
package = "my-crate"
[[platform]]
id = "android"
[platform.android]
namespace = "com.example"
min-sdk = 21
target-sdk = 33
ndk-level = 25
sdk-path = "/opt/sdk"
"""


class FakeRunner:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[tuple[list[str], dict[str, str]]] = []

    def __call__(self, args, env) -> int:
        self.calls.append((list(args), dict(env)))
        return self.returncode


def project_props(args: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for index, arg in enumerate(args):
        if arg == "--project-prop":
            key, _, value = args[index + 1].partition("=")
            out[key] = value
    return out


class BuildTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.target = self.root / "target"
        self.manifest = osiris_platform.Manifest.parse_str(MANIFEST, base_dir=self.root)
        self.platform = self.manifest.platform_by_id("android")
        self.metadata = osiris_platform.CargoMetadata(target_directory=self.target)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_build_emerges_ephemeral_platform(self) -> None:
        runner = FakeRunner()
        self.assertTrue(
            osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner, env={"PATH": "/bin"})
        )

        ephemeral = self.target / "osiris" / "platform" / "android"
        build_dir = self.target / "osiris" / "build" / "android"
        self.assertTrue((ephemeral / "build.gradle").is_file())
        self.assertTrue(build_dir.is_dir())
        self.assertFalse((self.root / "platform" / "android").exists())

        self.assertEqual(len(runner.calls), 1)
        args, env = runner.calls[0]
        self.assertEqual(args[:2], ["gradle", "build"])
        for flag in ("--no-daemon", "--quiet", "--parallel"):
            self.assertIn(flag, args)
        self.assertEqual(args[args.index("--project-dir") + 1], str(ephemeral))
        self.assertEqual(args[args.index("--project-cache-dir") + 1], str(build_dir / "gradle-cache"))
        self.assertEqual(env["PATH"], "/bin")
        self.assertEqual(env["ANDROID_HOME"], "/opt/sdk")

        props = project_props(args)
        self.assertEqual(props["osiris.build.dir"], str(build_dir / "gradle-build"))
        self.assertEqual(props["osiris.application.id"], "app")
        self.assertEqual(props["osiris.application.name"], "My App")
        self.assertEqual(props["osiris.application.packageSymbol"], "my_crate")
        self.assertEqual(props["osiris.android.applicationId"], "app")
        self.assertEqual(props["osiris.android.minSdk"], "21")
        self.assertEqual(props["osiris.android.targetSdk"], "33")
        self.assertEqual(props["osiris.android.compileSdk"], "33")
        self.assertEqual(props["osiris.android.ndkLevel"], "25")
        self.assertEqual(props["osiris.android.versionCode"], "1")
        self.assertEqual(props["osiris.android.versionName"], "0.1.0")
        self.assertEqual(props["osiris.android.sdkPath"], "/opt/sdk")

    def test_build_uses_persistent_platform(self) -> None:
        persistent = self.root / "platform" / "android"
        persistent.mkdir(parents=True)
        runner = FakeRunner()

        osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner, gradle="/usr/bin/gradle")

        args, _ = runner.calls[0]
        self.assertEqual(args[0], "/usr/bin/gradle")
        self.assertEqual(args[args.index("--project-dir") + 1], str(persistent))
        self.assertEqual(list(persistent.iterdir()), [])
        self.assertFalse((self.target / "osiris" / "platform").exists())

    def test_build_refreshes_existing_ephemeral_platform(self) -> None:
        runner = FakeRunner()
        osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner)
        osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner)
        self.assertEqual(len(runner.calls), 2)

    def test_persistent_platform_path_is_a_file(self) -> None:
        (self.root / "platform").mkdir()
        (self.root / "platform" / "android").write_text("x", encoding="utf-8")
        runner = FakeRunner()
        with self.assertRaises(osiris_platform.PlatformDirectoryError):
            osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner)
        self.assertEqual(runner.calls, [])

    def test_non_zero_exit_is_build_failure(self) -> None:
        with self.assertRaises(osiris_platform.BuildFailedError) as ctx:
            osiris_platform.build(self.manifest, self.metadata, self.platform, runner=FakeRunner(returncode=3))
        self.assertEqual(ctx.exception.returncode, 3)

    def test_runner_start_failure_is_exec_error(self) -> None:
        def runner(args, env) -> int:
            raise FileNotFoundError(2, "No such file or directory", args[0])

        with self.assertRaises(osiris_platform.ExecError) as ctx:
            osiris_platform.build(self.manifest, self.metadata, self.platform, runner=runner, gradle="no-gradle")
        self.assertEqual(ctx.exception.command, "no-gradle")

    def test_missing_key_stops_before_runner(self) -> None:
        manifest = osiris_platform.Manifest.parse_str(MANIFEST.replace("ndk-level = 25\n", ""), base_dir=self.root)
        runner = FakeRunner()
        with self.assertRaises(osiris_platform.MissingKeyError) as ctx:
            osiris_platform.build(manifest, self.metadata, manifest.platform_by_id("android"), runner=runner)
        self.assertEqual(ctx.exception.key, ".ndk-level")
        self.assertEqual(runner.calls, [])
        self.assertFalse(self.target.exists())

    def test_platform_without_configuration_builds_nothing(self) -> None:
        manifest = osiris_platform.Manifest.parse_str('version = 1\n[[platform]]\nid = "web"\n', base_dir=self.root)
        runner = FakeRunner()
        self.assertFalse(osiris_platform.build(manifest, self.metadata, manifest.platform_by_id("web"), runner=runner))
        self.assertEqual(runner.calls, [])


def completed(returncode: int = 0, stdout: bytes = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["cargo"], returncode=returncode, stdout=stdout)


class CargoMetadataTests(unittest.TestCase):
    def test_query_reads_target_directory(self) -> None:
        calls = []

        def runner(command, **kwargs):
            calls.append((command, kwargs))
            return completed(stdout=json.dumps({"target_directory": "/work/target", "packages": []}).encode())

        metadata = osiris_platform.CargoMetadata.query(Path("/work"), env={"CARGO": "/bin/cargo"}, runner=runner)

        self.assertEqual(metadata.target_directory, Path("/work/target"))
        command, kwargs = calls[0]
        self.assertEqual(command, ["/bin/cargo", "metadata", "--format-version", "1", "--no-deps"])
        self.assertEqual(kwargs["cwd"], "/work")

    def test_standalone(self) -> None:
        with self.assertRaises(osiris_cargo.CargoStandaloneError):
            osiris_platform.CargoMetadata.query(Path("."), env={}, runner=lambda *a, **k: completed())

    def test_error_conditions_are_distinct(self) -> None:
        def raise_oserror(command, **kwargs):
            raise PermissionError(13, "Permission denied")

        cases = [
            (raise_oserror, osiris_cargo.CargoExecError),
            (lambda command, **kwargs: completed(returncode=101), osiris_cargo.CargoFailedError),
            (lambda command, **kwargs: completed(stdout=b"\xff\xfe"), osiris_cargo.CargoEncodingError),
            (lambda command, **kwargs: completed(stdout=b"{not json"), osiris_cargo.CargoJsonError),
            (lambda command, **kwargs: completed(stdout=b"[]"), osiris_cargo.CargoDataError),
            (lambda command, **kwargs: completed(stdout=b'{"target_directory": 5}'), osiris_cargo.CargoDataError),
        ]
        for runner, error_type in cases:
            with self.subTest(error=error_type.__name__):
                with self.assertRaises(error_type) as ctx:
                    osiris_platform.CargoMetadata.query(Path("."), env={"CARGO": "cargo"}, runner=runner)
                self.assertIsInstance(ctx.exception, osiris_platform.CargoMetadataError)


if __name__ == "__main__":
    unittest.main()
