"""Tests for icubuild.build_scripts.build_icu, driven by a fake runner."""

import os

import pytest

from icubuild.build_scripts.build_icu import (
    LIBRARY_MODE_ARGS,
    build_all,
    build_target,
    get_configure_cmd,
)
from icubuild.build_scripts.build_targets import resolve_target
from icubuild.build_scripts.build_utils import (
    COLLATION_ONLY_FLAGS,
    MissingPreconditionError,
    ProcessFailedError,
    TargetConfigError,
)
from icubuild.build_scripts.prepare_source import prepare_source


def configure_calls(runner):
    return [(cmd, cwd, env) for cmd, cwd, env in runner.calls if cmd[0] == "sh"]


class TestBuildAll:
    def test_host_builds_before_any_cross_target(self, build_config, fake_runner) -> None:
        result = build_all(build_config, ["aarch64-android", "aarch64-linux"], fake_runner)
        assert result.is_success()
        assert fake_runner.steps() == [
            ("extract", None),
            ("configure", "build-host"),
            ("make", "build-host"),
            ("configure", "build-aarch64-android"),
            ("make", "build-aarch64-android"),
            ("configure", "build-aarch64-linux"),
            ("make", "build-aarch64-linux"),
        ]
        report = result.value
        assert report.targets == ["host", "aarch64-android", "aarch64-linux"]
        assert report.built == report.targets
        assert report.failed == []

    def test_cross_targets_reference_host_build(self, build_config, fake_runner) -> None:
        build_all(build_config, ["aarch64-ohos"], fake_runner)
        host_cmd, ohos_cmd = [cmd for cmd, _, _ in configure_calls(fake_runner)]
        host_build_dir = build_config.build_dir("host")
        assert host_cmd[2] == "MacOSX"
        assert not any(arg.startswith("--with-cross-build") for arg in host_cmd)
        assert ohos_cmd[2] == "Linux"
        assert "--host=aarch64-linux-ohos" in ohos_cmd
        assert f"--with-cross-build={host_build_dir}" in ohos_cmd

    def test_configure_arguments_and_environment(self, build_config, fake_runner) -> None:
        build_all(build_config, ["armv7-android"], fake_runner)
        cmd, cwd, env = configure_calls(fake_runner)[1]
        assert cmd[:2] == ["sh", os.path.join(build_config.icu_src, "runConfigureICU")]
        assert cmd[-2:] == LIBRARY_MODE_ARGS
        assert "--with-data-packaging=archive" in cmd
        assert cwd == build_config.build_dir("armv7-android")
        assert COLLATION_ONLY_FLAGS in env["CFLAGS"]
        assert COLLATION_ONLY_FLAGS in env["CXXFLAGS"]
        assert env["CC"].endswith("armv7a-linux-androideabi21-clang")
        assert env["PATH"] == "/usr/bin:/bin"

    def test_host_configure_uses_base_environment(self, build_config, fake_runner) -> None:
        build_all(build_config, [], fake_runner)
        cmd, cwd, env = configure_calls(fake_runner)[0]
        assert env == {"PATH": "/usr/bin:/bin"}
        assert cmd[-2:] == LIBRARY_MODE_ARGS

    def test_make_uses_configured_jobs(self, build_config, fake_runner) -> None:
        build_config.jobs = 3
        build_all(build_config, [], fake_runner)
        make_cmds = [cmd for cmd, _, _ in fake_runner.calls if cmd[0] == "make"]
        assert make_cmds == [["make", "-j3"]]

    def test_libraries_collected_per_target(self, build_config, fake_runner) -> None:
        result = build_all(build_config, ["aarch64-android", "aarch64-macos"], fake_runner)
        report = result.value
        android_out = os.path.join(build_config.libs_root, "android", "arm64-v8a")
        macos_out = os.path.join(build_config.libs_root, "osx", "aarch64")
        assert report.outputs == {"aarch64-android": android_out, "aarch64-macos": macos_out}
        for out_dir in (android_out, macos_out):
            assert sorted(os.listdir(out_dir)) == [
                "libicudata.a",
                "libicui18n.a",
                "libicuuc.a",
            ]

    def test_missing_ndk_fails_before_extraction(self, build_config, fake_runner) -> None:
        build_config.android_ndk = None
        result = build_all(build_config, ["x86_64-macos", "x86_64-android"], fake_runner)
        assert result.is_failure()
        assert isinstance(result.error, MissingPreconditionError)
        assert "ANDROID_NDK_HOME" in str(result.error)
        assert result.value.targets == ["host", "x86_64-macos", "x86_64-android"]
        assert result.value.failed == result.value.targets
        assert fake_runner.calls == []
        assert not os.path.exists(build_config.icu_root)

    def test_unknown_target_fails_before_extraction(self, build_config, fake_runner) -> None:
        result = build_all(build_config, ["mips-linux"], fake_runner)
        assert isinstance(result.error, TargetConfigError)
        assert fake_runner.calls == []

    def test_configure_failure_stops_the_run(self, build_config, runner_factory) -> None:
        runner = runner_factory(fail_on={"configure": "build-aarch64-android"}, exit_code=1)
        result = build_all(
            build_config, ["aarch64-android", "x86_64-android"], runner
        )
        assert result.is_failure()
        error = result.error
        assert isinstance(error, ProcessFailedError)
        assert error.step == "configure"
        assert error.target == "aarch64-android"
        assert error.exit_code == 1
        assert runner.steps()[-1] == ("configure", "build-aarch64-android")
        assert ("configure", "build-x86_64-android") not in runner.steps()

        report = result.value
        assert report.built == ["host"]
        assert report.failed == ["aarch64-android", "x86_64-android"]
        assert not os.path.exists(build_config.libs_root)

    def test_host_make_failure_stops_the_run(self, build_config, runner_factory) -> None:
        runner = runner_factory(fail_on={"make": "build-host"})
        result = build_all(build_config, ["aarch64-linux"], runner)
        assert result.error.step == "make"
        assert result.error.target == "host"
        assert result.value.built == []
        assert runner.steps()[-1] == ("make", "build-host")

    def test_extract_failure_stops_the_run(self, build_config, runner_factory) -> None:
        runner = runner_factory(fail_on={"extract": None})
        result = build_all(build_config, ["aarch64-linux"], runner)
        assert result.error.step == "extract"
        assert runner.steps() == [("extract", None)]

    def test_blocked_build_dir_is_reported(self, build_config, fake_runner) -> None:
        prepare_source(build_config, fake_runner)
        with open(build_config.build_dir("aarch64-linux"), "w") as f:
            f.write("not a directory")
        target = resolve_target("aarch64-linux", build_config)
        result = build_target(target, build_config, build_config.build_dir("host"), fake_runner)
        assert isinstance(result.error, MissingPreconditionError)
        assert result.error.target == "aarch64-linux"
        assert fake_runner.steps() == [("extract", None)]

    def test_rebuild_recreates_build_dirs(self, build_config, fake_runner) -> None:
        assert build_all(build_config, ["aarch64-linux"], fake_runner).is_success()
        assert build_all(build_config, ["aarch64-linux"], fake_runner).is_success()
        assert os.path.isfile(
            os.path.join(build_config.libs_root, "linux", "aarch64", "libicuuc.a")
        )


class TestGetConfigureCmd:
    def test_missing_configure_script(self, build_config) -> None:
        target = resolve_target("aarch64-linux", build_config)
        with pytest.raises(MissingPreconditionError) as exc:
            get_configure_cmd(target, build_config, "/tmp/build-host")
        assert "runConfigureICU" in str(exc.value)

    def test_cross_target_needs_host_build(self, build_config, fake_runner) -> None:
        prepare_source(build_config, fake_runner)
        target = resolve_target("aarch64-linux", build_config)
        with pytest.raises(MissingPreconditionError) as exc:
            get_configure_cmd(target, build_config, None)
        assert exc.value.target == "aarch64-linux"

    def test_macos_target_has_no_host_argument(self, build_config, fake_runner) -> None:
        prepare_source(build_config, fake_runner)
        target = resolve_target("aarch64-macos", build_config)
        cmd = get_configure_cmd(target, build_config, build_config.build_dir("host"))
        assert cmd[2:] == ["MacOSX"] + LIBRARY_MODE_ARGS
