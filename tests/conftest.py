"""Pytest fixtures for icubuild tests."""

import io
import os
import tarfile
from pathlib import Path

import pytest

from icubuild.build_scripts.build_config import BuildConfig

ICU_VERSION = "77_1"


def _add_file(tf: tarfile.TarFile, name: str, content: bytes) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(content)
    tf.addfile(info, io.BytesIO(content))


@pytest.fixture
def icu_release(tmp_path: Path) -> Path:
    """download/ with a tiny ICU-shaped source archive and data file. Returns project dir."""
    download = tmp_path / "download"
    download.mkdir()
    with tarfile.open(download / f"icu4c-{ICU_VERSION}-src.tgz", "w:gz") as tf:
        _add_file(tf, "icu/LICENSE", b"license\n")
        _add_file(tf, "icu/source/runConfigureICU", b"#!/bin/sh\nexit 0\n")
        _add_file(tf, "icu/source/common/unicode/uversion.h", b"#define U_ICU_VERSION \"77.1\"\n")
    (download / "icudt77l.dat").write_bytes(b"icu data")
    return tmp_path


@pytest.fixture
def build_config(icu_release: Path) -> BuildConfig:
    return BuildConfig(
        project_dir=str(icu_release),
        ohos_sdk="/opt/ohos-sdk",
        android_ndk="/opt/android-ndk",
        ndk_host_tag="darwin-x86_64",
        host_platform="MacOSX",
        environ={"PATH": "/usr/bin:/bin"},
    )


class FakeRunner:
    """
    Records every command and stands in for tar, sh and make.

    tar is emulated with tarfile, make drops empty static libraries into
    lib/ (stubdata/ for builds configured with archive data packaging).
    fail_on maps a step ("extract", "configure", "make") to the build
    directory name (or None for extract) that should exit non-zero.
    """

    def __init__(self, fail_on=None, exit_code=2):
        self.calls = []
        self.fail_on = fail_on or {}
        self.exit_code = exit_code
        self.configured = {}

    def __call__(self, cmd, cwd=None, env=None):
        self.calls.append((list(cmd), cwd, env))
        step = self.step_of(cmd)
        if step in self.fail_on and (
            self.fail_on[step] is None or os.path.basename(cwd or "") == self.fail_on[step]
        ):
            return self.exit_code
        if step == "extract":
            self.extract(cmd)
        elif step == "configure":
            self.configured[cwd] = list(cmd)
        elif step == "make":
            self.make(cwd)
        return 0

    @staticmethod
    def step_of(cmd):
        return {"tar": "extract", "sh": "configure", "make": "make"}[cmd[0]]

    def extract(self, cmd):
        archive = cmd[cmd.index("-xzf") + 1]
        dest = cmd[cmd.index("-C") + 1]
        with tarfile.open(archive, "r:gz") as tf:
            for member in tf.getmembers():
                parts = member.name.split("/", 1)
                if len(parts) < 2 or not member.isfile():
                    continue
                out = os.path.join(dest, parts[1])
                os.makedirs(os.path.dirname(out), exist_ok=True)
                with open(out, "wb") as f:
                    f.write(tf.extractfile(member).read())

    def make(self, cwd):
        lib_dir = os.path.join(cwd, "lib")
        os.makedirs(lib_dir, exist_ok=True)
        for lib in ("libicuuc.a", "libicui18n.a"):
            Path(lib_dir, lib).write_bytes(b"!<arch>\n")
        if "--with-data-packaging=archive" in self.configured.get(cwd, []):
            data_dir = os.path.join(cwd, "stubdata")
        else:
            data_dir = lib_dir
        os.makedirs(data_dir, exist_ok=True)
        Path(data_dir, "libicudata.a").write_bytes(b"!<arch>\ndata")

    def steps(self):
        """(step, build dir name) of each recorded call"""
        return [
            (self.step_of(cmd), os.path.basename(cwd) if cwd else None)
            for cmd, cwd, env in self.calls
        ]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def runner_factory():
    return FakeRunner
