"""Tests for icubuild.build_scripts.collect_libs."""

import os
from pathlib import Path

import pytest

from icubuild.build_scripts import collect_libs as collect_module
from icubuild.build_scripts.build_targets import resolve_target
from icubuild.build_scripts.build_utils import ICU_LIBS, ArtifactCopyError
from icubuild.build_scripts.collect_libs import collect_libs


def fake_build_dir(root, data_in_stubdata=False):
    build_dir = root / "build"
    (build_dir / "lib").mkdir(parents=True)
    (build_dir / "lib" / "libicuuc.a").write_bytes(b"uc")
    (build_dir / "lib" / "libicui18n.a").write_bytes(b"i18n")
    data_dir = build_dir / ("stubdata" if data_in_stubdata else "lib")
    data_dir.mkdir(exist_ok=True)
    (data_dir / "libicudata.a").write_bytes(b"data")
    return build_dir


def test_macos_libraries_land_in_osx_dir(tmp_path, build_config) -> None:
    build_dir = fake_build_dir(tmp_path)
    target = resolve_target("x86_64-macos", build_config)
    out_dir = collect_libs(target, str(build_dir), str(tmp_path / "libs"))

    assert out_dir == os.path.join(str(tmp_path / "libs"), "osx", "x86_64")
    assert sorted(os.listdir(out_dir)) == sorted(ICU_LIBS)
    assert Path(out_dir, "libicui18n.a").read_bytes() == b"i18n"


def test_android_copies_stub_data_first(tmp_path, build_config, monkeypatch) -> None:
    build_dir = fake_build_dir(tmp_path, data_in_stubdata=True)
    target = resolve_target("aarch64-android", build_config)
    copies = []
    real_copy_file = collect_module.copy_file

    def recording_copy_file(src, dst, target=None):
        copies.append((src, dst))
        real_copy_file(src, dst, target)

    monkeypatch.setattr(collect_module, "copy_file", recording_copy_file)
    out_dir = collect_libs(target, str(build_dir), str(tmp_path / "libs"))

    assert copies[0] == (
        os.path.join(str(build_dir), "stubdata", "libicudata.a"),
        os.path.join(str(build_dir), "lib", "libicudata.a"),
    )
    assert [os.path.basename(dst) for _, dst in copies[1:]] == ICU_LIBS
    assert out_dir == os.path.join(str(tmp_path / "libs"), "android", "arm64-v8a")
    assert Path(out_dir, "libicudata.a").read_bytes() == b"data"


def test_android_without_stub_data_fails(tmp_path, build_config) -> None:
    build_dir = fake_build_dir(tmp_path)
    target = resolve_target("x86-android", build_config)
    with pytest.raises(ArtifactCopyError) as exc:
        collect_libs(target, str(build_dir), str(tmp_path / "libs"))
    assert exc.value.target == "x86-android"
    assert "stubdata" in str(exc.value)


def test_missing_library_fails(tmp_path, build_config) -> None:
    build_dir = fake_build_dir(tmp_path)
    (build_dir / "lib" / "libicui18n.a").unlink()
    target = resolve_target("aarch64-linux", build_config)
    with pytest.raises(ArtifactCopyError) as exc:
        collect_libs(target, str(build_dir), str(tmp_path / "libs"))
    assert "libicui18n.a" in str(exc.value)
    assert exc.value.step == "collect"


def test_output_root_blocked_by_file(tmp_path, build_config) -> None:
    build_dir = fake_build_dir(tmp_path)
    libs_root = tmp_path / "libs"
    libs_root.write_text("not a directory", encoding="utf-8")
    target = resolve_target("aarch64-linux", build_config)
    with pytest.raises(ArtifactCopyError) as exc:
        collect_libs(target, str(build_dir), str(libs_root))
    assert exc.value.target == "aarch64-linux"
