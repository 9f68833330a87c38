#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_config.py
# icubuild
#
# Copyright 2024 zhlinh and icubuild Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Build configuration for icubuild.

Configuration is read once from ICUBUILD.toml in the project directory
(optional) and from the environment, then handed to every build step
as a BuildConfig object. Nothing below this module reads os.environ.

Configuration structure:
    [icu]
    version = "77_1"            # ICU release, archive icu4c-<version>-src.tgz
    download_dir = "download"   # Holds the archive and the icudt data file
    source_dir = "icu"          # Extracted source tree (recreated every run)
    output_dir = "libs"         # Collected static libraries

    [build]
    jobs = 8                    # make -j
    targets = ["x86_64-macos"]  # Cross targets, host is always built first

    [sdk]
    ohos_sdk = "/path/to/sdk"   # Overridden by $OHOS_SDK
    android_ndk = "/path/ndk"   # Overridden by $ANDROID_NDK_HOME
    android_api = 21
    ndk_host_tag = "darwin-x86_64"
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from icubuild.build_scripts.build_utils import (
    ANDROID_NDK_ENV,
    DEFAULT_JOBS,
    OHOS_SDK_ENV,
    MissingPreconditionError,
    TargetConfigError,
    get_host_platform,
    get_ndk_host_tag,
)
from icubuild.build_scripts.build_targets import DEFAULT_TARGETS

CONFIG_FILE_NAME = "ICUBUILD.toml"

# DevEco Studio bundles the OpenHarmony SDK here on macOS
DEFAULT_OHOS_SDK = "/Applications/DevEco-Studio.app/Contents/sdk"

DEFAULT_ICU_VERSION = "77_1"
DEFAULT_ANDROID_API = 21


@dataclass
class BuildConfig:
    """Everything a build run needs, resolved up front."""
    project_dir: str
    icu_version: str = DEFAULT_ICU_VERSION
    download_dir: str = "download"
    source_dir: str = "icu"
    output_dir: str = "libs"
    jobs: int = DEFAULT_JOBS
    targets: List[str] = field(default_factory=lambda: list(DEFAULT_TARGETS))
    ohos_sdk: str = DEFAULT_OHOS_SDK
    android_ndk: Optional[str] = None
    android_api: int = DEFAULT_ANDROID_API
    ndk_host_tag: str = field(default_factory=get_ndk_host_tag)
    host_platform: str = field(default_factory=get_host_platform)
    # base environment of configure, the target overrides are applied on top
    environ: Dict[str, str] = field(default_factory=dict, repr=False)

    @property
    def archive_name(self) -> str:
        return f"icu4c-{self.icu_version}-src.tgz"

    @property
    def data_file_name(self) -> str:
        # icudt77l.dat: data of major release 77, little endian
        major = self.icu_version.replace(".", "_").split("_")[0]
        return f"icudt{major}l.dat"

    @property
    def archive_path(self) -> str:
        return os.path.join(self.project_dir, self.download_dir, self.archive_name)

    @property
    def data_file_path(self) -> str:
        return os.path.join(self.project_dir, self.download_dir, self.data_file_name)

    @property
    def icu_root(self) -> str:
        return os.path.join(self.project_dir, self.source_dir)

    @property
    def icu_src(self) -> str:
        return os.path.join(self.icu_root, "source")

    @property
    def libs_root(self) -> str:
        return os.path.join(self.project_dir, self.output_dir)

    def build_dir(self, identifier: str) -> str:
        return os.path.join(self.icu_src, f"build-{identifier}")


def read_config_file(config_path: str, required: bool = False) -> Dict[str, Any]:
    """
    Parse ICUBUILD.toml.

    Args:
        config_path: Path of the TOML file
        required: Fail instead of returning {} when the file does not exist

    Returns:
        dict: Parsed TOML document, empty if an optional file does not exist

    Raises:
        MissingPreconditionError: If a required file does not exist
        TargetConfigError: If the file is not valid TOML
    """
    if not os.path.isfile(config_path):
        if required:
            raise MissingPreconditionError(f"config file not found: {config_path}")
        return {}
    # Must open in rb mode for tomllib
    with open(config_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise TargetConfigError(f"invalid {config_path}: {e}") from e


def _get_section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise TargetConfigError(f"[{name}] in {CONFIG_FILE_NAME} must be a table")
    return section


def _get_positive_int(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise TargetConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


def load_build_config(project_dir=None, environ=None, config_path=None) -> BuildConfig:
    """
    Build the configuration object for a run.

    Precedence for SDK roots: environment, then ICUBUILD.toml, then defaults.

    Args:
        project_dir: Project root (default: current working directory)
        environ: Environment mapping (default: os.environ)
        config_path: Explicit config file (default: <project_dir>/ICUBUILD.toml)

    Returns:
        BuildConfig: Fully populated configuration

    Raises:
        MissingPreconditionError: If an explicit config_path does not exist
        TargetConfigError: If the config file is malformed
    """
    if project_dir is None:
        project_dir = os.getcwd()
    if environ is None:
        environ = os.environ
    # only the default ICUBUILD.toml is optional
    required = config_path is not None
    if config_path is None:
        config_path = os.path.join(project_dir, CONFIG_FILE_NAME)

    data = read_config_file(config_path, required=required)
    icu = _get_section(data, "icu")
    build = _get_section(data, "build")
    sdk = _get_section(data, "sdk")

    targets = build.get("targets", list(DEFAULT_TARGETS))
    if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
        raise TargetConfigError(f"build.targets must be a list of strings, got {targets!r}")

    config = BuildConfig(
        project_dir=os.path.abspath(project_dir),
        icu_version=str(icu.get("version", DEFAULT_ICU_VERSION)),
        download_dir=icu.get("download_dir", "download"),
        source_dir=icu.get("source_dir", "icu"),
        output_dir=icu.get("output_dir", "libs"),
        jobs=_get_positive_int(build, "jobs", DEFAULT_JOBS),
        targets=targets,
        ohos_sdk=environ.get(OHOS_SDK_ENV) or sdk.get("ohos_sdk") or DEFAULT_OHOS_SDK,
        android_ndk=environ.get(ANDROID_NDK_ENV) or sdk.get("android_ndk") or None,
        android_api=_get_positive_int(sdk, "android_api", DEFAULT_ANDROID_API),
        environ=dict(environ),
    )
    if sdk.get("ndk_host_tag"):
        config.ndk_host_tag = sdk["ndk_host_tag"]
    return config
