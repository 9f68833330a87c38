#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_utils.py
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
Build utility functions shared by the ICU build steps.

This module provides:
- The error taxonomy every step reports failures with
- Host platform detection (macOS/Linux, NDK prebuilt host tag)
- Filesystem helpers (directory recreation, checked copies)
- Output banners in the style used by all build steps
"""

import os
import platform
import shutil
import time

# Static libraries produced by an ICU build and collected for every target
ICU_LIBS = ["libicuuc.a", "libicui18n.a", "libicudata.a"]

# Strip ICU down to collation to keep the static libraries small
COLLATION_ONLY_FLAGS = "-DUCONFIG_ONLY_COLLATION=1 -DUCONFIG_NO_LEGACY_CONVERSION=1"
OPTIMIZE_FLAGS = "-O2 -fPIC"

# Parallel jobs handed to make when nothing else is configured
DEFAULT_JOBS = 8

# Environment variables naming the OpenHarmony SDK and Android NDK roots
OHOS_SDK_ENV = "OHOS_SDK"
ANDROID_NDK_ENV = "ANDROID_NDK_HOME"


class BuildError(Exception):
    """Base class for every failure that aborts an ICU build run"""

    step = "build"

    def __init__(self, message, target=None):
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self):
        if self.target:
            return f"[{self.target}] {self.message}"
        return self.message


class MissingPreconditionError(BuildError):
    """A required file, directory or environment variable is absent"""

    step = "precondition"


class TargetConfigError(BuildError):
    """Unknown target identifier or invalid build configuration"""

    step = "config"


class ProcessFailedError(BuildError):
    """An external tool (tar, configure, make) exited with a non-zero code"""

    def __init__(self, step, exit_code, target=None):
        super().__init__(f"{step} failed with exit code {exit_code}", target)
        self.step = step
        self.exit_code = exit_code


class ArtifactCopyError(BuildError):
    """An expected build artifact is missing or cannot be copied"""

    step = "collect"


def system_is_macos():
    """Check if current platform is macOS/Darwin."""
    return platform.system().lower() == "darwin"


def system_architecture_is64():
    """Check if current system architecture is 64-bit."""
    return platform.machine().endswith("64")


def get_ndk_host_tag():
    """
    Get the NDK host platform tag for toolchain paths.

    Returns:
        str: Platform tag (e.g., "darwin-x86_64", "linux-x86_64")

    Note:
        The NDK only ships x86_64 host prebuilts for macOS, Apple Silicon
        machines run them too, so arm64 hosts map to "-x86_64" as well.
    """
    system_str = platform.system().lower()
    if system_architecture_is64():
        system_str = system_str + "-x86_64"
    return system_str


def get_host_platform():
    """
    Get the runConfigureICU platform name of the build machine.

    Returns:
        str: "MacOSX" on macOS, "Linux" otherwise
    """
    if system_is_macos():
        return "MacOSX"
    return "Linux"


def recreate_dir(path, target=None):
    """
    Remove a directory tree if it exists and create it empty again.

    Args:
        path: Directory path to recreate
        target: Target identifier used in the error message

    Raises:
        MissingPreconditionError: If the path cannot be removed or created
    """
    try:
        if os.path.exists(path):
            shutil.rmtree(path)
        os.makedirs(path)
    except OSError as e:
        raise MissingPreconditionError(f"cannot recreate directory {path}: {e}", target) from e


def copy_file(src, dst, target=None):
    """
    Copy a single file, creating the destination directory as needed.

    Args:
        src: Source file path
        dst: Destination file path
        target: Target identifier used in the error message

    Raises:
        ArtifactCopyError: If src does not exist or the copy fails
    """
    if not os.path.isfile(src):
        raise ArtifactCopyError(f"expected artifact not found: {src}", target)
    dst_dir = os.path.dirname(dst)
    try:
        if dst_dir:
            os.makedirs(dst_dir, exist_ok=True)
        shutil.copyfile(src, dst)
    except OSError as e:
        raise ArtifactCopyError(f"cannot copy {src} to {dst}: {e}", target) from e


def print_banner(title):
    print(f"=================={title}==================")


def print_use_time(before_time):
    after_time = time.time()
    print(f"use time: {int(after_time - before_time)}")
