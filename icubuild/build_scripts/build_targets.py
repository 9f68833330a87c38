#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_targets.py
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
Target table and resolver.

Every supported target identifier is one row of TARGET_TABLE. The resolver
turns a row plus the BuildConfig into a TargetConfig: the runConfigureICU
platform argument, the --host triple, CC/CXX and the compile flags.

Supported targets:
- macOS:   x86_64-macos, aarch64-macos            (clang -arch)
- Linux:   x86_64-linux, amd64-linux, aarch64-linux (zig cc)
- OHOS:    aarch64-ohos                            (OpenHarmony SDK clang)
- Android: armv7-android, aarch64-android, x86-android, x86_64-android (NDK clang)
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from icubuild.build_scripts.build_utils import (
    ANDROID_NDK_ENV,
    COLLATION_ONLY_FLAGS,
    OHOS_SDK_ENV,
    OPTIMIZE_FLAGS,
    MissingPreconditionError,
    TargetConfigError,
)

HOST = "host"

# Platform families
MACOS = "macOS"
LINUX = "Linux"
OHOS = "OHOS"
ANDROID = "Android"

# runConfigureICU platform argument of each family
PLATFORM_ARGUMENTS = {
    MACOS: "MacOSX",
    LINUX: "Linux",
    OHOS: "Linux",
    ANDROID: "Linux",
}

# Top level output directory of each family, under the output root
OUTPUT_GROUPS = {
    MACOS: "osx",
    LINUX: "linux",
    OHOS: "ohos",
    ANDROID: "android",
}

# Architecture token of the identifier -> Android ABI directory name
ANDROID_ABIS = {
    "armv7": "armeabi-v7a",
    "aarch64": "arm64-v8a",
    "x86": "x86",
    "x86_64": "x86_64",
}

CROSS_FLAGS = f"{OPTIMIZE_FLAGS} {COLLATION_ONLY_FLAGS}"


@dataclass(frozen=True)
class TargetSpec:
    """One row of the target table."""
    identifier: str
    family: str
    arch: str  # output directory name: CPU architecture or Android ABI
    triple: Optional[str] = None
    apple_arch: Optional[str] = None  # value of clang -arch for macOS rows


@dataclass
class TargetConfig:
    """Fully resolved build recipe of one target."""
    identifier: str
    platform_family: str
    platform_argument: str
    host_triple: Optional[str] = None
    toolchain: Dict[str, str] = field(default_factory=dict)
    flags: Dict[str, str] = field(default_factory=dict)
    extra_configure_args: List[str] = field(default_factory=list)
    requires_cross_reference: bool = False
    output_path: Optional[str] = None
    stub_data: bool = False

    @property
    def is_host(self) -> bool:
        return self.identifier == HOST

    @property
    def is_cross(self) -> bool:
        return self.host_triple is not None

    def env_overrides(self) -> Dict[str, str]:
        env = dict(self.toolchain)
        env.update(self.flags)
        return env


TARGET_TABLE = [
    TargetSpec("x86_64-macos", MACOS, "x86_64", apple_arch="x86_64"),
    TargetSpec("aarch64-macos", MACOS, "aarch64", apple_arch="arm64"),
    TargetSpec("x86_64-linux", LINUX, "x86_64", triple="x86_64-linux-gnu"),
    TargetSpec("amd64-linux", LINUX, "amd64", triple="x86_64-linux-gnu"),
    TargetSpec("aarch64-linux", LINUX, "aarch64", triple="aarch64-linux-gnu"),
    TargetSpec("aarch64-ohos", OHOS, "aarch64", triple="aarch64-linux-ohos"),
    TargetSpec("armv7-android", ANDROID, ANDROID_ABIS["armv7"], triple="armv7a-linux-androideabi"),
    TargetSpec("aarch64-android", ANDROID, ANDROID_ABIS["aarch64"], triple="aarch64-linux-android"),
    TargetSpec("x86-android", ANDROID, ANDROID_ABIS["x86"], triple="i686-linux-android"),
    TargetSpec("x86_64-android", ANDROID, ANDROID_ABIS["x86_64"], triple="x86_64-linux-android"),
]

TARGETS = {spec.identifier: spec for spec in TARGET_TABLE}

# Cross targets built by default, in build order
DEFAULT_TARGETS = [spec.identifier for spec in TARGET_TABLE]


def _cross_flags() -> Dict[str, str]:
    return {
        "CFLAGS": CROSS_FLAGS,
        "CXXFLAGS": CROSS_FLAGS,
        "LDFLAGS": "-fPIC",
    }


def _resolve_macos(spec, config):
    arch_flag = f"-arch {spec.apple_arch}"
    toolchain = {"CC": "clang", "CXX": "clang++"}
    flags = {
        "CFLAGS": f"{arch_flag} {CROSS_FLAGS}",
        "CXXFLAGS": f"{arch_flag} {CROSS_FLAGS}",
        "LDFLAGS": arch_flag,
    }
    return toolchain, flags, []


def _resolve_linux(spec, config):
    toolchain = {
        "CC": f"zig cc -target {spec.triple}",
        "CXX": f"zig c++ -target {spec.triple}",
    }
    return toolchain, _cross_flags(), []


def _resolve_ohos(spec, config):
    if not config.ohos_sdk:
        raise MissingPreconditionError(
            f"{OHOS_SDK_ENV} must be set to a valid OpenHarmony SDK path", spec.identifier
        )
    native = os.path.join(config.ohos_sdk, "default", "openharmony", "native")
    llvm_bin = os.path.join(native, "llvm", "bin")
    sysroot = os.path.join(native, "sysroot")
    target_flags = f"--target={spec.triple} --sysroot={sysroot}"
    toolchain = {
        "CC": f"{os.path.join(llvm_bin, 'clang')} {target_flags}",
        "CXX": f"{os.path.join(llvm_bin, 'clang++')} {target_flags}",
    }
    return toolchain, _cross_flags(), []


def _resolve_android(spec, config):
    if not config.android_ndk:
        raise MissingPreconditionError(
            f"{ANDROID_NDK_ENV} must be set to a valid Android NDK path", spec.identifier
        )
    llvm_bin = os.path.join(
        config.android_ndk, "toolchains", "llvm", "prebuilt", config.ndk_host_tag, "bin"
    )
    compiler = os.path.join(llvm_bin, f"{spec.triple}{config.android_api}")
    toolchain = {
        "CC": f"{compiler}-clang",
        "CXX": f"{compiler}-clang++",
    }
    # no data build on android, ICU data is loaded from an archive at runtime
    return toolchain, _cross_flags(), ["--with-data-packaging=archive"]


TOOLCHAIN_RESOLVERS = {
    MACOS: _resolve_macos,
    LINUX: _resolve_linux,
    OHOS: _resolve_ohos,
    ANDROID: _resolve_android,
}


def get_output_path(spec):
    """
    Get the output directory of a target, relative to the output root.

    Examples:
        aarch64-android -> android/arm64-v8a
        x86_64-macos    -> osx/x86_64
    """
    return os.path.join(OUTPUT_GROUPS[spec.family], spec.arch)


def resolve_host(config) -> TargetConfig:
    """The host build uses runConfigureICU's own toolchain defaults."""
    family = MACOS if config.host_platform == PLATFORM_ARGUMENTS[MACOS] else LINUX
    return TargetConfig(
        identifier=HOST,
        platform_family=family,
        platform_argument=config.host_platform,
    )


def resolve_target(identifier, config) -> TargetConfig:
    """
    Resolve a target identifier to its build recipe.

    Args:
        identifier: Target identifier (e.g., "aarch64-android") or "host"
        config: BuildConfig supplying SDK/NDK roots and the Android API level

    Returns:
        TargetConfig: Complete recipe, toolchain included

    Raises:
        TargetConfigError: If the identifier is not in the target table
        MissingPreconditionError: If a required SDK/NDK root is not configured
    """
    if identifier == HOST:
        return resolve_host(config)
    spec = TARGETS.get(identifier)
    if spec is None:
        raise TargetConfigError(
            f"unsupported target '{identifier}', expected one of: {', '.join(DEFAULT_TARGETS)}"
        )
    toolchain, flags, extra_args = TOOLCHAIN_RESOLVERS[spec.family](spec, config)
    return TargetConfig(
        identifier=spec.identifier,
        platform_family=spec.family,
        platform_argument=PLATFORM_ARGUMENTS[spec.family],
        host_triple=spec.triple,
        toolchain=toolchain,
        flags=flags,
        extra_configure_args=extra_args,
        requires_cross_reference=spec.triple is not None,
        output_path=get_output_path(spec),
        stub_data=spec.family == ANDROID,
    )


def resolve_build_plan(identifiers, config) -> List[TargetConfig]:
    """
    Resolve every target of a run before anything is executed.

    The host build always comes first since cross builds reference its
    build directory. Duplicates are dropped, keeping the first occurrence.

    Raises:
        TargetConfigError, MissingPreconditionError: On the first target
            that cannot be resolved
    """
    plan = [resolve_host(config)]
    seen = {HOST}
    for identifier in identifiers:
        if identifier in seen:
            continue
        seen.add(identifier)
        plan.append(resolve_target(identifier, config))
    return plan
