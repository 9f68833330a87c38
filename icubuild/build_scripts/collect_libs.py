#!/usr/bin/env python3
# -- coding: utf-8 --
#
# collect_libs.py
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
Copy the static libraries of a finished build into the output tree.

Output layout:
    libs/osx/{x86_64,aarch64}/
    libs/linux/{x86_64,amd64,aarch64}/
    libs/ohos/aarch64/
    libs/android/{armeabi-v7a,arm64-v8a,x86,x86_64}/
"""

import os

from icubuild.build_scripts.build_utils import ICU_LIBS, copy_file

ICU_DATA_LIB = "libicudata.a"


def copy_stub_data(build_dir, target=None):
    """
    Move the stub data library into lib/ for builds that skip the data build.

    With --with-data-packaging=archive ICU leaves libicudata.a in stubdata/
    instead of lib/.
    """
    src = os.path.join(build_dir, "stubdata", ICU_DATA_LIB)
    dst = os.path.join(build_dir, "lib", ICU_DATA_LIB)
    copy_file(src, dst, target)
    return dst


def collect_libs(target_config, build_dir, libs_root):
    """
    Copy libicuuc.a, libicui18n.a and libicudata.a of one target.

    Args:
        target_config: Resolved TargetConfig of the finished build
        build_dir: Build directory of the target
        libs_root: Output root, the target's output_path is appended

    Returns:
        str: Destination directory

    Raises:
        ArtifactCopyError: On the first missing or uncopyable library,
            libraries copied before it are left in place
    """
    identifier = target_config.identifier
    if target_config.stub_data:
        copy_stub_data(build_dir, identifier)

    target_out = os.path.join(libs_root, target_config.output_path)
    lib_dir = os.path.join(build_dir, "lib")
    for lib in ICU_LIBS:
        copy_file(os.path.join(lib_dir, lib), os.path.join(target_out, lib), identifier)
    print(f"Copied ICU libraries to {target_out}")
    return target_out
