#!/usr/bin/env python3
# -- coding: utf-8 --
#
# prepare_source.py
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
Extract the ICU source archive into a fresh tree.

The tree at <source_dir> is removed and extracted again on every run,
then the prebuilt ICU data file is dropped into source/data/in where
ICU's data build expects it.
"""

import os
import time

from icubuild.build_scripts.build_utils import (
    BuildError,
    MissingPreconditionError,
    ProcessFailedError,
    copy_file,
    print_banner,
    print_use_time,
    recreate_dir,
)
from icubuild.utils.cmd.cmd_util import run_command
from icubuild.utils.context.result import CliResult


def check_source_inputs(config):
    for path in (config.archive_path, config.data_file_path):
        if not os.path.isfile(path):
            raise MissingPreconditionError(f"required input file not found: {path}")


def extract_source(config, runner=run_command):
    if os.path.exists(config.icu_root):
        print("Removing old ICU source tree...")
    recreate_dir(config.icu_root)

    print("Extracting ICU source...")
    ret = runner(
        [
            "tar",
            "-xzf",
            config.archive_path,
            "--strip-components=1",
            "-C",
            config.icu_root,
        ]
    )
    if ret != 0:
        raise ProcessFailedError("extract", ret)


def copy_data_file(config):
    data_in_dir = os.path.join(config.icu_src, "data", "in")
    dst = os.path.join(data_in_dir, config.data_file_name)
    copy_file(config.data_file_path, dst)
    print(f"Copied {config.data_file_name} to {data_in_dir}")
    return dst


def prepare_source(config, runner=run_command) -> CliResult:
    """
    Produce a clean, ready-to-configure ICU source tree.

    Args:
        config: BuildConfig naming the archive, data file and source dir
        runner: Callable running an argument list, returns the exit code

    Returns:
        CliResult: value is the ICU "source" directory, error a BuildError
    """
    print_banner("Prepare ICU Source")
    before_time = time.time()
    try:
        check_source_inputs(config)
        extract_source(config, runner)
        copy_data_file(config)
    except BuildError as e:
        return CliResult.failure(e)
    print_use_time(before_time)
    return CliResult.success(config.icu_src)
