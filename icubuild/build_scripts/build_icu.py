#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_icu.py
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
ICU4C build driver.

Builds ICU with its own autotools setup (runConfigureICU + make):
1. Extracts the source archive into a fresh tree
2. Builds ICU for the build machine ("host"), the reference for cross builds
3. Configures, builds and collects every cross target, one after another

Each target builds in its own directory, icu/source/build-<target>, which is
recreated before configuring. The first failure stops the run: no further
targets are attempted and nothing is retried.

Requirements:
- tar, sh, make
- clang (macOS targets), zig (Linux targets)
- OpenHarmony SDK ($OHOS_SDK) for aarch64-ohos
- Android NDK ($ANDROID_NDK_HOME) for *-android
"""

import os
import time
from dataclasses import dataclass, field
from typing import Dict, List

from icubuild.build_scripts.build_targets import HOST, resolve_build_plan
from icubuild.build_scripts.build_utils import (
    BuildError,
    MissingPreconditionError,
    ProcessFailedError,
    print_banner,
    recreate_dir,
)
from icubuild.build_scripts.collect_libs import collect_libs
from icubuild.build_scripts.prepare_source import prepare_source
from icubuild.utils.cmd.cmd_util import run_command
from icubuild.utils.context.result import CliResult

CONFIGURE_SCRIPT = "runConfigureICU"

# ICU is linked statically into the consumers, never build .so/.dylib
LIBRARY_MODE_ARGS = ["--enable-static", "--disable-shared"]


@dataclass
class BuildReport:
    """Outcome of a build run, filled in as targets complete."""
    targets: List[str] = field(default_factory=list)
    built: List[str] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)
    use_time: int = 0

    @property
    def failed(self) -> List[str]:
        return [t for t in self.targets if t not in self.built]


def get_configure_cmd(target_config, config, cross_build=None):
    """
    Assemble the runConfigureICU invocation of a target.

    Args:
        target_config: Resolved TargetConfig
        config: BuildConfig
        cross_build: Finished host build directory, required by cross targets

    Returns:
        list: Argument list starting with "sh"

    Raises:
        MissingPreconditionError: If runConfigureICU is missing, or a cross
            target has no host build to reference
    """
    configure_script = os.path.join(config.icu_src, CONFIGURE_SCRIPT)
    if not os.path.isfile(configure_script):
        raise MissingPreconditionError(
            f"Cannot find {CONFIGURE_SCRIPT} at {configure_script}", target_config.identifier
        )

    cmd = ["sh", configure_script, target_config.platform_argument]
    if target_config.host_triple:
        cmd.append(f"--host={target_config.host_triple}")
    if target_config.requires_cross_reference:
        if not cross_build:
            raise MissingPreconditionError(
                "cross build requires a finished host build", target_config.identifier
            )
        cmd.append(f"--with-cross-build={cross_build}")
    cmd.extend(target_config.extra_configure_args)
    cmd.extend(LIBRARY_MODE_ARGS)
    return cmd


def configure_target(target_config, config, build_dir, cross_build=None, runner=run_command):
    cmd = get_configure_cmd(target_config, config, cross_build)
    env = dict(config.environ)
    env.update(target_config.env_overrides())
    ret = runner(cmd, cwd=build_dir, env=env)
    if ret != 0:
        raise ProcessFailedError("configure", ret, target_config.identifier)


def make_target(target_config, config, build_dir, runner=run_command):
    ret = runner(["make", f"-j{config.jobs}"], cwd=build_dir, env=None)
    if ret != 0:
        raise ProcessFailedError("make", ret, target_config.identifier)


def build_target(target_config, config, cross_build=None, runner=run_command) -> CliResult:
    """
    Configure and compile one target in its own, freshly created directory.

    Returns:
        CliResult: value is the build directory, error a BuildError
    """
    build_dir = config.build_dir(target_config.identifier)
    try:
        recreate_dir(build_dir, target_config.identifier)
        configure_target(target_config, config, build_dir, cross_build, runner)
        make_target(target_config, config, build_dir, runner)
    except BuildError as e:
        return CliResult.failure(e)
    return CliResult.success(build_dir)


def print_build_summary(report):
    print_banner("ICU Build Done")
    print(f"Build All:{report.targets}")
    print(f"Build Success:{report.built}")
    print(f"Build Failed:{report.failed}")
    if report.outputs:
        print_banner("Output")
        for identifier, out_dir in report.outputs.items():
            print(f"{identifier}: {out_dir}")
    print(f"use time: {report.use_time}")


def build_all(config, targets=None, runner=run_command) -> CliResult:
    """
    Run a complete ICU build: extract, host build, then every cross target.

    All targets are resolved before anything runs, so a missing NDK or an
    unknown identifier fails the run before extraction starts.

    Args:
        config: BuildConfig of the run
        targets: Cross target identifiers (default: config.targets)
        runner: Callable(cmd, cwd=None, env=None) -> exit code

    Returns:
        CliResult: value is a BuildReport, error the first BuildError hit
    """
    before_time = time.time()
    identifiers = config.targets if targets is None else targets
    report = BuildReport()

    def finish(error=None):
        report.use_time = int(time.time() - before_time)
        print_build_summary(report)
        if error is not None:
            return CliResult(value=report, error=error)
        return CliResult.success(report)

    # requested targets, shown as failed if resolution stops the run
    report.targets = [HOST]
    for identifier in identifiers:
        if identifier not in report.targets:
            report.targets.append(identifier)
    try:
        plan = resolve_build_plan(identifiers, config)
    except BuildError as e:
        return finish(e)
    report.targets = [t.identifier for t in plan]
    print(f"main targets:{report.targets}, jobs:{config.jobs}")

    result = prepare_source(config, runner)
    if result.is_failure():
        return finish(result.error)

    host_config = plan[0]
    print_banner(f"Building host ICU ({host_config.platform_argument})")
    result = build_target(host_config, config, None, runner)
    if result.is_failure():
        return finish(result.error)
    host_build_dir = result.value
    report.built.append(host_config.identifier)

    for target_config in plan[1:]:
        print_banner(f"Building ICU for {target_config.identifier}")
        result = build_target(target_config, config, host_build_dir, runner)
        if result.is_failure():
            return finish(result.error)
        try:
            out_dir = collect_libs(target_config, result.value, config.libs_root)
        except BuildError as e:
            return finish(e)
        report.built.append(target_config.identifier)
        report.outputs[target_config.identifier] = out_dir

    return finish()
