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

import os
import sys
import argparse

from icubuild.utils.context.namespace import CliNameSpace
from icubuild.utils.context.context import CliContext
from icubuild.utils.context.command import CliCommand
from icubuild.build_scripts.build_config import load_build_config
from icubuild.build_scripts.build_icu import build_all
from icubuild.build_scripts.build_targets import DEFAULT_TARGETS
from icubuild.build_scripts.build_utils import BuildError


class Build(CliCommand):
    def description(self) -> str:
        return f"""Build collation-only ICU4C static libraries.

Extracts the ICU source archive, builds ICU for this machine (host),
then cross-builds every target and copies libicuuc.a, libicui18n.a
and libicudata.a into the output directory.

SUPPORTED TARGETS:
    {", ".join(DEFAULT_TARGETS)}

ENVIRONMENT:
    OHOS_SDK            OpenHarmony SDK root (default: DevEco Studio's SDK)
    ANDROID_NDK_HOME    Android NDK root (required for *-android targets)

EXAMPLES:
    # Build every target configured in ICUBUILD.toml (default: all)
    icubuild build

    # Build only the Android arm64 and macOS arm64 libraries
    icubuild build aarch64-android aarch64-macos

    # Build with 16 make jobs
    icubuild build -j 16
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild build",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "targets",
            nargs="*",
            type=str,
            help="Cross targets to build (default: build.targets of ICUBUILD.toml)",
        )
        parser.add_argument(
            "-j", "--jobs",
            type=int,
            default=None,
            help="Number of parallel make jobs (default: 8)",
        )
        parser.add_argument(
            "--config",
            type=str,
            default=None,
            help="Path to the config file (default: ./ICUBUILD.toml)",
        )
        if argv is None:
            argv = sys.argv[1:]
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        input_argv = [x for x in argv if x != module_name]
        args, unknown = parser.parse_known_args(input_argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            config = load_build_config(
                project_dir=context.project_dir,
                environ=context.environ,
                config_path=args.config,
            )
        except BuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        if args.jobs is not None:
            if args.jobs <= 0:
                print(f"ERROR: --jobs must be a positive integer, got {args.jobs}")
                sys.exit(1)
            config.jobs = args.jobs

        targets = args.targets if args.targets else None
        result = build_all(config, targets)
        if result.is_failure():
            error = result.get_error()
            print("!!!!!!!!!!!!!!!!!!build fail!!!!!!!!!!!!!!!!!!!!")
            print(f"ERROR: {error}")
            if error.target:
                print(f"ERROR: ICU {error.step} failed for {error.target}. Stopping immediately.")
            sys.exit(1)
        return result.get_value()
