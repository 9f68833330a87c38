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
from icubuild.build_scripts.build_targets import DEFAULT_TARGETS


class Help(CliCommand):
    def description(self) -> str:
        return """Show detailed help information for icubuild commands.

Use 'icubuild <command> --help' for command-specific help.
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild help",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        if argv is None:
            argv = sys.argv[1:]
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        input_argv = [x for x in argv if x != module_name]
        args, unknown = parser.parse_known_args(input_argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        print("\n" + "=" * 70)
        print("icubuild - collation-only ICU4C static libraries")
        print("=" * 70)

        print("\n1. Initialize a build directory")
        print("\n  icubuild init [path] [options]")
        print("\n  Options:")
        print("    --data <key>=<value>    Template variables (can be used multiple times)")
        print("    --interact              Prompt for every value")
        print("    --force                 Overwrite an existing ICUBUILD.toml")

        print("\n2. Check tools, SDKs and input files")
        print("\n  icubuild check [--verbose]")

        print("\n3. List supported targets")
        print("\n  icubuild targets")

        print("\n4. Build ICU")
        print("\n  icubuild build [target ...] [options]")
        print("\n  Targets:")
        for identifier in DEFAULT_TARGETS:
            print(f"    {identifier}")
        print("\n  Options:")
        print("    -j, --jobs <n>          Parallel make jobs (default: 8)")
        print("    --config <file>         Config file (default: ./ICUBUILD.toml)")
        print("\n  Environment Variables:")
        print("    OHOS_SDK                OpenHarmony SDK root")
        print("    ANDROID_NDK_HOME        Android NDK root (required for android)")
        print("\n  Examples:")
        print("    icubuild build")
        print("    icubuild build aarch64-android armv7-android -j 16")

        print("\n5. Clean build artifacts")
        print("\n  icubuild clean [--all] [--dry-run]")

        print("\n6. Get help")
        print("\n  icubuild help")
        print("\n  icubuild <command> --help")

        print("\n" + "=" * 70)
        print("\n")
