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
from copier import run_copy

from icubuild.utils.context.namespace import CliNameSpace
from icubuild.utils.context.context import CliContext
from icubuild.utils.context.command import CliCommand
from icubuild.build_scripts.build_config import CONFIG_FILE_NAME

TEMPLATE_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.realpath(__file__))), "templates", "project"
)


class Init(CliCommand):
    def description(self) -> str:
        return """
        Initialize an ICU build directory.

        Creates ICUBUILD.toml and a download/ directory for the ICU source
        archive and data file. By default, the command runs in non-interactive
        mode using default values. Use --interact to be prompted for each value.

        Examples:
            icubuild init
            icubuild init path/to/icu-build
            icubuild init --interact
            icubuild init --data icu_version=76_1 --data targets=aarch64-android
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild init",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "path",
            nargs="?",
            default=".",
            help="Directory to initialize (default: current directory)",
        )
        parser.add_argument(
            "--data",
            action="append",
            help="Template data in KEY=VALUE format (can be used multiple times)",
        )
        parser.add_argument(
            "--interact",
            action="store_true",
            help="Enable interactive mode with prompts (default is non-interactive)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help=f"Overwrite an existing {CONFIG_FILE_NAME}",
        )
        if argv is None:
            argv = sys.argv[1:]
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        input_argv = [x for x in argv if x != module_name]
        args, unknown = parser.parse_known_args(input_argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        dst_path = args.path
        if context.project_dir and not os.path.isabs(dst_path):
            dst_path = os.path.join(context.project_dir, dst_path)

        config_file = os.path.join(dst_path, CONFIG_FILE_NAME)
        if os.path.exists(config_file) and not args.force:
            print(f"ERROR: {config_file} already exists, use --force to overwrite it")
            sys.exit(1)

        data = {}
        for item in args.data or []:
            if "=" not in item:
                print(f"ERROR: --data expects KEY=VALUE, got '{item}'")
                sys.exit(1)
            key, value = item.split("=", 1)
            data[key] = value

        print(f"Initializing ICU build directory in '{dst_path}'...")
        run_copy(
            TEMPLATE_PATH,
            dst_path,
            data=data,
            defaults=not args.interact,
            overwrite=True,
        )

        print(f"\nSuccessfully created {config_file}")
        print(f"\nNext steps:")
        print(f"  # Put the ICU source archive and data file into download/")
        print(f"  icubuild check")
        print(f"  icubuild build")
