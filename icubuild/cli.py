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
import importlib
import argparse

from icubuild.utils.context.namespace import CliNameSpace
from icubuild.utils.context.context import CliContext
from icubuild.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """icubuild - Cross-compile collation-only ICU4C static libraries

Builds libicuuc.a, libicui18n.a and libicudata.a for macOS, Linux,
OpenHarmony (OHOS) and Android from an ICU4C source release.

USAGE:
    icubuild <command> [options]

COMMANDS:
    init        Create ICUBUILD.toml and download/ in a directory
    check       Check tools, SDKs and input files
    targets     List supported build targets
    build       Build ICU for the host and every configured target
    clean       Remove the extracted source tree (and outputs)
    help        Show detailed help information

EXAMPLES:
    icubuild init                    # Scaffold a build directory
    icubuild build                   # Build all configured targets
    icubuild build aarch64-android   # Build a single target
    icubuild help                    # Show detailed help

For more information on a specific command:
    icubuild <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def get_parser(self, add_help=True):
        parser = argparse.ArgumentParser(
            prog="icubuild",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?",
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        if argv is None:
            argv = sys.argv[1:]
        # icubuild --help, but not icubuild build --help
        if len(argv) == 1 and argv[0] in ["--help", "-h"]:
            self.get_parser().print_help()
            sys.exit(0)

        # parse only known args - this will NOT consume --help of the subcommand
        parser = self.get_parser(add_help=False)
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        return args

    def get_subcommand(self, name) -> CliCommand:
        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{name}")
        klass = getattr(module, name.capitalize())
        return klass()

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self.get_parser().print_help()
            sys.exit(1)

        sub_cmd = self.get_subcommand(args.subcommand)
        return sub_cmd.exec(context, sub_cmd.cli())


def main():
    cmd = Cli()
    cmd.exec(CliContext(project_dir=os.getcwd(), environ=dict(os.environ)), cmd.cli())


if __name__ == "__main__":
    main()
