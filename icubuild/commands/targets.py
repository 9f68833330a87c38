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
from icubuild.build_scripts.build_targets import (
    PLATFORM_ARGUMENTS,
    TARGET_TABLE,
    get_output_path,
)


class Targets(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to list the supported build targets.

        For each target it shows the platform family, the runConfigureICU
        platform argument, the --host triple and where its libraries go.

        Examples:
            icubuild targets
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild targets",
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
        row = "{:<18}{:<10}{:<10}{:<28}{}"
        print(row.format("TARGET", "FAMILY", "PLATFORM", "HOST TRIPLE", "OUTPUT"))
        print("-" * 80)
        print(row.format("host", "-", "native", "-", "-"))
        for spec in TARGET_TABLE:
            print(
                row.format(
                    spec.identifier,
                    spec.family,
                    PLATFORM_ARGUMENTS[spec.family],
                    spec.triple or "-",
                    get_output_path(spec),
                )
            )
