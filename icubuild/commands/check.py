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
import platform
import shutil

from icubuild.utils.context.namespace import CliNameSpace
from icubuild.utils.context.context import CliContext
from icubuild.utils.context.command import CliCommand
from icubuild.utils.cmd.cmd_util import exec_command
from icubuild.build_scripts.build_config import load_build_config
from icubuild.build_scripts.build_targets import (
    ANDROID,
    LINUX,
    MACOS,
    OHOS,
    TARGETS,
)
from icubuild.build_scripts.build_utils import (
    ANDROID_NDK_ENV,
    OHOS_SDK_ENV,
    BuildError,
)


class Check(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to check the tools, SDKs and input files
        needed by the configured targets.

        Examples:
            icubuild check              # Check everything the build needs
            icubuild check --verbose    # Also list every individual check
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild check",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed information",
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
        print("🔍 Checking ICU build environment...\n")
        try:
            config = load_build_config(
                project_dir=context.project_dir,
                environ=context.environ,
                config_path=args.config,
            )
        except BuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        checker = BuildEnvChecker(config, verbose=args.verbose)
        checker.check_all()
        checker.print_summary()


class BuildEnvChecker:
    def __init__(self, config, verbose=False):
        self.config = config
        self.verbose = verbose
        self.results = {}
        self.warnings = []
        self.errors = []
        self.current_os = platform.system()

    def get_families(self):
        families = []
        for identifier in self.config.targets:
            spec = TARGETS.get(identifier)
            if spec is None:
                self.print_error(f"Unknown target in build.targets: {identifier}")
                continue
            if spec.family not in families:
                families.append(spec.family)
        return families

    def check_command_exists(self, command, friendly_name=None, version_args=("--version",)):
        """Check if a command exists in PATH"""
        name = friendly_name or command
        if shutil.which(command) is None:
            self.print_error(f"{name}: Not found")
            return False

        err_code, output = exec_command([command, *version_args])
        version_str = output.split("\n")[0].strip() if err_code == 0 else ""
        self.print_ok(f"{name}: Found {version_str}".rstrip())
        return True

    def check_dir(self, name, path):
        if path and os.path.isdir(path):
            self.print_ok(f"{name}: {path}")
            return True
        if path:
            self.print_error(f"{name}: Set to '{path}' but directory doesn't exist")
        else:
            self.print_error(f"{name}: Not set")
        return False

    def check_file(self, name, path):
        if os.path.isfile(path):
            self.print_ok(f"{name}: {path}")
            return True
        self.print_error(f"{name}: Not found at {path}")
        return False

    def print_ok(self, msg):
        """Print success message"""
        print(f"  ✅ {msg}")

    def print_error(self, msg):
        """Print error message"""
        print(f"  ❌ {msg}")
        self.errors.append(msg)

    def print_warning(self, msg):
        """Print warning message"""
        print(f"  ⚠️  {msg}")
        self.warnings.append(msg)

    def print_info(self, msg):
        """Print info message"""
        print(f"  ℹ️  {msg}")

    def print_section(self, title):
        """Print section header"""
        print(f"\n{'='*60}")
        print(f"  {title}")
        print(f"{'='*60}")

    def check_common(self):
        self.print_section("Common Tools")
        self.results["common"] = {
            "tar": self.check_command_exists("tar"),
            "sh": self.check_command_exists("sh", version_args=("-c", "true")),
            "make": self.check_command_exists("make", "GNU Make"),
        }

    def check_inputs(self):
        self.print_section("Source Inputs")
        self.results["inputs"] = {
            "archive": self.check_file("ICU source archive", self.config.archive_path),
            "data": self.check_file("ICU data file", self.config.data_file_path),
        }

    def check_macos(self):
        self.print_section("macOS Targets")
        if self.current_os != "Darwin":
            self.print_warning(f"macOS targets need a macOS host, current is {self.current_os}")
        self.results["macos"] = {
            "clang": self.check_command_exists("clang", "clang"),
        }

    def check_linux(self):
        self.print_section("Linux Targets")
        zig_exists = self.check_command_exists("zig", "zig", version_args=("version",))
        if not zig_exists:
            self.print_info("Linux targets are cross compiled with 'zig cc', install zig")
        self.results["linux"] = {"zig": zig_exists}

    def check_ohos(self):
        self.print_section("OpenHarmony (OHOS) Targets")
        sdk_exists = self.check_dir(OHOS_SDK_ENV, self.config.ohos_sdk)
        clang_exists = False
        if sdk_exists:
            clang = os.path.join(
                self.config.ohos_sdk, "default", "openharmony", "native", "llvm", "bin", "clang"
            )
            clang_exists = self.check_file("OHOS clang", clang)
        else:
            self.print_info(f"Set {OHOS_SDK_ENV} to your OpenHarmony SDK path")
        self.results["ohos"] = {"ohos_sdk": sdk_exists, "clang": clang_exists}

    def check_android(self):
        self.print_section("Android Targets")
        ndk_exists = self.check_dir(ANDROID_NDK_ENV, self.config.android_ndk)
        prebuilt_exists = False
        if ndk_exists:
            prebuilt = os.path.join(
                self.config.android_ndk,
                "toolchains",
                "llvm",
                "prebuilt",
                self.config.ndk_host_tag,
                "bin",
            )
            prebuilt_exists = self.check_dir("NDK LLVM toolchain", prebuilt)
            if self.verbose:
                self.print_info(f"Android API level: {self.config.android_api}")
        else:
            self.print_info(f"Set {ANDROID_NDK_ENV} to your Android NDK path")
        self.results["android"] = {"android_ndk": ndk_exists, "toolchain": prebuilt_exists}

    def check_all(self):
        """Check everything the configured targets need"""
        self.print_info(f"Checking ICU build configuration on {self.current_os}")
        if self.verbose:
            self.print_info(f"Targets: {', '.join(self.config.targets)}")

        self.check_common()
        self.check_inputs()

        family_checks = {
            MACOS: self.check_macos,
            LINUX: self.check_linux,
            OHOS: self.check_ohos,
            ANDROID: self.check_android,
        }
        for family in self.get_families():
            family_checks[family]()

    def print_summary(self):
        """Print summary of check results, exit 1 if anything is missing"""
        self.print_section("Summary")

        for name, checks in self.results.items():
            status = "✅ READY" if all(checks.values()) else "❌ NOT READY"
            print(f"  {name.upper()}: {status}")
            if self.verbose:
                for check, result in checks.items():
                    symbol = "✅" if result else "❌"
                    print(f"    {symbol} {check}")

        print(f"\n{'='*60}")
        if self.errors:
            print(f"  Total Errors: {len(self.errors)}")
        if self.warnings:
            print(f"  Total Warnings: {len(self.warnings)}")
        print(f"{'='*60}\n")

        if self.errors:
            print("💡 Some requirements are missing. See details above.")
            sys.exit(1)
        print("🎉 Everything needed to build ICU is in place!")
