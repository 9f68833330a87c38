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
import shutil

from icubuild.utils.context.namespace import CliNameSpace
from icubuild.utils.context.context import CliContext
from icubuild.utils.context.command import CliCommand
from icubuild.build_scripts.build_config import load_build_config
from icubuild.build_scripts.build_utils import BuildError


class Clean(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to clean build artifacts.

        Cleans the following directories:
        - icu/                    # Extracted ICU source tree and build-* directories
        - libs/                   # Collected static libraries (only with --all)

        Examples:
            icubuild clean              # Remove the extracted source tree
            icubuild clean --all        # Also remove the collected libraries
            icubuild clean --dry-run    # Preview what will be cleaned
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="icubuild clean",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Also remove the output directory with the collected libraries",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleaned without actually deleting",
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
        print("Cleaning build artifacts...\n")
        try:
            config = load_build_config(
                project_dir=context.project_dir,
                environ=context.environ,
                config_path=args.config,
            )
        except BuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        cleaner = ProjectCleaner(dry_run=args.dry_run)
        cleaner.clean_dir(config.icu_root, f"{config.source_dir}/")
        if args.all:
            cleaner.clean_dir(config.libs_root, f"{config.output_dir}/")
        cleaner.print_summary()
        if cleaner.failed_dirs:
            sys.exit(1)


class ProjectCleaner:
    def __init__(self, dry_run=False):
        self.dry_run = dry_run
        self.cleaned_dirs = []
        self.cleaned_size = 0
        self.failed_dirs = []

    def get_dir_size(self, path):
        """Get total size of directory in bytes"""
        total_size = 0
        for dirpath, dirnames, filenames in os.walk(path):
            for filename in filenames:
                filepath = os.path.join(dirpath, filename)
                if not os.path.islink(filepath):
                    total_size += os.path.getsize(filepath)
        return total_size

    def format_size(self, size_bytes):
        """Format bytes to human-readable size"""
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size_bytes < 1024.0:
                return f"{size_bytes:.2f} {unit}"
            size_bytes /= 1024.0
        return f"{size_bytes:.2f} TB"

    def clean_dir(self, dir_path, display_name):
        """Remove a directory and track the result"""
        print("="*60)
        print(f"  Cleaning {display_name} directory")
        print("="*60)

        if not os.path.isdir(dir_path):
            print(f"  ℹ️  {display_name} directory does not exist")
            return False

        size = self.get_dir_size(dir_path)
        if self.dry_run:
            print(f"  [DRY RUN] Would remove: {display_name} ({self.format_size(size)})")
            return True

        try:
            shutil.rmtree(dir_path)
        except OSError as e:
            self.failed_dirs.append((display_name, str(e)))
            print(f"  ❌ Failed to remove {display_name}: {e}")
            return False
        self.cleaned_dirs.append(display_name)
        self.cleaned_size += size
        print(f"  ✅ Removed: {display_name} ({self.format_size(size)})")
        return True

    def print_summary(self):
        """Print summary of cleaning operation"""
        print("\n" + "="*60)
        print("  Cleaning Summary")
        print("="*60)

        if self.dry_run:
            print("  [DRY RUN MODE - No files were actually deleted]")

        if self.cleaned_dirs:
            print(f"  ✅ Successfully cleaned {len(self.cleaned_dirs)} directories:")
            for dir_name in self.cleaned_dirs:
                print(f"     - {dir_name}")
            print(f"\n  💾 Total space freed: {self.format_size(self.cleaned_size)}")
        else:
            print("  ℹ️  No directories were cleaned")

        if self.failed_dirs:
            print(f"\n  ❌ Failed to clean {len(self.failed_dirs)} directories:")
            for dir_name, error in self.failed_dirs:
                print(f"     - {dir_name}: {error}")

        print("="*60 + "\n")

        if self.dry_run:
            print("💡 Tip: Run without --dry-run to actually delete the files")
