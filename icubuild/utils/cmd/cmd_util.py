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

import shlex
import subprocess

# exit code reported when the executable itself cannot be started,
# same as a POSIX shell's "command not found"
COMMAND_NOT_FOUND = 127


def decode_bytes(input: bytes) -> str:
    err_msg = ""
    try:
        err_msg = bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        err_msg = bytes.decode(input, "GBK")
    return err_msg


def format_command(command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(str(arg) for arg in command)


def run_command(command, cwd=None, env=None) -> int:
    """
    Run an external command, streaming its output to the console.

    No timeout is applied: configure and make of a full ICU tree
    can take a long time and are waited for until they exit.

    Args:
        command: Argument list (or a string, run through the shell)
        cwd: Working directory of the child process
        env: Complete environment of the child process (None inherits ours)

    Returns:
        int: Exit code of the command
    """
    print(f"build cmd: [{format_command(command)}]")
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            env=env,
            shell=isinstance(command, str),
        )
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        return COMMAND_NOT_FOUND
    return completed.returncode


def exec_command(command, cwd=None):
    """
    Run a short command and capture stdout and stderr combined.

    Returns:
        tuple: (exit_code, output_message)
    """
    try:
        compile_popen = subprocess.Popen(
            command,
            cwd=cwd,
            shell=isinstance(command, str),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except FileNotFoundError as e:
        return COMMAND_NOT_FOUND, str(e)
    stdout, _ = compile_popen.communicate()
    err_code = compile_popen.returncode
    err_msg = decode_bytes(stdout)
    return err_code, err_msg
