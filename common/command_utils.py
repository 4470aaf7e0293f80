# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.

Output of every child process is routed through the logging system line by
line, so it lands in the installer's log file as well as on the console.
"""

import logging
import os
import shlex
import subprocess
from typing import Dict, List, Optional, Union

from common.exceptions import ExternalCommandError
from ros2_installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message at the named level.

    Args:
        message (str): The log message to be recorded.
        level (str): "debug", "info", "warning", "error" or "critical".
            Anything else (e.g. "success") is logged at info.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to
            the module logger.
        app_settings (Optional[AppSettings]): Application settings. Accepted so
            callers can pass them uniformly; not used for routing.
        exc_info (bool): Include exception details in the record.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def _symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def _get_elevated_command_prefix() -> List[str]:
    """Return ["sudo"] unless the process already runs with euid 0."""
    return [] if os.geteuid() == 0 else ["sudo"]


def _run_streaming(
    command: List[str],
    cmd_input: Optional[str],
    cwd: Optional[str],
    env: Optional[Dict[str, str]],
    logger: logging.Logger,
) -> subprocess.CompletedProcess:
    output_lines: List[str] = []
    with subprocess.Popen(
        command,
        stdin=subprocess.PIPE if cmd_input is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        bufsize=1,
        cwd=cwd,
        env=env,
    ) as process:
        if cmd_input is not None and process.stdin is not None:
            process.stdin.write(cmd_input)
            process.stdin.close()
        if process.stdout is not None:
            for raw_line in process.stdout:
                line = raw_line.rstrip("\n")
                output_lines.append(line)
                logger.info(f"   {line}")
        returncode = process.wait()
    return subprocess.CompletedProcess(
        command, returncode, stdout="\n".join(output_lines), stderr=None
    )


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    Without capture_output the child's stdout and stderr are merged and each
    line is logged as it arrives. With capture_output both streams are
    collected and logged at debug level once the command finishes.

    Args:
        command (Union[List[str], str]): The command to execute. Strings are
            split with shlex.
        app_settings (Optional[AppSettings]): Settings providing log symbols.
        check (bool): Raise ExternalCommandError on a non-zero exit code.
        capture_output (bool): Collect output instead of streaming it.
        cmd_input (Optional[str]): Text passed to the command's stdin.
        current_logger (Optional[logging.Logger]): Logger to use.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command.

    Returns:
        subprocess.CompletedProcess: The completed process.

    Raises:
        ExternalCommandError: The command could not be started, or exited
            non-zero while check is True.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _symbols(app_settings)

    if isinstance(command, str):
        log_installer(
            f"Running string command '{command}'. Consider list format.",
            "warning",
            effective_logger,
            app_settings,
        )
        command_to_run = shlex.split(command)
    else:
        command_to_run = list(command)
    command_to_log_str = subprocess.list2cmdline(command_to_run)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}".rstrip(),
        "info",
        effective_logger,
        app_settings,
    )
    try:
        if capture_output:
            result = subprocess.run(
                command_to_run,
                check=False,
                capture_output=True,
                text=True,
                input=cmd_input,
                cwd=cwd,
                env=env,
            )
            if result.stdout and result.stdout.strip():
                log_installer(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if result.stderr and result.stderr.strip():
                log_installer(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        else:
            result = _run_streaming(
                command_to_run, cmd_input, cwd, env, effective_logger
            )
    except FileNotFoundError as e:
        log_installer(
            f"Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise ExternalCommandError(
            f"Command not found: {e.filename}",
            command=command_to_run,
            original_error=e,
        ) from e
    except OSError as e:
        log_installer(
            f"Could not start `{command_to_log_str}`: {e}",
            "error",
            effective_logger,
            app_settings,
        )
        raise ExternalCommandError(
            f"Could not start `{command_to_log_str}`: {e}",
            command=command_to_run,
            original_error=e,
        ) from e

    if check and result.returncode != 0:
        error = subprocess.CalledProcessError(
            result.returncode,
            command_to_run,
            output=result.stdout,
            stderr=result.stderr,
        )
        log_installer(
            f"Command `{command_to_log_str}` failed (rc {result.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if capture_output and result.stderr and result.stderr.strip():
            log_installer(
                f"   stderr: {result.stderr.strip()}",
                "error",
                effective_logger,
                app_settings,
            )
        raise ExternalCommandError.from_called_process_error(error) from error
    return result


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with elevated permissions by prefixing it with sudo
    when the process is not already root. See run_command for arguments.
    """
    prefix = _get_elevated_command_prefix()
    elevated_command_list = prefix + list(command)
    return run_command(
        elevated_command_list,
        app_settings,
        check=check,
        capture_output=capture_output,
        cmd_input=cmd_input,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
    )
