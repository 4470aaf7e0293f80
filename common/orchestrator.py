# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Centralized orchestrator for managing and executing sequences of tasks.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from common.exceptions import InstallerError


class Orchestrator:
    """A centralized orchestrator to run a series of defined tasks."""

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            orchestrator_logger: An optional logger instance.
        """
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        # Shared context for tasks to pass state between each other
        self.context: Dict[str, Any] = {}

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
        numbered: bool = True,
    ):
        """
        Adds a task to the execution list.

        Args:
            name: A human-readable name for the task.
            func: The function to execute for this task.
            args: A list of positional arguments to pass to the function.
            kwargs: A dictionary of keyword arguments to pass to the function.
            fatal: If True, a failure in this task halts the orchestration and
                the exception is re-raised to the caller.
            numbered: If True, the task is announced as "[i/N] name".
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
            "fatal": fatal,
            "numbered": numbered,
        })
        self.logger.debug(f"Task '{name}' added to the queue.")

    def run(self) -> bool:
        """
        Executes all added tasks in sequence.

        Returns:
            True if every task succeeded, False if a non-fatal task failed.

        Raises:
            Exception: Whatever a fatal task raised.
        """
        total_numbered = sum(1 for task in self.tasks if task["numbered"])
        step_number = 0
        all_succeeded = True

        for task in self.tasks:
            task_name = task["name"]
            if task["numbered"]:
                step_number += 1
                self.logger.info(
                    f"[{step_number}/{total_numbered}] {task_name}..."
                )
            else:
                self.logger.info(f"{task_name}...")

            try:
                # Pass the shared context to every function
                task["kwargs"]["context"] = self.context
                task["kwargs"]["app_settings"] = self.app_settings

                result = task["func"](*task["args"], **task["kwargs"])
                self.context[f"{task_name}_result"] = result

                self.logger.debug(
                    f"Task '{task_name}' completed successfully."
                )

            except Exception as e:
                self.logger.critical(
                    f"Task '{task_name}' failed: {e}",
                    exc_info=not isinstance(e, InstallerError),
                )
                if task["fatal"]:
                    self.logger.error(
                        "A fatal error occurred. Halting orchestration."
                    )
                    raise
                self.logger.warning(
                    f"Task '{task_name}' was non-fatal. Continuing orchestration."
                )
                all_succeeded = False

        self.logger.info("✨ Orchestration finished.")
        return all_succeeded
