# Copyright (C) 2023 The Android Open Source Project
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logic for printing user-friendly logs in repo."""

import logging

from error import RepoExitError


SEPARATOR = "=" * 80
MAX_PRINT_ERRORS = 5

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

# Level given to loggers that do not ask for one.
_level = logging.INFO
_ALL_LOGGERS = []


class _LogFormatter(logging.Formatter):
    """Formatter that tags warnings and errors with their level."""

    levelMap = {
        "WARNING": "warning: ",
        "ERROR": "error: ",
        "CRITICAL": "fatal: ",
    }

    def format(self, record):
        """Formats |record| with a level prefix."""
        msg = super().format(record)
        prefix = self.levelMap.get(record.levelname, "")
        if msg.startswith(prefix):
            return msg
        return prefix + msg


class RepoLogger(logging.Logger):
    """Repo Logging Module."""

    def __init__(self, name: str, level=None, **kwargs):
        super().__init__(name, _level if level is None else level, **kwargs)
        handler = logging.StreamHandler()
        handler.setFormatter(_LogFormatter())
        self.addHandler(handler)
        _ALL_LOGGERS.append(self)

    def log_aggregated_errors(self, err: RepoExitError):
        """Print all aggregated logs."""
        self.error(SEPARATOR)

        if not err.aggregate_errors:
            self.error("Repo command failed: %s", type(err).__name__)
            self.error("\t%s", str(err))
            return

        self.error(
            "Repo command failed due to the following `%s` errors:",
            type(err).__name__,
        )
        self.error(
            "\n".join(str(e) for e in err.aggregate_errors[:MAX_PRINT_ERRORS])
        )

        diff = len(err.aggregate_errors) - MAX_PRINT_ERRORS
        if diff > 0:
            self.error("+%d additional errors...", diff)


def SetLogLevel(level: str):
    """Apply |level| (one of LOG_LEVELS) to every RepoLogger."""
    global _level
    _level = getattr(logging, level.upper())
    for logger in _ALL_LOGGERS:
        logger.setLevel(_level)
