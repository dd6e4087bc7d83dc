# Copyright (C) 2008 The Android Open Source Project
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

from typing import List


class BaseRepoError(Exception):
    """All repo specific exceptions derive from BaseRepoError."""


class RepoExitError(BaseRepoError):
    """Exception thrown that result in termination of repo program.
    - Should only be handled in main.py
    """

    def __init__(
        self,
        *args,
        exit_code: int = 1,
        aggregate_errors: List[Exception] = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.exit_code = exit_code
        self.aggregate_errors = aggregate_errors


class ManifestError(RepoExitError):
    """A manifest document could not be loaded or combined.

    |path| is the manifest file the problem is attributed to.
    """

    def __init__(self, *args, path: str = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.path = path


class ManifestFileAccessError(ManifestError):
    """A manifest file is missing or unreadable."""


class ManifestParseError(ManifestError):
    """Failed to parse the manifest file."""


class ManifestRecursionError(ManifestError):
    """Too many nested <include> elements, most likely a circular include."""

    def __init__(self, *args, include: str = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.include = include


class ManifestMergeError(ManifestError):
    """Two manifest documents conflict with each other."""


class DuplicateNoticeError(ManifestMergeError):
    """More than one distinct <notice> was given."""


class DuplicateRemoteError(ManifestMergeError):
    """A <remote> was redefined with different attributes."""


class DuplicateDefaultError(ManifestMergeError):
    """A <default> was redefined with different attributes."""


class DuplicateServerError(ManifestMergeError):
    """A <manifest-server> was redefined with a different url."""


class DuplicatePathError(ManifestMergeError):
    """Two projects were checked out at the same path."""

    def __init__(self, *args, relpath: str = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.relpath = relpath


class GitError(RepoExitError):
    """Unspecified git related error."""

    def __init__(self, message, command_args=None, **kwargs):
        super().__init__(message, **kwargs)
        self.message = message
        self.command_args = command_args

    def __str__(self):
        return self.message


class InvalidArgumentsError(RepoExitError):
    """Invalid command Arguments."""
