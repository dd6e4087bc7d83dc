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

"""Read-only access to git-style configuration files."""

import os
import subprocess
from typing import Optional

from error import GitError
from repo_logging import RepoLogger


GIT = "git"

logger = RepoLogger(__file__)


def _key(name):
    parts = name.split(".")
    if len(parts) < 2:
        return name.lower()
    parts[0] = parts[0].lower()
    parts[-1] = parts[-1].lower()
    return ".".join(parts)


class GitConfig:
    """Values from one git config file, read through `git config`.

    The file is only ever read; a missing file is an empty config.
    """

    @classmethod
    def ForRepository(cls, gitdir):
        return cls(configfile=os.path.join(gitdir, "config"))

    def __init__(self, configfile):
        self.file = configfile
        self._cache_dict = None

    def GetString(self, name: str) -> Optional[str]:
        """Get the first value for a key, or None if it is not defined."""
        v = self._cache.get(_key(name))
        if v:
            return v[0]
        return None

    @property
    def _cache(self):
        if self._cache_dict is None:
            self._cache_dict = self._ReadGit()
        return self._cache_dict

    def _ReadGit(self):
        """
        Read configuration data from git.

        This internal method populates the GitConfig cache.

        """
        c = {}
        if not os.path.exists(self.file):
            return c

        d = self._do("--null", "--list")
        for line in d.rstrip("\0").split("\0"):
            if not line:
                continue
            if "\n" in line:
                key, val = line.split("\n", 1)
            else:
                key = line
                val = None

            if key in c:
                c[key].append(val)
            else:
                c[key] = [val]

        return c

    def _do(self, *args):
        command = [GIT, "config", "--file", self.file, "--includes"]
        command.extend(args)

        logger.debug(": %s", " ".join(command))
        try:
            p = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                check=False,
            )
        except OSError as e:
            raise GitError(
                "git config %s: %s" % (str(args), e), command_args=command
            )
        if p.returncode == 0:
            return p.stdout
        else:
            raise GitError(
                "git config %s: %s" % (str(args), p.stderr),
                command_args=command,
            )


class MemoryConfig:
    """A configuration held in a dict, for callers without a config file.

    Keys use the same spelling rules as GitConfig.
    """

    def __init__(self, values=None):
        self._values = dict((_key(k), v) for k, v in (values or {}).items())

    def GetString(self, name: str):
        return self._values.get(_key(name))
