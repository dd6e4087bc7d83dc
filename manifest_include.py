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

"""Expand <include> elements into an ordered list of manifest documents."""

import os
from typing import List

from error import ManifestParseError
from error import ManifestRecursionError
from manifest_xml import Manifest
from manifest_xml import ParseManifestFile
from repo_logging import RepoLogger


# Limit nested includes to an arbitrary depth for loop detection.
MAX_INCLUDE_DEPTH = 10

logger = RepoLogger(__file__)


def ResolveIncludes(path, depth=1) -> List[Manifest]:
    """Parse |path| and every manifest it includes, recursively.

    The result is in pre-order: a document comes before the documents it
    includes, and includes are expanded in the order they are declared.

    Args:
      path: The manifest file to parse.
      depth: The include depth of |path|; the file named by the user is 1.

    Returns:
      List of Manifest, starting with the one parsed from |path|.

    Raises:
      ManifestRecursionError: The includes nest deeper than MAX_INCLUDE_DEPTH.
      ManifestFileAccessError: A manifest file could not be read.
      ManifestParseError: A manifest file is not valid.
    """
    m = ParseManifestFile(path)
    manifests = [m]

    for include in m.includes:
        if not include.name:
            raise ManifestParseError(
                "no name in <include> within %s" % (path,), path=path
            )
        fp = os.path.join(os.path.dirname(path), include.name)

        if depth > MAX_INCLUDE_DEPTH:
            raise ManifestRecursionError(
                "exceeded maximum include depth (%d) while including\n"
                "\t%s\n"
                "from\n"
                "\t%s\n"
                "This might be due to circular includes"
                % (MAX_INCLUDE_DEPTH, fp, path),
                path=path,
                include=fp,
            )

        logger.debug("%s: including %s (depth %d)", path, fp, depth + 1)
        manifests.extend(ResolveIncludes(fp, depth + 1))

    return manifests
