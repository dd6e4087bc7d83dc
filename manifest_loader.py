# Copyright (C) 2009 The Android Open Source Project
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

"""Find, load and merge all the manifests of a repo client."""

import os
from typing import List, Optional

from git_config import GitConfig
from manifest_include import ResolveIncludes
from manifest_merge import MergeManifests
from manifest_xml import LOCAL_MANIFEST_NAME
from manifest_xml import LOCAL_MANIFESTS_DIR_NAME
from manifest_xml import MANIFEST_FILE_NAME
from manifest_xml import Manifest
import platform_utils
from repo_logging import RepoLogger


MANIFESTS_DIR_NAME = "manifests"
DEFAULT_MANIFEST_NAME = "default.xml"
# Config key (in the manifests checkout) naming the manifest to use.
DEFAULT_MANIFEST_KEY = "manifest.default"

logger = RepoLogger(__file__)


class ManifestLoader:
    """Loads the merged manifest of the client rooted at |topdir|.

    Args:
      topdir: The directory holding manifest.xml, manifests/ and the local
          manifests.
      config: Object with a GetString(name) method, used to look up
          DEFAULT_MANIFEST_KEY when there is no manifest.xml.  Defaults to
          the git config of the manifests/ checkout.
      manifest_name: Load this file from manifests/ instead of the usual
          manifest, just for this instance.
      load_local_manifests: Whether to apply the local manifests.
    """

    def __init__(
        self,
        topdir,
        config=None,
        manifest_name=None,
        load_local_manifests=True,
    ):
        self.topdir = topdir
        self.manifestName = manifest_name
        self.loadLocalManifests = load_local_manifests
        self.manifestsDir = os.path.join(topdir, MANIFESTS_DIR_NAME)
        self.localManifest = os.path.join(topdir, LOCAL_MANIFEST_NAME)
        self.localManifestsDir = os.path.join(topdir, LOCAL_MANIFESTS_DIR_NAME)
        self._config = config

    @property
    def config(self):
        if self._config is None:
            self._config = GitConfig.ForRepository(
                os.path.join(self.manifestsDir, ".git")
            )
        return self._config

    def ManifestFile(self) -> str:
        """Return the path of the manifest to start loading from.

        The file may not exist, e.g. in a client that was never initialized.
        """
        if self.manifestName:
            return os.path.join(self.manifestsDir, self.manifestName)

        path = os.path.join(self.topdir, MANIFEST_FILE_NAME)
        if os.path.exists(path):
            return path

        name = self.config.GetString(DEFAULT_MANIFEST_KEY)
        if not name:
            name = DEFAULT_MANIFEST_NAME
        return os.path.join(self.manifestsDir, name)

    def LocalManifestFiles(self) -> List[str]:
        """Return the local manifests to apply on top of the manifest.

        The deprecated local_manifest.xml comes first, then every .xml file
        found under local_manifests/, walked in sorted order.
        """
        files = []
        if platform_utils.isfile(self.localManifest):
            logger.warning(
                "%s is deprecated; put local manifests in `%s` instead",
                self.localManifest,
                self.localManifestsDir,
            )
            files.append(self.localManifest)

        if platform_utils.isdir(self.localManifestsDir):
            found = []
            for root, _, names in platform_utils.walk(self.localManifestsDir):
                for name in names:
                    if name.endswith(".xml"):
                        found.append(os.path.join(root, name))

            # Same order as a walk visiting each directory's entries sorted.
            def _walk_order(path):
                relpath = os.path.relpath(path, self.localManifestsDir)
                return relpath.split(os.sep)

            files.extend(sorted(found, key=_walk_order))
        return files

    def Load(self) -> Optional[Manifest]:
        """Read the manifests from disk and merge them.

        Returns:
          The merged Manifest, or None when the manifest file does not exist
          (an uninitialized client).

        Raises:
          ManifestError: A manifest could not be loaded or merged.
        """
        path = self.ManifestFile()
        if not os.path.exists(path):
            logger.debug("%s: no manifest, client is not initialized", path)
            return None

        manifests = ResolveIncludes(path)
        if self.loadLocalManifests:
            for local in self.LocalManifestFiles():
                manifests.extend(ResolveIncludes(local))
        return MergeManifests(manifests)


def ParseManifest(topdir, config=None) -> Optional[Manifest]:
    return ManifestLoader(topdir, config=config).Load()


_manifest = None


def GetManifest(topdir, reparse=False) -> Optional[Manifest]:
    """Return the merged manifest of |topdir|, parsing it once per process."""
    global _manifest
    if _manifest is None or reparse or _manifest[0] != topdir:
        _manifest = (topdir, ParseManifest(topdir))
    return _manifest[1]
