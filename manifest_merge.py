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

"""Combine manifest documents into a single manifest.

Documents are folded one at a time into an accumulator.  Each fold either
updates the accumulator or raises; a failed merge never yields a partial
manifest.
"""

from typing import Iterable

from error import DuplicateDefaultError
from error import DuplicateNoticeError
from error import DuplicatePathError
from error import DuplicateRemoteError
from error import DuplicateServerError
from manifest_xml import Manifest
from repo_logging import RepoLogger


logger = RepoLogger(__file__)


def _JoinGroups(groups, extra):
    """Append the |extra| groups onto |groups|.  Both are comma separated."""
    if not groups:
        return extra
    if not extra:
        return groups
    return ",".join(groups.split(",") + extra.split(","))


def Merge(manifest: Manifest, other: Manifest):
    """Fold |other| into |manifest|, updating |manifest| in place.

    <repo-hooks> in |other| are not merged.

    Raises:
      ManifestMergeError: |other| conflicts with what was merged so far.
    """
    src = other.sourceFile

    if other.notice:
        if not manifest.notice:
            manifest.notice = other.notice
        elif manifest.notice != other.notice:
            raise DuplicateNoticeError(
                "duplicate notice in %s" % (src,), path=src
            )

    for remote in other.remotes:
        existing = manifest.GetRemote(remote.name)
        if existing is None:
            manifest.remotes.append(remote)
        elif existing != remote:
            raise DuplicateRemoteError(
                "remote %s already exists with different attributes in %s"
                % (remote.name, src),
                path=src,
            )

    if other.default is not None:
        if manifest.default is None:
            manifest.default = other.default
        elif manifest.default != other.default:
            raise DuplicateDefaultError(
                "duplicate default in %s" % (src,), path=src
            )

    if other.server is not None:
        if manifest.server is None:
            manifest.server = other.server
        elif manifest.server != other.server:
            raise DuplicateServerError(
                "duplicate manifest-server in %s" % (src,), path=src
            )

    paths = set()
    for p in manifest.AllProjects():
        if p.path in paths:
            raise DuplicatePathError(
                "duplicate path for project '%s' in '%s'"
                % (p.path, manifest.sourceFile),
                path=manifest.sourceFile,
                relpath=p.path,
            )
        paths.add(p.path)

    for p in other.AllProjects():
        if p.path in paths:
            raise DuplicatePathError(
                "duplicate path for project '%s' in '%s'" % (p.path, src),
                path=src,
                relpath=p.path,
            )
        manifest.projects.append(p)
        paths.add(p.path)

    removed = set(r.name for r in other.remove_projects)
    projects = []
    for p in manifest.AllProjects():
        if p.name in removed:
            logger.debug("%s: removing project %s at %s", src, p.name, p.path)
        else:
            projects.append(p)
    manifest.projects = projects

    # A later <extend-project> for the same name replaces an earlier one.
    extensions = {}
    for ext in other.extend_projects:
        if ext.name in extensions:
            logger.debug(
                "%s: extend-project %s at %s replaces the one at %s",
                src,
                ext.name,
                ext.path,
                extensions[ext.name].path,
            )
        extensions[ext.name] = ext
    for p in manifest.projects:
        ext = extensions.get(p.name)
        if ext is None or ext.path != p.path:
            continue
        p.groups = _JoinGroups(p.groups, ext.groups)
        if ext.revision:
            p.revision = ext.revision


def MergeManifests(manifests: Iterable[Manifest]) -> Manifest:
    """Merge |manifests| in order into a new Manifest.

    Raises:
      ManifestMergeError: The first conflict found; nothing is returned.
    """
    manifest = Manifest()
    for m in manifests:
        logger.debug("merging %s", m.sourceFile)
        Merge(manifest, m)
    return manifest
