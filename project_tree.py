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

"""Turn nested <project> trees into flat lists of projects."""

import posixpath
from typing import Iterable, List, Union

from manifest_xml import FlatProject
from manifest_xml import Project


def JoinRelpath(parent_relpath, relpath):
    """Return |relpath| resolved against its parent project's path."""
    if not parent_relpath:
        return relpath
    return posixpath.normpath(posixpath.join(parent_relpath, relpath or ""))


def Flatten(project: Project, parent_relpath="") -> List[FlatProject]:
    """Flatten |project| and its subprojects into a list.

    The first entry is |project| itself, followed by the flattened form of
    each subproject in the order they were declared.  Paths of nested projects
    are joined onto their parent's path.

    |project|.path is rewritten in place to the joined path, so callers should
    use the returned list rather than the tree afterwards.  Flattening the
    same tree again keeps the already joined paths.
    """
    if not project.flattened:
        project.path = JoinRelpath(parent_relpath, project.path)
        project.flattened = True
    projects = [FlatProject.FromProject(project, project.path)]
    for subproject in project.subprojects:
        projects.extend(Flatten(subproject, project.path))
    return projects


def FlattenAll(
    projects: Iterable[Union[Project, FlatProject]]
) -> List[FlatProject]:
    """Flatten a list of top-level projects in order.

    Entries that are already flat are passed through as they are.
    """
    ret = []
    for project in projects:
        if isinstance(project, FlatProject):
            ret.append(project)
        else:
            ret.extend(Flatten(project))
    return ret
