# Copyright (C) 2019 The Android Open Source Project
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

"""Unittests for the project_tree.py module."""

import unittest

from manifest_xml import Annotation
from manifest_xml import CopyFile
from manifest_xml import FlatProject
from manifest_xml import Project
import project_tree


class JoinRelpathTests(unittest.TestCase):
    """Check JoinRelpath helper."""

    def test_no_parent(self):
        self.assertEqual("foo", project_tree.JoinRelpath("", "foo"))
        self.assertIsNone(project_tree.JoinRelpath("", None))

    def test_parent(self):
        self.assertEqual("base/sub", project_tree.JoinRelpath("base", "sub"))
        self.assertEqual(
            "base/sub/x", project_tree.JoinRelpath("base/", "sub/./x")
        )

    def test_missing_child_path(self):
        """A child without a path sits at its parent's path."""
        self.assertEqual("base", project_tree.JoinRelpath("base", None))


class FlattenTests(unittest.TestCase):
    """Check Flatten and FlattenAll."""

    def test_top_level_only(self):
        """Projects without children flatten to themselves."""
        projects = [
            Project(name="a", path="a"),
            Project(name="b", path="libs/b", groups="core"),
            Project(name="c", path="c", revision="main"),
        ]
        flat = project_tree.FlattenAll(projects)
        self.assertEqual(3, len(flat))
        for p, f in zip(projects, flat):
            self.assertIsInstance(f, FlatProject)
            self.assertEqual(p.name, f.name)
            self.assertEqual(p.path, f.path)
            self.assertEqual(p.groups, f.groups)
            self.assertEqual(p.revision, f.revision)

    def test_one_child(self):
        """A parent comes before its child, whose path is joined."""
        parent = Project(
            name="parent",
            path="base",
            subprojects=[Project(name="child", path="sub")],
        )
        flat = project_tree.Flatten(parent)
        self.assertEqual(["base", "base/sub"], [p.path for p in flat])
        self.assertEqual(["parent", "child"], [p.name for p in flat])
        self.assertFalse(hasattr(flat[0], "subprojects"))

    def test_deep_tree_order(self):
        """Children are visited depth first, in declaration order."""
        tree = Project(
            name="a",
            path="a",
            subprojects=[
                Project(
                    name="b",
                    path="b",
                    subprojects=[Project(name="c", path="c")],
                ),
                Project(name="d", path="d"),
            ],
        )
        flat = project_tree.FlattenAll([tree, Project(name="e", path="e")])
        self.assertEqual(
            ["a", "a/b", "a/b/c", "a/d", "e"], [p.path for p in flat]
        )

    def test_parent_path(self):
        child = Project(name="child", path="sub")
        flat = project_tree.Flatten(child, "top")
        self.assertEqual(["top/sub"], [p.path for p in flat])

    def test_rewrites_tree_paths(self):
        """The tree nodes are left holding the joined paths."""
        child = Project(name="child", path="sub")
        parent = Project(name="parent", path="base", subprojects=[child])
        project_tree.Flatten(parent)
        self.assertEqual("base/sub", child.path)

    def test_flatten_twice(self):
        """Flattening the same tree again gives the same paths."""
        child = Project(name="child", path="sub")
        parent = Project(name="parent", path="base", subprojects=[child])
        first = [p.path for p in project_tree.Flatten(parent)]
        second = [p.path for p in project_tree.Flatten(parent)]
        self.assertEqual(first, second)

    def test_keeps_children_elements(self):
        """Annotations and file copies are carried over."""
        parent = Project(
            name="parent",
            path="base",
            annotations=[Annotation(name="k", value="v")],
            copyfiles=[CopyFile(src="a", dest="b")],
            subprojects=[Project(name="child", path="sub")],
        )
        flat = project_tree.Flatten(parent)
        self.assertEqual([Annotation(name="k", value="v")], flat[0].annotations)
        self.assertEqual([CopyFile(src="a", dest="b")], flat[0].copyfiles)
        self.assertEqual([], flat[1].annotations)

    def test_flat_entries_pass_through(self):
        flat = FlatProject(name="x", path="deep/x")
        self.assertEqual([flat], project_tree.FlattenAll([flat]))
