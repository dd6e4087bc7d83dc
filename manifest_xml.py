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

"""The manifest document model and its XML form."""

import itertools
import sys
from typing import List, Optional
import xml.dom.minidom
import xml.parsers.expat

from error import ManifestFileAccessError
from error import ManifestParseError
from repo_logging import RepoLogger


MANIFEST_FILE_NAME = "manifest.xml"
LOCAL_MANIFEST_NAME = "local_manifest.xml"
LOCAL_MANIFESTS_DIR_NAME = "local_manifests"

logger = RepoLogger(__file__)


class _XmlElement:
    """An element whose fields are plain XML attributes.

    Subclasses list their attributes in |_ATTRS| as (xml name, field name)
    pairs.  Fields hold the attribute string, or None when it is not set.
    """

    TAG = None
    _ATTRS = ()

    def __init__(self, **kwargs):
        for _, field in self._ATTRS:
            setattr(self, field, kwargs.pop(field, None))
        if kwargs:
            raise TypeError(
                "%s got unexpected fields: %s"
                % (type(self).__name__, ", ".join(sorted(kwargs)))
            )

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        fields = ", ".join(
            "%s=%r" % (field, getattr(self, field))
            for _, field in self._ATTRS
            if getattr(self, field) is not None
        )
        return "%s(%s)" % (type(self).__name__, fields)

    @classmethod
    def _FromNode(cls, node):
        """Build an instance from the attributes of |node|."""
        values = {}
        for attr, field in cls._ATTRS:
            values[field] = _XmlAttr(node, attr)
        return cls(**values)

    def _ToNode(self, doc):
        """Return a new XML element holding the attributes that are set."""
        e = doc.createElement(self.TAG)
        for attr, field in self._ATTRS:
            value = getattr(self, field)
            if value is not None:
                e.setAttribute(attr, value)
        return e


def _XmlAttr(node, attr):
    """Return |node|'s |attr|, or None if it is missing or empty."""
    value = node.getAttribute(attr)
    if value == "":
        return None
    return value


class Annotation(_XmlElement):
    TAG = "annotation"
    _ATTRS = (
        ("name", "name"),
        ("value", "value"),
        ("keep", "keep"),
    )


class CopyFile(_XmlElement):
    TAG = "copyfile"
    _ATTRS = (
        ("src", "src"),
        ("dest", "dest"),
    )


class LinkFile(_XmlElement):
    TAG = "linkfile"
    _ATTRS = (
        ("src", "src"),
        ("dest", "dest"),
    )


class Remote(_XmlElement):
    """A <remote> element.  Remotes are identified by |name|."""

    TAG = "remote"
    _ATTRS = (
        ("name", "name"),
        ("alias", "alias"),
        ("fetch", "fetch"),
        ("pushurl", "pushUrl"),
        ("review", "review"),
        ("revision", "revision"),
    )


class Default(_XmlElement):
    """Project defaults within the manifest."""

    TAG = "default"
    _ATTRS = (
        ("remote", "remote"),
        ("revision", "revision"),
        ("dest-branch", "destBranch"),
        ("upstream", "upstream"),
        ("sync-j", "sync_j"),
        ("sync-c", "sync_c"),
        ("sync-s", "sync_s"),
        ("sync-tags", "sync_tags"),
    )


class Server(_XmlElement):
    """The <manifest-server> element."""

    TAG = "manifest-server"
    _ATTRS = (("url", "url"),)


class RemoveProject(_XmlElement):
    TAG = "remove-project"
    _ATTRS = (("name", "name"),)


class ExtendProject(_XmlElement):
    TAG = "extend-project"
    _ATTRS = (
        ("name", "name"),
        ("path", "path"),
        ("groups", "groups"),
        ("revision", "revision"),
    )


class RepoHooks(_XmlElement):
    TAG = "repo-hooks"
    _ATTRS = (
        ("in-project", "in_project"),
        ("enabled-list", "enabled_list"),
    )


class Include(_XmlElement):
    TAG = "include"
    _ATTRS = (("name", "name"),)


class _ProjectBase(_XmlElement):
    """Attributes shared by the tree and the flat form of a project."""

    TAG = "project"
    _ATTRS = (
        ("name", "name"),
        ("path", "path"),
        ("remote", "remote"),
        ("revision", "revision"),
        ("dest-branch", "dest_branch"),
        ("groups", "groups"),
        ("sync-c", "sync_c"),
        ("sync-s", "sync_s"),
        ("sync-tags", "sync_tags"),
        ("upstream", "upstream"),
        ("clone-depth", "clone_depth"),
        ("force-path", "force_path"),
    )

    def __init__(self, annotations=None, copyfiles=None, linkfiles=None,
                 **kwargs):
        super().__init__(**kwargs)
        self.annotations = list(annotations or [])
        self.copyfiles = list(copyfiles or [])
        self.linkfiles = list(linkfiles or [])

    def _NestedProjects(self):
        return []

    def _ToNode(self, doc):
        e = super()._ToNode(doc)
        for child in itertools.chain(
            self.annotations,
            self._NestedProjects(),
            self.copyfiles,
            self.linkfiles,
        ):
            e.appendChild(child._ToNode(doc))
        return e


class Project(_ProjectBase):
    """A <project> as written in a manifest, possibly with nested projects.

    The |path| of a nested project is relative to its parent's path until the
    tree is flattened (see project_tree.Flatten).
    """

    def __init__(self, subprojects=None, **kwargs):
        super().__init__(**kwargs)
        self.subprojects = list(subprojects or [])
        # Set once |path| has been joined onto the parent path.
        self.flattened = False

    @classmethod
    def _FromNode(cls, node):
        project = super()._FromNode(node)
        for n in node.childNodes:
            if n.nodeName == "annotation":
                project.annotations.append(Annotation._FromNode(n))
            elif n.nodeName == "copyfile":
                project.copyfiles.append(CopyFile._FromNode(n))
            elif n.nodeName == "linkfile":
                project.linkfiles.append(LinkFile._FromNode(n))
            elif n.nodeName == "project":
                project.subprojects.append(Project._FromNode(n))
        return project

    def _NestedProjects(self):
        return self.subprojects


class FlatProject(_ProjectBase):
    """One entry of a flattened project list.

    |path| is relative to the top of the checkout and there are no nested
    projects.
    """

    @classmethod
    def FromProject(cls, project: Project, path: Optional[str]):
        """Copy |project| without its subprojects, located at |path|."""
        values = {}
        for _, field in cls._ATTRS:
            values[field] = getattr(project, field)
        values["path"] = path
        return cls(
            annotations=project.annotations,
            copyfiles=project.copyfiles,
            linkfiles=project.linkfiles,
            **values,
        )


class Manifest:
    """One manifest document, or the result of merging several."""

    def __init__(self, sourceFile=None):
        self.notice = None
        self.remotes = []
        self.default = None
        self.server = None
        self.projects = []
        self.remove_projects = []
        self.extend_projects = []
        self.repo_hooks = None
        self.includes = []
        self.sourceFile = sourceFile

    def __repr__(self):
        return "<Manifest %s: %d projects>" % (
            self.sourceFile or "(merged)",
            len(self.projects),
        )

    def GetRemote(self, name) -> Optional[Remote]:
        for r in self.remotes:
            if r.name == name:
                return r
        return None

    def AllProjects(self) -> List[FlatProject]:
        """Return every project as a flat list, nested projects included."""
        import project_tree

        return project_tree.FlattenAll(self.projects)

    def ToXml(self):
        """Return the manifest as a xml.dom.minidom Document."""
        doc = xml.dom.minidom.Document()
        root = doc.createElement("manifest")
        doc.appendChild(root)

        # Save out the notice.  There's a little bit of work here to give it
        # the right whitespace, which assumes that the notice is automatically
        # indented by 4 by minidom.
        if self.notice:
            notice_element = root.appendChild(doc.createElement("notice"))
            notice_lines = self.notice.splitlines()
            indented_notice = (
                "\n".join(" " * 4 + line for line in notice_lines)
            )[4:]
            notice_element.appendChild(doc.createTextNode(indented_notice))

        for r in self.remotes:
            root.appendChild(r._ToNode(doc))
        for single in (self.default, self.server):
            if single is not None:
                root.appendChild(single._ToNode(doc))
        for element in itertools.chain(
            self.projects,
            self.remove_projects,
            self.extend_projects,
            [self.repo_hooks] if self.repo_hooks else [],
            self.includes,
        ):
            root.appendChild(element._ToNode(doc))
        return doc

    def ToDict(self):
        """Return the manifest as a dictionary."""
        # Elements that may only appear once.
        SINGLE_ELEMENTS = {
            "notice",
            "default",
            "manifest-server",
            "repo-hooks",
        }
        # Elements that may be repeated.
        MULTI_ELEMENTS = {
            "remote",
            "remove-project",
            "project",
            "extend-project",
            "include",
            # These are children of 'project' nodes.
            "annotation",
            "copyfile",
            "linkfile",
        }

        doc = self.ToXml()
        ret = {}

        def append_children(ret, node):
            for child in node.childNodes:
                if child.nodeType != xml.dom.Node.ELEMENT_NODE:
                    continue
                if child.nodeName == "notice":
                    ret["notice"] = self.notice
                    continue
                attrs = child.attributes
                element = dict(
                    (attrs.item(i).localName, attrs.item(i).value)
                    for i in range(attrs.length)
                )
                if child.nodeName in SINGLE_ELEMENTS:
                    ret[child.nodeName] = element
                elif child.nodeName in MULTI_ELEMENTS:
                    ret.setdefault(child.nodeName, []).append(element)
                else:
                    raise ManifestParseError(
                        'Unhandled element "%s"' % (child.nodeName,)
                    )

                append_children(element, child)

        append_children(ret, doc.firstChild)

        return ret

    def Save(self, fd):
        """Write the manifest out to the given file descriptor."""
        doc = self.ToXml()
        doc.writexml(fd, "", "  ", "\n", "UTF-8")


def ParseManifestFile(path) -> Manifest:
    """Read and parse the manifest file at |path|.

    Raises:
      ManifestFileAccessError: |path| is missing or unreadable.
      ManifestParseError: |path| is not a valid manifest.
    """
    try:
        with open(path, "rb") as fd:
            data = fd.read()
    except OSError as e:
        raise ManifestFileAccessError(
            "cannot read manifest file %s: %s" % (path, e), path=path
        )
    logger.debug("parsing manifest %s", path)
    return ParseManifestString(data, path)


def ParseManifestString(data, source_file=None) -> Manifest:
    """Parse |data| (str or bytes) holding a manifest document.

    |source_file| is recorded on the result for diagnostics.
    """
    try:
        root = xml.dom.minidom.parseString(data)
    except xml.parsers.expat.ExpatError as e:
        raise ManifestParseError(
            "error parsing manifest %s: %s" % (source_file, e),
            path=source_file,
        )

    if not root or not root.childNodes:
        raise ManifestParseError(
            "no root node in %s" % (source_file,), path=source_file
        )

    for node in root.childNodes:
        if node.nodeName == "manifest":
            break
    else:
        raise ManifestParseError(
            "no <manifest> in %s" % (source_file,), path=source_file
        )

    return _ParseManifestNode(node, source_file)


def _ParseManifestNode(manifest_node, source_file) -> Manifest:
    m = Manifest(sourceFile=source_file)
    for node in manifest_node.childNodes:
        if node.nodeName == "notice":
            m.notice = _ParseNotice(node) or None
        elif node.nodeName == "remote":
            m.remotes.append(Remote._FromNode(node))
        elif node.nodeName == "default":
            m.default = Default._FromNode(node)
        elif node.nodeName == "manifest-server":
            m.server = Server._FromNode(node)
        elif node.nodeName == "project":
            m.projects.append(Project._FromNode(node))
        elif node.nodeName == "remove-project":
            m.remove_projects.append(RemoveProject._FromNode(node))
        elif node.nodeName == "extend-project":
            m.extend_projects.append(ExtendProject._FromNode(node))
        elif node.nodeName == "repo-hooks":
            m.repo_hooks = RepoHooks._FromNode(node)
        elif node.nodeName == "include":
            m.includes.append(Include._FromNode(node))
    return m


def _ParseNotice(node):
    """
    reads a <notice> element from the manifest file

    The <notice> element is distinct from other tags in the XML in that the
    data is conveyed between the start and end tag (it's not an empty-element
    tag).

    The white space (carriage returns, indentation) for the notice element is
    relevant and is parsed in a way that is based on how python docstrings
    work.  In fact, the code is remarkably similar to here:
      http://www.python.org/dev/peps/pep-0257/
    """
    # Get the data out of the node...
    notice = "".join(
        n.data
        for n in node.childNodes
        if n.nodeType in (n.TEXT_NODE, n.CDATA_SECTION_NODE)
    )
    if not notice.strip():
        return ""

    # Figure out minimum indentation, skipping the first line (the same line
    # as the <notice> tag)...
    minIndent = sys.maxsize
    lines = notice.splitlines()
    for line in lines[1:]:
        lstrippedLine = line.lstrip()
        if lstrippedLine:
            indent = len(line) - len(lstrippedLine)
            minIndent = min(indent, minIndent)

    # Strip leading / trailing blank lines and also indentation.
    cleanLines = [lines[0].strip()]
    for line in lines[1:]:
        cleanLines.append(line[minIndent:].rstrip())

    # Clear completely blank lines from front and back...
    while cleanLines and not cleanLines[0]:
        del cleanLines[0]
    while cleanLines and not cleanLines[-1]:
        del cleanLines[-1]

    return "\n".join(cleanLines)
