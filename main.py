#!/usr/bin/env python3
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

"""Print the merged manifest of a repo client.

The manifest and (if present) the local manifests are combined together to
produce a single manifest, written out as XML or JSON.
"""

import enum
import json
import optparse
import os
import sys

from error import InvalidArgumentsError
from error import ManifestFileAccessError
from error import RepoExitError
from manifest_include import ResolveIncludes
from manifest_loader import ManifestLoader
from manifest_merge import MergeManifests
from repo_logging import LOG_LEVELS
from repo_logging import RepoLogger
from repo_logging import SetLogLevel


logger = RepoLogger(__file__)

KEYBOARD_INTERRUPT_EXIT = 130


class OutputFormat(enum.Enum):
    """Type for the requested output format."""

    # Canonicalized manifest in XML format.
    XML = enum.auto()

    # Canonicalized manifest in JSON format.
    JSON = enum.auto()


def _Options():
    formats = tuple(x.lower() for x in OutputFormat.__members__.keys())
    p = optparse.OptionParser(
        usage="repo-manifest [--topdir DIR] [-m NAME.xml | -f FILE] "
        "[-o {-|NAME.xml}]",
        description=__doc__.strip(),
    )
    p.add_option(
        "--topdir",
        default=os.getcwd(),
        help="top of the client holding manifest.xml (default: cwd)",
        metavar="DIR",
    )
    p.add_option(
        "-m",
        "--manifest-name",
        help="manifest in manifests/ to use instead of the default",
        metavar="NAME.xml",
    )
    p.add_option(
        "-f",
        "--manifest-file",
        help="merge this manifest file and its includes only",
        metavar="FILE",
    )
    p.add_option(
        "--no-local-manifests",
        default=False,
        action="store_true",
        dest="ignore_local_manifests",
        help="ignore local manifests",
    )
    p.add_option(
        "--json",
        action="store_const",
        dest="format",
        const=OutputFormat.JSON.name.lower(),
        help=optparse.SUPPRESS_HELP,
    )
    p.add_option(
        "--format",
        default=OutputFormat.XML.name.lower(),
        choices=formats,
        help=f"output format: {', '.join(formats)} (default: %default)",
    )
    p.add_option(
        "--pretty",
        default=False,
        action="store_true",
        help="format output for humans to read",
    )
    p.add_option(
        "-o",
        "--output-file",
        default="-",
        help="file to save the manifest to",
        metavar="-|NAME.xml",
    )
    p.add_option(
        "--log-level",
        default="warning",
        choices=LOG_LEVELS,
        help=f"log level: {', '.join(LOG_LEVELS)} (default: %default)",
    )
    return p


def _LoadManifest(opt):
    if opt.manifest_file:
        if opt.manifest_name:
            raise InvalidArgumentsError(
                "-m and -f cannot be used together"
            )
        return MergeManifests(ResolveIncludes(opt.manifest_file))

    loader = ManifestLoader(
        opt.topdir,
        manifest_name=opt.manifest_name,
        load_local_manifests=not opt.ignore_local_manifests,
    )
    if opt.manifest_name and not os.path.exists(loader.ManifestFile()):
        raise ManifestFileAccessError(
            "manifest %s not found" % (opt.manifest_name,),
            path=loader.ManifestFile(),
        )
    return loader.Load()


def _Output(opt, manifest):
    output_format = OutputFormat[opt.format.upper()]

    if opt.output_file == "-":
        fd = sys.stdout
    else:
        fd = open(opt.output_file, "w")

    try:
        if output_format == OutputFormat.JSON:
            json_settings = {
                # JSON style guide says Unicode characters are fully allowed.
                "ensure_ascii": False,
                # We use 2 space indent to match JSON style guide.
                "indent": 2 if opt.pretty else None,
                "separators": (",", ": ") if opt.pretty else (",", ":"),
                "sort_keys": True,
            }
            fd.write(json.dumps(manifest.ToDict(), **json_settings) + "\n")
        elif opt.pretty:
            manifest.Save(fd)
        else:
            fd.write(manifest.ToXml().toxml() + "\n")
    finally:
        if opt.output_file != "-":
            fd.close()

    if opt.output_file != "-":
        logger.info("Saved manifest to %s", opt.output_file)


def _Main(argv):
    opt, args = _Options().parse_args(argv)
    SetLogLevel(opt.log_level)

    try:
        if args:
            raise InvalidArgumentsError(
                "unexpected arguments: %s" % " ".join(args)
            )
        manifest = _LoadManifest(opt)
        if manifest is None:
            logger.warning(
                "no manifest found in %s; client is not initialized",
                opt.topdir,
            )
            return 0
        _Output(opt, manifest)
        result = 0
    except RepoExitError as e:
        logger.log_aggregated_errors(e)
        result = e.exit_code
    except KeyboardInterrupt:
        print("aborted by user", file=sys.stderr)
        result = KEYBOARD_INTERRUPT_EXIT
    return result


def main():
    sys.exit(_Main(sys.argv[1:]))


if __name__ == "__main__":
    main()
