"""
project_importer/naming.py
-----------------------------------------------------------------------------
Naming conventions that place an imported project in its owner's namespace.

The importer needs four things from a naming convention, captured by the
:class:`NamingConvention` protocol:

1. ``qualified_form_name``      – fully namespaced name of the project's main
                                  screen, derived from the owner and project.
2. ``resolve_source_directory`` – destination directory for program-logic
                                  files, derived from the qualified name.
3. ``synthesize_manifest``      – fresh project properties text for a
                                  newly imported project.
4. ``project_settings``         – the settings blob stored alongside a new
                                  project.

:class:`YoungAndroidNaming` is the default convention.  The values it derives
for one import call are frozen into a :class:`NamingContext`.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Protocol

from project_importer.config import SRC_FOLDER

DEFAULT_FORM_NAME: str = "Screen1"
PACKAGE_PREFIX: str = "appinventor.ai_"

_NON_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")


@dataclass(frozen=True)
class NamingContext:
    """Destination naming for a single import call."""

    qualified_form_name: str
    source_directory: str


class NamingConvention(Protocol):
    def qualified_form_name(self, user_email: str, project_name: str) -> str: ...

    def resolve_source_directory(self, qualified_form_name: str) -> str: ...

    def synthesize_manifest(self, project_name: str, qualified_form_name: str) -> str: ...

    def project_settings(self) -> str: ...


def naming_context(
    convention: NamingConvention, user_email: str, project_name: str
) -> NamingContext:
    """Derive the :class:`NamingContext` for one owner / project pair."""
    qualified = convention.qualified_form_name(user_email, project_name)
    return NamingContext(
        qualified_form_name=qualified,
        source_directory=convention.resolve_source_directory(qualified),
    )


class YoungAndroidNaming:
    """
    Default package layout: ``appinventor.ai_<user>.<project>.Screen1``.

    ``<user>`` is the local part of the owner's email address with every
    character outside ``[A-Za-z0-9_]`` replaced by ``_``, so it is always a
    valid package segment.
    """

    def qualified_form_name(self, user_email: str, project_name: str) -> str:
        user = _NON_IDENTIFIER_CHARS.sub("_", user_email.split("@", 1)[0])
        return f"{PACKAGE_PREFIX}{user}.{project_name}.{DEFAULT_FORM_NAME}"

    def resolve_source_directory(self, qualified_form_name: str) -> str:
        """
        ``appinventor.ai_bob.Demo.Screen1`` → ``src/appinventor/ai_bob/Demo``.

        The form name itself is dropped; every screen of a project shares its
        package directory.
        """
        package = qualified_form_name.rsplit(".", 1)[0]
        return f"{SRC_FOLDER}/{package.replace('.', '/')}"

    def synthesize_manifest(self, project_name: str, qualified_form_name: str) -> str:
        lines = [
            f"main={qualified_form_name}",
            f"name={project_name}",
            "assets=../assets",
            "source=../src",
            "build=../build",
            "versioncode=1",
            "versionname=1.0",
            "useslocation=False",
            f"aname={project_name}",
        ]
        return "\n".join(lines) + "\n"

    def project_settings(self) -> str:
        return json.dumps(
            {
                "SimpleSettings": {
                    "Icon": "",
                    "ShowHiddenComponents": "False",
                    "UsesLocation": "False",
                    "VersionCode": "1",
                    "VersionName": "1.0",
                }
            },
            sort_keys=True,
        )
