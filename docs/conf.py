# Configuration file for the Sphinx documentation builder.
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import sys
import tomllib
from pathlib import Path

# Project root on the path so autodoc can import project_importer
_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(_ROOT))

# -- Project information -----------------------------------------------------

project = "Project Archive Importer"
copyright = "2026, Project Archive Importer contributors"
author = "Project Archive Importer contributors"

# Version comes from pyproject.toml, like the app itself
with open(_ROOT / "pyproject.toml", "rb") as f:
    release = tomllib.load(f)["project"]["version"]
version = release

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",  # numpy-style Parameters / Returns sections
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
    "sphinx_autodoc_typehints",
    "myst_parser",  # index.md
]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]
master_doc = "index"

# -- MyST-Parser configuration -----------------------------------------------

myst_enable_extensions = [
    "colon_fence",
    "deflist",
]
myst_heading_anchors = 3

# -- HTML output options -----------------------------------------------------

html_theme = "furo"
html_theme_options = {
    "light_css_variables": {
        "color-brand-primary": "#1f6f8b",
        "color-brand-content": "#1f6f8b",
    },
    "dark_css_variables": {
        "color-brand-primary": "#5fb3d4",
        "color-brand-content": "#5fb3d4",
    },
    "navigation_with_keys": True,
}

# -- Autodoc configuration ---------------------------------------------------

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "undoc-members": True,
    "exclude-members": "__weakref__",
}

# Protocol stubs and dataclass fields read better as descriptions.
autodoc_typehints = "description"
autodoc_typehints_description_target = "documented"

# -- Napoleon settings -------------------------------------------------------

napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_include_init_with_doc = True
napoleon_use_param = True
napoleon_use_rtype = True

# -- Intersphinx configuration -----------------------------------------------

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pydantic": ("https://docs.pydantic.dev/latest", None),
}
