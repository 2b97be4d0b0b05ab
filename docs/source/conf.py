# ruff: noqa
"""Configuration file for the Sphinx documentation builder."""

import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath("../.."))

project = "Incremental Tree"
copyright = f"{date.today().year}, Incremental Tree contributors"
author = "Incremental Tree contributors"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "sphinx.ext.autosummary",
    "sphinx_autodoc_typehints",
    "sphinxcontrib.autodoc_pydantic",
    "myst_parser",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pandas": ("https://pandas.pydata.org/pandas-docs/stable", None),
    "numpy": ("https://numpy.org/doc/stable", None),
    "pydantic": ("https://docs.pydantic.dev/latest", None),
}

autodoc_typehints = "description"
autosummary_generate = True
autoclass_content = "class"
autodoc_member_order = "groupwise"
python_use_unqualified_type_names = True
add_module_names = False
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

# Google-style docstrings
napoleon_google_docstring = True
napoleon_preprocess_types = True

# LabeledExample and Settings
autodoc_pydantic_model_show_json = False
autodoc_pydantic_field_doc_policy = "description"

myst_enable_extensions = ["colon_fence"]

nitpicky = True
nitpick_ignore = [
    ("py:class", "Node"),
    ("py:class", "incremental_tree.dtree._text.LineSink"),
    ("py:class", "incremental_tree.core._types.ImageFormat"),
]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

html_theme = "pydata_sphinx_theme"
html_title = "Incremental Tree"
