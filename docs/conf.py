import os
import sys

# Add the project root (one level up from docs/) to sys.path
sys.path.insert(0, os.path.abspath(".."))

from hibachi_signing import get_version

# -- Project information -----------------------------------------------------

project = "hibachi_signing"
copyright = "2025, Hibachi Engineering Team"
author = "Hibachi Engineering Team"

release = get_version()
if "unknown" in release:
    raise RuntimeError(f"Unknown version {release=}; install the package first")

# -- General configuration ---------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

# Docstrings follow the Google style
napoleon_google_docstring = True
napoleon_numpy_docstring = False

# Names such as Side and SignedPayload are re-exported from hibachi_signing
suppress_warnings = ["ref.python"]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "sphinx_rtd_theme"
html_static_path = ["_static"]

autodoc_default_options = {
    "members": True,
    "undoc-members": True,
    "show-inheritance": True,
}
autodoc_member_order = "bysource"
