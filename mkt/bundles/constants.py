from __future__ import annotations

# Per-folder files
DECLARATION_FILE = "info.json"
DOCUMENTATION_FILE = "README.md"

# Generated descriptors
PACKAGE_XML = "package.xml"
DESTRUCTIVE_CHANGES_XML = "destructiveChanges.xml"

# Build output inside a bundle folder
DIST_DIR = "dist"

# Never part of a bundle's metadata: build output, OS files, generated
# descriptors, declaration files.
IGNORED_NAMES: frozenset[str] = frozenset(
    {
        DIST_DIR,
        ".DS_Store",
        PACKAGE_XML,
        DESTRUCTIVE_CHANGES_XML,
        DECLARATION_FILE,
    }
)

# Substrings excluded from index file lists, matched against bundle-relative
# paths.
IGNORED_FILE_MARKERS: tuple[str, ...] = (DECLARATION_FILE, ".DS_Store")

METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
DEFAULT_API_VERSION = "62.0"
