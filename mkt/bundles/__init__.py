"""Bundle domain: file lists, descriptors, dependencies and the index."""

from .declaration import (
    DeclarationError,
    load_bundle_declaration,
    load_package_descriptors,
)
from .dependencies import (
    ConflictPolicy,
    DependencyError,
    MergeReport,
    resolve_dependencies,
    stage_bundle,
)
from .folder_parser import (
    DefaultFolderParserStrategy,
    FolderParserStrategy,
    FolderStructureBuilder,
    ObjectsFolderParserStrategy,
    register_strategy,
    strategy_for,
)
from .manifest import (
    ManifestDocument,
    ManifestError,
    ManifestType,
    UninstallDescriptors,
    parse_manifest,
    render_manifest,
    synthesize_uninstall,
)
from .model import BundleDeclaration, BundleEntry, IndexDocument, PackageEntry

__all__ = [
    # declaration
    "DeclarationError",
    "load_bundle_declaration",
    "load_package_descriptors",
    # dependencies
    "ConflictPolicy",
    "DependencyError",
    "MergeReport",
    "resolve_dependencies",
    "stage_bundle",
    # folder_parser
    "DefaultFolderParserStrategy",
    "FolderParserStrategy",
    "FolderStructureBuilder",
    "ObjectsFolderParserStrategy",
    "register_strategy",
    "strategy_for",
    # manifest
    "ManifestDocument",
    "ManifestError",
    "ManifestType",
    "UninstallDescriptors",
    "parse_manifest",
    "render_manifest",
    "synthesize_uninstall",
    # model
    "BundleDeclaration",
    "BundleEntry",
    "IndexDocument",
    "PackageEntry",
]
