import logging
from pathlib import Path
from typing import Dict, List, Optional

from wysiwyg import manifest as manifest_store
from wysiwyg.manifest import Manifest
from wysiwyg.scanner import UiStruct, find_ui_structs, scan_project_sources

logger = logging.getLogger(__name__)


class Project:
    """An open designer project: a view over the files under `root_path`.

    A single file project has `source_file` set, and its manifest only exists
    in memory.
    """

    def __init__(
        self,
        root_path: Path,
        manifest: Manifest,
        source_file: Optional[Path] = None,
    ):
        self.root_path = Path(root_path)
        self.manifest = manifest
        self.source_file = Path(source_file) if source_file is not None else None
        self.ui_structs: List[UiStruct] = []

    @property
    def is_file_project(self) -> bool:
        return self.source_file is not None

    @property
    def name(self) -> str:
        return self.manifest.package_name or self.root_path.name

    @property
    def manifest_path(self) -> Path:
        return self.manifest.path

    def has_dependency(self, name: str) -> bool:
        return manifest_store.has_dependency(self.manifest, name)

    def missing_dependencies(self, required: Dict[str, str]) -> Dict[str, str]:
        """Return the required dependencies the manifest does not declare.

        Single file projects have no manifest on disk to fix, so nothing is
        ever missing from them.
        """
        if self.is_file_project:
            return {}
        return {
            name: version
            for name, version in required.items()
            if not self.has_dependency(name)
        }

    def dependencies_ok(self, required: Dict[str, str]) -> bool:
        return not self.missing_dependencies(required)

    def reload_manifest(self) -> bool:
        """Re-read the manifest if it is stale. Returns True if it changed."""
        if self.is_file_project:
            return False
        fresh = manifest_store.reload_if_stale(self.manifest)
        if fresh is self.manifest:
            return False
        self.manifest = fresh
        return True

    def reload_ui_structs(self, scanner_params: dict) -> List[UiStruct]:
        """Scan the project sources for UI structs and remember the result."""
        marker = scanner_params["derive_marker"]
        if self.source_file is not None:
            self.ui_structs = find_ui_structs(self.source_file, marker)
        else:
            self.ui_structs = scan_project_sources(
                self.root_path,
                source_dir=scanner_params["source_dir"],
                extension=scanner_params["extension"],
                marker=marker,
            )
        logger.debug(f"Project {self.name!r} has {len(self.ui_structs)} UI structs")
        return self.ui_structs
