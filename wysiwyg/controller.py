"""Project lifecycle controller.

Creates, opens and closes designer projects and repairs their dependencies.
Every operation takes the `AppState` explicitly, mutates it and appends the
follow-up tasks the shell must apply; the controller never calls into the
shell.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from wysiwyg import manifest as manifest_store
from wysiwyg.config import (
    get_app_title,
    get_build_tool_params,
    get_config,
    get_manifest_params,
    get_required_dependencies,
    get_scanner_params,
)
from wysiwyg.errors import ToolInvocationError, ValidationError
from wysiwyg.project import Project
from wysiwyg.runner import CommandRunner, SubprocessRunner, describe_signal
from wysiwyg.scanner import has_ui_structure
from wysiwyg.state import AppState, Empty, Loaded
from wysiwyg.tasks import (
    AskUserUpdateDependencies,
    ClearData,
    EnableUi,
    ReloadObjectInspector,
    ReloadProjectSettings,
    UpdateWindowTitle,
)
from wysiwyg.validation import validate_new_project_path

logger = logging.getLogger(__name__)


class ProjectController:
    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        runner: Optional[CommandRunner] = None,
    ):
        """Initialize the controller.

        Args:
            config: Configuration dictionary. If None, uses get_config().
            runner: Runner used to invoke the build tool. Defaults to a
                SubprocessRunner.
        """
        self.config = config if config is not None else get_config()
        self.runner: CommandRunner = runner if runner is not None else SubprocessRunner()

        self.title = get_app_title(self.config)
        self.manifest_params = get_manifest_params(self.config)
        self.build_tool = get_build_tool_params(self.config)
        self.required_dependencies = get_required_dependencies(self.config)
        self.scanner_params = get_scanner_params(self.config)

    def create(self, state: AppState, path: str | Path) -> None:
        """Initialize a new project in an empty directory with the build tool.

        Raises:
            ValidationError: If `path` is not an empty writable directory
            ToolInvocationError: If the build tool cannot run or fails
            IoError: If the generated manifest cannot be read or written
            ParseError: If the generated manifest cannot be parsed
        """
        root_path = Path(path).absolute()
        validate_new_project_path(root_path)
        self._init_with_build_tool(root_path)

        manifest_file = manifest_store.manifest_path(
            root_path, self.manifest_params["file_name"]
        )
        manifest_store.append_dependencies(manifest_file, self._dependency_lines())

        manifest = manifest_store.load_file(manifest_file)
        state.slot = Loaded(project=Project(root_path, manifest))
        logger.info(f"Created project {manifest.package_name!r} in {root_path}")

        state.push(
            EnableUi(enabled=True),
            UpdateWindowTitle(title=f"{self.title} - {root_path}"),
            ReloadProjectSettings(),
        )

    def open(self, state: AppState, path: str | Path) -> None:
        """Open an existing project directory.

        Raises:
            IoError: If the manifest cannot be read
            ParseError: If the manifest cannot be parsed
        """
        root_path = Path(path).absolute()
        manifest = manifest_store.load(root_path, self.manifest_params["file_name"])
        project = Project(root_path, manifest)
        state.slot = Loaded(project=project)
        logger.info(f"Opened project {project.name!r} at {root_path}")

        state.push(
            EnableUi(enabled=True),
            UpdateWindowTitle(title=f"{self.title} - {root_path}"),
            ReloadProjectSettings(),
            ReloadObjectInspector(),
        )

        if not project.dependencies_ok(self.required_dependencies):
            missing = project.missing_dependencies(self.required_dependencies)
            logger.info(f"Project is missing dependencies: {sorted(missing)}")
            state.push(AskUserUpdateDependencies())

        self._reload_gui_struct(state)

    def open_single_file(self, state: AppState, path: str | Path) -> None:
        """Open a single source file that already defines a UI struct.

        Raises:
            ValidationError: If the file defines no UI struct
            IoError: If the file metadata cannot be read
        """
        source_file = Path(path).absolute()
        if not has_ui_structure(source_file, self.scanner_params["derive_marker"]):
            raise ValidationError(
                "A valid file project must already have a GUI struct defined",
                source_file,
            )

        manifest = manifest_store.synthesize(
            source_file, source_file.parent, self.manifest_params["file_name"]
        )
        project = Project(source_file.parent, manifest, source_file=source_file)
        state.slot = Loaded(project=project)
        logger.info(f"Opened file project {project.name!r} from {source_file}")

        state.push(
            EnableUi(enabled=True),
            UpdateWindowTitle(title=f"{self.title} - {project.name}"),
            ReloadProjectSettings(),
            ReloadObjectInspector(),
        )

        self._reload_gui_struct(state)

    def close(self, state: AppState) -> None:
        """Drop the current project. Does nothing if no project is loaded."""
        if not state.project_loaded:
            return

        logger.info(f"Closing project {state.project.name!r}")  # type: ignore[union-attr]
        state.slot = Empty()

        state.push(
            EnableUi(enabled=False),
            UpdateWindowTitle(title=self.title),
            ClearData(),
        )

    def fix_dependencies(self, state: AppState) -> None:
        """Add the missing required dependencies to the project manifest.

        Raises:
            NotFoundError: If the manifest has no dependency section header
            IoError: If the manifest cannot be read or written
            ParseError: If the edited manifest cannot be parsed
        """
        project = state.project
        if project is None:
            logger.warning("fix_dependencies called without an active project")
            return

        # The file may have been edited since it was opened
        reloaded = project.reload_manifest()

        missing = project.missing_dependencies(self.required_dependencies)
        if not missing:
            if reloaded:
                state.push(ReloadProjectSettings())
            return

        lines = [
            manifest_store.format_dependency(name, version)
            for name, version in missing.items()
        ]
        manifest_store.insert_dependencies_after_marker(
            project.manifest_path,
            lines,
            self.manifest_params["dependency_marker"],
        )

        # Full load: the edit may land within the same timestamp tick
        project.manifest = manifest_store.load_file(project.manifest_path)
        logger.info(f"Added dependencies {sorted(missing)} to {project.manifest_path}")

        state.push(ReloadProjectSettings())

    def refresh(self, state: AppState) -> bool:
        """Resynchronize the loaded project with the files on disk.

        Reloads the manifest if it is stale and scans the sources for UI
        structs again.

        Returns:
            True if the manifest changed on disk
        """
        project = state.project
        if project is None:
            logger.info("refresh called without an active project")
            return False

        changed = project.reload_manifest()
        if changed:
            state.push(ReloadProjectSettings())

        self._reload_gui_struct(state)
        return changed

    def _dependency_lines(self) -> list[str]:
        return [
            manifest_store.format_dependency(name, version)
            for name, version in self.required_dependencies.items()
        ]

    def _init_with_build_tool(self, root_path: Path) -> None:
        program = self.build_tool["program"]
        args = self.build_tool["init_args"]
        command = " ".join([program, *args])

        try:
            result = self.runner.run(program, args, root_path)
        except OSError as e:
            raise ToolInvocationError(f"Failed to run `{command}`: {e}", root_path) from e

        if result.success:
            return
        if result.signal is not None:
            raise ToolInvocationError(
                f"`{command}` process terminated by signal {describe_signal(result.signal)}",
                root_path,
            )
        msg = f"`{command}` terminated with exit code {result.returncode}"
        if result.stderr.strip():
            msg += f":\n\n{result.stderr.strip()}"
        raise ToolInvocationError(msg, root_path)

    def _reload_gui_struct(self, state: AppState) -> None:
        project = state.project
        if project is None:
            logger.warning("GUI struct reload requested but no project is loaded")
            return

        structs = project.reload_ui_structs(self.scanner_params)
        current = state.gui_struct_index
        if structs and current is not None and current < len(structs):
            return
        state.set_gui_struct_index(0 if structs else None)
