"""Main CLI entry point for wysiwyg.

This module provides a Fire CLI over the project controller. It plays the part
of a minimal shell: after each operation it drains the task queue and prints
the tasks as YAML.
"""

import logging
from typing import Any, Callable, Dict, List

import fire
import yaml

from wysiwyg.controller import ProjectController
from wysiwyg.config import get_config, get_scanner_params
from wysiwyg.scanner import find_ui_structs
from wysiwyg.state import AppState

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def drain_tasks(state: AppState) -> List[Dict[str, Any]]:
    """Take every queued task out of the state, in order."""
    drained = [task.model_dump() for task in state.tasks]
    state.tasks.clear()
    return drained


def _report(state: AppState) -> str:
    project = state.project
    report: Dict[str, Any] = {
        "project": None,
        "gui_struct_index": state.gui_struct_index,
        "tasks": drain_tasks(state),
    }
    if project is not None:
        report["project"] = {
            "name": project.name,
            "root_path": str(project.root_path),
            "ui_structs": [s.name for s in project.ui_structs],
        }
    return yaml.safe_dump(report, sort_keys=False)


def create(path: str) -> str:
    """Create a new project in the empty directory `path`."""
    state = AppState()
    ProjectController().create(state, path)
    return _report(state)


def open_project(path: str) -> str:
    """Open the project at `path` and report what the shell would do."""
    state = AppState()
    ProjectController().open(state, path)
    return _report(state)


def open_file(path: str) -> str:
    """Open a single source file defining a UI struct as a project."""
    state = AppState()
    ProjectController().open_single_file(state, path)
    return _report(state)


def fix_dependencies(path: str) -> str:
    """Open the project at `path` and add its missing required dependencies."""
    state = AppState()
    controller = ProjectController()
    controller.open(state, path)
    drain_tasks(state)
    controller.fix_dependencies(state)
    return _report(state)


def scan(path: str) -> str:
    """List the UI structs defined in the source file `path`."""
    marker = get_scanner_params(get_config())["derive_marker"]
    structs = find_ui_structs(path, marker)
    return yaml.safe_dump(
        [{"name": s.name, "line": s.line} for s in structs], sort_keys=False
    )


def main() -> Any:
    """Main entry point for the CLI."""
    setup_logging()
    commands: Dict[str, Callable] = {
        "create": create,
        "open": open_project,
        "open_file": open_file,
        "fix_dependencies": fix_dependencies,
        "scan": scan,
    }
    return fire.Fire(commands)


if __name__ == "__main__":
    main()
