"""Application state owned by the GUI shell and mutated by the controller.

The project slot is either `Empty` or `Loaded`; the index of the UI struct
shown in the designer lives inside `Loaded` so it is dropped with the project.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from wysiwyg.project import Project
from wysiwyg.tasks import Task


@dataclass
class Empty:
    pass


@dataclass
class Loaded:
    project: Project
    gui_struct_index: Optional[int] = None


ProjectSlot = Union[Empty, Loaded]


@dataclass
class AppState:
    slot: ProjectSlot = field(default_factory=Empty)

    # Appended to by the controller, drained and cleared by the shell
    tasks: List[Task] = field(default_factory=list)

    @property
    def project_loaded(self) -> bool:
        return isinstance(self.slot, Loaded)

    @property
    def project(self) -> Optional[Project]:
        if isinstance(self.slot, Loaded):
            return self.slot.project
        return None

    @property
    def gui_struct_index(self) -> Optional[int]:
        if isinstance(self.slot, Loaded):
            return self.slot.gui_struct_index
        return None

    def set_gui_struct_index(self, index: Optional[int]) -> None:
        if not isinstance(self.slot, Loaded):
            raise RuntimeError("Cannot select a GUI struct without a loaded project")
        self.slot.gui_struct_index = index

    def push(self, *tasks: Task) -> None:
        self.tasks.extend(tasks)
