"""Tasks the core queues for the GUI shell.

A task describes one visible effect the shell must apply after the app state
changed. Tasks carry no behavior; the shell drains the queue in order and
clears it.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class EnableUi(BaseModel):
    kind: Literal["enable_ui"] = "enable_ui"
    enabled: bool


class UpdateWindowTitle(BaseModel):
    kind: Literal["update_window_title"] = "update_window_title"
    title: str


class ReloadProjectSettings(BaseModel):
    kind: Literal["reload_project_settings"] = "reload_project_settings"


class ReloadObjectInspector(BaseModel):
    kind: Literal["reload_object_inspector"] = "reload_object_inspector"


class AskUserUpdateDependencies(BaseModel):
    kind: Literal["ask_user_update_dependencies"] = "ask_user_update_dependencies"


class ClearData(BaseModel):
    kind: Literal["clear_data"] = "clear_data"


Task = Annotated[
    Union[
        EnableUi,
        UpdateWindowTitle,
        ReloadProjectSettings,
        ReloadObjectInspector,
        AskUserUpdateDependencies,
        ClearData,
    ],
    Field(discriminator="kind"),
]
