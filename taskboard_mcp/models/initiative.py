"""Initiative models: cross-cutting goals that group tasks."""

from pydantic import BaseModel, Field, computed_field


class InitiativeModel(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str = "active"
    owner: str | None = None
    participants: list[str] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)
    progress_pct: int = 0
    target_date: str | None = None
    created_at: str
    updated_at: str


class InitiativeUpdate(BaseModel):
    """An append-only progress note."""

    id: str
    initiative_id: str
    agent_name: str
    update_text: str
    created_at: str


class LinkedTask(BaseModel):
    """A task linked to an initiative, with the role it plays there."""

    id: str
    title: str
    status: str
    project: str
    priority: int = 5
    assigned_to: str | None = None
    role: str = ""
    linked_by: str | None = None
    done: bool = False


class InitiativeDetail(BaseModel):
    initiative: InitiativeModel
    tasks: list[LinkedTask] = Field(default_factory=list)
    updates: list[InitiativeUpdate] = Field(default_factory=list)

    @computed_field
    @property
    def tasks_done(self) -> int:
        return sum(1 for t in self.tasks if t.done)
