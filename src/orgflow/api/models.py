"""API models for orgflow."""

from pydantic import BaseModel, Field

from orgflow.core.note import Note
from orgflow.core.task import Task
from orgflow.document.tag_index import TagIndex


class TaskResponse(BaseModel):
    """API response model for tasks."""

    index: int  # Position in the document's task section
    line: str  # Task as written in the document
    completed: bool
    priority: str | None
    completion_date: str | None  # YYYY-MM-DD
    creation_date: str | None  # YYYY-MM-DD
    description: str
    tags: list[str]

    @classmethod
    def from_task(cls, index: int, task: Task) -> "TaskResponse":
        return cls(
            index=index,
            line=str(task),
            completed=task.completed,
            priority=str(task.priority) if task.priority else None,
            completion_date=str(task.completion_date) if task.completion_date else None,
            creation_date=str(task.creation_date) if task.creation_date else None,
            description=task.description,
            tags=[str(tag) for tag in task.tags] if task.tags else [],
        )


class NoteResponse(BaseModel):
    """API response model for notes."""

    guid: str
    level: int
    title: str
    creation_date: str
    modification_date: str
    tags: list[str]
    content: list[str]

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(
            guid=str(note.guid),
            level=note.level,
            title=note.title,
            creation_date=str(note.creation_date),
            modification_date=str(note.modification_date),
            tags=[str(tag) for tag in note.tags],
            content=list(note.content),
        )


class TagIndexResponse(BaseModel):
    """API response model for the tag index."""

    context: list[str]
    project: list[str]
    person: list[str]
    custom: list[str]
    oneoff: list[str]

    @classmethod
    def from_index(cls, index: TagIndex) -> "TagIndexResponse":
        return cls(
            context=index.context,
            project=index.project,
            person=index.person,
            custom=index.custom,
            oneoff=index.oneoff,
        )


class DocumentResponse(BaseModel):
    """API response model for document state."""

    path: str
    tasks: int
    notes: int
    load_errors: list[str] = Field(default_factory=list)
    writable: bool = True  # False after a failed load; changes are refused


class AddTaskRequest(BaseModel):
    """Request model for quick task entry, e.g. ``(A) Call Bob @phone``."""

    text: str


class AddNoteRequest(BaseModel):
    """Request model for adding a note; tags may appear anywhere in the text."""

    title: str
    content: list[str] = Field(default_factory=list)
