"""Session-owned state: the rendered snapshot, override flags and store events"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from postdraft.core.models import DraftFields


class WorkflowState(str, Enum):
    idle = "idle"
    validating = "validating"
    saving = "saving"
    reloading = "reloading"
    done = "done"
    failed = "failed"


class EditOverrides(BaseModel):
    """Per derived field: has the user typed into it since the last load/save?"""
    slug_user_edited: bool = False
    excerpt_user_edited: bool = False


# derived field -> override flag gating it
OVERRIDE_FLAGS: dict[str, str] = {
    "slug": "slug_user_edited",
    "excerpt": "excerpt_user_edited",
}


class DraftSessionState(BaseModel):
    post_id: Optional[str] = None
    fields: DraftFields = Field(default_factory=DraftFields)
    is_dirty: bool = False
    is_saving: bool = False
    is_loading: bool = False
    last_saved_at: Optional[datetime] = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    overrides: EditOverrides = Field(default_factory=EditOverrides)
    error: Optional[str] = None
    workflow: WorkflowState = WorkflowState.idle


@dataclass(frozen=True)
class StoreEvent:
    """Change notification delivered to store subscribers.

    kind is one of:
      field    - the user edited `field`
      derived  - the derivation engine rewrote `field`
      baseline - fields were replaced by a load, a save reload, an unpublish or a reset
      status   - saving/loading/workflow/error flags changed
    """
    kind: str
    field: Optional[str] = None
