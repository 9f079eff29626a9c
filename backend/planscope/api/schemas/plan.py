"""Schemas for plan selection, plan copy and assembled plan records."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from planscope.services.plan_types import CandidateTask, Constraints, ScoredTask

MAX_TASKS_PER_REQUEST = 50


class CandidateTaskPayload(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=300)
    # Effort and urgency are not restricted here; the scorer decides how to treat unknown values.
    effort: str = "medium"
    urgency: str = "medium"
    deadline: Optional[date] = None
    category: str = "other"

    @field_validator("effort", "urgency", "category", mode="before")
    @classmethod
    def default_missing_labels(cls, value: Optional[str], info: ValidationInfo) -> str:
        """``null`` or blank labels take the field defaults."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return "other" if info.field_name == "category" else "medium"
        return value

    def to_candidate(self) -> CandidateTask:
        return CandidateTask(
            id=self.id,
            title=self.title,
            effort=self.effort,
            urgency=self.urgency,
            deadline=self.deadline,
            category=self.category,
        )


class ConstraintsPayload(BaseModel):
    time_available: Literal["low", "medium", "high"]
    energy_level: Literal["drained", "ok", "fired_up"]
    focus_area: Literal["work", "health", "home", "money", "other"]
    mode: Literal["today", "week"] = "week"

    def to_constraints(self) -> Constraints:
        return Constraints(
            time_available=self.time_available,
            energy_level=self.energy_level,
            focus_area=self.focus_area,
            mode=self.mode,
        )


class PlanSelectRequest(BaseModel):
    tasks: List[CandidateTaskPayload] = Field(default_factory=list, max_length=MAX_TASKS_PER_REQUEST)
    constraints: ConstraintsPayload

    @model_validator(mode="after")
    def _unique_task_ids(self) -> "PlanSelectRequest":
        ids = [task.id for task in self.tasks]
        if len(ids) != len(set(ids)):
            raise ValueError("task ids must be unique within a request")
        return self


class PlanGenerateRequest(PlanSelectRequest):
    label: Optional[str] = Field(default=None, max_length=100)
    overwhelm_level: Optional[int] = Field(default=None, ge=1, le=10)


class ScoredTaskPayload(BaseModel):
    id: str
    title: str
    effort: str
    urgency: str
    deadline: Optional[date] = None
    category: str
    score: int
    idx: int

    @classmethod
    def from_scored(cls, task: ScoredTask) -> "ScoredTaskPayload":
        return cls(
            id=task.id,
            title=task.title,
            effort=task.effort,
            urgency=task.urgency,
            deadline=task.deadline,
            category=task.category,
            score=task.score,
            idx=task.idx,
        )


class CapacityPayload(BaseModel):
    max_minutes: int
    max_tasks: int
    used_minutes: int


class PlanSelectionResponse(BaseModel):
    do_first: List[ScoredTaskPayload]
    this_week: List[ScoredTaskPayload]
    not_this_week: List[ScoredTaskPayload]
    capacity: CapacityPayload
    request_id: str


class TaskCopy(BaseModel):
    """Display copy for one task, written by the plan writer."""

    task_id: Optional[str] = None
    title: str
    time_estimate: Optional[str] = None
    why: Optional[str] = None
    context: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    reason: Optional[str] = None
    validation: Optional[str] = None


class PlanCopy(BaseModel):
    headline: str
    burnout_alert: Optional[str] = None
    do_first: List[TaskCopy] = Field(default_factory=list)
    this_week: List[TaskCopy] = Field(default_factory=list)
    not_this_week: List[TaskCopy] = Field(default_factory=list)
    reality_check: str = ""
    real_talk: Optional[str] = None
    next_week_preview: str = ""


class PlanMeta(BaseModel):
    headline: str
    burnout_alert: Optional[str] = None
    reality_check: str = ""
    real_talk: Optional[str] = None
    next_week_preview: str = ""


class PlanTaskRecord(BaseModel):
    task_id: str
    title: str
    section: Literal["do_first", "this_week", "not_this_week"]
    time_estimate: Optional[str] = None
    focus_seconds: Optional[int] = None
    effort: str
    urgency: str
    category: str
    deadline: Optional[date] = None
    context: Optional[str] = None
    score: int
    status: Literal["pending", "done", "skipped"] = "pending"
    sort_order: int


class PlanRecord(BaseModel):
    mode: Literal["today", "week"]
    label: Optional[str] = None
    week_start: date
    week_end: date
    week_label: str
    is_next_week: bool = False
    constraints: Dict[str, str]
    status: Literal["review", "active", "completed"] = "review"
    meta: PlanMeta
    tasks: List[PlanTaskRecord]


class PlanGenerateResponse(BaseModel):
    plan: PlanRecord
    request_id: str
