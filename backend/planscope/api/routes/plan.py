"""Plan selection and generation endpoints."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, HTTPException, Request, status

from planscope.api.schemas.plan import (
    CapacityPayload,
    PlanGenerateRequest,
    PlanGenerateResponse,
    PlanSelectionResponse,
    PlanSelectRequest,
    ScoredTaskPayload,
)
from planscope.core.config import settings
from planscope.core.rate_limit import plan_rate_limiter
from planscope.observability.metrics import log_metric
from planscope.observability.tracing import trace
from planscope.services.plan_assembler import assemble_plan
from planscope.services.plan_writer import write_plan_copy
from planscope.services.scoring import UnknownEnumValueError
from planscope.services.task_selection import partition_plan, select_tasks

router = APIRouter()

EMPTY_PLAN_DETAIL = "We couldn't find any tasks in your brain dump. Try breaking it into shorter sentences."
RATE_LIMIT_DETAIL = "Too many plan requests. Please try again later."


@router.post("/plans/select", response_model=PlanSelectionResponse, tags=["plans"])
def select_plan(request: Request, payload: PlanSelectRequest) -> PlanSelectionResponse:
    """Score and partition candidate tasks without writing any copy."""
    request_id = getattr(request.state, "request_id", None)
    constraints = payload.constraints.to_constraints()
    metadata = {
        "route": "/plans/select",
        "task_count": len(payload.tasks),
        "mode": constraints.mode,
        "time_available": constraints.time_available,
    }
    start = perf_counter()

    with trace("plan.select", metadata=metadata):
        try:
            selection = select_tasks(
                [task.to_candidate() for task in payload.tasks],
                constraints,
                strict=settings.strict_task_enums,
            )
        except UnknownEnumValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        partition = partition_plan(selection, constraints.mode)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("plan.select.success", 1, metadata={"mode": constraints.mode})
    log_metric("plan.select.selected", len(selection.selected), metadata={"mode": constraints.mode})
    log_metric("plan.select.latency_ms", latency_ms)

    return PlanSelectionResponse(
        do_first=[ScoredTaskPayload.from_scored(task) for task in partition.do_first],
        this_week=[ScoredTaskPayload.from_scored(task) for task in partition.this_week],
        not_this_week=[ScoredTaskPayload.from_scored(task) for task in partition.not_this_week],
        capacity=CapacityPayload(
            max_minutes=selection.max_minutes,
            max_tasks=selection.max_tasks,
            used_minutes=selection.total_minutes,
        ),
        request_id=request_id or "",
    )


@router.post("/plans/generate", response_model=PlanGenerateResponse, tags=["plans"])
def generate_plan(request: Request, payload: PlanGenerateRequest) -> PlanGenerateResponse:
    """Select tasks, write plan copy and return the record ready for storage."""
    request_id = getattr(request.state, "request_id", None)
    client_host = request.client.host if request.client else "unknown"
    if not plan_rate_limiter.allow(f"plan:{client_host}"):
        log_metric("plan.generate.rate_limited", 1)
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=RATE_LIMIT_DETAIL)
    if not payload.tasks:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMPTY_PLAN_DETAIL)

    constraints = payload.constraints.to_constraints()
    metadata = {
        "route": "/plans/generate",
        "task_count": len(payload.tasks),
        "mode": constraints.mode,
        "overwhelm_level": payload.overwhelm_level,
    }
    start = perf_counter()

    with trace("plan.generate", metadata=metadata):
        try:
            selection = select_tasks(
                [task.to_candidate() for task in payload.tasks],
                constraints,
                strict=settings.strict_task_enums,
            )
        except UnknownEnumValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        partition = partition_plan(selection, constraints.mode)
        copy = write_plan_copy(
            partition,
            constraints,
            overwhelm_level=payload.overwhelm_level,
            request_id=request_id,
        )
        record = assemble_plan(partition, constraints, copy, label=payload.label)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("plan.generate.success", 1, metadata={"mode": constraints.mode})
    log_metric("plan.generate.active_tasks", len(partition.this_week), metadata={"mode": constraints.mode})
    log_metric("plan.generate.latency_ms", latency_ms)

    return PlanGenerateResponse(plan=record, request_id=request_id or "")
