"""LLM-written display copy for a selected plan, with deterministic fallbacks."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import openai

from planscope.api.schemas.plan import PlanCopy, TaskCopy
from planscope.core.config import settings
from planscope.observability.metrics import log_metric
from planscope.observability.tracing import trace
from planscope.services.capacity import estimate_minutes, max_task_count, plan_mode, time_budget_label
from planscope.services.plan_types import Constraints, PlanPartition, ScoredTask
from planscope.services.time_estimates import format_minutes

logger = logging.getLogger(__name__)

CRISIS_OVERWHELM_LEVEL = 9
SIMPLE_PLAN_MAX_TASKS = 2

SYSTEM_PROMPT = (
    "You are a compassionate plan writer. You receive tasks that have already been "
    "prioritised and split into sections; do not move tasks between sections. "
    "Write clear task titles, explain why the first tasks come first, and validate every "
    "parked item so it feels OK to leave it. Use British English, kind non-shaming language "
    "and no productivity jargon. The reader is overwhelmed: every word should say "
    "'I understand you. This is real. You can do this.'"
)

PARKED_VALIDATION = "This matters. We just ran out of space. It's next on the list."


def write_plan_copy(
    partition: PlanPartition,
    constraints: Constraints,
    *,
    overwhelm_level: Optional[int] = None,
    request_id: Optional[str] = None,
) -> PlanCopy:
    """Return headline, reality check and per-task copy for ``partition``."""
    if overwhelm_level is not None and overwhelm_level >= CRISIS_OVERWHELM_LEVEL:
        log_metric("plan.copy.source", 0, metadata={"source": "crisis"})
        copy = crisis_plan_copy()
    else:
        copy = _request_copy_from_llm(partition, constraints, request_id=request_id)
    return _finalize_copy(copy, partition)


def fallback_plan_copy(partition: PlanPartition, constraints: Constraints) -> PlanCopy:
    """Deterministic copy built only from the partition."""
    period = _period_label(constraints.mode)
    do_first_ids = {task.id for task in partition.do_first}
    active_count = len(partition.this_week)

    if active_count == 0:
        headline = "Nothing fits right now, and that's OK."
        reality_check = f"None of these tasks fit the time you have {period}. Try a smaller first step."
    elif active_count == 1:
        headline = "One thing. Let's get it done."
        reality_check = "One focused task is a real plan."
    else:
        headline = f"{active_count} doable things {period}. Start with the first."
        reality_check = (
            f"We planned around {time_budget_label(constraints.mode, constraints.time_available)} "
            f"{period}, so the list stays realistic."
        )

    return PlanCopy(
        headline=headline,
        burnout_alert=None,
        do_first=[
            TaskCopy(
                task_id=task.id,
                title=task.title,
                time_estimate=_default_time_estimate(task),
                why="Highest priority right now.",
                context=f"Due {task.deadline.isoformat()}" if task.deadline else None,
            )
            for task in partition.do_first
        ],
        this_week=[
            TaskCopy(
                task_id=task.id,
                title=task.title,
                time_estimate=_default_time_estimate(task),
                category=task.category,
            )
            for task in partition.this_week
            if task.id not in do_first_ids
        ],
        not_this_week=[
            TaskCopy(
                task_id=task.id,
                title=task.title,
                reason=f"Over capacity for {period}.",
                validation=PARKED_VALIDATION,
            )
            for task in partition.not_this_week
        ],
        reality_check=reality_check,
        real_talk=None,
        next_week_preview="Whatever is parked comes back first when you plan again.",
    )


def crisis_plan_copy() -> PlanCopy:
    return PlanCopy(
        headline="You're overwhelmed. Let's not add more to your plate.",
        burnout_alert=(
            "Your brain dump suggests you're approaching or in burnout. This plan is designed to give "
            "you breathing room, not more pressure. Please consider talking to someone you trust."
        ),
        reality_check=(
            "You tried to fit too much into too little time and energy. That's not a failure, it's a "
            "signal. The real fix isn't a better plan, it's fewer commitments."
        ),
        real_talk=(
            "If this level of overwhelm keeps coming back, it might not be a planning problem. "
            "It could be a workload or boundaries problem. You deserve support."
        ),
        next_week_preview="Once you've rested, come back and we'll build a lighter plan together.",
    )


def build_user_prompt(partition: PlanPartition, constraints: Constraints) -> str:
    mode = plan_mode(constraints.mode)
    period = _period_label(mode)
    do_first_ids = {task.id for task in partition.do_first}
    sections = {
        "do_first": [_task_prompt_entry(task) for task in partition.do_first],
        "this_week": [_task_prompt_entry(task) for task in partition.this_week if task.id not in do_first_ids],
        "not_this_week": [_task_prompt_entry(task) for task in partition.not_this_week],
    }
    return (
        f"Prioritised sections JSON: {json.dumps(sections)}\n"
        f"Time available: {time_budget_label(mode, constraints.time_available)} {period}\n"
        f"Energy level: {constraints.energy_level}\n"
        f"Focus area: {constraints.focus_area}\n"
        f"Hard limit: at most {max_task_count(mode)} active tasks; keep every task in the section given.\n"
        "Return a JSON object with keys 'headline', 'burnout_alert', 'do_first', 'this_week', "
        "'not_this_week', 'reality_check', 'real_talk' and 'next_week_preview'. "
        "Every task entry must keep its 'task_id' and have a 'title'. do_first entries add "
        "'time_estimate', 'why' and 'context'; this_week entries add 'time_estimate', 'category' "
        f"and 'notes'; not_this_week entries add 'reason' (why it's not {period}) and 'validation'."
    )


def _request_copy_from_llm(
    partition: PlanPartition,
    constraints: Constraints,
    *,
    request_id: Optional[str] = None,
) -> PlanCopy:
    """Call OpenAI for plan copy or fall back safely."""
    if not settings.openai_api_key:
        log_metric("plan.copy.source", 0, metadata={"source": "fallback"})
        return fallback_plan_copy(partition, constraints)

    metadata = {
        "mode": plan_mode(constraints.mode),
        "active_tasks": len(partition.this_week),
        "parked_tasks": len(partition.not_this_week),
    }
    with trace("plan.copy.generate", metadata=metadata, request_id=request_id) as copy_trace:
        try:
            client = openai.OpenAI(api_key=settings.openai_api_key)
            completion = client.chat.completions.create(
                model=settings.planner_model,
                response_format={"type": "json_object"},
                temperature=settings.planner_temperature,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(partition, constraints)},
                ],
            )
            content = completion.choices[0].message.content or "{}"
            copy = PlanCopy.model_validate(json.loads(content))
        except Exception as exc:
            logger.warning("Plan copy generation failed, using fallback copy: %s", exc)
            log_metric("plan.copy.source", 0, metadata={"source": "fallback", "error": type(exc).__name__})
            return fallback_plan_copy(partition, constraints)

        if copy_trace:
            try:
                copy_trace.update(metadata={**metadata, "llm_output_text": copy.headline[:500]})
            except Exception:
                logger.debug("Failed to attach plan copy to Opik trace", exc_info=True)

    log_metric("plan.copy.source", 1, metadata={"source": "llm"})
    return copy


def _finalize_copy(copy: PlanCopy, partition: PlanPartition) -> PlanCopy:
    if partition.task_count <= SIMPLE_PLAN_MAX_TASKS and copy.next_week_preview:
        return copy.model_copy(update={"next_week_preview": ""})
    return copy


def _task_prompt_entry(task: ScoredTask) -> Dict[str, Any]:
    return {
        "task_id": task.id,
        "title": task.title,
        "effort": task.effort,
        "urgency": task.urgency,
        "deadline": task.deadline.isoformat() if task.deadline else None,
        "category": task.category,
        "estimated_minutes": estimate_minutes(task.effort),
    }


def _default_time_estimate(task: ScoredTask) -> str:
    return format_minutes(estimate_minutes(task.effort))


def _period_label(mode: str | None) -> str:
    return "today" if plan_mode(mode) == "today" else "this week"
