"""
Parallel fan-out orchestrator.

Launches every task of a batch concurrently, waits until all of them
finish or the batch timeout elapses, and hands the full per-key result map
to an aggregator agent. A batch survives partial failure: the aggregator
runs whenever at least one task succeeded and sees the missing sources
explicitly. Only a batch in which every task failed is reported as a
failure, without calling the aggregator.
"""

import asyncio
import functools
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from agentflow.parallel.prompts import render_aggregation_input, unavailable_note
from agentflow.parallel.schemas import AggregationInput, BatchOutcome, ParallelTask
from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.contracts.agent_result import (
    FAILURE_SEVERITY,
    AgentFailure,
    AgentResult,
    FailureKind,
)
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError, DuplicateTaskKeyError
from agentflow.shared.llm.capability import AgentCapability, invoke_guarded


logger = logging.getLogger(__name__)


def validate_batch(tasks: Iterable[ParallelTask]) -> List[ParallelTask]:
    """
    Check a batch before anything is launched.

    Raises:
        ConfigurationError: If the batch is empty
        DuplicateTaskKeyError: If two tasks share a key
    """
    batch = list(tasks)
    if not batch:
        raise ConfigurationError("A fan-out batch needs at least one task")
    seen = set()
    for task in batch:
        if task.key in seen:
            raise DuplicateTaskKeyError(task.key)
        seen.add(task.key)
    return batch


def select_batch_failure(results: AggregationInput) -> Tuple[str, AgentFailure]:
    """
    Pick the representative failure of a batch in which every task failed.

    The most severe kind wins; ties go to the first key in sorted order.
    """
    worst_key: Optional[str] = None
    for key in sorted(results):
        if worst_key is None or (
            FAILURE_SEVERITY[results[key].kind] > FAILURE_SEVERITY[results[worst_key].kind]
        ):
            worst_key = key
    return worst_key, results[worst_key]


def _discard_late_result(key: str, _log: str, task: asyncio.Task) -> None:
    # Retrieve the outcome so a late failure is never reported as unhandled.
    if task.cancelled():
        logger.debug(f"{_log}Task '{key}' cancelled after batch timeout")
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"{_log}Discarded late error from task '{key}': {error!r}")
    else:
        logger.debug(f"{_log}Discarded late result from task '{key}'")


class ParallelOrchestrator:
    """
    Fan-out/aggregate over independent agent calls.

    Args:
        capability: Agent capability shared by every task
        settings: Timeouts. Uses DEFAULT_CONFIG if not provided.
    """

    def __init__(
        self,
        capability: AgentCapability,
        settings: Optional[OrchestratorConfig] = None,
    ):
        self._capability = capability
        self._settings = settings or DEFAULT_CONFIG

    async def fan_out(
        self,
        tasks: Iterable[ParallelTask],
        batch_timeout: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> AggregationInput:
        """
        Run every task concurrently and collect one result per key.

        Tasks still running when the batch timeout elapses are cancelled
        without waiting for them and recorded as timeouts. Cancelling the
        caller cancels every task of the batch.

        Args:
            tasks: Batch of tasks with unique keys
            batch_timeout: Wall-clock limit in seconds (config default if None)
            request_id: Optional identifier used in log lines

        Returns:
            Mapping from every submitted key to that task's result
        """
        batch = validate_batch(tasks)
        timeout = self._settings.batch_timeout if batch_timeout is None else batch_timeout
        _log = f"[request={request_id or 'unknown'}] [graph=parallel] [node=fan_out] "

        logger.info(
            f"{_log}Launching {len(batch)} tasks | keys={[t.key for t in batch]}, "
            f"batch_timeout={timeout:.1f}s"
        )
        running: Dict[str, asyncio.Task] = {
            task.key: asyncio.create_task(self._run_task(task, _log), name=f"fan-out:{task.key}")
            for task in batch
        }

        done = set()
        try:
            done, _ = await asyncio.wait(running.values(), timeout=timeout)
        finally:
            for key, running_task in running.items():
                if running_task not in done:
                    running_task.cancel()
                    running_task.add_done_callback(
                        functools.partial(_discard_late_result, key, _log)
                    )

        results: AggregationInput = {}
        for key, running_task in running.items():
            if running_task not in done:
                results[key] = AgentFailure(
                    kind=FailureKind.TIMEOUT,
                    message=f"no result within batch timeout of {timeout:.1f}s",
                )
            elif running_task.cancelled():
                results[key] = AgentFailure(
                    kind=FailureKind.CANCELLED,
                    message="task was cancelled before completing",
                )
            elif running_task.exception() is not None:
                error = running_task.exception()
                results[key] = AgentFailure(
                    kind=FailureKind.PROVIDER_ERROR,
                    message=f"{type(error).__name__}: {error}",
                )
            else:
                results[key] = running_task.result()

        failed = sorted(k for k, r in results.items() if not r.ok)
        logger.info(
            f"{_log}Batch finished | succeeded={len(results) - len(failed)}, "
            f"failed={failed}"
        )
        return results

    async def fan_out_and_aggregate(
        self,
        tasks: Iterable[ParallelTask],
        aggregator_role: AgentRole,
        batch_timeout: Optional[float] = None,
        subject: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> BatchOutcome:
        """
        Fan out a batch, then aggregate whatever succeeded.

        Args:
            tasks: Batch of tasks with unique keys
            aggregator_role: Role that combines the per-key findings
            batch_timeout: Wall-clock limit in seconds (config default if None)
            subject: Optional description of what the batch investigated,
                prepended to the aggregator input
            request_id: Optional identifier used in log lines

        Returns:
            BatchOutcome with every key's result and the aggregate result

        Raises:
            ConfigurationError: If the batch is empty or has duplicate keys
        """
        _log = f"[request={request_id or 'unknown'}] [graph=parallel] [node=aggregate] "
        results = await self.fan_out(tasks, batch_timeout=batch_timeout, request_id=request_id)

        notes = [unavailable_note(key, results[key]) for key in sorted(results) if not results[key].ok]
        if len(notes) == len(results):
            key, worst = select_batch_failure(results)
            logger.warning(
                f"{_log}All {len(results)} tasks failed -> skipping aggregator | "
                f"representative={key} ({worst.kind.value})"
            )
            return BatchOutcome(
                results=results,
                aggregate=AgentFailure(
                    kind=worst.kind,
                    message=f"all {len(results)} tasks failed; {key}: {worst.message or worst.kind.value}",
                ),
                aggregated=False,
                degraded=True,
                notes=notes,
            )

        timeout = aggregator_role.timeout or self._settings.aggregator_timeout
        aggregation_text = render_aggregation_input(results, subject=subject)
        logger.info(
            f"{_log}Invoking aggregator '{aggregator_role.name}' | "
            f"keys={sorted(results)}, missing={len(notes)}"
        )
        aggregate: AgentResult = await invoke_guarded(
            self._capability, aggregator_role, aggregation_text, timeout
        )
        if not aggregate.ok:
            logger.warning(f"{_log}Aggregator failed: {aggregate.describe()}")

        return BatchOutcome(
            results=results,
            aggregate=aggregate,
            aggregated=True,
            degraded=bool(notes),
            notes=notes,
        )

    async def _run_task(self, task: ParallelTask, _log: str) -> AgentResult:
        timeout = task.role.timeout or self._settings.task_timeout
        logger.info(f"{_log}Task '{task.key}' started | role={task.role.name}")
        result = await invoke_guarded(self._capability, task.role, task.input, timeout)
        if result.ok:
            logger.info(f"{_log}Task '{task.key}' complete | latency={result.latency_ms:.0f}ms")
        else:
            logger.warning(f"{_log}Task '{task.key}' failed: {result.describe()}")
        return result
