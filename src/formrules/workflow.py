"""Step navigation driven by workflow-scoped rules."""

import logging
from dataclasses import dataclass, field

from .enums import RuleAction
from .evaluator import ConditionEvaluator
from .runtime import WorkflowFormData
from .schemas import ConditionalRule, WorkflowSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationDecision:
    """Where a workflow goes next.

    ``step`` is the 1-based step to show, or None once the workflow is
    complete. ``applied_rules`` lists the triggered workflow rules in the
    order they were applied.
    """

    step: int | None
    is_complete: bool
    module_id: int | None = None
    applied_rules: list[ConditionalRule] = field(default_factory=list)


class WorkflowNavigator:
    """Decide the next step of a workflow from its rules and the form data.

    Triggered rules are applied in priority order. ``completeWorkflow`` ends
    the workflow. Otherwise the last triggered ``goToStep`` wins; without one,
    the next step in sequence that no triggered ``skipStep`` removed is
    chosen. Advancing past the last step completes the workflow.
    """

    def __init__(self, evaluator: ConditionEvaluator | None = None):
        self.evaluator = evaluator or ConditionEvaluator()

    def triggered_rules(
        self, workflow: WorkflowSchema, data: WorkflowFormData
    ) -> list[ConditionalRule]:
        return self.evaluator.triggered_rules(workflow.workflow_rules, data)

    def skipped_steps(self, workflow: WorkflowSchema, data: WorkflowFormData) -> list[int]:
        """Steps removed from sequential navigation by triggered ``skipStep`` rules."""
        return sorted(
            {
                workflow.target_step(rule)
                for rule in self.triggered_rules(workflow, data)
                if rule.action == RuleAction.SKIP_STEP
            }
        )

    def first_step(self, workflow: WorkflowSchema, data: WorkflowFormData) -> NavigationDecision:
        """The step a new submission starts on."""
        return self._advance(workflow, 0, data)

    def next_step(
        self, workflow: WorkflowSchema, current_step: int, data: WorkflowFormData
    ) -> NavigationDecision:
        """Decide the step that follows ``current_step``.

        Raises:
            ValueError: If ``current_step`` is outside the workflow
        """
        if not 1 <= current_step <= workflow.step_count:
            raise ValueError(
                f"Workflow {workflow.id} has {workflow.step_count} steps, "
                f"step {current_step} is out of range"
            )
        return self._advance(workflow, current_step, data)

    def _advance(
        self, workflow: WorkflowSchema, current_step: int, data: WorkflowFormData
    ) -> NavigationDecision:
        applied: list[ConditionalRule] = []
        skipped: set[int] = set()
        jump: int | None = None

        for rule in self.triggered_rules(workflow, data):
            match rule.action:
                case RuleAction.COMPLETE_WORKFLOW:
                    applied.append(rule)
                    logger.debug(f"Workflow {workflow.id} completed by rule '{rule.id}'")
                    return NavigationDecision(step=None, is_complete=True, applied_rules=applied)
                case RuleAction.GO_TO_STEP:
                    jump = workflow.target_step(rule)
                case RuleAction.SKIP_STEP:
                    skipped.add(workflow.target_step(rule))
                case _:
                    logger.warning(
                        f"Workflow {workflow.id}: ignoring rule '{rule.id}' "
                        f"with field action '{rule.action.value}'"
                    )
                    continue
            applied.append(rule)

        if jump is not None:
            step = jump
        else:
            step = current_step + 1
            while step in skipped:
                step += 1

        if step > workflow.step_count:
            return NavigationDecision(step=None, is_complete=True, applied_rules=applied)

        logger.debug(f"Workflow {workflow.id}: step {current_step} -> {step}")
        return NavigationDecision(
            step=step,
            is_complete=False,
            module_id=workflow.module_id_for_step(step),
            applied_rules=applied,
        )
