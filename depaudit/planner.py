"""Classification of remediation actions into executable buckets."""

from collections.abc import Iterable

from .models import RemediationAction, RemediationPlan


class RemediationPlanner:
    """Routes each action into exactly one bucket of a RemediationPlan."""

    def plan(self, actions: Iterable[RemediationAction]) -> RemediationPlan:
        """Classify actions, preserving input order within each bucket.

        Precedence is: semver-major, install, update, review. A major update
        therefore lands in major_list and never raises max_depth. Actions of
        any other kind are dropped.

        Args:
            actions: Actions in report order

        Returns:
            A fresh RemediationPlan
        """
        plan = RemediationPlan()
        for action in actions:
            if action.is_major:
                plan.major_list.append(action.spec)
            elif action.kind == "install":
                plan.install_list.append(action.spec)
            elif action.kind == "update":
                plan.update_list.append(action.module)
                plan.max_depth = max(plan.max_depth, action.depth)
            elif action.kind == "review":
                plan.review_list.append(action)
        return plan


def plan(actions: Iterable[RemediationAction]) -> RemediationPlan:
    """Classify remediation actions into a RemediationPlan."""
    return RemediationPlanner().plan(actions)
