"""Two-phase application of a remediation plan."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from .errors import CommandFailedError
from .log import NOTICE
from .models import ExecutionOutcome, RemediationPlan

logger = logging.getLogger(__name__)

Updater = Callable[[Sequence[str], int], Awaitable[None]]
Installer = Callable[[Sequence[str]], Awaitable[None]]


class NpmRunner:
    """Runs npm update/install in the project directory."""

    def __init__(self, project_root: str | Path, npm_command: str = "npm"):
        self.project_root = Path(project_root)
        self.npm_command = npm_command

    async def update(self, module_names: Sequence[str], depth: int) -> None:
        await self._run(["update", "--depth", str(depth), *module_names])

    async def install(self, module_specs: Sequence[str]) -> None:
        await self._run(["install", *module_specs])

    async def _run(self, args: list[str]) -> None:
        argv = [self.npm_command, *args]
        process = await asyncio.create_subprocess_exec(*argv, cwd=self.project_root)
        returncode = await process.wait()
        if returncode != 0:
            raise CommandFailedError(argv, returncode)


class RemediationExecutor:
    """Applies updates first, then installs, stopping on the first failure."""

    def __init__(self, updater: Updater, installer: Installer):
        self.updater = updater
        self.installer = installer

    async def execute(self, plan: RemediationPlan) -> ExecutionOutcome:
        """Run the plan.

        Phase 1 updates plan.update_list limited to plan.max_depth. Phase 2
        installs major changes followed by plain installs, and only starts once
        phase 1 has finished without raising. Nothing is rolled back on failure.
        """
        self._announce(plan)
        outcome = ExecutionOutcome(depth=plan.max_depth)

        if plan.update_list:
            depth_flag = f"--depth {plan.max_depth} " if plan.max_depth else ""
            logger.debug("running 'npm update %s%s'", depth_flag, " ".join(plan.update_list))
            await self.updater(list(plan.update_list), plan.max_depth)
            outcome.updated = list(plan.update_list)

        targets = plan.install_targets
        if targets:
            logger.debug("running 'npm install %s'", " ".join(targets))
            await self.installer(targets)
            outcome.installed = targets

        return outcome

    def _announce(self, plan: RemediationPlan) -> None:
        if plan.has_fixes:
            logger.log(NOTICE, "automatically fixing detected vulnerabilities")
        if plan.major_list:
            logger.warning("some updates include semver-major changes: %s", " ".join(plan.major_list))
        if plan.review_list:
            logger.warning("some vulnerabilities require manual review")
            logger.warning("run `depaudit` to view the full report")
