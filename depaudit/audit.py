"""The audit command: resolve, verify, submit, then fix or report."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .client import AuditReportClient, Client, generate
from .config import AuditConfig
from .errors import GlobalModeUnsupported, InvalidSubcommand
from .executor import Installer, NpmRunner, RemediationExecutor, Updater
from .inputs import InputResolver
from .models import AuditRequest, AuditResult, DependencySet, LockfileDocument
from .planner import RemediationPlanner
from .presenter import Printer, ReportPresenter
from .verify import LockConsistencyGate, Verifier

logger = logging.getLogger(__name__)

USAGE = "depaudit\ndepaudit fix\n"

Generator = Callable[[LockfileDocument, DependencySet], AuditRequest]


class AuditCommand:
    """Runs one audit of the project at project_root.

    Every collaborator is optional; the defaults talk to the configured
    registry and shell out to npm for fixes.
    """

    def __init__(
        self,
        project_root: str | Path,
        config: AuditConfig | None = None,
        verifier: Verifier | None = None,
        generator: Generator = generate,
        client: Client | None = None,
        printer: Printer | None = None,
        updater: Updater | None = None,
        installer: Installer | None = None,
    ):
        self.project_root = Path(project_root)
        self.config = config or AuditConfig()
        self.generator = generator

        runner = NpmRunner(self.project_root, npm_command=self.config.npm_command)
        self.resolver = InputResolver(self.project_root)
        self.gate = LockConsistencyGate(verifier)
        self.report_client = AuditReportClient(
            self.config.registry, client=client, timeout=self.config.timeout
        )
        self.planner = RemediationPlanner()
        self.executor = RemediationExecutor(
            updater=updater or runner.update,
            installer=installer or runner.install,
        )
        self.presenter = ReportPresenter(printer)

    def check_args(self, args: Sequence[str]) -> bool:
        """Validate invocation; returns True when fix mode was requested."""
        if self.config.global_mode:
            raise GlobalModeUnsupported()
        if args and args[0] and args[0] != "fix":
            raise InvalidSubcommand(args[0], USAGE)
        return bool(args) and args[0] == "fix"

    async def fetch_report(self) -> AuditResult:
        """Run the stages that end with a submitted audit report."""
        inputs = (await self.resolver.load()).unwrap()
        (await self.gate.check(self.project_root, inputs.lockfile_name)).unwrap()

        request = self.generator(inputs.lockfile, inputs.requires)
        return (await self.report_client.submit(request)).unwrap()

    async def run(self, args: Sequence[str] = ()) -> int:
        """Audit the project and return the process exit code."""
        fix = self.check_args(args)
        result = await self.fetch_report()

        if not fix:
            return self.presenter.present(result)

        plan = self.planner.plan(result.actions)
        outcome = await self.executor.execute(plan)
        if outcome.changed:
            logger.info(
                "updated %d and installed %d package(s)",
                len(outcome.updated),
                len(outcome.installed),
            )
        return 0
