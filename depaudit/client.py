"""Audit report generation and registry submission."""

import logging
import sys
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_REGISTRY
from .errors import RegistryUnsupportedError
from .models import (
    AuditRequest,
    AuditResult,
    DependencySet,
    LockfileDocument,
    RemediationAction,
    StageResult,
    VulnerabilityCounts,
)

logger = logging.getLogger(__name__)

AUDIT_PATH = "-/npm/v1/security/audits"

# Lock tree fields the registry needs; resolved URLs and integrity hashes are dropped
_NODE_FIELDS = ("version", "dev", "optional", "bundled", "requires")


class Client(Protocol):
    async def submit_for_full_report(self, request: AuditRequest) -> AuditResult: ...


def _strip_tree(dependencies: dict) -> dict:
    stripped = {}
    for name, node in dependencies.items():
        entry = {key: node[key] for key in _NODE_FIELDS if key in node}
        if node.get("dependencies"):
            entry["dependencies"] = _strip_tree(node["dependencies"])
        stripped[name] = entry
    return stripped


def _tree_from_packages(packages: dict) -> dict:
    """Rebuild the nested dependency tree from a lockfileVersion 2/3 packages map."""
    tree: dict = {}
    for path, node in packages.items():
        # "" is the root project; workspace links live outside node_modules
        if not path.startswith("node_modules/"):
            continue
        names = path[len("node_modules/"):].split("/node_modules/")
        level = tree
        for parent in names[:-1]:
            level = level.setdefault(parent, {}).setdefault("dependencies", {})

        entry = {key: node[key] for key in ("version", "dev", "optional") if key in node}
        if node.get("inBundle"):
            entry["bundled"] = True
        requires = {**(node.get("dependencies") or {}), **(node.get("optionalDependencies") or {})}
        if requires:
            entry["requires"] = requires
        level.setdefault(names[-1], {}).update(entry)
    return tree


def generate(lockfile: LockfileDocument, requires: DependencySet) -> AuditRequest:
    """Build the registry audit payload from a lock tree and declared dependencies.

    Args:
        lockfile: Selected lockfile document
        requires: Merged dependencies and devDependencies

    Returns:
        Request ready for submission
    """
    tree = lockfile.tree
    if tree.get("dependencies") is not None:
        dependencies = _strip_tree(tree["dependencies"])
    else:
        dependencies = _tree_from_packages(tree.get("packages") or {})

    payload = {
        "name": lockfile.name,
        "version": lockfile.version,
        "requires": dict(requires),
        "dependencies": dependencies,
        "install": [],
        "remove": [],
        "metadata": {
            "npm_version": None,
            "node_version": None,
            "platform": sys.platform,
        },
    }
    return AuditRequest(lockfile=lockfile, requires=dict(requires), payload=payload)


class ActionPayload(BaseModel):
    """Wire format of one recommended action."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    action: str
    module: str
    target: str | None = None
    is_major: bool = Field(False, alias="isMajor")
    depth: int | None = None
    resolves: list[dict] = Field(default_factory=list)


class VulnerabilitiesPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    info: int = 0
    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0


class MetadataPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vulnerabilities: VulnerabilitiesPayload


class AuditResponse(BaseModel):
    """Wire format of a full audit report."""

    model_config = ConfigDict(extra="ignore")

    actions: list[ActionPayload] = Field(default_factory=list)
    advisories: dict[str, dict] = Field(default_factory=dict)
    metadata: MetadataPayload


def parse_audit_result(data: dict) -> AuditResult:
    """Validate a registry response and convert it to an AuditResult.

    Raises:
        pydantic.ValidationError: if the document does not have the report shape
    """
    response = AuditResponse.model_validate(data)
    counts = response.metadata.vulnerabilities
    return AuditResult(
        vulnerabilities=VulnerabilityCounts(
            low=counts.low,
            moderate=counts.moderate,
            high=counts.high,
            critical=counts.critical,
            info=counts.info,
        ),
        actions=[
            RemediationAction(
                module=action.module,
                target=action.target,
                kind=action.action,
                is_major=action.is_major,
                depth=action.depth or 0,
                resolves=action.resolves,
            )
            for action in response.actions
        ],
        advisories=response.advisories,
        raw=data,
    )


class RegistryClient:
    """Submits audit requests to an npm-compatible registry."""

    def __init__(
        self,
        registry: str = DEFAULT_REGISTRY,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize registry client.

        Args:
            registry: Registry base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.registry = registry
        self.timeout = timeout
        self._transport = transport

    @property
    def audit_url(self) -> str:
        return f"{self.registry.rstrip('/')}/{AUDIT_PATH}"

    async def submit_for_full_report(self, request: AuditRequest) -> AuditResult:
        logger.debug("POST %s", self.audit_url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.audit_url, json=request.payload)
            response.raise_for_status()
            return parse_audit_result(response.json())


def _status_code(error: Exception) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return getattr(error, "status_code", None)


def is_unsupported_status(status: int | None) -> bool:
    """True for the statuses that mean the registry has no audit endpoint."""
    return status is not None and (status == 404 or status >= 500)


class AuditReportClient:
    """Submission stage: sends the request and maps registry failures."""

    def __init__(self, registry: str = DEFAULT_REGISTRY, client: Client | None = None, timeout: float = 30.0):
        self.registry = registry
        self.client = client or RegistryClient(registry, timeout=timeout)

    async def submit(self, request: AuditRequest) -> StageResult[AuditResult]:
        try:
            result = await self.client.submit_for_full_report(request)
        except Exception as e:
            if not is_unsupported_status(_status_code(e)):
                raise
            return StageResult.failure(RegistryUnsupportedError(self.registry, e))

        return StageResult.success(result)
