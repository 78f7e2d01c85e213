"""Core data models for depaudit."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

DependencySet = dict[str, str]


@dataclass
class ManifestDocument:
    """A parsed package.json."""

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    name: str | None = None
    version: str | None = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict) -> "ManifestDocument":
        return cls(
            dependencies=dict(data.get("dependencies") or {}),
            dev_dependencies=dict(data.get("devDependencies") or {}),
            name=data.get("name"),
            version=data.get("version"),
            raw=data,
        )

    def requires(self) -> DependencySet:
        """Merge dependencies and devDependencies; dev entries win on collision."""
        merged: DependencySet = {}
        merged.update(self.dependencies)
        merged.update(self.dev_dependencies)
        return merged


@dataclass
class LockfileDocument:
    """A parsed resolved-dependency tree (shrinkwrap or package-lock)."""

    filename: str
    tree: dict

    @property
    def name(self) -> str | None:
        return self.tree.get("name")

    @property
    def version(self) -> str | None:
        return self.tree.get("version")


@dataclass
class LoadedInputs:
    """Result of resolving the project's input files."""

    manifest: ManifestDocument
    lockfile: LockfileDocument
    lockfile_name: str
    requires: DependencySet
    warnings: list[str] = field(default_factory=list)


@dataclass
class AuditRequest:
    """A lockfile paired with the declared dependencies, ready for submission."""

    lockfile: LockfileDocument
    requires: DependencySet
    payload: dict = field(default_factory=dict)


@dataclass
class VulnerabilityCounts:
    """Vulnerability counts per severity bucket."""

    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0
    info: int = 0

    @property
    def total(self) -> int:
        # info is reported but never counted
        return self.low + self.moderate + self.high + self.critical


@dataclass
class RemediationAction:
    """A single suggested fix from an audit report."""

    module: str
    target: str | None = None
    kind: str = "review"  # install, update, review
    is_major: bool = False
    depth: int = 0
    resolves: list[dict] = field(default_factory=list)

    @property
    def spec(self) -> str:
        return f"{self.module}@{self.target}"


@dataclass
class AuditResult:
    """Severity counts and remediation actions returned by the registry."""

    vulnerabilities: VulnerabilityCounts
    actions: list[RemediationAction] = field(default_factory=list)
    advisories: dict[str, dict] = field(default_factory=dict)
    raw: dict = field(default_factory=dict)


@dataclass
class RemediationPlan:
    """Remediation actions classified into executable buckets."""

    install_list: list[str] = field(default_factory=list)
    update_list: list[str] = field(default_factory=list)
    major_list: list[str] = field(default_factory=list)
    review_list: list[RemediationAction] = field(default_factory=list)
    max_depth: int = 0

    @property
    def install_targets(self) -> list[str]:
        """Specs handed to the installer, semver-major changes first."""
        return self.major_list + self.install_list

    @property
    def has_fixes(self) -> bool:
        return bool(self.update_list or self.major_list or self.install_list)


@dataclass
class VerifyResult:
    """Outcome reported by a lockfile verifier."""

    ok: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class ExecutionOutcome:
    """What a fix run actually invoked."""

    updated: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)
    depth: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.updated or self.installed)


@dataclass
class StageResult(Generic[T]):
    """Success or failure value handed from one pipeline stage to the next."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "StageResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the carried value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
