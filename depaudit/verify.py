"""Lockfile consistency checks run before auditing."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from .errors import LockVerifyError
from .inputs import MANIFEST, PACKAGE_LOCK, SHRINKWRAP, read_json_document, read_manifest
from .models import ManifestDocument, StageResult, VerifyResult

logger = logging.getLogger(__name__)


class Verifier(Protocol):
    async def verify(self, project_root: Path) -> VerifyResult: ...


class LockfileVerifier:
    """Checks that every declared dependency is present in the lockfile.

    Only presence is checked; whether the locked version satisfies the
    declared range is left to npm itself.
    """

    async def verify(self, project_root: Path) -> VerifyResult:
        return await asyncio.to_thread(self._verify, Path(project_root))

    def _verify(self, project_root: Path) -> VerifyResult:
        manifest = read_manifest(project_root / MANIFEST)
        if manifest is None:
            return VerifyResult(ok=False, errors=[f"Missing: {MANIFEST}"])

        tree = read_json_document(project_root / SHRINKWRAP)
        if tree is None:
            tree = read_json_document(project_root / PACKAGE_LOCK)
        if tree is None:
            return VerifyResult(ok=False, errors=["Missing: lockfile"])

        errors = []
        for name, spec in ManifestDocument.from_json(manifest).requires().items():
            if not self._is_locked(tree, name):
                errors.append(f"Missing: {name}@{spec}")

        return VerifyResult(ok=not errors, errors=errors)

    def _is_locked(self, tree: dict, name: str) -> bool:
        # lockfileVersion 1 nests under "dependencies", 2 and 3 under "packages"
        if name in (tree.get("dependencies") or {}):
            return True
        return f"node_modules/{name}" in (tree.get("packages") or {})


class LockConsistencyGate:
    """Turns a verifier report into a pass/fail stage result."""

    def __init__(self, verifier: Verifier | None = None):
        self.verifier = verifier or LockfileVerifier()

    async def check(self, project_root: str | Path, lockfile_name: str) -> StageResult[None]:
        result = await self.verifier.verify(Path(project_root))
        if not result.ok:
            return StageResult.failure(LockVerifyError(lockfile_name, result.errors))

        logger.debug("%s is consistent with %s", lockfile_name, MANIFEST)
        return StageResult.success()
