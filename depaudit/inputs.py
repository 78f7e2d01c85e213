"""Manifest and lockfile resolution."""

import asyncio
import json
import logging
from pathlib import Path

from .errors import NoLockfileError, NoManifestError, ParseError
from .models import LoadedInputs, LockfileDocument, ManifestDocument, StageResult

logger = logging.getLogger(__name__)

SHRINKWRAP = "npm-shrinkwrap.json"
PACKAGE_LOCK = "package-lock.json"
MANIFEST = "package.json"


def read_json_document(path: Path) -> dict | None:
    """Read and parse a JSON document.

    Args:
        path: File to read

    Returns:
        Parsed object, or None if the file does not exist
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ParseError(str(path), f"expected a JSON object, got {type(data).__name__}")

    return data


def read_manifest(path: Path) -> dict | None:
    """Read package.json, checking that its dependency sections are objects."""
    data = read_json_document(path)
    if data is None:
        return None

    for section in ("dependencies", "devDependencies"):
        if data.get(section) is not None and not isinstance(data[section], dict):
            raise ParseError(str(path), f"{section} must be an object")

    return data


class InputResolver:
    """Loads package.json and the lockfile candidates from a project root."""

    def __init__(self, project_root: str | Path):
        self.project_root = Path(project_root)

    async def load(self) -> StageResult[LoadedInputs]:
        """Read all three candidates concurrently and select the inputs to audit."""
        shrinkwrap, package_lock, manifest = await asyncio.gather(
            self._read(SHRINKWRAP),
            self._read(PACKAGE_LOCK),
            self._read(MANIFEST, reader=read_manifest),
            return_exceptions=True,
        )

        # All reads complete before the first failure is reported
        for outcome in (shrinkwrap, package_lock, manifest):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, ParseError):
                    return StageResult.failure(outcome)
                raise outcome

        return self.resolve(shrinkwrap, package_lock, manifest)

    def resolve(
        self,
        shrinkwrap: dict | None,
        package_lock: dict | None,
        manifest: dict | None,
    ) -> StageResult[LoadedInputs]:
        """Apply the selection rules to already-read documents."""
        if manifest is None:
            return StageResult.failure(NoManifestError())

        if shrinkwrap is None and package_lock is None:
            return StageResult.failure(NoLockfileError())

        warnings: list[str] = []
        if shrinkwrap is not None:
            lockfile = LockfileDocument(filename=SHRINKWRAP, tree=shrinkwrap)
            if package_lock is not None:
                message = f"Both {SHRINKWRAP} and {PACKAGE_LOCK} exist, using {SHRINKWRAP}."
                logger.warning(message)
                warnings.append(message)
        else:
            lockfile = LockfileDocument(filename=PACKAGE_LOCK, tree=package_lock)

        document = ManifestDocument.from_json(manifest)
        return StageResult.success(
            LoadedInputs(
                manifest=document,
                lockfile=lockfile,
                lockfile_name=lockfile.filename,
                requires=document.requires(),
                warnings=warnings,
            )
        )

    async def _read(self, name: str, reader=read_json_document) -> dict | None:
        return await asyncio.to_thread(reader, self.project_root / name)


async def load_inputs(project_root: str | Path) -> StageResult[LoadedInputs]:
    """Resolve manifest and lockfile for the project at project_root."""
    return await InputResolver(project_root).load()
