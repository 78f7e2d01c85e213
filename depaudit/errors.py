"""Errors raised by the audit pipeline."""


class AuditError(Exception):
    """Base class for audit failures; carries an npm-style error code."""

    code = "EAUDIT"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(AuditError):
    """An input file exists but is not a valid JSON document."""

    code = "EJSONPARSE"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to parse {path}: {reason}")
        self.path = path


class NoManifestError(AuditError):
    code = "EAUDITNOPJSON"

    def __init__(self):
        super().__init__("No package.json found: Cannot audit a project without a package.json")


class NoLockfileError(AuditError):
    code = "EAUDITNOLOCK"

    def __init__(self):
        super().__init__(
            "Neither npm-shrinkwrap.json nor package-lock.json found: "
            "Cannot audit a project without a lockfile"
        )


class GlobalModeUnsupported(AuditError):
    code = "EAUDITGLOBAL"

    def __init__(self):
        super().__init__("`depaudit` does not support testing globals")


class InvalidSubcommand(AuditError):
    code = "EAUDITUSAGE"

    def __init__(self, subcommand: str, usage: str):
        super().__init__(f"Invalid audit subcommand: `{subcommand}`\n\nUsage:\n{usage}")
        self.subcommand = subcommand


class LockVerifyError(AuditError):
    """The lockfile does not agree with package.json."""

    code = "ELOCKVERIFY"

    def __init__(self, lockfile_name: str, errors: list[str]):
        details = "\n    ".join(errors)
        super().__init__(
            f"Errors were found in your {lockfile_name}, run  npm install  to fix them.\n    {details}"
        )
        self.lockfile_name = lockfile_name
        self.errors = list(errors)


class RegistryUnsupportedError(AuditError):
    """The configured registry cannot answer audit requests."""

    code = "ENOAUDIT"

    def __init__(self, registry: str, wrapped: Exception):
        super().__init__(f"Your configured registry ({registry}) does not support audit requests.")
        self.registry = registry
        self.wrapped = wrapped
        self.__cause__ = wrapped


class CommandFailedError(AuditError):
    """An npm subprocess exited with a non-zero status."""

    code = "ECOMMAND"

    def __init__(self, argv: list[str], returncode: int):
        super().__init__(f"Command `{' '.join(argv)}` failed with exit code {returncode}")
        self.argv = list(argv)
        self.returncode = returncode
