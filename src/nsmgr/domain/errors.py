"""Configuration errors raised while reading or applying a namespace map.

Every error is fatal to the operation that raised it. Services convert
them into a failed ServiceResult using :attr:`NamespaceConfigError.code`.
"""

from __future__ import annotations

from typing import Any


class NamespaceConfigError(Exception):
    """Base class for namespace configuration problems."""

    code = "INVALID_CONFIG"

    def __init__(self, message: str, *, namespace: str | None = None, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.namespace = namespace
        self.detail: dict[str, Any] = dict(detail)
        if namespace is not None:
            self.detail.setdefault("namespace", namespace)


class InvalidConfigError(NamespaceConfigError):
    """A record has the wrong shape or a field has the wrong type."""


class MissingFieldError(NamespaceConfigError):
    """A namespace record lacks ``id`` or ``constant``."""

    code = "MISSING_FIELD"


class AdminGroupConflictError(NamespaceConfigError):
    """Two namespaces designate different admin groups."""

    code = "ADMIN_CONFLICT"


class MultipleAdminsError(NamespaceConfigError):
    """A ``*`` lockdown entry lists more than one group."""

    code = "MULTIPLE_ADMINS"


class ExtraGroupsError(NamespaceConfigError):
    """A locked-down right is granted to more than one non-admin group."""

    code = "EXTRA_GROUPS"


class AmbiguousGroupError(NamespaceConfigError):
    """More than one non-admin group holds a namespace's permission."""

    code = "AMBIGUOUS_GROUP"


class ProtectionConflictError(NamespaceConfigError):
    """A namespace is protected by more than one right."""

    code = "PROTECTION_CONFLICT"


class ConstantMismatchError(NamespaceConfigError):
    """A namespace constant is already defined with a different value."""

    code = "CONSTANT_MISMATCH"


class UnknownVariableError(NamespaceConfigError):
    """A settings variable was requested that the snapshot does not have."""

    code = "UNKNOWN_VARIABLE"
