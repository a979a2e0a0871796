"""Namespace map — the JSON document that describes custom namespaces.

The document maps a namespace name to its record. A handful of top-level
keys are directives rather than namespaces:

- ``globalAdmin``: the group exempt from lockdowns (default ``sysop``).
- ``defaults``: values merged into every record that does not set them.
- ``lockdownDefaults``: rights used where a record says ``lockdown: true``.
- ``resetGlobals``: clear ApprovedRevs namespace lists before applying.

A null value counts as "not set", both in records and in ``defaults``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from nsmgr.domain.canonical import TALK_CONSTANT_SUFFIX, talk_id
from nsmgr.domain.errors import InvalidConfigError, MissingFieldError

DEFAULT_ADMIN_GROUP = "sysop"
DEFAULT_OWNER = "core"

GLOBAL_ADMIN_KEY = "globalAdmin"
DEFAULTS_KEY = "defaults"
LOCKDOWN_DEFAULTS_KEY = "lockdownDefaults"
RESET_GLOBALS_KEY = "resetGlobals"
DIRECTIVE_KEYS = frozenset(
    {GLOBAL_ADMIN_KEY, DEFAULTS_KEY, LOCKDOWN_DEFAULTS_KEY, RESET_GLOBALS_KEY}
)

# Keys that identify a namespace and are never taken from ``defaults``.
_IDENTITY_KEYS = frozenset({"id", "number", "constant", "const"})


class NamespaceConfig(BaseModel):
    """One namespace record from the map."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int = Field(validation_alias=AliasChoices("id", "number"), serialization_alias="id")
    constant: str = Field(
        validation_alias=AliasChoices("constant", "const"), serialization_alias="constant"
    )
    permission: str | None = None
    group: str | None = None
    lockdown: bool | list[str] = False
    alias: list[str] = Field(default_factory=list)
    owner: str = DEFAULT_OWNER

    has_subpages: bool = Field(
        False,
        validation_alias=AliasChoices("hasSubpages", "hasSubpage"),
        serialization_alias="hasSubpages",
    )
    default_search: bool = Field(False, alias="defaultSearch")
    use_ve: bool = Field(False, alias="useVE")
    use_smw: bool = Field(False, alias="useSMW")
    user_functions: bool = Field(False, alias="userFunctions")
    use_flow_for_talk: bool = Field(False, alias="useFlowForTalk")
    content: bool = False
    use_collection: bool = Field(False, alias="useCollection")
    use_approved_revs: bool | None = Field(None, alias="useApprovedRevs")
    use_page_triage: bool | None = Field(None, alias="usePageTriage")
    use_page_images: bool = Field(False, alias="usePageImages")
    auto_edit: bool = Field(False, alias="autoEdit")
    includable: bool | None = None
    content_model: str | None = Field(
        None,
        validation_alias=AliasChoices("contentModel", "useContentModel"),
        serialization_alias="contentModel",
    )
    search_weight: float | None = Field(None, alias="searchWeight")

    @field_validator("alias", mode="before")
    @classmethod
    def _single_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def talk_id(self) -> int:
        return talk_id(self.id)

    @property
    def talk_constant(self) -> str:
        return f"{self.constant}{TALK_CONSTANT_SUFFIX}"

    @property
    def is_locked_down(self) -> bool:
        return self.lockdown is True or isinstance(self.lockdown, list)

    @property
    def lockdown_rights(self) -> list[str]:
        """Rights explicitly locked to the owning group (empty for admin-only)."""
        return list(self.lockdown) if isinstance(self.lockdown, list) else []

    def to_document(self) -> dict[str, Any]:
        """Serialize back to the JSON record shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NamespaceMap(BaseModel):
    """A parsed namespace map with ``defaults`` already merged."""

    model_config = ConfigDict(populate_by_name=True)

    global_admin: str = Field(DEFAULT_ADMIN_GROUP, alias=GLOBAL_ADMIN_KEY)
    reset_globals: bool = Field(False, alias=RESET_GLOBALS_KEY)
    namespaces: dict[str, NamespaceConfig] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.namespaces)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {GLOBAL_ADMIN_KEY: self.global_admin}
        if self.reset_globals:
            doc[RESET_GLOBALS_KEY] = True
        for name, conf in self.namespaces.items():
            doc[name] = conf.to_document()
        return doc


def describe_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
        for err in exc.errors()
    ]


def _drop_unset(record: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in record.items() if value is not None}


def _prepare_record(
    name: str,
    record: Any,
    defaults: Mapping[str, Any],
    lockdown_defaults: list[str] | None,
) -> dict[str, Any]:
    if not isinstance(record, Mapping):
        msg = f"Namespace '{name}' must be an object, got {type(record).__name__}."
        raise InvalidConfigError(msg, namespace=name)

    prepared = _drop_unset(record)
    if not ({"id", "number"} & prepared.keys() and {"constant", "const"} & prepared.keys()):
        msg = f"Namespace map needs a constant name and an id set for '{name}'."
        raise MissingFieldError(msg, namespace=name)

    for key, value in defaults.items():
        prepared.setdefault(key, value)

    if prepared.get("lockdown") is True:
        prepared["lockdown"] = list(lockdown_defaults) if lockdown_defaults else False
    return prepared


def parse_namespace_map(
    raw: Any,
    *,
    default_admin: str = DEFAULT_ADMIN_GROUP,
) -> NamespaceMap:
    """Validate a decoded JSON document into a :class:`NamespaceMap`.

    Raises:
        InvalidConfigError: The document or a record has the wrong shape, or two
            records share an id.
        MissingFieldError: A record lacks ``id`` or ``constant``.
    """
    if not isinstance(raw, Mapping):
        msg = f"Namespace map must be a JSON object, got {type(raw).__name__}."
        raise InvalidConfigError(msg)

    defaults_raw = raw.get(DEFAULTS_KEY) or {}
    if not isinstance(defaults_raw, Mapping):
        raise InvalidConfigError(f"'{DEFAULTS_KEY}' must be an object.")
    defaults = {k: v for k, v in _drop_unset(defaults_raw).items() if k not in _IDENTITY_KEYS}

    lockdown_defaults = raw.get(LOCKDOWN_DEFAULTS_KEY)
    if lockdown_defaults is not None and not isinstance(lockdown_defaults, list):
        raise InvalidConfigError(f"'{LOCKDOWN_DEFAULTS_KEY}' must be a list of rights.")

    namespaces: dict[str, NamespaceConfig] = {}
    names_by_id: dict[int, str] = {}
    for name, record in raw.items():
        if name in DIRECTIVE_KEYS:
            continue
        prepared = _prepare_record(name, record, defaults, lockdown_defaults)
        try:
            conf = NamespaceConfig.model_validate(prepared)
        except ValidationError as exc:
            problems = describe_errors(exc)
            msg = f"Invalid configuration for namespace '{name}': {problems[0]}"
            raise InvalidConfigError(msg, namespace=name, errors=problems) from exc

        other = names_by_id.setdefault(conf.id, name)
        if other != name:
            msg = f"Namespace '{name}' reuses id {conf.id} of '{other}'."
            raise InvalidConfigError(msg, namespace=name, id=conf.id, other=other)
        namespaces[name] = conf

    try:
        return NamespaceMap(
            global_admin=raw.get(GLOBAL_ADMIN_KEY) or default_admin,
            reset_globals=bool(raw.get(RESET_GLOBALS_KEY, False)),
            namespaces=namespaces,
        )
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid namespace map: {describe_errors(exc)[0]}") from exc
