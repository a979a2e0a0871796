"""WikiSettings — the wiki host's configuration surface as one object.

Each field corresponds to one of the host's global configuration
variables and serializes under that variable's name, so a snapshot
dumped from a running wiki loads straight into this model. Variables
the model does not know are kept as extras and remain addressable
through :meth:`WikiSettings.variable`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nsmgr.domain.canonical import CORE_CONSTANTS, CORE_NAMESPACES
from nsmgr.domain.errors import UnknownVariableError

IntMap = dict[int, bool]


class WikiSettings(BaseModel):
    """Host configuration variables touched by namespace management."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # --- Core ---
    extra_namespaces: dict[int, str] = Field(default_factory=dict, alias="wgExtraNamespaces")
    namespace_aliases: dict[str, int] = Field(default_factory=dict, alias="wgNamespaceAliases")
    content_namespaces: list[int] = Field(default_factory=list, alias="wgContentNamespaces")
    namespaces_with_subpages: IntMap = Field(
        default_factory=dict, alias="wgNamespacesWithSubpages"
    )
    namespaces_to_be_searched_default: IntMap = Field(
        default_factory=dict, alias="wgNamespacesToBeSearchedDefault"
    )
    namespace_content_models: dict[int, str] = Field(
        default_factory=dict, alias="wgNamespaceContentModels"
    )
    nonincludable_namespaces: list[int] = Field(
        default_factory=list, alias="wgNonincludableNamespaces"
    )

    # --- Permissions ---
    group_permissions: dict[str, dict[str, bool]] = Field(
        default_factory=dict, alias="wgGroupPermissions"
    )
    grant_permissions: dict[str, dict[str, bool]] = Field(
        default_factory=dict, alias="wgGrantPermissions"
    )
    namespace_protection: dict[int, list[str]] = Field(
        default_factory=dict, alias="wgNamespaceProtection"
    )
    namespace_permission_lockdown: dict[int, dict[str, list[str]]] = Field(
        default_factory=dict, alias="wgNamespacePermissionLockdown"
    )
    namespace_hide_from_rc: list[int] = Field(default_factory=list, alias="wgNamespaceHideFromRC")

    # --- Extensions ---
    visual_editor_available_namespaces: IntMap = Field(
        default_factory=dict, alias="wgVisualEditorAvailableNamespaces"
    )
    namespaces_with_semantic_links: IntMap = Field(
        default_factory=dict, alias="smwgNamespacesWithSemanticLinks"
    )
    uf_allowed_namespaces: IntMap = Field(default_factory=dict, alias="wgUFAllowedNamespaces")
    collection_article_namespaces: list[int] = Field(
        default_factory=list, alias="wgCollectionArticleNamespaces"
    )
    approved_revs_enabled_namespaces: IntMap = Field(
        default_factory=dict, alias="egApprovedRevsEnabledNamespaces"
    )
    approved_revs_namespaces: list[int] = Field(
        default_factory=list, alias="egApprovedRevsNamespaces"
    )
    page_triage_namespaces: list[int] = Field(default_factory=list, alias="wgPageTriageNamespaces")
    page_triage_curation_modules: dict[str, dict[str, Any]] = Field(
        default_factory=dict, alias="wgPageTriageCurationModules"
    )
    page_images_namespaces: list[int] = Field(default_factory=list, alias="wgPageImagesNamespaces")
    page_forms_autoedit_namespaces: list[int] = Field(
        default_factory=list, alias="wgPageFormsAutoeditNamespaces"
    )
    cirrus_search_namespace_weights: dict[int, float] = Field(
        default_factory=dict, alias="wgCirrusSearchNamespaceWeights"
    )

    # --- Not host variables, but part of every snapshot ---
    constants: dict[str, int] = Field(default_factory=dict)
    user_groups: dict[int, list[str]] = Field(default_factory=dict, alias="userGroups")

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> WikiSettings:
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Serialize under the host's variable names."""
        return self.model_dump(mode="json", by_alias=True)

    def variable(self, name: str) -> Any:
        """Return one variable by its host name (a leading ``$`` is ignored).

        Raises:
            UnknownVariableError: The snapshot has no such variable.
        """
        key = name.lstrip("$")
        document = self.to_document()
        if key not in document:
            raise UnknownVariableError(f"No such variable: ${key}", variable=key)
        return document[key]

    def all_constants(self) -> dict[str, int]:
        """Core namespace constants merged with the custom ones."""
        return {**CORE_CONSTANTS, **self.constants}

    def canonical_namespaces(self) -> dict[int, str]:
        """Core and custom namespaces, ordered by id."""
        merged = {**CORE_NAMESPACES, **self.extra_namespaces}
        return dict(sorted(merged.items()))
