"""Bindings to the external language service that performs the analysis."""

from __future__ import annotations

from vue_type_check.services.cache import LanguageModelCache
from vue_type_check.services.environment import (
    EnvironmentService,
    create_environment_service,
    get_default_vls_config,
)
from vue_type_check.services.language_server import LanguageServerSession
from vue_type_check.services.modes import (
    JavascriptMode,
    LanguageModes,
    ModesFactory,
    ScriptValidator,
    TemplateValidator,
    VueInterpolationMode,
    create_language_modes,
)
from vue_type_check.services.regions import Region, VueDocumentRegions, get_vue_document_regions

__all__ = [
    # Environment
    "EnvironmentService",
    "create_environment_service",
    "get_default_vls_config",
    # Caches and regions
    "LanguageModelCache",
    "Region",
    "VueDocumentRegions",
    "get_vue_document_regions",
    # Validators
    "JavascriptMode",
    "LanguageModes",
    "LanguageServerSession",
    "ModesFactory",
    "ScriptValidator",
    "TemplateValidator",
    "VueInterpolationMode",
    "create_language_modes",
]
