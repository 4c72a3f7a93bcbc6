"""
Module: templates

Purpose:
    Product catalog and named fixture templates used to start a session.

Key Functions:
    - create_layout(): Fresh Layout from a template id
    - available_templates(): Built-in template ids and names
    - sample_catalog(): Built-in demo catalog
"""

from .catalog import SAMPLE_ENTRIES, Catalog, CatalogEntry, CatalogError, sample_catalog
from .library import (
    BUILTIN_TEMPLATES,
    DEFAULT_TEMPLATE_ID,
    TemplateCompartment,
    TemplateDefinition,
    TemplateError,
    TemplateRow,
    available_templates,
    create_layout,
    get_template,
)

__all__ = [
    # Catalog
    "SAMPLE_ENTRIES",
    "Catalog",
    "CatalogEntry",
    "CatalogError",
    "sample_catalog",
    # Library
    "BUILTIN_TEMPLATES",
    "DEFAULT_TEMPLATE_ID",
    "TemplateCompartment",
    "TemplateDefinition",
    "TemplateError",
    "TemplateRow",
    "available_templates",
    "create_layout",
    "get_template",
]
