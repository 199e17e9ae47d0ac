"""
Policy Loader - Read catalogs, selections and documents from YAML/JSON files

This is the only place that knows about legacy catalog fields. A catalog
entry with the old singular `category` field is converted to a
`categories` set here, so nothing downstream has to check both.
"""

import logging
from typing import List, Dict, Any

import yaml

from policywright.core import (
    AttributeCatalog,
    AttributeConstraints,
    AttributeDefinition,
    PolicyDocument,
    ReferenceDirectory,
    ReferenceEntity,
    SelectionState,
)

logger = logging.getLogger(__name__)


class PolicyLoadError(Exception):
    """Raised when a catalog, selection or document file cannot be loaded"""

    pass


def _read_mapping(path: str) -> Dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise PolicyLoadError(f"Failed to load {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PolicyLoadError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


def _categories(entry: Dict[str, Any]) -> List[str]:
    categories = entry.get("categories")
    if isinstance(categories, str):
        return [categories]
    if isinstance(categories, (list, tuple, set)):
        return [c for c in categories if isinstance(c, str)]
    legacy = entry.get("category")
    if legacy:
        return [legacy]
    return []


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return value is True


def parse_attribute(entry: Dict[str, Any]) -> AttributeDefinition:
    """Build an AttributeDefinition from a catalog entry (camelCase keys)"""
    attribute_id = entry.get("id") or entry.get("_id")
    return AttributeDefinition(
        id=attribute_id,
        name=entry.get("name") or attribute_id,
        display_name=entry.get("displayName") or "",
        data_type=entry.get("dataType") or "string",
        categories=frozenset(_categories(entry)),
        is_multi_value=_flag(entry.get("isMultiValue")),
        is_required=_flag(entry.get("isRequired")),
        constraints=AttributeConstraints.from_dict(entry.get("constraints")),
    )


def catalog_from_dict(data: Dict[str, Any]) -> AttributeCatalog:
    """
    Build the attribute catalog from the `attributes` list.

    Entries without an id are skipped; a partial catalog is still usable.
    """
    attributes = []
    for i, entry in enumerate(data.get("attributes") or []):
        if not isinstance(entry, dict) or not (entry.get("id") or entry.get("_id")):
            logger.warning("Skipping catalog attribute %d: missing id", i)
            continue
        try:
            attributes.append(parse_attribute(entry))
        except ValueError as e:
            raise PolicyLoadError(f"Invalid catalog attribute {i}: {e}")
    return AttributeCatalog(attributes)


def references_from_dict(data: Dict[str, Any]) -> ReferenceDirectory:
    """Build the reference directory from the catalog's entity lists"""

    def entities(key):
        return [
            ReferenceEntity.from_dict(e)
            for e in data.get(key) or []
            if isinstance(e, dict) and e.get("id")
        ]

    return ReferenceDirectory(
        subjects=entities("subjects"),
        actions=entities("actions"),
        resources=entities("resources"),
        additional_resources=entities("additionalResources"),
    )


def load_catalog(path: str) -> AttributeCatalog:
    """Load the attribute catalog from a catalog file"""
    return catalog_from_dict(_read_mapping(path))


def load_references(path: str) -> ReferenceDirectory:
    """Load display names from a catalog file"""
    return references_from_dict(_read_mapping(path))


def load_selection(path: str) -> SelectionState:
    """Load wizard selections from a selection file"""
    data = _read_mapping(path)
    try:
        return SelectionState.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise PolicyLoadError(f"Invalid selection in {path}: {e}")


def load_document(path: str) -> PolicyDocument:
    """Load a persisted policy document (JSON or YAML)"""
    data = _read_mapping(path)
    try:
        return PolicyDocument.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PolicyLoadError(f"Invalid policy document in {path}: {e}")
