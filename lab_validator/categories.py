"""
Category registry — the reference data every validator reads.

One CategoryDefinition per supported lab type, keyed by the closed
``Category`` enum. The registry is built once at import and never changes;
adding a lab type means adding an enum member and a definition here, never
registering one at runtime.

Each definition carries:
  - keywords:   header terms expected in raw document text
  - parameters: canonical parameter name → accepted aliases
  - coverage:   how many distinct parameters make "a complete panel"
                (confidence denominator) and the minimum count the
                structured validator accepts
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .exceptions import UnknownCategoryError
from .models import Category
from .normalize import normalize_key

ParameterSet = Mapping[str, tuple[str, ...]]
KeywordSet = tuple[str, ...]


@dataclass(frozen=True)
class CategoryDefinition:
    """Reference data for one lab report type."""

    category: Category
    display_name: str
    keywords: KeywordSet
    parameters: ParameterSet
    expected_parameters: int  # Distinct matches that count as a full panel
    min_parameters: int  # Structured validator acceptance floor

    def terms_for(self, parameter: str) -> tuple[str, ...]:
        """Canonical name (spaced) followed by every alias, without duplicates."""
        terms = [parameter.replace("_", " "), *self.parameters[parameter]]
        return tuple(dict.fromkeys(terms))


# ─── Reference Data ──────────────────────────────────────────────────

_CBC = CategoryDefinition(
    category=Category.CBC,
    display_name="CBC",
    keywords=(
        "complete blood count",
        "cbc",
        "full blood count",
        "blood count",
        "hemogram",
        "haemogram",
    ),
    parameters=MappingProxyType({
        "hemoglobin": ("haemoglobin", "hgb", "hb"),
        "wbc": (
            "white blood cell", "white blood cells", "white cell count",
            "leukocytes", "leucocytes", "tlc", "total leukocyte count",
        ),
        "rbc": ("red blood cell", "red blood cells", "red cell count", "erythrocytes"),
        "platelets": ("platelet", "platelet count", "plt", "thrombocytes"),
        "hematocrit": ("haematocrit", "hct", "pcv", "packed cell volume"),
        "mcv": ("mean corpuscular volume",),
        "mch": ("mean corpuscular hemoglobin",),
        "mchc": ("mean corpuscular hemoglobin concentration",),
        "rdw": ("red cell distribution width",),
        "neutrophils": ("neutrophil",),
        "lymphocytes": ("lymphocyte",),
    }),
    expected_parameters=5,
    min_parameters=3,
)

_URINALYSIS = CategoryDefinition(
    category=Category.URINALYSIS,
    display_name="Urinalysis",
    keywords=(
        "urinalysis",
        "urine analysis",
        "urine examination",
        "urine routine",
        "routine urine",
    ),
    parameters=MappingProxyType({
        "color": ("colour",),
        "appearance": ("clarity", "turbidity"),
        "ph": (),
        "specific_gravity": ("sp gr", "sg"),
        "protein": ("albumin",),
        "glucose": ("sugar",),
        "ketones": ("ketone", "acetone"),
        "bilirubin": (),
        "urobilinogen": (),
        "blood": ("occult blood",),
        "nitrite": ("nitrites",),
        "leukocyte_esterase": ("leucocyte esterase",),
        "wbc": ("white blood cells", "white blood cell", "pus cells", "leukocytes"),
        "rbc": ("red blood cells", "red blood cell", "erythrocytes"),
        "bacteria": (),
        "epithelial_cells": ("epithelial", "epi cells"),
        "casts": (),
        "crystals": (),
    }),
    expected_parameters=6,
    min_parameters=4,
)

_LIPID = CategoryDefinition(
    category=Category.LIPID,
    display_name="Lipid Profile",
    keywords=(
        "lipid profile",
        "lipid panel",
        "lipid",
        "cholesterol",
        "lipogram",
    ),
    parameters=MappingProxyType({
        "total_cholesterol": ("cholesterol total", "serum cholesterol", "cholesterol", "chol"),
        "hdl": ("hdl cholesterol", "hdl c", "high density lipoprotein"),
        "ldl": ("ldl cholesterol", "ldl c", "low density lipoprotein"),
        "vldl": ("vldl cholesterol", "very low density lipoprotein"),
        "triglycerides": ("triglyceride", "tg", "trigs"),
        "chol_hdl_ratio": ("cholesterol hdl ratio", "total cholesterol hdl ratio", "tc hdl ratio"),
    }),
    expected_parameters=4,
    min_parameters=3,
)

_REGISTRY: Mapping[Category, CategoryDefinition] = MappingProxyType({
    d.category: d for d in (_CBC, _URINALYSIS, _LIPID)
})

# Spellings a caller might send for the declared lab type
_CATEGORY_ALIASES: dict[Category, tuple[str, ...]] = {
    Category.CBC: ("complete blood count", "complete-blood-count", "full blood count", "hemogram"),
    Category.URINALYSIS: ("urine analysis", "urine test", "ua"),
    Category.LIPID: ("lipid panel", "lipid-panel", "lipid profile", "lipids"),
}


# ─── Lookup Indexes (built once) ─────────────────────────────────────


def _build_key_index(definition: CategoryDefinition) -> Mapping[str, str]:
    index: dict[str, str] = {}
    for parameter in definition.parameters:
        for term in definition.terms_for(parameter):
            key = normalize_key(term)
            owner = index.setdefault(key, parameter)
            if owner != parameter:
                raise ValueError(
                    f"{definition.display_name}: alias '{term}' maps to both "
                    f"'{owner}' and '{parameter}'"
                )
    return MappingProxyType(index)


def _build_category_index() -> Mapping[str, Category]:
    index: dict[str, Category] = {}
    for category, definition in _REGISTRY.items():
        for name in (category.value, definition.display_name, *_CATEGORY_ALIASES[category]):
            index[normalize_key(name)] = category
    return MappingProxyType(index)


_KEY_INDEX: Mapping[Category, Mapping[str, str]] = MappingProxyType({
    category: _build_key_index(definition) for category, definition in _REGISTRY.items()
})
_CATEGORY_INDEX = _build_category_index()


# ─── Public API ──────────────────────────────────────────────────────


def supported_categories() -> frozenset[Category]:
    """The closed set of lab types this validator can score."""
    return frozenset(_REGISTRY)


def resolve_category(name: Category | str) -> Category:
    """Map a user-declared lab type ("cbc", "Complete Blood Count", "lipid-panel") to a Category.

    Raises:
        UnknownCategoryError: if the name is not a supported category.
            No fallback category is ever substituted.
    """
    if isinstance(name, Category):
        return name

    category = _CATEGORY_INDEX.get(normalize_key(name)) if isinstance(name, str) else None
    if category is None:
        raise UnknownCategoryError(
            f"Unsupported lab type '{name}'. Expected one of: "
            f"{', '.join(sorted(c.value for c in _REGISTRY))}.",
            details={
                "lab_type": str(name),
                "supported": sorted(c.value for c in _REGISTRY),
            },
        )
    return category


def definition_for(category: Category | str) -> CategoryDefinition:
    return _REGISTRY[resolve_category(category)]


def parameters_for(category: Category | str) -> ParameterSet:
    return definition_for(category).parameters


def keywords_for(category: Category | str) -> KeywordSet:
    return definition_for(category).keywords


def parameter_key_index(category: Category | str) -> Mapping[str, str]:
    """Normalized key (canonical name or alias) → canonical parameter name."""
    return _KEY_INDEX[resolve_category(category)]
