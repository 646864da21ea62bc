"""
Result shape declarations.

A plain result is any dataclass. A polymorphic result is a base dataclass
plus a closed table of (discriminator tag, variant dataclass) pairs,
declared right after the classes with declare_variants(). The table is
validated when declared, so a bad hierarchy fails at import time.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any

from models import ConfigurationError

DEFAULT_DISCRIMINATOR = "type"

_TABLE_ATTR = "_variant_table"
_VARIANT_OF_ATTR = "_variant_of"


@dataclass(frozen=True)
class VariantTable:
    """The closed set of variants of one polymorphic base."""
    base: type
    discriminator: str
    variants: tuple[tuple[str, type], ...]

    def tag_for(self, cls: type) -> str | None:
        for tag, variant in self.variants:
            if variant is cls:
                return tag
        return None


def declare_variants(
    base: type,
    variants: list[tuple[str, type]],
    discriminator: str = DEFAULT_DISCRIMINATOR,
) -> VariantTable:
    """
    Declare the variants of a polymorphic result base.

    Args:
        base: Base dataclass shared by all variants
        variants: (tag, variant class) pairs; order is kept in schemas
        discriminator: Wire property that carries the tag

    Raises:
        ConfigurationError: If the table is empty, tags repeat, a variant
            doesn't subclass the base, or the discriminator clashes with a field
    """
    name = base.__name__
    if not dataclasses.is_dataclass(base):
        raise ConfigurationError(f"Polymorphic base {name} must be a dataclass")
    if _TABLE_ATTR in base.__dict__:
        raise ConfigurationError(f"Variants of {name} are already declared")
    if not variants:
        raise ConfigurationError(f"Polymorphic base {name} declares no variants")
    if not discriminator:
        raise ConfigurationError(f"Polymorphic base {name} needs a discriminator name")

    seen_tags: set[str] = set()
    seen_classes: set[type] = set()
    for tag, variant in variants:
        if not isinstance(tag, str) or not tag:
            raise ConfigurationError(f"{name}: variant {variant!r} has an empty tag")
        if tag in seen_tags:
            raise ConfigurationError(f"{name}: tag '{tag}' is declared twice")
        if variant in seen_classes:
            raise ConfigurationError(f"{name}: {variant.__name__} is declared twice")
        if variant is base or not (isinstance(variant, type) and issubclass(variant, base)):
            raise ConfigurationError(f"{name}: variant {variant!r} must be a subclass of {name}")
        if not dataclasses.is_dataclass(variant):
            raise ConfigurationError(f"{name}: variant {variant.__name__} must be a dataclass")
        if _VARIANT_OF_ATTR in variant.__dict__:
            raise ConfigurationError(f"{variant.__name__} is already a variant of another base")
        if discriminator in {f.name for f in dataclasses.fields(variant)}:
            raise ConfigurationError(
                f"{name}: discriminator '{discriminator}' clashes with a field of {variant.__name__}"
            )
        seen_tags.add(tag)
        seen_classes.add(variant)

    table = VariantTable(base=base, discriminator=discriminator, variants=tuple(variants))
    setattr(base, _TABLE_ATTR, table)
    for _, variant in variants:
        setattr(variant, _VARIANT_OF_ATTR, table)
    return table


def variants_of(cls: Any) -> VariantTable | None:
    """The variant table declared on ``cls`` itself (not inherited)."""
    if not isinstance(cls, type):
        return None
    return cls.__dict__.get(_TABLE_ATTR)


def variant_table_for(cls: Any) -> VariantTable | None:
    """The table ``cls`` is registered in as a variant, if any."""
    if not isinstance(cls, type):
        return None
    return cls.__dict__.get(_VARIANT_OF_ATTR)
