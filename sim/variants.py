"""
Model variants: point overrides applied to a model for one simulation.

A variant never modifies the model it is applied to. The simulator reads
the overrides when building initial conditions and parameter values.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


ENTRY_TYPES = ('species', 'parameter')

# Attribute each entry type may override
ENTRY_ATTRIBUTES = {
    'species': ('initial_amount',),
    'parameter': ('value',),
}


@dataclass(frozen=True)
class VariantEntry:
    """
    One override, e.g. ('species', 'GI_Tract', 'initial_amount', 0.5).

    Attributes:
        entry_type: 'species' or 'parameter'
        target: Species name, 'compartment.species' path, or parameter name
        attribute: Overridden attribute ('initial_amount' or 'value')
        value: New value
    """
    entry_type: str
    target: str
    attribute: str
    value: float

    def __post_init__(self):
        if self.entry_type not in ENTRY_TYPES:
            raise ValueError(f"Unknown entry type: {self.entry_type!r}")
        if self.attribute not in ENTRY_ATTRIBUTES[self.entry_type]:
            raise ValueError(
                f"Cannot override {self.attribute!r} on a {self.entry_type}")


class Variant:
    """
    Named collection of overrides.

    Attributes:
        name: Variant identifier
        tag: Free-form label
        content: Override entries, applied in order
    """

    def __init__(self, name: str, tag: str = '',
                 content: Optional[Sequence] = None):
        self.name = name
        self.tag = tag
        self._content: Tuple[VariantEntry, ...] = ()
        if content:
            self.set_content(content)

    @property
    def content(self) -> Tuple[VariantEntry, ...]:
        return self._content

    def set_content(self, content: Sequence) -> None:
        """
        Replace the variant's content.

        Previous entries are discarded, not merged.

        Args:
            content: VariantEntry objects or (type, target, attribute, value)
                tuples
        """
        self._content = tuple(
            e if isinstance(e, VariantEntry) else VariantEntry(*e)
            for e in content
        )

    def entries(self, entry_type: str) -> List[VariantEntry]:
        return [e for e in self._content if e.entry_type == entry_type]

    def __len__(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        return f"Variant(name='{self.name}', entries={len(self._content)})"
