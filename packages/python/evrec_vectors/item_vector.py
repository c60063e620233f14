from __future__ import annotations

from dataclasses import dataclass

from .fixed_vector import FixedVector
from .sparse_vector import SparseVector, empty


@dataclass(frozen=True)
class ItemVector:
    """
    Content profile of one item (or of a user) in a 4-component feature space.

    - term: TF-IDF weighted words of the item text
    - tag: tag frequencies
    - category: category frequencies
    - host: single entry keyed by host id, valued by the host's IDF weight

    Every operation acts on each component independently; components never mix.
    """

    term: SparseVector[str]
    tag: SparseVector[str]
    category: SparseVector[str]
    host: SparseVector[str]

    @classmethod
    def identity(cls) -> ItemVector:
        # Additive zero
        return cls(empty(), empty(), empty(), empty())

    def add(self, other: ItemVector) -> ItemVector:
        return ItemVector(
            term=self.term.add(other.term),
            tag=self.tag.add(other.tag),
            category=self.category.add(other.category),
            host=self.host.add(other.host),
        )

    def multiply(self, scalar: float) -> ItemVector:
        return ItemVector(
            term=self.term.multiply(scalar),
            tag=self.tag.multiply(scalar),
            category=self.category.multiply(scalar),
            host=self.host.multiply(scalar),
        )

    def apply_idfs(
        self, tag_idf: SparseVector[str], category_idf: SparseVector[str]
    ) -> ItemVector:
        # term is TF-IDF weighted at construction; host already carries its IDF
        return ItemVector(
            term=self.term,
            tag=self.tag.cartesian_product(tag_idf).normalised(),
            category=self.category.cartesian_product(category_idf).normalised(),
            host=self.host,
        )

    def normalise(self) -> ItemVector:
        # Per component, not over the concatenation, so combine() sees unit directions
        return ItemVector(
            term=self.term.normalised(),
            tag=self.tag.normalised(),
            category=self.category.normalised(),
            host=self.host.normalised(),
        )

    def combine(self, other: ItemVector, extra: float) -> FixedVector:
        """Dot each component with its counterpart; `extra` fills the 5th slot."""
        return FixedVector(
            [
                self.term.dot(other.term),
                self.tag.dot(other.tag),
                self.category.dot(other.category),
                self.host.dot(other.host),
                extra,
            ]
        )
