"""
Dating Export Profile Pipeline

This package turns raw personal-data exports from dating platforms
(Tinder, Hinge) into normalized, consent-filtered profiles, merges
exports that belong to the same person, and derives the aggregate
statistics used throughout the product.

Key Design Decisions:
- Every stage is a pure function over immutable inputs (no I/O, no shared state)
- Raw vendor account identifiers are replaced by a one-way hash at normalization
- Consent removes data outright; it never masks or marks it
- Statistics are always recomputed from scratch, never patched
"""

__version__ = "1.0.0"
