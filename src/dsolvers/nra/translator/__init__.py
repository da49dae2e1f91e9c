"""
Translation from the term representation to Z3 constraints.
"""

from .term_to_z3 import TermToZ3Translator, Z3Problem

__all__ = [
    "TermToZ3Translator",
    "Z3Problem",
]
