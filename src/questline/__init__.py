"""Turn-by-turn branching narrative engine for stateless voice and text hosts."""

__version__ = "0.1.0"
