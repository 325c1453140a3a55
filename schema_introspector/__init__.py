"""
Graph schema introspector package root.

Reads the structure of a property graph (labels, relationship types and the
properties observed on them) and describes it as a graph schema JSON document
with stable, cross-referenced ids.
"""

__all__ = ["ir", "graph", "config", "pipeline", "api"]
