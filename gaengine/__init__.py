"""
Genetic algorithm engine with pluggable selection, crossover, mutation and stopping policies,
plus a Traveling Salesman Problem front end.
"""

__all__ = [
    "continuation",
    "crossover",
    "data",
    "decision",
    "events",
    "model",
    "mutation",
    "random_source",
    "runner",
    "selection",
    "tsp",
]
