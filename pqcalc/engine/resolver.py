"""
Dependency resolver.

Finds which quantities each derived quantity reads, and orders quantities
so dependencies come first.
"""

import logging
from collections import deque
from typing import Mapping, Collection

from pqcalc.engine.registry import QuantityRegistry
from pqcalc.errors import CircularDependencyError
from pqcalc.expressions.tokens import variable_names

logger = logging.getLogger(__name__)

DependencyGraph = dict[str, set[str]]


class DependencyResolver:
    """Builds the symbol -> referenced symbols graph of a registry."""

    def build_graph(self, registry: QuantityRegistry) -> DependencyGraph:
        """
        Map every symbol to the registered symbols its expression reads.

        Math names (sin, pi, e, ...) are never dependencies, even when a
        quantity uses the same name. Identifiers that are not registered are
        left out; evaluation reports them as unknown.
        """
        graph: DependencyGraph = {}
        for quantity in registry:
            if quantity.is_input:
                graph[quantity.symbol] = set()
                continue
            graph[quantity.symbol] = {
                name for name in variable_names(quantity.expression) if name in registry
            }

        logger.debug(
            "Dependency graph: %d nodes, %d edges",
            len(graph), sum(len(deps) for deps in graph.values()),
        )
        return graph

    @staticmethod
    def undefined_references(registry: QuantityRegistry) -> dict[str, list[str]]:
        """Symbol -> identifiers its expression reads that are not registered."""
        missing = {}
        for quantity in registry.derived:
            names = [n for n in variable_names(quantity.expression) if n not in registry]
            if names:
                missing[quantity.symbol] = names
        return missing


def topological_order(graph: Mapping[str, Collection[str]]) -> list[str]:
    """
    Order symbols so every symbol comes after the symbols it depends on.

    Args:
        graph: Mapping from symbol to the symbols it depends on

    Returns:
        Symbols in dependency order; ties keep the graph's own order

    Raises:
        CircularDependencyError: If the graph contains a cycle
    """
    indegree = {node: 0 for node in graph}
    dependents: dict[str, list[str]] = {node: [] for node in graph}
    for node, deps in graph.items():
        for dep in deps:
            if dep not in indegree:
                continue
            indegree[node] += 1
            dependents[dep].append(node)

    queue = deque(node for node, degree in indegree.items() if degree == 0)
    order = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for dependent in dependents[node]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(indegree):
        raise CircularDependencyError(n for n, degree in indegree.items() if degree > 0)
    return order
