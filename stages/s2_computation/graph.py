"""Dependency graph over declared formulas."""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Set

from core.exceptions import CircularReferenceError
from .formulas import Formula


class FormulaGraph:
    """Static DAG of derived cells, ordered once at construction."""

    def __init__(self, formulas: Dict[str, Formula]):
        self.formulas = formulas

        adjacency: Dict[str, Set[str]] = {node: set() for node in formulas}
        reverse_adjacency: Dict[str, Set[str]] = {node: set() for node in formulas}
        in_degree: Dict[str, int] = {node: 0 for node in formulas}

        for address, formula in formulas.items():
            for dependency in set(formula.inputs):
                if dependency in formulas:
                    adjacency[dependency].add(address)
                    reverse_adjacency[address].add(dependency)
                    in_degree[address] += 1

        self.execution_order = self._topological_sort(adjacency, in_degree)
        if len(self.execution_order) < len(formulas):
            ordered = set(self.execution_order)
            raise CircularReferenceError(sorted(n for n in formulas if n not in ordered))

        self.depths = self._compute_depths(reverse_adjacency, self.execution_order)
        self._adjacency = adjacency
        self._reverse_adjacency = reverse_adjacency
        self._position = {node: i for i, node in enumerate(self.execution_order)}

    def __contains__(self, address: object) -> bool:
        return address in self.formulas

    def __len__(self) -> int:
        return len(self.formulas)

    def dependencies(self, address: str) -> Set[str]:
        """Derived cells ``address`` reads directly"""
        return set(self._reverse_adjacency.get(address, set()))

    def dependants(self, address: str) -> Set[str]:
        """Derived cells reading ``address`` directly"""
        return set(self._adjacency.get(address, set()))

    def closure(self, addresses: Iterable[str]) -> List[str]:
        """Derived cells needed for ``addresses``, in evaluation order"""
        stack = [a for a in addresses if a in self.formulas]
        needed: Set[str] = set()
        while stack:
            node = stack.pop()
            if node in needed:
                continue
            needed.add(node)
            stack.extend(self._reverse_adjacency[node])
        return sorted(needed, key=self._position.__getitem__)

    def _topological_sort(
        self, adjacency: Dict[str, Set[str]], in_degree: Dict[str, int]
    ) -> List[str]:
        in_degree = dict(in_degree)
        # Declaration order among ready nodes keeps the order deterministic
        queue = deque([node for node, deg in in_degree.items() if deg == 0])
        order: List[str] = []

        while queue:
            node = queue.popleft()
            order.append(node)
            for neighbor in sorted(adjacency.get(node, set())):
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        return order

    def _compute_depths(
        self,
        reverse_adjacency: Dict[str, Set[str]],
        execution_order: List[str],
    ) -> Dict[str, int]:
        depth_map: Dict[str, int] = {}
        for node in execution_order:
            parents = reverse_adjacency.get(node, set())
            if not parents:
                depth_map[node] = 0
            else:
                depth_map[node] = max(depth_map.get(p, 0) for p in parents) + 1
        return depth_map
