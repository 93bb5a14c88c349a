import numpy as np

from typing import Optional
from typeguard import typechecked

from tabulated.access_cache import AccessCache
from tabulated.function_error import (
    FunctionStateError,
    InappropriateFunctionPointError,
)
from tabulated.function_point import FunctionPoint
from tabulated.tabulated_function import (
    EPS,
    GridValues,
    TabulatedFunction,
    check_order,
    interpolate,
    outside_domain,
    uniform_grid,
)


class NodeArena:
    """Cyclic doubly-linked list of points laid out in parallel lists.

    Nodes are addressed by slot numbers. Slot HEAD is the sentinel: it has
    no point, its `next` is the first node and its `prev` is the last one.
    Released slots are reused by later allocations.
    """

    HEAD = 0

    def __init__(self):
        self.points: list[Optional[FunctionPoint]] = [None]
        self.next: list[int] = [self.HEAD]
        self.prev: list[int] = [self.HEAD]
        self._free: list[int] = []

    @property
    def first(self) -> int:
        return self.next[self.HEAD]

    @property
    def last(self) -> int:
        return self.prev[self.HEAD]

    def is_live(self, slot: int) -> bool:
        return (
            slot != self.HEAD
            and 0 <= slot < len(self.points)
            and self.points[slot] is not None
        )

    def allocate(self, point: FunctionPoint) -> int:
        if self._free:
            slot = self._free.pop()
            self.points[slot] = point
        else:
            slot = len(self.points)
            self.points.append(point)
            self.next.append(self.HEAD)
            self.prev.append(self.HEAD)
        return slot

    def link_before(self, slot: int, successor: int) -> None:
        predecessor = self.prev[successor]
        self.prev[slot] = predecessor
        self.next[slot] = successor
        self.next[predecessor] = slot
        self.prev[successor] = slot

    def unlink(self, slot: int) -> None:
        self.next[self.prev[slot]] = self.next[slot]
        self.prev[self.next[slot]] = self.prev[slot]

    def release(self, slot: int) -> None:
        self.points[slot] = None
        self.next[slot] = self.prev[slot] = self.HEAD
        self._free.append(slot)


class LinkedListTabulatedFunction(TabulatedFunction):
    """Tabulated function stored in a cyclic doubly-linked list of points.

    Indexed access walks the list. The walk starts from the last accessed
    node when it is at most half the list away from the target, and from
    the first node otherwise.

    Attributes:
    ----------
    cache (AccessCache)
        Last accessed (index, arena slot).

    """

    @typechecked
    def __init__(
        self, left_x: float, right_x: float, values: GridValues, cache: bool = True
    ):
        xs, ys = uniform_grid(left_x, right_x, values)

        self._nodes = NodeArena()
        self._points_count: int = 0
        self.cache = AccessCache(enabled=cache)
        for x, y in zip(xs, ys):
            self._append_node(FunctionPoint(x, y))

    def _append_node(self, point: FunctionPoint) -> int:
        slot = self._nodes.allocate(point)
        self._nodes.link_before(slot, NodeArena.HEAD)
        self._points_count += 1
        self.cache.remember(self._points_count - 1, slot)
        return slot

    def _node_at(self, index: int) -> int:
        self._check_index(index)

        nodes = self._nodes
        start = self.cache.index
        slot = self.cache.handle
        if slot is None or abs(index - start) > self._points_count // 2:
            start, slot = 0, nodes.first

        if index > start:
            for _ in range(index - start):
                slot = nodes.next[slot]
        else:
            for _ in range(start - index):
                slot = nodes.prev[slot]

        self.cache.remember(index, slot)
        return slot

    def _check_neighbours(self, slot: int, x: float) -> None:
        nodes = self._nodes
        before, after = nodes.prev[slot], nodes.next[slot]
        lower = nodes.points[before].x if before != NodeArena.HEAD else None
        upper = nodes.points[after].x if after != NodeArena.HEAD else None
        check_order(x, lower, upper)

    def points_count(self) -> int:
        return self._points_count

    def left_domain_border(self) -> float:
        return self._nodes.points[self._nodes.first].x

    def right_domain_border(self) -> float:
        return self._nodes.points[self._nodes.last].x

    @typechecked
    def function_value(self, x: float) -> float:
        """Evaluates the function at x by linear interpolation.

        Args:
            x (float): point of evaluation

        Returns:
            float: function value, NaN when x is outside of the domain
        """
        if outside_domain(x, self.left_domain_border(), self.right_domain_border()):
            return np.float64(np.nan)

        nodes = self._nodes
        slot = nodes.first
        while nodes.next[slot] != NodeArena.HEAD:
            left, right = nodes.points[slot], nodes.points[nodes.next[slot]]
            if abs(x - left.x) < EPS:
                return left.y
            if abs(x - right.x) < EPS:
                return right.y
            if left.x - EPS < x < right.x + EPS:
                return interpolate(left, right, x)
            slot = nodes.next[slot]

        last = nodes.points[nodes.last]
        if abs(x - last.x) < EPS:
            return last.y

        return np.float64(np.nan)

    @typechecked
    def get_point(self, index: int) -> FunctionPoint:
        return self._nodes.points[self._node_at(index)].copy()

    @typechecked
    def set_point(self, index: int, point: FunctionPoint) -> None:
        slot = self._node_at(index)
        self._check_neighbours(slot, point.x)
        self._nodes.points[slot] = point.copy()

    @typechecked
    def get_point_x(self, index: int) -> float:
        return self._nodes.points[self._node_at(index)].x

    @typechecked
    def set_point_x(self, index: int, x: float) -> None:
        slot = self._node_at(index)
        self._check_neighbours(slot, x)
        self._nodes.points[slot].x = np.float64(x)

    @typechecked
    def get_point_y(self, index: int) -> float:
        return self._nodes.points[self._node_at(index)].y

    @typechecked
    def set_point_y(self, index: int, y: float) -> None:
        self._nodes.points[self._node_at(index)].y = np.float64(y)

    @typechecked
    def add_point(self, point: FunctionPoint) -> None:
        """Inserts a copy of the point keeping the points ordered by x.

        Both the duplicate search and the insertion search scan the list
        from its first node.

        Args:
            point (FunctionPoint): point to be added

        Raises:
            InappropriateFunctionPointError: x is not finite, or a point with
                the same x (within EPS) already exists
        """
        check_order(point.x, None, None)

        nodes = self._nodes
        slot = nodes.first
        while slot != NodeArena.HEAD:
            if abs(nodes.points[slot].x - point.x) < EPS:
                raise InappropriateFunctionPointError(
                    f"A point with x={point.x} already exists"
                )
            slot = nodes.next[slot]

        index, successor = 0, nodes.first
        while successor != NodeArena.HEAD and nodes.points[successor].x < point.x:
            successor = nodes.next[successor]
            index += 1

        slot = nodes.allocate(point.copy())
        nodes.link_before(slot, successor)
        self._points_count += 1

        self.cache.remember(index, slot)

    @typechecked
    def delete_point(self, index: int) -> None:
        """Removes the point at index.

        Raises:
            FunctionPointIndexOutOfBoundsError: invalid index
            FunctionStateError: the function has only 2 points left
        """
        self._check_index(index)
        if self._points_count <= 2:
            raise FunctionStateError(
                f"Can't delete a point, only {self._points_count} points left"
            )

        slot = self._node_at(index)
        self._nodes.unlink(slot)
        self._nodes.release(slot)
        self._points_count -= 1

        self.cache.after_delete(index)

    def cache_is_consistent(self) -> bool:
        return self.cache.is_consistent(self._nodes.is_live)
