import numpy as np

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


class ArrayTabulatedFunction(TabulatedFunction):
    """Tabulated function stored in a contiguous array of points.

    The array may hold more slots than points; only the first
    `points_count()` are meaningful. It grows one slot at a time when a
    point is added to a full array.

    Attributes:
    ----------
    cache (AccessCache)
        Last accessed (index, point), checked before indexing the array.

    """

    @typechecked
    def __init__(
        self, left_x: float, right_x: float, values: GridValues, cache: bool = True
    ):
        xs, ys = uniform_grid(left_x, right_x, values)

        self._points = np.empty(xs.size, dtype=object)
        for i in range(xs.size):
            self._points[i] = FunctionPoint(xs[i], ys[i])
        self._points_count: int = xs.size
        self.cache = AccessCache(enabled=cache)

    def points_count(self) -> int:
        return self._points_count

    def left_domain_border(self) -> float:
        return self._points[0].x

    def right_domain_border(self) -> float:
        return self._points[self._points_count - 1].x

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

        for i in range(self._points_count - 1):
            left, right = self._points[i], self._points[i + 1]
            if abs(x - left.x) < EPS:
                return left.y
            if abs(x - right.x) < EPS:
                return right.y
            if left.x - EPS < x < right.x + EPS:
                return interpolate(left, right, x)

        last = self._points[self._points_count - 1]
        if abs(x - last.x) < EPS:
            return last.y

        return np.float64(np.nan)

    def _cached_point(self, index: int) -> FunctionPoint:
        self._check_index(index)
        point = self.cache.lookup(index)
        if point is None:
            point = self._points[index]
            self.cache.remember(index, point)
        return point

    def _check_neighbours(self, index: int, x: float) -> None:
        lower = self._points[index - 1].x if index > 0 else None
        upper = self._points[index + 1].x if index < self._points_count - 1 else None
        check_order(x, lower, upper)

    @typechecked
    def get_point(self, index: int) -> FunctionPoint:
        return self._cached_point(index).copy()

    @typechecked
    def set_point(self, index: int, point: FunctionPoint) -> None:
        self._check_index(index)
        self._check_neighbours(index, point.x)

        self._points[index] = point.copy()
        self.cache.remember(index, self._points[index])

    @typechecked
    def get_point_x(self, index: int) -> float:
        return self._cached_point(index).x

    @typechecked
    def set_point_x(self, index: int, x: float) -> None:
        self._check_index(index)
        self._check_neighbours(index, x)

        self._points[index].x = np.float64(x)
        self.cache.remember(index, self._points[index])

    @typechecked
    def get_point_y(self, index: int) -> float:
        return self._cached_point(index).y

    @typechecked
    def set_point_y(self, index: int, y: float) -> None:
        self._check_index(index)

        self._points[index].y = np.float64(y)
        self.cache.remember(index, self._points[index])

    @typechecked
    def add_point(self, point: FunctionPoint) -> None:
        """Inserts a copy of the point keeping the points ordered by x.

        Args:
            point (FunctionPoint): point to be added

        Raises:
            InappropriateFunctionPointError: x is not finite, or a point with
                the same x (within EPS) already exists
        """
        check_order(point.x, None, None)
        for i in range(self._points_count):
            if abs(self._points[i].x - point.x) < EPS:
                raise InappropriateFunctionPointError(
                    f"A point with x={point.x} already exists at index {i}"
                )

        if self._points_count == self._points.size:
            grown = np.empty(self._points_count + 1, dtype=object)
            grown[: self._points_count] = self._points
            self._points = grown

        index = 0
        while index < self._points_count and self._points[index].x < point.x:
            index += 1

        self._points[index + 1 : self._points_count + 1] = self._points[
            index : self._points_count
        ].copy()
        self._points[index] = point.copy()
        self._points_count += 1

        self.cache.remember(index, self._points[index])

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

        self._points[index : self._points_count - 1] = self._points[
            index + 1 : self._points_count
        ].copy()
        self._points_count -= 1
        self._points[self._points_count] = None

        # Indexes after the removed point have shifted
        self.cache.forget()

    def cache_is_consistent(self) -> bool:
        index = self.cache.index
        return self.cache.is_consistent(
            lambda point: index < self._points_count and self._points[index] is point
        )
