from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence, Union
import warnings

import numpy as np
from typeguard import typechecked

from tabulated.function_error import (
    DomainWarning,
    FunctionArgumentError,
    FunctionPointIndexOutOfBoundsError,
    InappropriateFunctionPointError,
)
from tabulated.function_point import FunctionPoint

# Machine epsilon of 1.0, tolerance for coinciding x and domain borders
EPS = np.finfo(np.float64).eps

GridValues = Union[int, Sequence[float], np.ndarray]


@typechecked
def uniform_grid(
    left_x: float, right_x: float, values: GridValues
) -> tuple[np.ndarray, np.ndarray]:
    """Builds the x and y arrays of a function sampled on a uniform grid.

    Args:
        left_x (float): left domain border
        right_x (float): right domain border
        values (int | Sequence[float] | np.ndarray): either the number of
            points (all y set to zero) or the y value of each point

    Returns:
        tuple[np.ndarray, np.ndarray]: x and y of every point
    """
    if not (np.isfinite(left_x) and np.isfinite(right_x)):
        raise FunctionArgumentError(
            f"Domain borders must be finite: [{left_x}, {right_x}]"
        )
    if left_x >= right_x:
        raise FunctionArgumentError(
            f"Left border {left_x} must be less than right border {right_x}"
        )

    if isinstance(values, int):
        ys = np.zeros(max(values, 0), dtype=np.float64)
    else:
        ys = np.asarray(values, dtype=np.float64).ravel()

    if ys.size < 2:
        raise FunctionArgumentError(f"At least 2 points are needed, got {ys.size}")

    step = (right_x - left_x) / (ys.size - 1)
    if not np.isfinite(step):
        raise FunctionArgumentError(
            f"Domain [{left_x}, {right_x}] is too wide to be sampled"
        )

    xs = left_x + np.arange(ys.size, dtype=np.float64) * step
    # Steps below the float spacing around the borders collapse neighbours
    if not np.all(np.diff(xs) > 0):
        raise FunctionArgumentError(
            f"{ys.size} points can't be told apart on [{left_x}, {right_x}]"
        )
    return xs, ys


def interpolate(left: FunctionPoint, right: FunctionPoint, x: float) -> np.float64:
    return left.y + (right.y - left.y) * (x - left.x) / (right.x - left.x)


def check_order(x: float, lower: Optional[float], upper: Optional[float]) -> None:
    """Raises when x does not fit strictly between its neighbours' x."""
    if not np.isfinite(x):
        raise InappropriateFunctionPointError(f"Point x must be finite, got {x}")
    if lower is not None and x <= lower:
        raise InappropriateFunctionPointError(
            f"Point x {x} is not greater than previous x {lower}"
        )
    if upper is not None and x >= upper:
        raise InappropriateFunctionPointError(
            f"Point x {x} is not less than next x {upper}"
        )


def outside_domain(x: float, left: float, right: float) -> bool:
    if x < left - EPS or x > right + EPS or np.isnan(x):
        warnings.warn(
            f"x={x} is outside of the domain [{left}, {right}], returning NaN",
            DomainWarning,
            stacklevel=3,
        )
        return True
    return False


class TabulatedFunction(ABC):
    """A function known by a finite set of points ordered by x.

    Between two stored points the function is linear, outside of
    [left_domain_border(), right_domain_border()] it is undefined (NaN).
    Points always come in and out as copies.
    """

    @abstractmethod
    def points_count(self) -> int:
        ...

    @abstractmethod
    def left_domain_border(self) -> float:
        ...

    @abstractmethod
    def right_domain_border(self) -> float:
        ...

    @abstractmethod
    def function_value(self, x: float) -> float:
        ...

    @abstractmethod
    def get_point(self, index: int) -> FunctionPoint:
        ...

    @abstractmethod
    def set_point(self, index: int, point: FunctionPoint) -> None:
        ...

    @abstractmethod
    def get_point_x(self, index: int) -> float:
        ...

    @abstractmethod
    def set_point_x(self, index: int, x: float) -> None:
        ...

    @abstractmethod
    def get_point_y(self, index: int) -> float:
        ...

    @abstractmethod
    def set_point_y(self, index: int, y: float) -> None:
        ...

    @abstractmethod
    def add_point(self, point: FunctionPoint) -> None:
        ...

    @abstractmethod
    def delete_point(self, index: int) -> None:
        ...

    @abstractmethod
    def cache_is_consistent(self) -> bool:
        """Checks that the access cache is empty or names a live point."""
        ...

    def __len__(self) -> int:
        return self.points_count()

    def __iter__(self) -> Iterator[FunctionPoint]:
        for i in range(self.points_count()):
            yield self.get_point(i)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.points_count():
            raise FunctionPointIndexOutOfBoundsError(
                f"Index {index} is out of bounds [0, {self.points_count()})"
            )
