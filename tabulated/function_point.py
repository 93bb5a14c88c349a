import numpy as np

from dataclasses import dataclass


@dataclass
class FunctionPoint:
    """A single sample of a tabulated function.

    Attributes:
    ----------
    x (np.float64)
        Abscissa, orders the points inside a function.
    y (np.float64)
        Function value at x.

    """

    x: np.float64
    y: np.float64

    def __post_init__(self):
        self.x = np.float64(self.x)
        self.y = np.float64(self.y)

    def copy(self) -> "FunctionPoint":
        return FunctionPoint(self.x, self.y)
