from dataclasses import dataclass
from typing import Any, Callable, Optional

from typeguard import typechecked


@dataclass
class AccessCache:
    """Remembers the last touched (index, element) pair of a function.

    The handle is whatever the owner uses to reach an element: the stored
    point itself for arrays, the arena slot for linked lists. It is either
    empty or names a live element sitting at `index`.

    Attributes:
    ----------
    enabled (bool)
        When False nothing is ever remembered.
    index (int | None)
        Index of the remembered element.
    handle (Any)
        Location of the remembered element.

    """

    enabled: bool = True
    index: Optional[int] = None
    handle: Any = None

    @property
    def empty(self) -> bool:
        return self.handle is None

    @typechecked
    def lookup(self, index: int) -> Any:
        """Returns the remembered handle when it sits at `index`, None otherwise."""
        if self.handle is not None and self.index == index:
            return self.handle
        return None

    @typechecked
    def remember(self, index: int, handle: Any) -> None:
        if not self.enabled:
            return
        self.index = index
        self.handle = handle

    def forget(self) -> None:
        self.index = None
        self.handle = None

    @typechecked
    def after_delete(self, index: int) -> None:
        """Keeps the cache valid after the element at `index` was removed."""
        if self.handle is None:
            return
        if self.index == index:
            self.forget()
        elif self.index > index:
            self.index -= 1

    def is_consistent(self, is_live: Callable[[Any], bool]) -> bool:
        if self.handle is None:
            return self.index is None
        return self.index is not None and self.index >= 0 and is_live(self.handle)
