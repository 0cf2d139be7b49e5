import logging
import typing as t
from contextlib import contextmanager
from copy import deepcopy

LOGGER = logging.getLogger(__name__)


class UndoRecursiveStep(Exception):
    pass


class DeadEnd(UndoRecursiveStep):
    def __init__(
        self,
        msg: str = "",
        save_deadends_to: list[t.Any] | None = None,
        max_deadends_to_save: int = 100,
        **kwargs,
    ):
        super().__init__(msg)
        if save_deadends_to is not None:
            if len(save_deadends_to) < max_deadends_to_save:
                save_deadends_to.append(deepcopy(kwargs))


class SearchBudgetExhausted(TimeoutError):
    """The search was aborted before it could either succeed or prove that
    no solution exists."""

    def __init__(self, msg: str = "", n_steps: int = 0):
        super().__init__(msg)
        self.n_steps = n_steps


@contextmanager
def append_attempt(list_: t.List[t.Any], item: t.Any):
    """Appends `item` to `list_` for the duration of the block.

    If the block raises `UndoRecursiveStep`, the item is popped again and the
    exception is swallowed so the caller can go on to try the next item.

    >>> line = [1]
    >>> for item in (2, 3):
    ...     with append_attempt(line, item):
    ...         if item == 2:
    ...             raise DeadEnd()
    >>> line
    [1, 3]
    """
    list_.append(item)
    try:
        yield
    except UndoRecursiveStep as exc:
        LOGGER.debug(f"undoing append attempt of {item!r}")
        LOGGER.debug(f"{exc.__class__.__name__}: {str(exc)}")
        list_.pop()
