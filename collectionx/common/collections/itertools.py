import itertools
import math
import random
from typing import Iterable, Optional, Reversible, TypeVar

T = TypeVar("T")


def take(iterable: Iterable[T], amount: float) -> list[T]:
    """Takes the first ``amount`` items of an iterable, consuming no more than needed.
    i.e. take("abc", 2) --> ["a", "b"]

    Args:
        iterable (Iterable[T]): The items to take from
        amount (float): The number of items to take, truncated toward zero; non-positive takes nothing

    Returns:
        list[T]: Up to ``amount`` items, fewer if the iterable is shorter
    """
    return list(itertools.islice(iterable, max(math.trunc(amount), 0)))


def tail(items: Reversible[T], amount: float) -> list[T]:
    """Takes the last ``amount`` items, in their original order.
    i.e. tail([1, 2, 3], 2) --> [2, 3]

    Args:
        items (Reversible[T]): The items to take from, i.e. a list or a dict view
        amount (float): The number of items to take, truncated toward zero; non-positive takes nothing

    Returns:
        list[T]: Up to ``amount`` items, fewer if there are not enough
    """
    taken = take(reversed(items), amount)
    taken.reverse()
    return taken


def nth(iterable: Iterable[T], position: int) -> T:
    """Returns the item at a non-negative position of an iterable.
    i.e. nth("abc", 1) --> "b"

    Raises:
        StopIteration: If the iterable is shorter than ``position + 1``
    """
    return next(itertools.islice(iterable, position, None))


def sample_distinct(
    list_of_items: list[T], amount: float, rng: random.Random
) -> list[T]:
    """Draws up to ``amount`` items uniformly at random without replacement.

    Each position is drawn at most once, so equal items at different positions may
    all be returned but no position repeats.

    Args:
        list_of_items (list[T]): The pool to draw from; it is not modified
        amount (float): The number of draws requested, truncated toward zero
        rng (random.Random): The random number generator to draw with

    Returns:
        list[T]: ``min(amount, len(list_of_items))`` items, or ``[]`` for an empty pool or zero amount

    Raises:
        ValueError: If amount is negative
    """
    if amount < 0:
        raise ValueError(f"amount must be a non-negative integer, but got {amount}")
    draws = math.trunc(amount)
    if not list_of_items or not draws:
        return []
    return rng.sample(list_of_items, min(draws, len(list_of_items)))


def normalize_index(index: float, length: int) -> Optional[int]:
    """Resolves a possibly negative, possibly fractional index into a list of ``length`` items.
    i.e. normalize_index(-1, 3) --> 2, normalize_index(1.7, 3) --> 1, normalize_index(3, 3) --> None

    Args:
        index (float): Position to resolve; truncated toward zero, negative values count from the end
        length (int): Length of the list being indexed

    Returns:
        Optional[int]: The non-negative position, or None if it falls outside the list
    """
    position = math.trunc(index)
    if position < 0:
        position += length
    if position < 0 or position >= length:
        return None
    return position
