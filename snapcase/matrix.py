"""
Parameterized test bodies.

vary_parameters() runs a block with every combination of the values of
the given parameters, e.g. to snapshot a cell with all combinations of
short and long titles and locations:

    vary_parameters(
        {
            'title': {'small': "Suspendisse aliquet.", 'large': "Mauris risus lacus, placerat quis."},
            'location': {'small': "Location.", 'extreme': "Location taking much more characters."},
        },
        lambda combination, values: verifier.check(make_cell(**values), Fit.SCREEN_WIDTH, combination)
    )
"""

import random
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

__all__ = [
    'Parameter',
    'combination_identifier',
    'iter_combinations',
    'vary_parameters',
    'perform_in_random_order',
    'perform_in_order',
]


class Parameter:
    """A named set of values, each with its own identifier such as 'longTitle' or 'shortTitle'."""

    def __init__(self, name: str, values: Mapping[str, Any]):
        self.name = name
        # Sorted by identifier to always have a definite order.
        self._values: List[Tuple[str, Any]] = sorted(values.items(), key=lambda item: item[0])

    @property
    def size(self) -> int:
        return len(self._values)

    def value_for_index(self, index: int) -> Any:
        return self._values[index][1]

    def identifier_for_index(self, index: int) -> str:
        return self._values[index][0]

    def __repr__(self) -> str:
        return f"Parameter({self.name!r}, {[i for i, _ in self._values]})"


def combination_identifier(index: int, identifiers: Sequence[str]) -> str:
    return f"{index:03d}__" + "__".join(identifiers)


def _parameters_from_mapping(parameters: Mapping[str, Mapping[str, Any]]) -> List[Parameter]:
    # Sorted by name, so combinations always come in the same order.
    return [Parameter(name, parameters[name]) for name in sorted(parameters)]


def iter_combinations(
    parameters: Mapping[str, Mapping[str, Any]]
) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    All combinations of the values of the parameters.

    Works as an odometer: digit i of the counter belongs to parameter
    (count - 1 - i), so the last parameter (by name) changes fastest.

    Yields:
        (combination identifier, values by parameter name) tuples
    """
    params = _parameters_from_mapping(parameters)
    count = len(params)
    if any(p.size == 0 for p in params):
        return

    # One extra digit to detect the final carry over.
    indexes = [0] * (count + 1)
    combination_index = 0

    while indexes[count] == 0:
        values = {}
        identifiers = []
        for i, p in enumerate(params):
            value_index = indexes[count - 1 - i]
            identifiers.append(p.identifier_for_index(value_index))
            values[p.name] = p.value_for_index(value_index)

        yield combination_identifier(combination_index, identifiers), values

        indexes[0] += 1
        for i in range(count):
            if indexes[i] < params[count - 1 - i].size:
                break
            indexes[i] = 0
            indexes[i + 1] += 1

        combination_index += 1


def vary_parameters(
    parameters: Mapping[str, Mapping[str, Any]],
    block: Callable[[str, Dict[str, Any]], Any]
) -> int:
    """
    Run the block with all the combinations of the given parameters.

    Args:
        parameters: Parameter name -> (value identifier -> value)
        block: Called with the combination identifier and the values by parameter name

    Returns:
        Number of combinations the block was called with
    """
    n = 0
    for identifier, values in iter_combinations(parameters):
        block(identifier, values)
        n += 1
    return n


def perform_in_random_order(blocks: Sequence[Callable[[], Any]], rng: Optional[random.Random] = None) -> None:
    """
    Call the blocks in a random order.

    The order in which properties of an object are set should not matter,
    but sometimes code is not ready for a certain order, so it's worth
    shuffling it in tests.
    """
    shuffled = list(blocks)
    (rng or random).shuffle(shuffled)
    for block in shuffled:
        block()


def perform_in_order(blocks: Sequence[Callable[[], Any]]) -> None:
    """The inverse of perform_in_random_order(), handy to confirm the order is the problem."""
    for block in blocks:
        block()
