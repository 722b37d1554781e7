from typing import List  # noqa:F401
from typing import Optional  # noqa:F401


def parse_list(value):
    # type: (Optional[str]) -> List[str]
    """Split a comma separated string into its non-empty, stripped items.

    >>> parse_list("a, b,,c")
    ['a', 'b', 'c']
    """
    if not isinstance(value, str):
        return []

    fragments = [s.strip() for s in value.split(",")]
    return [f for f in fragments if f != ""]
