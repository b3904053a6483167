"""Database utility functions"""

import re
from typing import Any, Sequence, Tuple

# Positional placeholders as written for PostgreSQL: $1, $2, ...
PG_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


def replace_postgres_placeholders(sql: str, marker: str = "?") -> str:
    """Rewrite every ``$N`` placeholder to ``marker`` (the generic ``?`` by default).

    No other text in the statement is touched, so
    ``VALUES ($1, $2, $3)`` becomes ``VALUES (?, ?, ?)``.
    """
    return PG_PLACEHOLDER_RE.sub(lambda _: marker, sql)


def bind_positional_args(
    sql: str, args: Sequence[Any], marker: str = "?"
) -> Tuple[str, Tuple[Any, ...]]:
    """Convert a ``$N`` statement and its arguments for a positional driver.

    Positional markers bind in order, so the arguments are reordered (and
    repeated) to follow the order in which the numbered placeholders appear.

    Args:
        sql: Statement using ``$1``-style placeholders.
        args: Arguments where ``args[0]`` binds ``$1``.
        marker: Placeholder the driver understands (``?`` or ``%s``).

    Returns:
        The rewritten statement and the arguments in marker order.
    """
    numbers = [int(match) for match in PG_PLACEHOLDER_RE.findall(sql)]
    if not numbers:
        return sql, tuple(args)

    for number in numbers:
        if not 1 <= number <= len(args):
            raise ValueError(
                f"placeholder ${number} has no matching argument ({len(args)} given)"
            )

    return replace_postgres_placeholders(sql, marker), tuple(args[n - 1] for n in numbers)
