"""Accumulating mapping of confirmed answers for one session.

Keys are restricted to the active question set and snapshots always come
back in question order, regardless of the order fields were committed in.
"""

import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)


class AnswerStore:
    """Field key -> canonical English value, written only on confirmation.

    Args:
        field_keys: Ordered keys of the question set this store belongs to.
    """

    def __init__(self, field_keys: Sequence[str] = ()) -> None:
        self._order: tuple[str, ...] = tuple(field_keys)
        self._values: dict[str, str] = {}

    @property
    def field_keys(self) -> tuple[str, ...]:
        return self._order

    def commit(self, field_key: str, value: str) -> None:
        """Store the confirmed value for a field, replacing any earlier one.

        Raises:
            KeyError: If the key is not part of the question set.
        """
        if field_key not in self._order:
            raise KeyError(f"Unknown field: {field_key}")
        if field_key in self._values:
            logger.info("Overwriting answer for field %s", field_key)
        self._values[field_key] = value

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the committed answers in question order."""
        return {key: self._values[key] for key in self._order if key in self._values}

    def __len__(self) -> int:
        return len(self._values)
