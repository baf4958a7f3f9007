"""
Abstract base class for answer sinks.

A sink receives the completed answer snapshot of a session exactly once.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from src.core.models import Role


class BaseAnswerSink(ABC):
    """Interface that every answer sink must implement."""

    @abstractmethod
    async def append_answers(self, role: Role, answers: Mapping[str, str]) -> None:
        """Append one session's answers.

        Args:
            role: Which question set the answers belong to.
            answers: Field key -> canonical English value, in question order.

        Raises:
            PersistenceFailedError: If the append did not succeed.
        """
