"""Collects the warnings and errors reported while loading a description.

Loading never stops at a malformed element; the problem is recorded here
and the element is skipped. Every record is also forwarded to a logger.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str


class Diagnostics:
    """Ordered record of the problems found during a load.

    Args:
        log: Logger that receives every record. Defaults to this module's logger.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.entries: List[Diagnostic] = []
        self._log = log or logger

    def warning(self, message: str) -> None:
        self.entries.append(Diagnostic(Severity.WARNING, message))
        self._log.warning(message)

    def error(self, message: str) -> None:
        self.entries.append(Diagnostic(Severity.ERROR, message))
        self._log.error(message)

    @property
    def warnings(self) -> List[str]:
        return [d.message for d in self.entries if d.severity is Severity.WARNING]

    @property
    def errors(self) -> List[str]:
        return [d.message for d in self.entries if d.severity is Severity.ERROR]

    def __len__(self) -> int:
        return len(self.entries)

    def clear(self) -> None:
        self.entries.clear()
