"""Host ports: the narrow interfaces the core uses to talk to its host.

The export pipeline and explorer never touch a UI toolkit or the file system
directly. They ask for confirmation, hand bytes to a saver and emit
notifications through these protocols. Any class with matching methods
satisfies them; no inheritance required.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

_logger = logging.getLogger(__name__)


@runtime_checkable
class ConfirmPort(Protocol):
    """Ask the user a yes/no question before a large or noisy operation."""

    def confirm(self, message: str) -> bool:
        ...


@runtime_checkable
class SavePort(Protocol):
    """Hand finished bytes to the host under a file name."""

    def save(self, data: bytes, filename: str) -> None:
        ...


@runtime_checkable
class NotifyPort(Protocol):
    """Surface a short message to the user.

    Severity follows Textual's notification levels:
    ``information``, ``warning`` or ``error``.
    """

    def notify(self, message: str, severity: str = "information") -> None:
        ...


class CancellationToken:
    """Cooperative cancellation flag checked at each export iteration."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class AlwaysConfirm:
    """Confirmation port with a fixed answer (headless runs, tests)."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    def confirm(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


class DirectorySaver:
    """Save port writing each payload into a directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def save(self, data: bytes, filename: str) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        target = self._root / Path(filename).name
        target.write_bytes(data)
        _logger.debug("Saved %s (%d bytes)", target, len(data))


class RecordingSaver:
    """Save port that keeps payloads in memory, in dispatch order."""

    def __init__(self) -> None:
        self.saved: list[tuple[str, bytes]] = []

    def save(self, data: bytes, filename: str) -> None:
        self.saved.append((filename, data))

    @property
    def filenames(self) -> list[str]:
        return [name for name, _ in self.saved]


class LoggingNotifier:
    """Notify port that routes messages to the ``logging`` module."""

    _LEVELS = {
        "information": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def notify(self, message: str, severity: str = "information") -> None:
        self._logger.log(self._LEVELS.get(severity, logging.INFO), message)


__all__ = [
    "AlwaysConfirm",
    "CancellationToken",
    "ConfirmPort",
    "DirectorySaver",
    "LoggingNotifier",
    "NotifyPort",
    "RecordingSaver",
    "SavePort",
]
