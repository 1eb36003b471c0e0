"""Progress reporting shared by the export pipeline and the sink dispatcher."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class ProgressReporter:
    """Forwards progress to an optional callback.

    Reported values are clamped to ``[0, 100]`` and never move backwards. A
    callback that raises is logged and otherwise ignored, so a misbehaving
    listener cannot abort the operation being reported.

    Example:
        >>> seen = []
        >>> reporter = ProgressReporter(lambda percent, message: seen.append(percent))
        >>> reporter.report(40, "half")
        >>> reporter.report(30, "late")
        >>> seen
        [40.0, 40.0]
    """

    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self._callback = callback
        self._last = 0.0

    def report(self, percent: float, message: str) -> None:
        percent = float(min(100.0, max(self._last, percent)))
        self._last = percent
        if self._callback is None:
            return
        try:
            self._callback(percent, message)
        except Exception as e:
            logger.warning("Progress callback raised: %s", e)
