from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class FeedbackSink:
    """
    User-facing feedback surface: loading indicator, transient toasts,
    the inline error banner and the visible test case count.

    The base implementation records nothing; ``LoggingFeedback`` writes to
    the log. A UI binds its own subclass.
    """

    def show_loading(self, message: str) -> None:
        pass

    def hide_loading(self) -> None:
        pass

    def show_success(self, message: str) -> None:
        pass

    def show_error(self, message: str) -> None:
        pass

    def show_inline_error(self, message: str) -> None:
        pass

    def update_count(self, count: int) -> None:
        pass


class LoggingFeedback(FeedbackSink):
    def show_loading(self, message: str) -> None:
        logger.info("Loading: %s", message)

    def hide_loading(self) -> None:
        logger.debug("Loading finished")

    def show_success(self, message: str) -> None:
        logger.info(message)

    def show_error(self, message: str) -> None:
        logger.error(message)

    def show_inline_error(self, message: str) -> None:
        logger.warning(message)

    def update_count(self, count: int) -> None:
        logger.info("Test cases: %d", count)
