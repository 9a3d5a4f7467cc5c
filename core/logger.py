"""
Structured logging with context - tags every line of a sitemap build
with its build id.
"""
import logging
from typing import Optional
from datetime import datetime


class ContextLogger:
    """Logger with build context (build_id, site url)."""

    def __init__(
        self,
        name: str = "sitemap",
        build_id: Optional[str] = None,
        site_url: Optional[str] = None,
    ):
        """
        Args:
            name: Logger name
            build_id: Build id (for traceability)
            site_url: Site being built
        """
        self.build_id = build_id
        self.site_url = site_url
        self.logs_buffer = []
        self.logger = logging.getLogger(name)

    def _format_message(self, level: str, message: str) -> str:
        """Format a message with its context."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        context_parts = [timestamp]

        if self.build_id:
            context_parts.append(f"[{self.build_id[:8]}]")
        if self.site_url:
            context_parts.append(f"[{self.site_url}]")

        level_str = f"[{level}]" if level != "INFO" else ""
        context = " ".join(filter(None, context_parts + [level_str]))

        return f"{context} {message}"

    def info(self, message: str, **kwargs):
        formatted = self._format_message("INFO", message)
        self.logs_buffer.append(formatted)
        self.logger.info(formatted, extra=kwargs)

    def error(self, message: str, **kwargs):
        formatted = self._format_message("ERROR", message)
        self.logs_buffer.append(formatted)
        self.logger.error(formatted, extra=kwargs)

    def get_logs(self, limit: int = 100) -> list:
        """Recent log lines."""
        return self.logs_buffer[-limit:]


__all__ = ["ContextLogger"]
