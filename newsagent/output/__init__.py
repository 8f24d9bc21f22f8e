"""Report output."""

from .base import ReportMaterializer, group_by_priority
from .markdown import MarkdownReport
from .terminal import TerminalReport

__all__ = ["MarkdownReport", "ReportMaterializer", "TerminalReport", "group_by_priority"]
