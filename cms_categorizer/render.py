"""
Markdown rendering of the category review queue.

Turns a batch result (or a standalone review queue) into a report editors
can work through when approving category suggestions.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from .categorizer import BatchCategorizationResult, ReviewEntry
from .config import Settings
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEMPLATE = "review_report.md"


@dataclass
class ReportMetadata:
    """Review report metadata."""
    title: str
    generation_time: datetime
    entry_count: int
    auto_assign_threshold: float


def format_confidence(confidence: float, precision: int = 0) -> str:
    """Format a confidence as a percentage."""
    return f"{confidence * 100:.{precision}f}%"


def confidence_label(confidence: float) -> str:
    """Coarse label for a confidence value."""
    if confidence > 0.8:
        return "high"
    if confidence > 0.5:
        return "medium"
    return "low"


class ReviewReportRenderer:
    """Markdown review report renderer."""

    def __init__(self, settings: Settings, template_dir: Path | None = None):
        self.settings = settings

        if template_dir is None:
            template_dir = Path(__file__).parent / 'templates'
        self.template_dir = Path(template_dir)

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.jinja_env.filters['format_confidence'] = format_confidence
        self.jinja_env.filters['confidence_label'] = confidence_label

    def render(
        self,
        entries: list[ReviewEntry],
        result: BatchCategorizationResult | None = None,
        title: str = "Category Review Queue",
        template_name: str = DEFAULT_TEMPLATE,
    ) -> str:
        """Render review entries, with an optional batch summary."""
        logger.info("rendering_review_report", entries=len(entries))

        metadata = ReportMetadata(
            title=title,
            generation_time=datetime.now(),
            entry_count=len(entries),
            auto_assign_threshold=self.settings.auto_assign_threshold,
        )
        context: dict[str, Any] = {
            'metadata': metadata,
            'entries': entries,
            'result': result,
        }
        template = self.jinja_env.get_template(template_name)
        return template.render(**context)

    def render_batch(self, result: BatchCategorizationResult) -> str:
        """Render the review section of an auto-categorization run."""
        return self.render(result.suggestions, result=result, title="Auto-Categorization Report")

    def save_report(self, content: str, output_path: Path | None = None) -> Path:
        """Save a rendered report to disk."""
        if output_path is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            output_path = Path(f"category_review_{timestamp}.md")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding='utf-8')

        logger.info("review_report_saved", path=str(output_path))
        return output_path
