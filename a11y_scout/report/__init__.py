"""a11y_scout.report: JSON and HTML reports for crawl results, used by the CLI."""

from a11y_scout.report.html_report import render_html
from a11y_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]
