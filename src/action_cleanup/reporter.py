"""
Console, JSON and HTML rendering of scan results.
"""

from datetime import datetime
from pathlib import Path
from typing import Union
import html
import json

import click

from .scanner.index import Confidence, ScanResult


class Reporter:
    def __init__(self, result: ScanResult):
        self.result = result

    def format_summary(self, ignored_count: int = 0) -> str:
        summary = self.result.summary
        lines = [
            click.style("Server Action Analysis Results", fg="blue", bold=True),
            "",
            f"{click.style('Used actions:', fg='green')} {summary.used}",
            f"{click.style('Possibly unused:', fg='yellow')} {summary.possibly_unused}",
            f"{click.style('Likely unused:', fg='red')} {summary.likely_unused}",
        ]
        if ignored_count:
            lines.append(f"{click.style('Ignored actions:', fg='bright_black')} {ignored_count}")
        lines.extend(
            [
                f"{click.style('Empty folders:', fg='yellow')} {len(self.result.empty_folders)}",
                click.style("-" * 40, fg="bright_black"),
                f"{click.style('Total actions:', bold=True)} {summary.total_actions}",
            ]
        )
        return "\n".join(lines)

    def print_summary(self, limit: int = 10):
        click.echo(self.format_summary())
        click.echo("")
        click.echo(click.style("Safe to delete:", bold=True))

        unused = self.result.with_confidence(Confidence.SAFE_TO_DELETE)
        if not unused:
            click.echo(click.style("  None found!", fg="green"))
        else:
            for action in unused[:limit]:
                click.echo(f"  {click.style('x', fg='red')} {action.file_path}")
            if len(unused) > limit:
                click.echo(click.style(f"  ... and {len(unused) - limit} more", fg="bright_black"))

        for warning in self.result.warnings:
            click.echo(click.style(warning, fg="yellow"), err=True)

    def save_json(self, filename: Union[str, Path]):
        Path(filename).write_text(json.dumps(self.result.to_dict(), indent=2))

    def save_html(self, filename: Union[str, Path]):
        Path(filename).write_text(self.generate_html_report())

    def save(self, filename: Union[str, Path]):
        """Write JSON, or HTML when the file name ends in .html."""
        if str(filename).lower().endswith((".html", ".htm")):
            self.save_html(filename)
        else:
            self.save_json(filename)

    def generate_html_report(self) -> str:
        summary = self.result.summary
        rows = "".join(
            f"""
            <tr class="{action.confidence.value}">
                <td class="{action.status}">{action.status}</td>
                <td>{action.confidence.value}</td>
                <td>{action.reference_count}</td>
                <td><code>{html.escape(action.url_path)}</code></td>
                <td><code>{html.escape(action.file_path)}</code></td>
            </tr>"""
            for action in self.result.actions
        )
        return f"""<!DOCTYPE html>
<html>
<head>
    <title>Server Action Analysis Report</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; }}
        .summary {{ background: #f5f5f5; padding: 15px; border-radius: 5px; margin-bottom: 20px; }}
        .used {{ color: #28a745; }}
        .unused {{ color: #dc3545; }}
        table {{ width: 100%; border-collapse: collapse; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
        .safe-to-delete {{ background-color: #ffebee; }}
    </style>
</head>
<body>
    <h1>Server Action Analysis Report</h1>
    <div class="summary">
        <p><span class="used">Used actions:</span> {summary.used}</p>
        <p>Possibly unused: {summary.possibly_unused}</p>
        <p><span class="unused">Likely unused:</span> {summary.likely_unused}</p>
        <p><strong>Total actions:</strong> {summary.total_actions}</p>
    </div>
    <table>
        <thead>
            <tr><th>Status</th><th>Confidence</th><th>References</th><th>URL Path</th><th>File Path</th></tr>
        </thead>
        <tbody>{rows}
        </tbody>
    </table>
    <p><em>Generated on {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}</em></p>
</body>
</html>
"""
