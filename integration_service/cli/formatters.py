"""
CLI formatting functions for human-readable output.

JSON and YAML render the payload as-is; tables are drawn with Rich.
"""
import json
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.table import Table

_STATUS_STYLES = {
    "Pending": "yellow",
    "Submitted": "cyan",
    "Processing": "blue",
    "Completed": "green",
    "Failed": "red",
    "Retrying": "magenta",
    "Cancelled": "dim",
}


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if format_type == "table":
        return format_table_output(data)
    return json.dumps(data, indent=2, default=str)


def format_table_output(data: Any) -> str:
    """Format data as a table."""
    if isinstance(data, dict) and "requests" in data:
        return format_requests_table(data["requests"])
    if isinstance(data, dict):
        return format_mapping_table(data)
    return json.dumps(data, indent=2, default=str)


def format_requests_table(requests: List[Dict[str, Any]]) -> str:
    """Format tracked requests as a table."""
    if not requests:
        return "No requests found."

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Request ID", style="cyan", no_wrap=True)
    table.add_column("External ID", style="green")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Submitted")
    table.add_column("Completed")

    for request in requests:
        status = request.get("status", "N/A")
        style = _STATUS_STYLES.get(status, "")
        table.add_row(
            str(request.get("request_id", "N/A")),
            str(request.get("external_request_id") or "-"),
            str(request.get("request_type", "N/A")),
            f"[{style}]{status}[/{style}]" if style else str(status),
            str(request.get("submitted_at") or "-"),
            str(request.get("completed_at") or "-"),
        )
    return _render(table)


def format_mapping_table(data: Dict[str, Any]) -> str:
    """Format a single record as a two-column field/value table."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, default=str)
        table.add_row(str(key), "-" if value is None else str(value))
    return _render(table)


def _render(table: Table) -> str:
    console = Console(width=160, force_terminal=False, color_system=None)
    with console.capture() as capture:
        console.print(table)
    return capture.get()
