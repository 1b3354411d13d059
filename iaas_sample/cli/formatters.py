"""
CLI-specific formatting functions for human-readable output.

This module handles presentation formatting for the CLI, including:
- JSON and YAML dumps
- Rich tables per resource collection
- List formatting for detailed views
"""
import json
from typing import Any, Dict, List, Sequence, Tuple

import yaml
from rich.console import Console
from rich.table import Table

from iaas_sample.domain.compute import InstanceDescriptor

# Collection key -> (column title, field name) pairs shown in tables.
TABLE_COLUMNS: Dict[str, Sequence[Tuple[str, str]]] = {
    "locations": (("ID", "id"), ("Name", "name"), ("Country", "country"), ("Provider", "provider")),
    "hardware": (
        ("ID", "id"),
        ("Name", "name"),
        ("CPUs", "cpus"),
        ("RAM (MB)", "memory_mb"),
        ("Disk (GB)", "disk_gb"),
        ("Storage", "storage_type"),
    ),
    "images": (("ID", "id"), ("Name", "name"), ("OS", "operating_system")),
    "instances": (
        ("ID", "id"),
        ("Name", "name"),
        ("OS", "operating_system"),
        ("Status", "status"),
        ("Public IPs", "public_ips"),
    ),
}


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    elif format_type == "table":
        return format_table_output(data)
    elif format_type == "list":
        return format_list_output(data)
    else:
        return json.dumps(data, indent=2, default=str)


def _collections(data: Any) -> List[Tuple[str, List[Dict[str, Any]]]]:
    if not isinstance(data, dict):
        return []
    found = []
    for key in TABLE_COLUMNS:
        if key in data:
            found.append((key, data[key]))
    if "instance" in data:
        found.append(("instances", [data["instance"]]))
    return found


def format_cell(value: Any) -> str:
    """Render one field value for table and list output."""
    if value is None:
        return "N/A"
    if isinstance(value, dict) and "family" in value:
        parts = [value.get("family") or "", value.get("version") or ""]
        if value.get("is_64bit"):
            parts.append("64bit")
        return " ".join(p for p in parts if p)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


def format_table_output(data: Any) -> str:
    """Format each resource collection in ``data`` as a table."""
    collections = _collections(data)
    if not collections:
        return json.dumps(data, indent=2, default=str)

    console = Console(width=120, legacy_windows=False, force_terminal=False)
    with console.capture() as capture:
        for key, rows in collections:
            if not rows:
                console.print(f"No {key} found.")
                continue
            table = Table(title=key.capitalize(), show_header=True, header_style="bold magenta")
            for title, _ in TABLE_COLUMNS[key]:
                table.add_column(title)
            for row in rows:
                table.add_row(*(format_cell(row.get(field)) for _, field in TABLE_COLUMNS[key]))
            console.print(table)
    return capture.get()


def format_list_output(data: Any) -> str:
    """Format data as a detailed list."""
    collections = _collections(data)
    if not collections:
        return json.dumps(data, indent=2, default=str)

    lines = []
    for key, rows in collections:
        lines.append(f"{key.capitalize()}:")
        if not rows:
            lines.append(f"  No {key} found.")
        for row in rows:
            if key == "instances":
                lines.append("  " + InstanceDescriptor.model_validate(row).describe())
            else:
                lines.append("  " + " ".join(format_cell(row.get(f)) for _, f in TABLE_COLUMNS[key]))
    return "\n".join(lines)
