"""Prometheus text-exposition rendering for probe results."""

from __future__ import annotations

from probe_exporter.config.models import ProbeDefinition

METRIC_TEMPLATE = "# HELP {help_line}\n# TYPE {metric} gauge\n{series} {value}\n"


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def format_labels(labels: dict[str, str]) -> str:
    """Render ``{k="v", ...}`` in insertion order, or "" when there are no labels."""
    if not labels:
        return ""
    pairs = ", ".join(f'{key}="{_escape_label_value(value)}"' for key, value in labels.items())
    return "{" + pairs + "}"


def format_metric(definition: ProbeDefinition, value: int) -> str:
    """Render the HELP/TYPE/sample block for one probe definition.

    Example:
        # HELP probe_up svc up
        # TYPE probe_up gauge
        probe_up{env="prod"} 0
    """
    metadata = definition.metadata
    return METRIC_TEMPLATE.format(
        help_line=f"{metadata.metric} {_escape_help(metadata.help)}",
        metric=metadata.metric,
        series=metadata.metric + format_labels(metadata.labels),
        value=value,
    )


def metric_join(*blocks: str) -> str:
    """Join metric blocks with newlines, without doubling an existing trailing one."""
    result = ""
    for block in blocks:
        if not result or result.endswith("\n"):
            result += block
        else:
            result += "\n" + block
    return result
