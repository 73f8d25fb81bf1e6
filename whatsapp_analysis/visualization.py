"""
Visualization functions for WhatsApp chart data.

Renders bucketed counters as stacked bar charts using plotly.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

import plotly.graph_objects as go  # type: ignore[import-untyped]

from whatsapp_analysis.etl.aggregators import ChartBucket, ChartData, Granularity

logger = logging.getLogger(__name__)

METRICS = ("messages", "chars")

METRIC_LABELS = {
    "messages": "Messages",
    "chars": "Characters",
}


def build_chart_figure(
    buckets: Sequence[ChartBucket],
    granularity: Granularity,
    metric: str = "messages",
) -> go.Figure:
    """
    Build a stacked bar chart with one trace per contact.

    Args:
        buckets: Buckets of one granularity.
        granularity: Granularity of the buckets (used for titles).
        metric: "messages" or "chars".

    Returns:
        Plotly figure.

    Raises:
        ValueError: If metric is unknown.
    """
    if metric not in METRICS:
        raise ValueError(f"Unknown metric '{metric}', expected one of {METRICS}")

    granularity = Granularity(granularity)
    dates = [bucket.date for bucket in buckets]
    contacts = list(buckets[0].counters) if buckets else []

    figure = go.Figure()
    for contact in contacts:
        figure.add_trace(
            go.Bar(
                name=contact,
                x=dates,
                y=[getattr(bucket.counters[contact], metric) for bucket in buckets],
            )
        )

    figure.update_layout(
        barmode="stack",
        title=f"{METRIC_LABELS[metric]} by {granularity.value}",
        xaxis_title=granularity.value.capitalize(),
        yaxis_title=METRIC_LABELS[metric],
        xaxis={"type": "category"},
    )
    return figure


def write_chart_html(figure: go.Figure, output_file: Union[str, Path]) -> Path:
    """
    Write a figure to a standalone HTML file.

    Args:
        figure: Plotly figure.
        output_file: Destination path. Parent directories are created.

    Returns:
        Path of the written file.
    """
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    figure.write_html(str(path), include_plotlyjs="cdn")
    logger.info(f"Chart written to {path}")
    return path


def write_all_charts(chart_data: ChartData, output_dir: Union[str, Path]) -> List[Path]:
    """
    Write message and character charts for every granularity.

    Args:
        chart_data: Aggregated chart data.
        output_dir: Directory for the HTML files.

    Returns:
        Paths of the written files, named "<granularity>_<metric>.html".
    """
    output_dir = Path(output_dir)
    written = []
    for granularity in Granularity:
        buckets = chart_data.get(granularity)
        for metric in METRICS:
            figure = build_chart_figure(buckets, granularity, metric)
            written.append(
                write_chart_html(figure, output_dir / f"{granularity.value}_{metric}.html")
            )
    return written
