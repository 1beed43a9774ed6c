"""ECharts option builder and hover event decoding for the price chart.

Keys prefixed with ":" are evaluated as JavaScript by NiceGUI's ``ui.echart``.
"""

from typing import Any, Dict, List, Optional, Sequence

SERIES_NAME = "Bitcoin Price (USD)"
CURVE_SMOOTHING = 0.4
GRID_LINE_COLOR = "rgba(200, 200, 200, 0.3)"

_JS_USD = "(value) => '$' + Number(value).toLocaleString()"


def build_chart_options(
    labels: Sequence[str],
    prices: Sequence[float],
    palette: Dict[str, str],
) -> Dict[str, Any]:
    """Line chart options: one filled series, hidden legend, axis tooltip."""
    return {
        "animation": False,
        "grid": {"left": 70, "right": 16, "top": 16, "bottom": 32},
        "legend": {"show": False},
        "tooltip": {
            "trigger": "axis",
            "axisPointer": {"type": "line"},
            ":valueFormatter": _JS_USD,
        },
        "xAxis": {
            "type": "category",
            "boundaryGap": False,
            "data": list(labels),
            "splitLine": {"show": False},
            "axisLabel": {"rotate": 0, "hideOverlap": True},
        },
        "yAxis": {
            "type": "value",
            "scale": True,
            "splitLine": {"lineStyle": {"color": GRID_LINE_COLOR}},
            "axisLabel": {":formatter": _JS_USD},
        },
        "series": [{
            "name": SERIES_NAME,
            "type": "line",
            "data": list(prices),
            "showSymbol": False,
            "smooth": CURVE_SMOOTHING,
            "lineStyle": {"color": palette["line"], "width": 2},
            "itemStyle": {"color": palette["line"]},
            "areaStyle": {"color": palette["fill"]},
        }],
    }


def hover_index_from_event(args: Any) -> Optional[int]:
    """Sample index reported by an ECharts hover event, if any.

    Axis-triggered tooltips emit ``highlight`` with a ``batch`` list; direct
    item hovers carry ``dataIndex`` at the top level.
    """
    if not isinstance(args, dict):
        return None
    candidates: List[Any] = [args.get("dataIndex")]
    batch = args.get("batch")
    if isinstance(batch, list) and batch and isinstance(batch[0], dict):
        candidates.append(batch[0].get("dataIndex"))
    for value in candidates:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None
