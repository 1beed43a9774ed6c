"""Bitcoin Price Chart — NiceGUI entry point."""

import sys
import os
import logging

# Ensure project root is on path when launched as a script
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nicegui import ui

from ui.pages.price_chart import price_chart_page

HOST = os.environ.get("BTC_CHART_HOST", "0.0.0.0")
PORT = int(os.environ.get("BTC_CHART_PORT", "8080"))
LOG_LEVEL = os.environ.get("BTC_CHART_LOG_LEVEL", "INFO").upper()

# Dark theme CSS
DARK_CSS = """
@import url('https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500&family=Inter:wght@400;500;600;700&display=swap');
:root {
    --bg-primary: #0a0f1a;
    --bg-panel: #0d1117;
    --bg-surface: #131a27;
    --border: #1e293b;
    --green: #10b981;
    --red: #ef4444;
    --text: #e2e8f0;
    --text-dim: #94a3b8;
}
body {
    background-color: var(--bg-primary) !important;
    color: var(--text) !important;
    font-family: 'Inter', system-ui, sans-serif;
}
.nicegui-content {
    background-color: var(--bg-primary) !important;
}
.q-card {
    background-color: var(--bg-panel) !important;
    color: var(--text) !important;
    border: 1px solid var(--border) !important;
    border-radius: 12px !important;
}
/* Monospace for data values */
.monospace { font-family: 'JetBrains Mono', 'Fira Code', monospace; }
/* Error banner */
.accent-red { border-left: 3px solid var(--red) !important; background: linear-gradient(90deg, rgba(239,68,68,0.06), transparent) !important; }
/* Range selector */
.range-selector { background: var(--bg-surface); border: 1px solid var(--border); border-radius: 8px; }
.range-btn { color: var(--text-dim) !important; border-radius: 6px !important; padding: 4px 12px !important; transition: all 0.2s ease-in-out; }
.range-btn-active { background: var(--bg-panel) !important; color: var(--text) !important; font-weight: 700; box-shadow: 0 2px 5px rgba(0, 0, 0, 0.3); }
.q-btn { border-radius: 8px !important; }
"""


@ui.page("/")
def index():
    ui.add_head_html(f"<style>{DARK_CSS}</style>")
    price_chart_page()


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    ui.run(
        title="Bitcoin Price Chart",
        host=HOST,
        port=PORT,
        dark=True,
        reload=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
