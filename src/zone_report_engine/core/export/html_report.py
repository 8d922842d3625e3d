"""Self-contained HTML report: header with domain and date, one row per entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from jinja2 import Environment

from ..labels import LabelCatalog
from ..models import Entry
from .base import ReportContext

_TEMPLATE = """<!doctype html>
<html lang="{{ language }}">
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0, shrink-to-fit=no">
    <title>{{ domain }} • Zonemaster Test Result</title>
    <style>
      th,td {
        text-align: left;
        font-weight: normal;
        padding: 0.75rem;
      }
      thead {
        background-color: #212529;
        color: #fff;
      }
      body td {
        border-top: 1px solid #dee2e6;
      }
      body {
        color: #212529;
        font-family: sans;
        margin-left: 20px;
      }
      table {
        border: none;
      }
      tbody tr:nth-child(odd) {
        background-color: rgba(0,0,0,.05);
      }
      h2 {
        font-weight: normal;
        font-size: 2rem;
        margin: .5rem 0;
      }
    </style>
  </head>
  <body>
    <header>
      <h2>{{ domain }}</h2><i>{{ created }}</i>
    </header>
    <table cellspacing="0" cellpadding="0">
      <thead>
        <tr>
          <th scope="col">{{ headings.module }}</th>
          <th scope="col">{{ headings.level }}</th>
          <th scope="col">{{ headings.message }}</th>
        </tr>
      </thead>
      <tbody>
{%- for row in rows %}
        <tr>
          <td>{{ row.module }}</td>
          <td>{{ row.level }}</td>
          <td>{{ row.message }}</td>
        </tr>
{%- endfor %}
      </tbody>
    </table>
  </body>
</html>
"""


def format_created(ts: datetime) -> str:
    """Format as `yyyy-MM-dd HH:mm` plus the long GMT offset (en locale)."""
    offset = ts.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{ts:%Y-%m-%d %H:%M} GMT{sign}{hours:02d}:{mins:02d}"


@dataclass(frozen=True, slots=True)
class HtmlWriter:
    env: Environment = field(default_factory=lambda: Environment(autoescape=True))

    def render(self, entries: list[Entry], context: ReportContext, labels: LabelCatalog) -> str:
        template = self.env.from_string(_TEMPLATE)
        rows = [
            {
                "module": labels.module_label(e.module),
                "level": labels.severity_label(e.level.value),
                "message": e.message,
            }
            for e in entries
        ]
        return template.render(
            language=context.language,
            domain=context.ascii_domain,
            created=format_created(context.created_at_utc),
            headings={
                "module": labels.heading("module"),
                "level": labels.heading("level"),
                "message": labels.heading("message"),
            },
            rows=rows,
        )
