from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from zone_report_engine.core.export import ExportError, ExportFormat, save_payload
from zone_report_engine.core.filters import FilterSpec
from zone_report_engine.core.labels import SUPPORTED_LANGUAGES
from zone_report_engine.core.models import Severity, UnknownSeverityError
from zone_report_engine.core.result_source import load_payload
from zone_report_engine.core.settings import resolve_settings
from zone_report_engine.core.view import ResultView


def _parse_levels(s: str) -> list[Severity]:
    out: list[Severity] = []
    for part in s.split(","):
        if not part.strip():
            continue
        try:
            out.append(Severity.parse(part, strict=True))
        except UnknownSeverityError as e:
            raise argparse.ArgumentTypeError(
                "Invalid level. Allowed: info, notice, warning, error, critical"
            ) from e
    if not out:
        raise argparse.ArgumentTypeError("At least one level must be provided")
    return out


def _print_table(view: ResultView) -> None:
    print(view.title)
    for module in view.result.modules:
        levels = ", ".join(f"{lc.name}={lc.value}" for lc in view.result.counts_by_module[module.name])
        print(f"\n{view.module_label(module.name)} ({levels})")
        for tc in module.testcases:
            print(f"  {tc.id} [{tc.level.value}]")
            for e in tc.entries:
                print(f"    [{e.level.value}] {e.message}")

    counts = view.result.counts
    summary = " ".join(f"{k}={counts[k]}" for k in ("all", *(s.value for s in Severity)))
    print(f"\nTest cases: {summary}")


def main() -> None:
    settings = resolve_settings()
    p = argparse.ArgumentParser(description="Group, filter and export a stored zone test result.")
    p.add_argument("result_path", help="Result JSON as returned by the test backend")
    p.add_argument("--format", choices=["table", *(f.value for f in ExportFormat)], default="table")
    p.add_argument("--levels", type=_parse_levels, default=None, help="Comma-separated (e.g., error,warning)")
    p.add_argument("--search", default="", help="Case-insensitive message filter")
    p.add_argument("--filtered", action="store_true", help="Export only entries matching the filter")
    p.add_argument("--output", default=None, help="Directory to write the export to (default: stdout)")
    p.add_argument("--language", choices=sorted(SUPPORTED_LANGUAGES), default=settings.language)
    p.add_argument("--strict-levels", action="store_true", default=settings.strict_levels)
    p.add_argument(
        "--legacy-skip-first-row",
        action="store_true",
        default=settings.export_skip_first_row,
        help="Drop the first data row of csv/txt exports like the legacy exporter",
    )
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = load_payload(Path(args.result_path).read_bytes())
        view = ResultView.from_payload(
            payload,
            language=args.language,
            strict=args.strict_levels,
            skip_first_row=args.legacy_skip_first_row,
        )
        view.filter = FilterSpec.for_levels(args.levels, args.search)
        view.apply_filter()

        if args.format == "table":
            _print_table(view)
            return

        export = view.export(args.format, filtered=args.filtered)
        if args.output:
            path = asyncio.run(save_payload(export, args.output))
            print(path)
        else:
            sys.stdout.write(export.text)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (ValueError, ExportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
