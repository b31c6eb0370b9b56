"""Command-line interface for timeline_trace.

Run:
    python -m timeline_trace inspect --file Timeline.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime

from timeline_trace.day_index import count_by_day
from timeline_trace.inspect import export_events_csv, inspect_events
from timeline_trace.json_io import DocumentParseError, read_document
from timeline_trace.models import DEFAULT_TZ, ICON_EMOJI, DetectedFormat
from timeline_trace.session import TimelineSession, load_document
from timeline_trace.timeutils import tzinfo_from_name


def _load(args: argparse.Namespace) -> TimelineSession | None:
    try:
        doc = read_document(args.file)
    except OSError as exc:
        print(f"无法读取文件：{args.file!r}（{exc}）", file=sys.stderr)
        return None
    except DocumentParseError as exc:
        print(f"解析失败：{exc}", file=sys.stderr)
        return None

    session = load_document(doc, args.tz)
    if session.detected_format is DetectedFormat.UNRECOGNIZED:
        print(
            "未识别的格式：没有找到 timelineObjects / semanticSegments / locations 数组",
            file=sys.stderr,
        )
        return None
    return session


def _parse_day(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"无法解析日期：{text!r}。建议格式：2023-05-01") from exc


def _hhmm(session: TimelineSession, dt: datetime | None) -> str:
    if dt is None:
        return ""
    return dt.astimezone(tzinfo_from_name(session.tz_name)).strftime("%H:%M")


def _cmd_inspect(args: argparse.Namespace) -> int:
    session = _load(args)
    if session is None:
        return 1
    res = inspect_events(session.events, session.detected_format, len(session.day_index))

    print("### 格式")
    print(res.detected_format)
    print()

    print("### 记录数")
    print(
        f"total={res.events_total}, movements={res.movements}, visits={res.visits}, "
        f"raw_points={res.raw_points}, days={res.days}"
    )
    print()

    if res.first_start is not None and res.last_start is not None:
        print("### 时间范围（本地时区）")
        tz = tzinfo_from_name(args.tz)
        print(
            f"start={res.first_start.astimezone(tz).isoformat(sep=' ')}, "
            f"end={res.last_start.astimezone(tz).isoformat(sep=' ')}"
        )
        print()

    if res.bounds is not None:
        print("### 经纬度范围（粗略）")
        b = res.bounds
        print(f"lat=[{b.min_lat}, {b.max_lat}], lng=[{b.min_lng}, {b.max_lng}]")
        print()

    if args.json:
        payload = asdict(res) | {
            "first_start": res.first_start.isoformat() if res.first_start else None,
            "last_start": res.last_start.isoformat() if res.last_start else None,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_days(args: argparse.Namespace) -> int:
    session = _load(args)
    if session is None:
        return 1
    counts = count_by_day(session.events, session.tz_name)
    for d in session.day_index:
        print(f"{d.isoformat()}\t{counts.get(d, 0)}")
    print(f"days={len(session.day_index)}", file=sys.stderr)
    return 0


def _cmd_day(args: argparse.Namespace) -> int:
    session = _load(args)
    if session is None:
        return 1
    if args.date is not None:
        if args.date not in session.day_index:
            print(f"{args.date.isoformat()} 没有数据", file=sys.stderr)
            return 1
        session = session.select_day(args.date)

    day = session.current_day
    if day is None:
        print("没有数据", file=sys.stderr)
        return 1

    pos = session.navigator.position or 0
    prev_day = session.go_prev().current_day if session.has_prev else None
    next_day = session.go_next().current_day if session.has_next else None
    print(f"### {day.isoformat()}（{pos + 1}/{len(session.day_index)}）")
    print(
        f"prev={prev_day.isoformat() if prev_day else '-'}, "
        f"next={next_day.isoformat() if next_day else '-'}"
    )
    print()
    for e in session.events_for_current_day():
        end = _hhmm(session, e.end)
        span = f"{_hhmm(session, e.start)}-{end}" if end else _hhmm(session, e.start)
        print(f"{span:<11} {ICON_EMOJI[e.icon]} {e.title} | {e.subtitle}")
    return 0


def _cmd_export_csv(args: argparse.Namespace) -> int:
    session = _load(args)
    if session is None:
        return 1
    events = list(session.events)
    if args.date is not None:
        events = session.events_for_day(args.date)
    n = export_events_csv(events, args.out, args.tz)
    print(f"已导出：{args.out}（{n} 行）")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="timeline_trace")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别（DEBUG 会逐条输出被跳过的记录）",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    def _common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--file", type=str, default="Timeline.json", help="导出的 JSON 文件路径")
        sp.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA），默认 Asia/Tokyo")

    p_ins = sub.add_parser("inspect", help="识别格式并统计记录数/时间范围/经纬度范围")
    _common(p_ins)
    p_ins.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_ins.set_defaults(func=_cmd_inspect)

    p_days = sub.add_parser("days", help="列出有数据的日期及每天的记录数")
    _common(p_days)
    p_days.set_defaults(func=_cmd_days)

    p_day = sub.add_parser("day", help="显示某一天的时间线（默认最早的一天）")
    _common(p_day)
    p_day.add_argument("--date", type=_parse_day, default=None, help="日期，例如 2023-05-01")
    p_day.set_defaults(func=_cmd_day)

    p_exp = sub.add_parser("export-csv", help="导出标准化后的记录为可读 CSV")
    _common(p_exp)
    p_exp.add_argument("--out", type=str, default="events.csv", help="输出CSV路径")
    p_exp.add_argument("--date", type=_parse_day, default=None, help="只导出该日期（例如 2023-05-01）")
    p_exp.set_defaults(func=_cmd_export_csv)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
