from __future__ import annotations

from datetime import date
from pathlib import Path

import streamlit as st

from timeline_trace.geo import bounding_box
from timeline_trace.json_io import DocumentParseError, read_document
from timeline_trace.models import DEFAULT_TZ, ICON_EMOJI, DetectedFormat, Event, EventKind
from timeline_trace.session import LoadResult, TimelineSession, load_document, load_text
from timeline_trace.timeutils import tzinfo_from_name

STATE_KEY = "timeline_session"
SOURCE_KEY = "timeline_source"

FORMAT_LABELS = {
    DetectedFormat.LEGACY: "timelineObjects（旧版 Semantic Location History）",
    DetectedFormat.SEMANTIC: "semanticSegments（手机端导出）",
    DetectedFormat.RAW_LOCATIONS: "Records.json（locations[]）",
    DetectedFormat.UNRECOGNIZED: "未识别",
}


def _session() -> TimelineSession:
    return st.session_state.get(STATE_KEY) or TimelineSession()


def _is_loaded(source: tuple[str, int], tz_name: str) -> bool:
    return st.session_state.get(SOURCE_KEY) == (source, tz_name)


def _store(result: LoadResult, source: tuple[str, int], tz_name: str) -> LoadResult:
    if result.ok:
        st.session_state[STATE_KEY] = result.session
        st.session_state[SOURCE_KEY] = (source, tz_name)
    return result


def _load(text: str, source: tuple[str, int], tz_name: str) -> LoadResult:
    """Parse once per (source, tz); reruns reuse the stored session."""

    if _is_loaded(source, tz_name):
        return LoadResult(session=_session())
    return _store(load_text(text, previous=st.session_state.get(STATE_KEY), tz_name=tz_name), source, tz_name)


def _load_path(p: Path, tz_name: str) -> LoadResult:
    source = (str(p), int(p.stat().st_mtime))
    if _is_loaded(source, tz_name):
        return LoadResult(session=_session())
    try:
        doc = read_document(p)
    except DocumentParseError as exc:
        return LoadResult(session=_session(), error=str(exc))
    return _store(LoadResult(session=load_document(doc, tz_name)), source, tz_name)


def _go_prev() -> None:
    st.session_state[STATE_KEY] = _session().go_prev()


def _go_next() -> None:
    st.session_state[STATE_KEY] = _session().go_next()


def _event_rows(events: list[Event], tz_name: str) -> list[dict[str, object]]:
    tz = tzinfo_from_name(tz_name)
    rows: list[dict[str, object]] = []
    for e in events:
        rows.append(
            {
                "start": e.start.astimezone(tz).strftime("%H:%M"),
                "end": e.end.astimezone(tz).strftime("%H:%M") if e.end else "",
                "": ICON_EMOJI[e.icon],
                "title": e.title,
                "subtitle": e.subtitle,
            }
        )
    return rows


def _map_points(events: list[Event]) -> dict[str, list[float]]:
    lat: list[float] = []
    lon: list[float] = []
    for e in events:
        # a single path point cannot be drawn as a route
        if e.kind is EventKind.MOVEMENT and len(e.path) < 2:
            continue
        for p in e.coordinates():
            lat.append(p.lat)
            lon.append(p.lng)
    return {"lat": lat, "lon": lon}


def main() -> None:
    st.set_page_config(page_title="Timeline Trace：按天查看位置记录", layout="wide")
    st.title("Timeline Trace：按天查看位置记录")

    with st.sidebar:
        st.subheader("数据与时区")
        tz_name = st.text_input("时区（IANA）", value=DEFAULT_TZ)
        uploaded = st.file_uploader("选择导出的 JSON", type=["json"])
        path_json = st.text_input("或填写 JSON 路径", value="")
        st.caption("文件只在本地解析，不会上传到任何地方。")

    try:
        tzinfo_from_name(tz_name)
    except ValueError as exc:
        st.error(str(exc))
        return

    if uploaded is not None:
        data = uploaded.getvalue()
        result = _load(data.decode("utf-8-sig", errors="replace"), (uploaded.name, len(data)), tz_name)
    elif path_json:
        p = Path(path_json)
        if not p.exists():
            st.error(f"找不到文件：{path_json!r}")
            return
        try:
            result = _load_path(p, tz_name)
        except OSError as exc:
            st.error(f"无法读取文件：{path_json!r}（{exc}）")
            return
    else:
        result = LoadResult(session=_session())

    if not result.ok:
        st.error(f"JSON 解析失败，保留之前的数据：{result.error}")

    session = _session()
    st.caption(f"Format: {FORMAT_LABELS[session.detected_format]}")
    if session.current_day is None:
        if session.detected_format is DetectedFormat.UNRECOGNIZED and SOURCE_KEY in st.session_state:
            st.warning("没有找到 timelineObjects / semanticSegments / locations[] 数据。")
        else:
            st.info("请选择 JSON 文件。")
        return

    days: list[date] = list(session.day_index)
    c1, c2, c3 = st.columns([1, 3, 1])
    c1.button("◀ 前一天", on_click=_go_prev, disabled=not session.has_prev, use_container_width=True)
    c3.button("后一天 ▶", on_click=_go_next, disabled=not session.has_next, use_container_width=True)
    picked = c2.selectbox(
        "有数据的日期",
        options=days,
        index=session.navigator.position or 0,
        format_func=lambda d: d.isoformat(),
        label_visibility="collapsed",
    )
    if picked != session.current_day:
        session = session.select_day(picked)
        st.session_state[STATE_KEY] = session

    day = session.current_day
    events = session.events_for_current_day()

    m1, m2, m3 = st.columns(3)
    m1.metric("记录总数", str(len(session.events)))
    m2.metric("有数据的天数", str(len(days)))
    m3.metric(day.isoformat(), f"{(session.navigator.position or 0) + 1}/{len(days)}")

    if not events:
        st.info("这一天没有数据。")
        return

    points = _map_points(events)
    if points["lat"]:
        st.map(points, size=20)
        box = bounding_box(p for e in events for p in e.coordinates())
        if box is not None:
            st.caption(
                f"lat=[{box.min_lat:.5f}, {box.max_lat:.5f}], lng=[{box.min_lng:.5f}, {box.max_lng:.5f}], "
                f"center=({box.center.lat:.5f}, {box.center.lng:.5f})"
            )

    st.subheader("当天时间线")
    st.dataframe(_event_rows(events, session.tz_name), use_container_width=True, height=520)


if __name__ == "__main__":
    main()
