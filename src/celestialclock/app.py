"""Celestial Clock: Streamlit sun/moon dial with a true-sunrise alarm."""

import datetime
import html

import streamlit as st
from streamlit_js_eval import get_geolocation, streamlit_js_eval

from celestialclock.alarm import AlarmError, AlarmScheduler, JsonFileAlarmStore
from celestialclock.audio import ToneAudio
from celestialclock.clock import CelestialClock
from celestialclock.config import configure_logging, load_settings
from celestialclock.ephemeris import EphemerisError, SkyfieldPositionProvider
from celestialclock.i18n import t
from celestialclock.location import parse_geolocation, resolve_location
from celestialclock.models import AlarmStatus, Body
from celestialclock.projection import is_zoomed
from celestialclock.renderers.briefing import (
    format_clock_time,
    render_briefing,
    render_phase_card,
)
from celestialclock.renderers.dial_svg import render_dial_svg

_settings = load_settings(env=None)
configure_logging(_settings.log_level)

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in.
if _settings.lang:
    st.session_state.lang = _settings.lang
elif "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="☀",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---

if "clock" not in st.session_state:
    _provider = SkyfieldPositionProvider(
        resources_dir=_settings.resources_dir,
        ephemeris_file=_settings.ephemeris_file,
    )
    _audio = ToneAudio()
    _scheduler = AlarmScheduler(
        _provider, JsonFileAlarmStore(_settings.alarm_store_path), _audio
    )
    st.session_state.clock = CelestialClock(_provider, _scheduler)
    st.session_state.audio = _audio
if "alarm_error" not in st.session_state:
    st.session_state.alarm_error = None

clock: CelestialClock = st.session_state.clock
audio: ToneAudio = st.session_state.audio

# --- Static CSS ---
st.markdown(
    """
    <style>
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #111827 !important;
        color: #ffffff;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    .panel {
        background: rgba(0, 0, 0, 0.2);
        border-radius: 10px;
        padding: 1rem;
        margin-bottom: 1rem;
        color: rgba(255, 255, 255, 0.85);
    }
    .phase-card { display: flex; align-items: center; gap: 1rem; }
    .phase-card h2 { margin: 0; font-size: 1.4rem; color: rgba(255,255,255,0.9); }
    .phase-card p { margin: 0; color: rgba(255,255,255,0.7); }
    .briefing ul { list-style: none; padding: 0; margin: 0; }
    .briefing li { display: flex; justify-content: space-between; font-size: 0.9rem; padding: 0.2rem 0; }
    .briefing .value { color: rgba(255,255,255,0.6); }
    .advisory { color: #fcd34d; font-size: 0.8rem; margin-top: 0.5rem; }
    .ringing {
        background: rgba(251, 191, 36, 0.3);
        border-radius: 16px;
        padding: 2rem;
        text-align: center;
        animation: pulse 2s cubic-bezier(0.4, 0, 0.6, 1) infinite;
    }
    @keyframes pulse { 50% { opacity: 0.6; } }
    .footer { text-align: center; font-size: 0.75rem; color: rgba(255,255,255,0.5); }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Location (one-shot; suspends the first render until resolved) ---
if clock.context is None:
    _payload = get_geolocation()
    if _payload is None:
        st.markdown(
            f"<div style='height:80vh; display:flex; align-items:center; justify-content:center;'>"
            f"{t('awaiting_location', _lang)}</div>",
            unsafe_allow_html=True,
        )
        st.stop()
    clock.set_location(
        resolve_location(
            lambda: parse_geolocation(_payload), default=_settings.default_location
        )
    )


# --- Intent handlers ---


def _arm() -> None:
    try:
        clock.arm_alarm()
        st.session_state.alarm_error = None
    except AlarmError as e:
        st.session_state.alarm_error = t("alarm_unavailable", _lang).format(
            error=html.escape(str(e))
        )


def _dismiss() -> None:
    try:
        clock.dismiss_alarm()
        st.session_state.alarm_error = None
    except AlarmError as e:
        st.session_state.alarm_error = t("alarm_unavailable", _lang).format(
            error=html.escape(str(e))
        )


def _play_audio() -> None:
    if audio.clip is None:
        return
    st.audio(audio.clip, format="audio/wav", autoplay=True, loop=audio.is_playing)
    # Fade-out tail is played once
    audio.release()


# --- 1 Hz clock tick ---


@st.fragment(run_every=1)
def _clock_view() -> None:
    try:
        clock.tick(datetime.datetime.now(datetime.timezone.utc))
    except EphemerisError as e:
        st.error(str(e))
        return

    state = clock.alarm.state
    if state.status is AlarmStatus.RINGING:
        st.markdown(
            f"<div class='ringing'><h2>{t('ringing_title', _lang)}</h2>"
            f"<p>{t('ringing_body', _lang)}</p></div>",
            unsafe_allow_html=True,
        )
        st.button(t("btn_dismiss", _lang), key="dismiss_btn", on_click=_dismiss)
    _play_audio()

    frame = clock.frame()
    if frame is None:
        return

    dial_col, side_col = st.columns([3, 2])
    with dial_col:
        st.markdown(render_dial_svg(frame), unsafe_allow_html=True)
        bcols = st.columns(5)
        bcols[0].button("☀", key="sun_btn", on_click=clock.click_body, args=(Body.SUN,))
        bcols[1].button("☾", key="moon_btn", on_click=clock.click_body, args=(Body.MOON,))
        bcols[2].button(t("btn_zoom_in", _lang), key="zoom_in", on_click=clock.zoom_wheel, args=(-4,))
        bcols[3].button(t("btn_zoom_out", _lang), key="zoom_out", on_click=clock.zoom_wheel, args=(4,))
        if is_zoomed(clock.view):
            bcols[4].button(t("btn_reset_view", _lang), key="reset_view", on_click=clock.reset_view)

    with side_col:
        snapshot = clock.snapshot
        context = clock.context
        st.markdown(
            render_phase_card(clock.phase, snapshot.moon_illumination, _lang),
            unsafe_allow_html=True,
        )
        st.markdown(
            render_briefing(snapshot, context.tz_name, _lang, advisory=context.advisory),
            unsafe_allow_html=True,
        )
        if state.target is not None and state.status is AlarmStatus.ARMED:
            st.markdown(
                "<div class='panel'>"
                + t("alarm_set_for", _lang).format(
                    time=format_clock_time(state.target, context.tz_name)
                )
                + "</div>",
                unsafe_allow_html=True,
            )
            st.button(t("btn_clear_alarm", _lang), key="clear_btn", on_click=clock.clear_alarm)
        elif state.status is AlarmStatus.UNSET:
            st.button(
                t("btn_set_alarm", _lang),
                key="arm_btn",
                on_click=_arm,
                use_container_width=True,
            )
        if st.session_state.alarm_error:
            st.markdown(
                f"<div class='panel' style='border:1px solid #ff6b6b; color:#ff9999;'>"
                f"{st.session_state.alarm_error}</div>",
                unsafe_allow_html=True,
            )


_clock_view()

st.markdown(f"<div class='footer'>{t('footer', _lang)}</div>", unsafe_allow_html=True)
