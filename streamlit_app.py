from __future__ import annotations

import asyncio
import html
import time

import streamlit as st

from portfolio import ChatSessionManager, LocaleManager, TimeSyncPlayer
from portfolio.config import CONTACT_EMAIL, INTRO_AUDIO_SRC, UIConfig
from portfolio.i18n import ui_text
from portfolio.playback import ManualTickSource, SimulatedMedia
from portfolio.storage import MappingSessionStore
from portfolio.subtitles import WORD_ACTIVE, WORD_FUTURE, WORD_PAST, format_time, total_duration, word_states

WORD_STYLES = {
    WORD_PAST: "opacity:0.9;",
    WORD_ACTIVE: "opacity:1;font-weight:700;color:#7c3aed;",
    WORD_FUTURE: "opacity:0.5;",
}


def t(key: str) -> str:
    return ui_text(key, get_locale_manager().locale)


def get_locale_manager() -> LocaleManager:
    if "locale_manager" not in st.session_state:
        st.session_state["locale_manager"] = LocaleManager(
            st.query_params,
            accept_language=st.context.headers.get("Accept-Language"),
        )
    return st.session_state["locale_manager"]


def get_chat_manager() -> ChatSessionManager:
    if "chat_manager" not in st.session_state:
        locales = get_locale_manager()
        manager = ChatSessionManager(
            store=MappingSessionStore(st.session_state),
            locale=locales.locale,
        )
        locales.subscribe(manager.change_locale)
        st.session_state["chat_manager"] = manager
    return st.session_state["chat_manager"]


def get_player() -> tuple[TimeSyncPlayer, SimulatedMedia, ManualTickSource]:
    if "intro_player" not in st.session_state:
        ticks = ManualTickSource()
        media = SimulatedMedia(INTRO_AUDIO_SRC, total_duration())
        player = TimeSyncPlayer(ticks)
        player.initialize(media)
        st.session_state["intro_player"] = (player, media, ticks)
        st.session_state["intro_last_tick"] = time.monotonic()
    return st.session_state["intro_player"]


def render_locale_selector():
    locales = get_locale_manager()
    options = locales.options()
    codes = list(options)
    selected = st.sidebar.selectbox(
        t("language"),
        options=codes,
        format_func=lambda code: options[code],
        index=codes.index(locales.locale),
    )
    if selected != locales.locale:
        locales.set_locale(selected)
        st.rerun()


@st.fragment(run_every=0.25)
def render_intro():
    player, media, ticks = get_player()
    now = time.monotonic()
    elapsed = now - st.session_state.get("intro_last_tick", now)
    st.session_state["intro_last_tick"] = now
    if player.clock.is_playing:
        media.advance(elapsed)
        ticks.step()

    st.subheader(t("intro_title"))
    subtitle = player.active_subtitle()
    if subtitle is not None:
        states = word_states(subtitle, player.clock.current_time)
        spans = [
            f"<span style='{WORD_STYLES[state]}'>{html.escape(word.word)}</span>"
            for word, state in zip(subtitle.words, states)
        ]
        st.markdown(" ".join(spans), unsafe_allow_html=True)
    else:
        st.markdown("&nbsp;", unsafe_allow_html=True)

    st.progress(int(player.progress))
    controls = st.columns([1, 4])
    label = t("intro_pause") if player.clock.is_playing else t("intro_play")
    if controls[0].button(label, key="intro_toggle", disabled=not player.clock.is_loaded):
        player.toggle()
        st.rerun(scope="fragment")
    controls[1].caption(f"{format_time(player.clock.current_time)} / {format_time(player.clock.duration)}")

    position = st.slider(
        t("intro_position"),
        min_value=0.0,
        max_value=max(player.clock.duration, 0.1),
        value=float(player.clock.current_time),
        step=0.1,
        key=f"intro_seek_{int(player.clock.current_time * 10)}",
    )
    if abs(position - player.clock.current_time) > 0.05:
        player.seek(position)
        st.rerun(scope="fragment")


def render_message(chat: ChatSessionManager, message):
    with st.chat_message(message.role):
        st.write(message.content)
        if message.show_contact_button and CONTACT_EMAIL:
            st.link_button(t("contact_button"), f"mailto:{CONTACT_EMAIL}")
        if message.suggestions and not message.suggestions_used:
            st.caption(t("suggested_questions"))
            for suggestion in message.suggestions:
                if st.button(suggestion.text, key=f"suggest_{message.id}_{suggestion.id}"):
                    with st.spinner(t("typing")):
                        asyncio.run(chat.select_suggestion(message.id, suggestion.id))
                    st.rerun()


def render_chat():
    chat = get_chat_manager()
    chat.open_session()
    st.subheader(t("chat_title"))
    for message in chat.session.messages:
        render_message(chat, message)
    prompt = st.chat_input(t("chat_placeholder"))
    if prompt:
        with st.spinner(t("typing")):
            asyncio.run(chat.submit_user_input(prompt))
        st.rerun()


def main():
    st.set_page_config(
        page_title=UIConfig.PAGE_TITLE,
        page_icon=UIConfig.PAGE_ICON,
        layout="wide",
    )
    render_locale_selector()
    st.title(UIConfig.OWNER_NAME)
    intro_col, chat_col = st.columns([1, 1])
    with intro_col:
        render_intro()
    with chat_col:
        render_chat()


if __name__ == "__main__":
    main()
