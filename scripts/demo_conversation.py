from __future__ import annotations

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from portfolio.playback import ManualTickSource, SimulatedMedia, TimeSyncPlayer
from portfolio.session import ChatSessionManager
from portfolio.storage import MappingSessionStore
from portfolio.subtitles import total_duration


def _print_session(manager: ChatSessionManager):
    for message in manager.session.messages:
        print(f" [{message.role}] {message.content}")
        if message.suggestions and not message.suggestions_used:
            for suggestion in message.suggestions:
                print(f"     -> {suggestion.id}: {suggestion.text}")
        if message.show_contact_button:
            print("     (contact button)")


async def run_conversation():
    backing = {}
    manager = ChatSessionManager(store=MappingSessionStore(backing), delay_factory=lambda: 0.0)
    manager.open_session()
    await manager.submit_user_input("Where are you based?")
    last = manager.session.messages[-1]
    if last.suggestions:
        await manager.select_suggestion(last.id, last.suggestions[0].id)
    await manager.submit_user_input("asdlkfj qwer")
    print("English conversation:")
    _print_session(manager)

    manager.change_locale("de")
    print("\nAfter switching to German:")
    _print_session(manager)

    restored = ChatSessionManager(store=MappingSessionStore(backing), delay_factory=lambda: 0.0)
    print(f"\nRestored {len(restored.session.messages)} messages, asked: {restored.session.asked_question_ids}")


def run_intro():
    ticks = ManualTickSource()
    player = TimeSyncPlayer(ticks)
    media = SimulatedMedia("intro.m4a", total_duration())
    player.initialize(media)
    player.play()
    print("\nIntro playback:")
    for _ in range(8):
        media.advance(0.25)
        ticks.step()
        subtitle = player.active_subtitle()
        if subtitle is None:
            print(f" {player.clock.current_time:5.2f}s  (no caption)")
            continue
        word = subtitle.words[player.active_word_index()].word
        print(f" {player.clock.current_time:5.2f}s  #{subtitle.id} {word}")


def main():
    asyncio.run(run_conversation())
    run_intro()


if __name__ == "__main__":
    main()
