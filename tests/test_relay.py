"""Tests for ConversationRelay: history bounds, modes and serialisation."""

import asyncio
import random

import pytest

from persona_relay.configs.system import ChatConfig
from persona_relay.core.relay import (
    MODE_DEGRADED,
    MODE_PROVIDER,
    ConversationRelay,
    InvalidRequest,
    ProviderError,
    Turn,
    bound_history,
    build_provider_messages,
    validate_message,
)

from conftest import StubProvider


def _turns(n: int) -> list[Turn]:
    return [
        Turn(role="user" if i % 2 == 0 else "assistant", content=f"t{i}")
        for i in range(n)
    ]


# =========================================================================
# Pure helpers
# =========================================================================


class TestBoundHistory:
    def test_short_history_unchanged(self):
        turns = _turns(3)
        assert bound_history(turns, 20) == turns

    def test_drops_oldest_first(self):
        bounded = bound_history(_turns(25), 20)
        assert len(bounded) == 20
        assert bounded[0].content == "t5"
        assert bounded[-1].content == "t24"

    def test_returns_new_list(self):
        turns = _turns(2)
        assert bound_history(turns, 20) is not turns


class TestBuildProviderMessages:
    def test_system_prompt_first_then_history_in_order(self):
        messages = build_provider_messages("be nice", _turns(3))
        assert messages[0] == {"role": "system", "content": "be nice"}
        assert [m["content"] for m in messages[1:]] == ["t0", "t1", "t2"]
        assert [m["role"] for m in messages[1:]] == ["user", "assistant", "user"]


class TestValidateMessage:
    @pytest.mark.parametrize("message", [None, "", "   ", "\n\t", 42])
    def test_rejects_missing_or_blank(self, message):
        with pytest.raises(InvalidRequest, match="Message is required"):
            validate_message(message)

    def test_accepts_text_unchanged(self):
        assert validate_message("  hi  ") == "  hi  "


# =========================================================================
# Provider mode
# =========================================================================


class TestProviderMode:
    @pytest.mark.asyncio
    async def test_round_trip_records_exact_exchange(self, persona, store):
        provider = StubProvider(
            replies=["we don't pay that out here, fractions of a cent fam"]
        )
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        reply = await relay.handle_message("s1", "yo what's the deal with gas fees")

        assert reply.mode == MODE_PROVIDER
        assert reply.content == "we don't pay that out here, fractions of a cent fam"
        history = await store.get("s1")
        assert [(t.role, t.content) for t in history] == [
            ("user", "yo what's the deal with gas fees"),
            ("assistant", "we don't pay that out here, fractions of a cent fam"),
        ]

    @pytest.mark.asyncio
    async def test_provider_sees_system_prompt_and_history(self, persona, store):
        provider = StubProvider(replies=["a1", "a2"])
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        await relay.handle_message("s1", "u1")
        await relay.handle_message("s1", "u2")

        second_call = provider.calls[1]
        assert second_call[0] == {"role": "system", "content": persona.system_prompt}
        assert [m["content"] for m in second_call[1:]] == ["u1", "a1", "u2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("n", [1, 5, 10, 11, 15])
    async def test_history_length_is_min_2n_20(self, persona, store, n):
        provider = StubProvider(replies=[f"a{i}" for i in range(n)] + ["last"])
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        for i in range(n):
            await relay.handle_message("s1", f"u{i}")

        history = await store.get("s1")
        assert len(history) == min(2 * n, 20)
        assert history[-1].role == "assistant"
        assert history[-2].content == f"u{n - 1}"

    @pytest.mark.asyncio
    async def test_provider_never_sees_more_than_limit(self, persona, store):
        provider = StubProvider()
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        for i in range(15):
            await relay.handle_message("s1", f"u{i}")

        # system prompt + at most 20 turns
        assert all(len(call) <= 21 for call in provider.calls)
        assert provider.calls[-1][-1]["content"] == "u14"

    @pytest.mark.asyncio
    async def test_custom_history_limit(self, persona, store):
        relay = ConversationRelay(
            persona, store, StubProvider(), ChatConfig(max_history_turns=4)
        )
        for i in range(5):
            await relay.handle_message("s1", f"u{i}")

        history = await store.get("s1")
        assert [t.content for t in history][0] == "u3"
        assert len(history) == 4

    @pytest.mark.asyncio
    async def test_absent_session_uses_default_key(self, persona, store):
        relay = ConversationRelay(persona, store, StubProvider(), ChatConfig())

        await relay.handle_message(None, "hello")
        await relay.handle_message("", "again")

        assert len(await store.get("default")) == 4

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, persona, store):
        provider = StubProvider(replies=["for a", "for b"])
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        await relay.handle_message("a", "message a")
        await relay.handle_message("b", "message b")

        assert [t.content for t in await store.get("a")] == ["message a", "for a"]
        assert [t.content for t in await store.get("b")] == ["message b", "for b"]
        assert [m["content"] for m in provider.calls[1][1:]] == ["message b"]


class TestInvalidMessage:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", [None, "", "   "])
    async def test_blank_message_touches_nothing(self, persona, store, message):
        provider = StubProvider()
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        with pytest.raises(InvalidRequest):
            await relay.handle_message("s1", message)

        assert provider.calls == []
        assert await store.size() == 0


# =========================================================================
# Failure and degraded modes
# =========================================================================


class TestProviderFailure:
    @pytest.mark.asyncio
    async def test_error_propagates_without_assistant_turn(
        self, persona, store, failing_provider
    ):
        relay = ConversationRelay(persona, store, failing_provider, ChatConfig())

        with pytest.raises(ProviderError, match="upstream exploded"):
            await relay.handle_message("s1", "hello")

        history = await store.get("s1")
        assert [t.role for t in history] == ["user"]

    def test_fallback_reply_comes_from_failure_list(self, persona, store):
        relay = ConversationRelay(persona, store, StubProvider(), ChatConfig())
        for _ in range(20):
            assert relay.fallback_reply().content in persona.failure_replies

    def test_no_fallback_without_failure_lines(self, persona, store):
        bare = persona.model_copy(update={"failure_replies": []})
        relay = ConversationRelay(bare, store, StubProvider(), ChatConfig())
        assert relay.fallback_reply() is None


class TestDegradedMode:
    @pytest.mark.asyncio
    async def test_replies_drawn_from_degraded_list(self, persona, store):
        relay = ConversationRelay(
            persona, store, None, ChatConfig(), rng=random.Random(7)
        )
        assert relay.degraded

        for _ in range(25):
            reply = await relay.handle_message("s1", "hello")
            assert reply.mode == MODE_DEGRADED
            assert reply.degraded
            assert reply.content in persona.degraded_replies

    @pytest.mark.asyncio
    async def test_history_untouched(self, persona, store):
        await store.set("s1", _turns(2))
        relay = ConversationRelay(persona, store, None, ChatConfig())

        await relay.handle_message("s1", "hello")
        await relay.handle_message("fresh", "hello")

        assert await store.get("s1") == _turns(2)
        assert await store.size() == 1

    @pytest.mark.asyncio
    async def test_blank_message_still_rejected(self, persona, store):
        relay = ConversationRelay(persona, store, None, ChatConfig())
        with pytest.raises(InvalidRequest):
            await relay.handle_message("s1", " ")


# =========================================================================
# Concurrency
# =========================================================================


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_same_session_calls_serialise(self, persona, store):
        provider = StubProvider(delay=0.01)
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        await asyncio.gather(
            *(relay.handle_message("s1", f"u{i}") for i in range(5))
        )

        history = await store.get("s1")
        assert len(history) == 10
        # strictly alternating: no two user turns were appended back to back
        assert [t.role for t in history] == ["user", "assistant"] * 5
        # each call saw every earlier exchange in full
        assert sorted(len(call) for call in provider.calls) == [2, 4, 6, 8, 10]

    @pytest.mark.asyncio
    async def test_different_sessions_overlap(self, persona, store):
        provider = StubProvider(delay=0.05)
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        loop = asyncio.get_running_loop()
        start = loop.time()
        await asyncio.gather(
            *(relay.handle_message(f"s{i}", "hi") for i in range(5))
        )
        elapsed = loop.time() - start

        assert elapsed < 0.2
        for i in range(5):
            assert len(await store.get(f"s{i}")) == 2


class TestMessageLength:
    def test_limit_rejects_longer_messages(self):
        assert validate_message("x" * 10, max_length=10) == "x" * 10
        with pytest.raises(InvalidRequest, match="too long"):
            validate_message("x" * 11, max_length=10)

    @pytest.mark.asyncio
    async def test_no_limit_by_default(self, persona, store):
        provider = StubProvider()
        relay = ConversationRelay(persona, store, provider, ChatConfig())

        await relay.handle_message("s1", "y" * 10_000)

        assert provider.calls[0][-1]["content"] == "y" * 10_000
