"""
Unit tests for the combination requester (services/combiner.py).

The completion client is faked — these test validation, prompt shape and
reply parsing, not the model's creativity.
"""

import pytest

from craft_gateway.core.errors import ConfigurationError, UpstreamError, ValidationError
from craft_gateway.services.combiner import (
    combine,
    extract_json_text,
    first_emoji,
    parse_combination,
    validate_items,
)

INSTRUCTIONS = "You are a crafting engine."
FENCED_STEAM = '```json\n{"name":"Steam","emoji":"💨🔥"}\n```'


# ─── Reply parsing ────────────────────────────────────────────────────────────


class TestParseCombination:
    def test_fenced_reply_keeps_first_emoji(self):
        result = parse_combination(FENCED_STEAM)
        assert result.name == "Steam"
        assert result.emoji == "💨"

    def test_plain_json_reply(self):
        result = parse_combination('{"name": "Mud", "emoji": "🟫"}')
        assert (result.name, result.emoji) == ("Mud", "🟫")

    def test_unlabelled_fence(self):
        result = parse_combination('```\n{"name": "Lake", "emoji": "🏞️"}\n```')
        assert result.name == "Lake"

    def test_zwj_sequence_kept_whole(self):
        family = "\U0001F468\u200d\U0001F469\u200d\U0001F467"
        result = parse_combination('{"name": "Family", "emoji": "%s🏠"}' % family)
        assert result.emoji == family

    def test_missing_emoji_raises(self):
        with pytest.raises(UpstreamError):
            parse_combination('{"name": "Steam"}')

    def test_missing_name_raises(self):
        with pytest.raises(UpstreamError):
            parse_combination('{"emoji": "💨"}')

    def test_empty_name_raises(self):
        with pytest.raises(UpstreamError):
            parse_combination('{"name": "", "emoji": "💨"}')

    def test_not_json_raises(self):
        with pytest.raises(UpstreamError):
            parse_combination("Steam 💨")

    def test_json_array_raises(self):
        with pytest.raises(UpstreamError):
            parse_combination('["Steam", "💨"]')

    def test_upstream_error_hides_detail(self):
        with pytest.raises(UpstreamError) as exc_info:
            parse_combination("garbage")
        assert exc_info.value.public_message == "Failed to create combination"


class TestHelpers:
    def test_extract_without_fence_is_identity(self):
        assert extract_json_text('{"a": 1}') == '{"a": 1}'

    def test_extract_first_fence_only(self):
        text = '```json\n{"a": 1}\n```\nand\n```json\n{"b": 2}\n```'
        assert extract_json_text(text) == '{"a": 1}'

    def test_first_emoji_without_emoji_is_unchanged(self):
        assert first_emoji("steam") == "steam"

    def test_first_emoji_single(self):
        assert first_emoji("🔥") == "🔥"


# ─── Validation ───────────────────────────────────────────────────────────────


class TestValidateItems:
    def test_valid_items_are_trimmed(self):
        assert validate_items(" Water ", "Fire") == ("Water", "Fire")

    @pytest.mark.parametrize("item1, item2", [(None, "Fire"), ("Water", ""), ("  ", "Fire")])
    def test_missing_items(self, item1, item2):
        with pytest.raises(ValidationError, match="required"):
            validate_items(item1, item2)

    def test_non_string_items(self):
        with pytest.raises(ValidationError, match="must be strings"):
            validate_items("Water", 7)

    def test_too_long_items(self):
        with pytest.raises(ValidationError, match="too long"):
            validate_items("Water", "f" * 101)


# ─── combine() ────────────────────────────────────────────────────────────────


class TestCombine:
    async def test_returns_parsed_result(self, make_fake_client):
        fake = make_fake_client()
        result = await combine("Water", "Fire", instructions=INSTRUCTIONS, client=fake)
        assert result.model_dump() == {"name": "Steam", "emoji": "💨"}

    async def test_prompt_shape(self, make_fake_client):
        fake = make_fake_client()
        await combine("Water", "Fire", instructions=INSTRUCTIONS, client=fake)

        messages = fake.complete.await_args.args[0]
        assert messages == [
            {"role": "system", "content": INSTRUCTIONS},
            {"role": "user", "content": "Combine: Water + Fire"},
        ]

    async def test_low_temperature_and_small_budget(self, make_fake_client):
        fake = make_fake_client()
        await combine("Water", "Fire", instructions=INSTRUCTIONS, client=fake)

        kwargs = fake.complete.await_args.kwargs
        assert kwargs["temperature"] == pytest.approx(0.2)
        assert kwargs["max_tokens"] == 50

    async def test_invalid_input_skips_upstream(self, make_fake_client):
        fake = make_fake_client()
        with pytest.raises(ValidationError):
            await combine("", "Fire", instructions=INSTRUCTIONS, client=fake)
        fake.complete.assert_not_awaited()

    async def test_missing_emoji_reply_raises(self, make_fake_client):
        fake = make_fake_client('{"name": "Steam"}')
        with pytest.raises(UpstreamError):
            await combine("Water", "Fire", instructions=INSTRUCTIONS, client=fake)

    async def test_configuration_error_propagates(self, make_fake_client):
        fake = make_fake_client()
        fake.complete.side_effect = ConfigurationError("no key")
        with pytest.raises(ConfigurationError):
            await combine("Water", "Fire", instructions=INSTRUCTIONS, client=fake)
