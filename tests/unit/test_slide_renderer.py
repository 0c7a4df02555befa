"""Tests for the slide rendering engine."""

import pytest

from promptdeck.agents.generation.fallback_synthesizer import synthesize_deck
from promptdeck.models.deck import Deck
from promptdeck.models.slide import Slide, SlideStyling
from promptdeck.services.slide_renderer import render_deck, render_slide, split_stat, text_size_class


def blocks_by_role(descriptor):
    return {block.role: block for block in descriptor.blocks}


class TestArchetypes:

    def test_quote_joins_bullets_without_attribution(self, sample_theme):
        slide = Slide(id=1, type="quote", title="Q", content=["Part one.", "Part two."])

        descriptor = render_slide(slide, sample_theme)

        roles = blocks_by_role(descriptor)
        assert roles["quote"].text == "Part one. Part two."
        assert "attribution" not in roles

    def test_quote_with_author_has_attribution(self, sample_theme):
        slide = Slide(id=1, type="quote", content="Stay hungry.", author="Someone")

        roles = blocks_by_role(render_slide(slide, sample_theme))

        assert roles["quote"].text == "Stay hungry."
        assert roles["attribution"].text == "Someone"

    def test_stats_split_on_first_space(self, sample_theme):
        slide = Slide(id=2, type="stats", title="Numbers", content=["85% improvement in efficiency", "42"])

        cards = render_slide(slide, sample_theme).stat_cards

        assert [(c.value, c.label) for c in cards] == [("85%", "improvement in efficiency"), ("42", "")]
        assert all(card.color == sample_theme.accentColor for card in cards)

    def test_split_layout_has_two_columns_and_image(self, sample_theme):
        slide = Slide(id=3, type="split", title="Side by side", content=["a"], imageUrl="https://x/img.jpg")

        descriptor = render_slide(slide, sample_theme)

        assert descriptor.columns == 2
        assert descriptor.image_panel.url == "https://x/img.jpg"

    @pytest.mark.parametrize("slide_type", ["section", "mystery", "", "content"])
    def test_unknown_types_render_as_content(self, sample_theme, slide_type):
        slide = Slide(id=1, type=slide_type, title="T", content=["x"])

        assert render_slide(slide, sample_theme).archetype == "content"

    def test_title_type_shares_hero_layout(self, sample_theme):
        slide = Slide(id=1, type="title", title="Welcome")
        assert render_slide(slide, sample_theme).archetype == "hero"


class TestBackgroundAndOverlay:

    def test_gradient_uses_theme_gradient(self, sample_theme):
        slide = Slide(id=1, backgroundStyle="gradient", styling=SlideStyling(overlay="dark"))

        descriptor = render_slide(slide, sample_theme)

        assert descriptor.background.css == "linear-gradient(135deg, #1e3a8a, #3b82f6)"
        assert descriptor.overlay is None

    def test_image_background_with_overlays(self, sample_theme):
        dark = Slide(id=1, backgroundStyle="image", imageUrl="https://x/a.jpg", styling=SlideStyling(overlay="dark"))
        light = dark.model_copy(update={"styling": SlideStyling(overlay="light")})
        plain = dark.model_copy(update={"styling": None})

        assert render_slide(dark, sample_theme).background.size == "cover"
        assert render_slide(dark, sample_theme).overlay.opacity == 0.6
        assert render_slide(light, sample_theme).overlay.opacity == 0.3
        assert render_slide(plain, sample_theme).overlay is None

    def test_image_without_url_is_solid(self, sample_theme):
        slide = Slide(id=1, backgroundStyle="image")

        background = render_slide(slide, sample_theme).background

        assert background.kind == "solid"
        assert background.color == sample_theme.backgroundColor

    def test_split_color(self, sample_theme):
        background = render_slide(Slide(id=1, backgroundStyle="split-color"), sample_theme).background
        assert background.css == "linear-gradient(90deg, #1e3a8a 50%, #ffffff 50%)"

    def test_styling_overrides_win(self, sample_theme):
        slide = Slide(id=1, title="T", styling=SlideStyling(titleSize="3xl"))

        descriptor = render_slide(slide, sample_theme, SlideStyling(titleSize="6xl"))

        assert blocks_by_role(descriptor)["title"].size_class == "text-6xl"


class TestPurity:

    def test_render_is_idempotent(self, sample_deck):
        first = render_deck(sample_deck)
        second = render_deck(sample_deck)

        assert first == second

    def test_json_round_trip_renders_identically(self):
        deck = synthesize_deck("Sustainable business practices in retail")

        restored = Deck.from_json(deck.to_json())

        assert render_deck(restored) == render_deck(deck)

    def test_size_table(self):
        assert text_size_class("5xl") == "text-5xl"
        assert text_size_class("huge") == "text-2xl"
        assert text_size_class(None) == "text-2xl"

    def test_split_stat(self):
        card = split_stat("$2.5B market size")
        assert (card.value, card.label) == ("$2.5B", "market size")
