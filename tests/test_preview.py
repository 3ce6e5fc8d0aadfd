"""Tests for the route-day and activity phone previews."""

from cms_shared.builder import RouteBuilder
from cms_shared.preview import (
    ACTIVITY_INTRO_PLACEHOLDER,
    ACTIVITY_TITLE_PLACEHOLDER,
    EMPTY_DAY_MESSAGE,
    ROUTE_TITLE_PLACEHOLDER,
    UNTITLED,
    preview_activity,
    preview_route_day,
    render_phone,
)


class TestRoutePreview:
    def test_empty_day_shows_empty_state(self):
        screen = preview_route_day(RouteBuilder())
        assert screen.cards == []
        assert screen.empty_state == EMPTY_DAY_MESSAGE
        assert screen.subtitle == "Día 1 • 0 min"
        assert screen.route_title == ROUTE_TITLE_PLACEHOLDER

    def test_cards_follow_block_order(self):
        builder = RouteBuilder()
        lesson = builder.add_block("lesson")
        activity = builder.add_block("activity")
        builder.update_block(activity.id, "duration", 7)

        screen = preview_route_day(builder, {"title": "Camino hacia la Calma"})

        assert [c.block_id for c in screen.cards] == [lesson.id, activity.id]
        assert screen.cards[1].badge == "Práctica"
        assert screen.cards[1].tone == "purple"
        assert screen.cards[0].tone == "blue"
        assert screen.subtitle == "Día 1 • 12 min"
        assert screen.route_title == "Camino hacia la Calma"
        assert screen.empty_state is None

    def test_blank_titles_fall_back(self):
        builder = RouteBuilder()
        block = builder.add_block("reflection")
        builder.update_block(block.id, "title", "")
        builder.update_day("title", "")
        screen = preview_route_day(builder)
        assert screen.header_title == UNTITLED
        assert screen.cards[0].title == UNTITLED
        assert screen.cards[0].tone == "orange"

    def test_preview_tracks_active_day(self):
        builder = RouteBuilder()
        builder.add_day()
        builder.update_day("title", "Segundo")
        screen = preview_route_day(builder)
        assert screen.header_title == "Segundo"
        assert screen.subtitle.startswith("Día 2")

    def test_preview_does_not_mutate(self):
        builder = RouteBuilder()
        builder.add_block("lesson")
        before = builder.snapshot()
        preview_route_day(builder)
        assert builder.snapshot() == before


class TestActivityPreview:
    def test_defaults_for_empty_form(self):
        screen = preview_activity({})
        assert screen.title == ACTIVITY_TITLE_PLACEHOLDER
        assert screen.intro == ACTIVITY_INTRO_PLACEHOLDER
        assert screen.timer_label == "4s - 4s - 4s"
        assert screen.cta == "Comenzar"

    def test_breathing_timer_label(self):
        screen = preview_activity({
            "type": "breathing_timer",
            "title": "Respiración cuadrada",
            "breathing_inhale": 4,
            "breathing_hold": 7,
            "breathing_exhale": 8,
            "duration_minutes": 3,
        })
        assert screen.timer_label == "4s - 7s - 8s"
        assert screen.duration_label == "3 min"
        assert screen.interactive_placeholder is None

    def test_other_types_show_placeholder(self):
        screen = preview_activity({"type": "grounding"})
        assert screen.timer_label is None
        assert screen.interactive_placeholder == "[Componente interactivo: grounding]"

    def test_non_text_values_are_shown_as_text(self):
        screen = preview_activity({
            "type": "grounding",
            "title": 5,
            "intro_text": ["Respira"],
            "difficulty": 2,
            "cover_image": 0,
        })
        assert screen.title == "5"
        assert screen.intro == "['Respira']"
        assert screen.difficulty == "2"
        assert screen.cover_image == "0"
        assert "5" in render_phone(screen)


class TestRenderPhone:
    def test_route_frame(self):
        text = render_phone(preview_route_day(RouteBuilder()))
        lines = text.splitlines()
        assert lines[0].startswith("╭") and lines[-1].startswith("╰")
        assert len({len(line) for line in lines}) == 1
        assert "Introducción" in text

    def test_activity_frame(self):
        text = render_phone(preview_activity({"title": "Calma"}))
        assert "[ Comenzar ]" in text
        assert "4s - 4s - 4s" in text
