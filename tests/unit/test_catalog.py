"""Unit tests for the shipped achievement and badge catalog"""
import pytest

from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog
from quizhub.models.achievement import AchievementCategory, Rarity


def test_definition_ids_are_unique():
    achievement_ids = [a.id for a in DEFAULT_CATALOG.achievements]
    badge_ids = [b.id for b in DEFAULT_CATALOG.badges]

    assert len(achievement_ids) == len(set(achievement_ids))
    assert len(badge_ids) == len(set(badge_ids))


def test_every_rule_targets_a_definition():
    achievement_ids = {a.id for a in DEFAULT_CATALOG.achievements}
    badge_ids = {b.id for b in DEFAULT_CATALOG.badges}

    assert set(DEFAULT_CATALOG.achievement_rules) <= achievement_ids
    assert set(DEFAULT_CATALOG.badge_rules) <= badge_ids


def test_definitions_are_well_formed():
    for definition in DEFAULT_CATALOG.achievements:
        assert definition.max_progress > 0
        assert definition.points >= 0


def test_catalog_lookup():
    first_quiz = DEFAULT_CATALOG.get_achievement("first-quiz")

    assert first_quiz.category == AchievementCategory.PARTICIPATION
    assert first_quiz.rarity == Rarity.COMMON
    assert first_quiz.max_progress == 1
    assert DEFAULT_CATALOG.get_achievement("missing") is None
    assert DEFAULT_CATALOG.get_badge("novice").name == "Novice"
    assert DEFAULT_CATALOG.get_badge("missing") is None


def test_catalog_rule_tables_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_CATALOG.achievement_rules["first-quiz"] = None


def test_custom_catalog_copies_rule_tables():
    rule_table = {}
    catalog = Catalog(achievements=(), badges=(), achievement_rules=rule_table)

    rule_table["late-addition"] = lambda stats, context: (0, False)

    assert "late-addition" not in catalog.achievement_rules
