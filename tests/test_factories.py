import pytest

from manaduel.components.color import Color
from manaduel.components.skill import ClassSkill
from manaduel.constants import PRIMARY_COLOR_STAT, SECONDARY_COLOR_STAT
from manaduel.events.bus import EventBus
from manaduel.factories.classes import CLASS_DEFINITIONS, class_components, get_class_definition
from manaduel.factories.skills import SkillRegistry, create_skill_by_name, default_skill_registry
from manaduel.world import create_world


def test_every_class_skill_is_registered():
    for definition in CLASS_DEFINITIONS.values():
        assert len(definition.skills) == 2
        for skill_id in definition.skills:
            skill = default_skill_registry.get(skill_id)
            assert skill.cost
            assert skill.primary_color in (definition.primary_color, definition.secondary_color)


def test_registry_rejects_unknown_and_duplicate_ids():
    registry = SkillRegistry([create_skill_by_name("fireball")])
    assert registry.ids() == ("fireball",)
    with pytest.raises(KeyError):
        registry.get("ice_shard")
    with pytest.raises(ValueError):
        registry.register(create_skill_by_name("fireball"))
    with pytest.raises(ValueError):
        create_skill_by_name("meteor_swarm")


def test_targeted_skills_declare_target():
    for skill_id in default_skill_registry.ids():
        skill = default_skill_registry.get(skill_id)
        assert isinstance(skill, ClassSkill)
        if skill.target_color is not None:
            assert skill.requires_target


def test_class_components_set_affinity_stats():
    character, affinity = class_components("cryomancer")
    assert character.primary_color is Color.BLUE
    assert affinity.stat(Color.BLUE) == PRIMARY_COLOR_STAT
    assert affinity.stat(Color.YELLOW) == SECONDARY_COLOR_STAT
    assert affinity.stat(Color.RED) == 0


def test_unknown_class_is_rejected():
    with pytest.raises(KeyError):
        get_class_definition("necromancer")
    with pytest.raises(KeyError):
        create_world(EventBus(), ai_class="necromancer")
