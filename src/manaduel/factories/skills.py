from __future__ import annotations

import importlib
import pkgutil
from typing import Callable, Dict, Iterable, Tuple

from manaduel.components.skill import ClassSkill

SKILL_FACTORY_PACKAGES: Tuple[str, ...] = ("manaduel.skills",)


def _discover_skill_builders() -> Dict[str, Callable[[], ClassSkill]]:
    builders: Dict[str, Callable[[], ClassSkill]] = {}
    for package_name in SKILL_FACTORY_PACKAGES:
        package = importlib.import_module(package_name)
        for module in _iter_modules(package_name, package):
            for attr_name in dir(module):
                if not attr_name.startswith("create_skill_"):
                    continue
                factory = getattr(module, attr_name)
                if not callable(factory):
                    continue
                builders.setdefault(attr_name[len("create_skill_") :], factory)
    return builders


def _iter_modules(package_name: str, package) -> Iterable:
    yield package
    package_path = getattr(package, "__path__", None)
    if not package_path:
        return
    for module_info in pkgutil.iter_modules(package_path):
        if module_info.name.startswith("__"):
            continue
        yield importlib.import_module(f"{package_name}.{module_info.name}")


class SkillRegistry:
    """Read-only catalog of skills keyed by id."""

    def __init__(self, skills: Iterable[ClassSkill] = ()) -> None:
        self._skills: Dict[str, ClassSkill] = {}
        for skill in skills:
            self.register(skill)

    def register(self, skill: ClassSkill) -> None:
        if skill.id in self._skills:
            raise ValueError(f"Skill '{skill.id}' already registered")
        self._skills[skill.id] = skill

    def get(self, skill_id: str) -> ClassSkill:
        try:
            return self._skills[skill_id]
        except KeyError as exc:
            raise KeyError(f"Skill '{skill_id}' is not registered") from exc

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._skills)


def create_skill_by_name(name: str) -> ClassSkill:
    try:
        builder = _SKILL_BUILDERS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown skill '{name}'") from exc
    return builder()


def _build_default_registry() -> SkillRegistry:
    return SkillRegistry(builder() for _, builder in sorted(_SKILL_BUILDERS.items()))


_SKILL_BUILDERS: Dict[str, Callable[[], ClassSkill]] = _discover_skill_builders()

default_skill_registry = _build_default_registry()
