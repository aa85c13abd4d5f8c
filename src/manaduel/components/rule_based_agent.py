from dataclasses import dataclass

from manaduel.constants import AI_DEFAULT_DIFFICULTY


@dataclass(slots=True)
class RuleBasedAgent:
    """Marker component for the rule-driven AI controller.

    difficulty: 1..5; 5 always plays the best scored swap.
    """

    difficulty: int = AI_DEFAULT_DIFFICULTY
