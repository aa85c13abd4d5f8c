from dataclasses import dataclass


@dataclass(slots=True)
class HumanAgent:
    """Marker component for the player driven by external input."""
