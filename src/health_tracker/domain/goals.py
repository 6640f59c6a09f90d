"""Daily activity and nutrition goals."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthGoals:
    """Targets used for progress rings and remaining-calorie hints."""

    step_goal: int = 10000
    active_energy_goal_kcal: float = 600.0
    calorie_goal: int = 2400
    protein_goal_g: float = 180.0
    carbs_goal_g: float = 250.0
    fat_goal_g: float = 70.0
