"""
Points System
Converts fight outcomes into signed point deltas for TantalusBot
"""

import logging
from typing import Union, Optional
from config import POINT_SYSTEM, STOPPAGE_METHODS
from utils.enums import FightResult, FightMethod
from utils.validators import Validators

logger = logging.getLogger('TantalusBot.Points')

class PointsCalculator:
    def __init__(self):
        self.win_points = POINT_SYSTEM['Win']
        self.loss_points = POINT_SYSTEM['Loss']
        self.draw_points = POINT_SYSTEM['Draw']
        self.stoppage_bonus = POINT_SYSTEM['stoppage_bonus']
        self.stoppage_methods = {FightMethod(method) for method in STOPPAGE_METHODS}

    def calculate(self, result: Union[str, FightResult],
                  method: Union[str, FightMethod, None] = None) -> int:
        """
        Calculate the point delta for a single fight outcome

        Args:
            result: Win, Loss or Draw
            method: Fight method (free text is normalized, empty means decision)

        Returns:
            Signed point delta
        """
        parsed_result = Validators.parse_result(result)
        if parsed_result is None:
            raise ValueError(f'Unknown fight result: {result}')

        if parsed_result == FightResult.WIN:
            points = self.win_points
            if self.is_stoppage(method):
                points += self.stoppage_bonus
            return points

        if parsed_result == FightResult.LOSS:
            return self.loss_points

        return self.draw_points

    def is_stoppage(self, method: Union[str, FightMethod, None]) -> bool:
        """Check if a method earns the stoppage bonus on a win"""
        return Validators.normalize_method(method) in self.stoppage_methods

    def describe(self, result: Union[str, FightResult], method: Optional[str] = None) -> str:
        """Human readable breakdown, e.g. 'Win (+5) + KO bonus (+3) = +8'"""
        parsed_result = Validators.parse_result(result)
        total = self.calculate(result, method)

        if parsed_result == FightResult.WIN and self.is_stoppage(method):
            normalized = Validators.normalize_method(method).value
            return (f'Win (+{self.win_points}) + {normalized} bonus '
                    f'(+{self.stoppage_bonus}) = {total:+d}')

        return f'{parsed_result.value} ({total:+d})'
