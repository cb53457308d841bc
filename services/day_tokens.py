from typing import Dict, List, Optional

from config.settings import settings
from services.signing import PROGRAM_DAY_COUNT


class DayTokenRegistry:
    """
    Operator-configured venue tokens, one per program day.
    Tokens are opaque and matched exactly; an empty slot never matches.
    """

    def __init__(self, tokens: Dict[int, Optional[str]]):
        self._tokens = {day: (tokens.get(day) or "") for day in range(1, PROGRAM_DAY_COUNT + 1)}

    @classmethod
    def from_settings(cls) -> "DayTokenRegistry":
        return cls(settings.day_tokens)

    @staticmethod
    def env_key(day: int) -> str:
        return f"DAY{day}_TOKEN"

    def resolve_day(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        for day, configured in self._tokens.items():
            if configured and configured == token:
                return day
        return None

    def missing_env_keys(self) -> List[str]:
        return [self.env_key(day) for day, token in self._tokens.items() if not token]

    def describe(self) -> List[dict]:
        return [
            {
                "day": day,
                "has_token": bool(token),
                "env_key": self.env_key(day),
                "token": token or None,
            }
            for day, token in self._tokens.items()
        ]


def get_day_token_registry() -> DayTokenRegistry:
    # rebuilt per request so settings changes are picked up
    return DayTokenRegistry.from_settings()
