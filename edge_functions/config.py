import os
from typing import Final


class _Config:
    def __init__(self) -> None:
        # Model credentials / selection
        self.gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        try:
            self.temperature: float = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))
        except ValueError:
            self.temperature = 0.4

        # Limits
        self.rate_limit: str = os.getenv("EDGE_RATE_LIMIT", "30/minute")

        # Prompt behavior
        self.description_language: str = os.getenv("DESCRIPTION_LANGUAGE", "Korean")
        self.base_currency: str = "KRW"


CONFIG: Final[_Config] = _Config()
