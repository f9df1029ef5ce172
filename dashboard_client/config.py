import os
from pathlib import Path
from typing import Final


class _Config:
    def __init__(self) -> None:
        self.api_base: str = os.getenv("DASHBOARD_API_BASE", "http://localhost:3001").rstrip("/")
        self.state_file: Path = Path(
            os.getenv("DASHBOARD_STATE_FILE", str(Path.home() / ".weather_dashboard" / "storage.json"))
        ).expanduser()
        # Forecast synthesis by the model routinely takes tens of seconds
        try:
            self.http_timeout_sec: float = float(os.getenv("HTTP_TIMEOUT_SEC", "60"))
        except ValueError:
            self.http_timeout_sec = 60.0


CONFIG: Final[_Config] = _Config()
