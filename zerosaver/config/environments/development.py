from ..settings import Settings

class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    sweep_interval_seconds: float = 2.0
