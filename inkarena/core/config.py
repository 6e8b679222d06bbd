"""Application configuration settings"""


from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = Field(default="sqlite:///./ink_arena.db", env="DATABASE_URL")

    # Application
    app_name: str = Field(default="Ink Arena", env="APP_NAME")
    debug: bool = Field(default=False, env="DEBUG")
    version: str = Field(default="0.1.0", env="VERSION")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # Field
    field_area: float = Field(default=16.0, env="FIELD_AREA")  # 4m x 4m
    field_width: float = Field(default=4.0, env="FIELD_WIDTH")
    field_depth: float = Field(default=4.0, env="FIELD_DEPTH")

    # Match timing (seconds)
    game_duration: float = Field(default=180.0, env="GAME_DURATION")
    min_game_duration: float = Field(default=30.0, env="MIN_GAME_DURATION")
    max_game_duration: float = Field(default=600.0, env="MAX_GAME_DURATION")

    # Ink rules
    max_marks_per_player: int = Field(default=100, env="MAX_MARKS_PER_PLAYER")
    player_collision_radius: float = Field(default=0.5, env="PLAYER_COLLISION_RADIUS")
    mark_min_size: float = Field(default=0.1, env="MARK_MIN_SIZE")
    mark_max_size: float = Field(default=2.0, env="MARK_MAX_SIZE")
    default_mark_size: float = Field(default=0.5, env="DEFAULT_MARK_SIZE")

    # Outcome
    min_win_margin: float = Field(default=3.0, env="MIN_WIN_MARGIN")
    tie_break_by_mark_count: bool = Field(default=True, env="TIE_BREAK_BY_MARK_COUNT")

    # Seconds between sweeps that end games whose clock ran out
    expiry_check_interval: float = Field(default=1.0, env="EXPIRY_CHECK_INTERVAL")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
