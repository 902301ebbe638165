"""Settings loaded from environment variables or a .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from stakemap.board import BOARD_SIZE, TOKEN_RADIUS, BoardGeometry


def _find_env_files() -> list[Path]:
    """The nearest .env walking up from the current directory, if any."""
    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        env_path = parent / ".env"
        if env_path.is_file():
            return [env_path]
    return []


class StakemapSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STAKEMAP_",
        env_file=_find_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Board geometry (px); must match the board participants answered on
    board_size: float = BOARD_SIZE
    token_radius: float = TOKEN_RADIUS

    # Analysis
    completed_only: bool = False

    # Output
    output_dir: Path | None = None

    def board(self) -> BoardGeometry:
        return BoardGeometry(board_size=self.board_size, token_radius=self.token_radius)


def load_settings(**overrides: object) -> StakemapSettings:
    """Load settings, letting non-None CLI overrides win over the environment."""
    cleaned = {k: v for k, v in overrides.items() if v is not None}
    return StakemapSettings(**cleaned)  # type: ignore[arg-type]
