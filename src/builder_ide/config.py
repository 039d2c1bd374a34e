import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_PREVIEW_URL = "http://localhost:3001"
_DEFAULT_PACKAGE_TIMEOUT = 120.0
_DEFAULT_ANALYZER_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    project_root: Path
    source_dir: str = "src"
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    preview_url: str = _DEFAULT_PREVIEW_URL
    package_timeout: float = _DEFAULT_PACKAGE_TIMEOUT
    analyzer_timeout: float = _DEFAULT_ANALYZER_TIMEOUT


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None


def get_settings(project_root: str | Path | None = None) -> Settings:
    """Build settings from the environment; *project_root* overrides ``BUILDER_IDE_ROOT``."""
    root = project_root if project_root is not None else os.getenv("BUILDER_IDE_ROOT", ".")
    return Settings(
        project_root=Path(root).resolve(),
        source_dir=os.getenv("BUILDER_IDE_SOURCE_DIR", "src"),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        preview_url=os.getenv("BUILDER_IDE_PREVIEW_URL", _DEFAULT_PREVIEW_URL),
        package_timeout=_float_env("BUILDER_IDE_PACKAGE_TIMEOUT", _DEFAULT_PACKAGE_TIMEOUT),
        analyzer_timeout=_float_env("BUILDER_IDE_ANALYZER_TIMEOUT", _DEFAULT_ANALYZER_TIMEOUT),
    )
