"""Session orchestration and configuration."""
from .config import TemplateConfig
from .session import TemplateSession, run_template

__all__ = ["TemplateConfig", "TemplateSession", "run_template"]
