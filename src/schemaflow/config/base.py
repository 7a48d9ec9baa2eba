"""Engine settings.

Settings name the attributes the engines read and control logging. They
contain no engine logic.
"""

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Process-wide configuration for the schema and task engines."""

    schema_attribute: str = Field(
        default="schema",
        description="Field attribute holding a field's validator chain",
    )
    order_attribute: str = Field(
        default="order",
        description="Field attribute holding a task's sibling order",
    )
    action_attribute: str = Field(
        default="run",
        description="Function attribute tagging a task action and its order",
    )
    log_level: str = Field(default="WARNING", description="Level for the schemaflow logger")
    rich_tracebacks: bool = Field(
        default=True,
        description="Render logged tracebacks with rich",
    )


_global_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings singleton."""
    global _global_settings
    if _global_settings is None:
        _global_settings = Settings()
    return _global_settings


def configure(settings: Settings | None = None) -> Settings:
    """Replace the global settings (defaults when None)."""
    global _global_settings
    _global_settings = settings or Settings()
    return _global_settings
