"""Default ``enable()`` options via pydantic-settings.

Configuration is loaded from environment variables prefixed with
``CHRONOMOCK_`` and/or a ``.env`` file, so a CI job can change the
default facility set or start time without touching test code::

    CHRONOMOCK_APIS='["timeout", "interval"]'
    CHRONOMOCK_NOW=1700000000000

Explicit arguments to :meth:`~chronomock._timers.MockTimers.enable`
always win over these defaults.  Times are in **milliseconds**.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chronomock._facilities import SUPPORTED_FACILITIES, Facility


class MockTimersSettings(BaseSettings):
    """Defaults applied when ``enable()`` is called without arguments.

    Example ``.env``::

        CHRONOMOCK_APIS=["date"]
        CHRONOMOCK_NOW=86400000
    """

    model_config = SettingsConfigDict(
        env_prefix="CHRONOMOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    apis: list[Facility] = Field(
        default_factory=lambda: list(SUPPORTED_FACILITIES),
        description="Facilities substituted by default.",
    )
    now: Annotated[int, Field(ge=0)] = Field(
        default=0,
        description="Virtual epoch (ms) a new session starts at.",
    )
