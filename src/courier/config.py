"""Runtime settings for Courier clients."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "COURIER_"


class CourierSettings(BaseModel):
    """Transport settings applied uniformly to every request of one client.

    ``requests`` only offers connect and read timeouts, so ``request_timeout``
    bounds each read and ``resource_timeout`` is used as the connect timeout.
    Neither limits the total duration of a transfer.
    """

    request_timeout: float = Field(default=30.0, gt=0)
    resource_timeout: float = Field(default=30.0, gt=0)
    max_workers: int = Field(default=8, ge=1)

    @property
    def timeout(self):
        """``(connect, read)`` timeout tuple in the form ``requests`` expects."""
        return (self.resource_timeout, self.request_timeout)


def _read_env(name: str, cast) -> Optional[object]:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}")
        return None


def load_settings() -> CourierSettings:
    """Load settings from environment variables.

    Recognised variables:
    1. COURIER_REQUEST_TIMEOUT (seconds, default 30)
    2. COURIER_RESOURCE_TIMEOUT (seconds, default 30)
    3. COURIER_MAX_WORKERS (default 8)

    Returns:
        CourierSettings with defaults for anything unset or unparsable
    """
    overrides = {}
    for field_name, env_name, cast in (
        ("request_timeout", "REQUEST_TIMEOUT", float),
        ("resource_timeout", "RESOURCE_TIMEOUT", float),
        ("max_workers", "MAX_WORKERS", int),
    ):
        value = _read_env(env_name, cast)
        if value is not None:
            overrides[field_name] = value

    if overrides:
        logger.debug(f"Loaded settings overrides from environment: {sorted(overrides)}")
    return CourierSettings(**overrides)
