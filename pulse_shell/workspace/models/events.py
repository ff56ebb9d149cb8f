"""Content-runtime event models.

The native host reports page loads for browser tabs as
``{tabId, url?, title?}`` notifications.  ``RuntimeUpdate`` is the part the
tree cares about; ``RuntimeEvent`` adds the tab it belongs to.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RuntimeUpdate(BaseModel):
    """Partial tab update.  Blank fields leave the current value in place."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    title: str | None = None


class RuntimeEvent(RuntimeUpdate):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    tab_id: str
