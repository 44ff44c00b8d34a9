from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LedgerResult(BaseModel):
    """Outcome of a best-effort stock adjustment.

    ``deltas`` maps stock ids to the signed change that was (or would have
    been) applied. Callers are free to ignore a failed result.
    """

    ok: bool
    deltas: dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None
