"""Defensive decoding of bounty board payloads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from bounty_widget.domain.exceptions import MalformedPayloadError
from bounty_widget.domain.models import Bounty

logger = logging.getLogger(__name__)

BOUNTIES_KEY = "bounties"


def parse_bounty_list(data: Any) -> List[Bounty]:
    """Accept a bare array or an object wrapping a ``bounties`` array.

    An object without a ``bounties`` array yields an empty list. Entries that
    cannot be validated are skipped.
    """

    if isinstance(data, dict):
        items = data.get(BOUNTIES_KEY)
        if not isinstance(items, list):
            return []
    elif isinstance(data, list):
        items = data
    else:
        raise MalformedPayloadError(
            "Bounty list must be an array or an object",
            context={"type": type(data).__name__},
        )

    bounties: List[Bounty] = []
    for index, item in enumerate(items):
        try:
            bounties.append(Bounty.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "bounty_entry_skipped",
                extra={"index": index, "errors": exc.error_count()},
            )
    return bounties


def parse_stats_overrides(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise MalformedPayloadError(
            "Stats payload must be an object",
            context={"type": type(data).__name__},
        )
    return dict(data)
