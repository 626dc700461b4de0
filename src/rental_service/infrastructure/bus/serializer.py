"""Wire format of relay frames exchanged between worker processes."""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


@dataclass(frozen=True, slots=True)
class RelayFrame:
    origin: str
    receiver_id: UUID
    event: str
    data: Any


def serialize_frame(frame: RelayFrame) -> str:
    return json.dumps(
        {
            "origin": frame.origin,
            "receiver_id": frame.receiver_id,
            "event": frame.event,
            "data": frame.data,
        },
        cls=_Encoder,
    )


def deserialize_frame(raw: str | bytes) -> RelayFrame:
    data = json.loads(raw)
    return RelayFrame(
        origin=data["origin"],
        receiver_id=UUID(data["receiver_id"]),
        event=data["event"],
        data=data["data"],
    )
