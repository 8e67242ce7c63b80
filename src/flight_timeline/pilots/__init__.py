"""Pilot domain exports."""

from flight_timeline.pilots.models import (
    Clip,
    ClipMedia,
    Fix,
    Payload,
    PayloadKind,
    Position,
    Track,
)
from flight_timeline.pilots.registry import PALETTE, UNASSIGNED, Owner, OwnerRegistry

__all__ = [
    "Clip",
    "ClipMedia",
    "Fix",
    "Owner",
    "OwnerRegistry",
    "PALETTE",
    "Payload",
    "PayloadKind",
    "Position",
    "Track",
    "UNASSIGNED",
]
