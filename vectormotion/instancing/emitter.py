#!/usr/bin/env python3
"""
Dual Emitter

Builds the live preview tree and the export markup from the same records and
clip instances. One chain-delay map is computed per pass and shared by both
outputs, so preview and export never disagree on timing.

The preview tree carries remount keys derived from ``restart_key``; markup
never depends on it.
"""

import re
from typing import Dict, Iterable, List, NamedTuple, Optional

from vectormotion.config.schemas import EmitterSettings
from vectormotion.core import get_logger

from .clip_renderer import collect_instances, instantiate_clip
from .content import animation_node, begin_value, serialize
from .sdk import INDEFINITE, AnimationChain, AnimationRecord, ChainTrigger, ContentNode, RenderableClip

log = get_logger("emitter")

_CLOCK = re.compile(r"^\s*(?P<value>[+-]?\d+(?:\.\d+)?|[+-]?\.\d+)\s*(?P<unit>h|min|s|ms)?\s*$")
_UNIT_MS = {"h": 3_600_000, "min": 60_000, "s": 1000, "ms": 1, None: 1000}


def parse_clock_ms(value: Optional[str]) -> Optional[float]:
    """``"1.5s" -> 1500``; None for indefinite or unparseable clock values."""
    if value is None or value.strip() == INDEFINITE:
        return None
    m = _CLOCK.match(value)
    if not m:
        log.debug(f"Unparseable clock value {value!r}")
        return None
    return float(m.group("value")) * _UNIT_MS[m.group("unit")]


def finite_duration_ms(record: AnimationRecord) -> float:
    """Active duration of one record; indefinite repetition counts as 0."""
    track = record.track
    if track.repeat_count == INDEFINITE:
        return 0.0
    dur = parse_clock_ms(track.dur)
    if dur is None:
        return 0.0
    return dur * max(1, int(track.repeat_count))


def compute_chain_delays(records: Iterable[AnimationRecord], chains: Iterable[AnimationChain]) -> Dict[str, float]:
    """Begin delay in ms per record id.

    Each chain runs a cursor from 0: an ``end`` entry starts ``delay`` after
    the cursor and pushes the cursor to its own end; a ``start`` entry starts
    ``delay`` after the chain start and only moves the cursor forward.
    Negative delays count as 0.
    """
    by_id = {r.id: r for r in records}
    delays: Dict[str, float] = {}
    for chain in chains:
        cursor = 0.0
        for entry in chain.entries:
            record = by_id.get(entry.animation_id)
            if record is None:
                log.debug(f"Chain {chain.id}: no record {entry.animation_id}")
                continue
            delay_ms = max(0.0, entry.delay) * 1000
            if entry.trigger == ChainTrigger.END:
                base = cursor + delay_ms
                cursor = base + finite_duration_ms(record)
            else:
                base = delay_ms
                cursor = max(cursor, base)
            delays[record.id] = max(base, delays.get(record.id, 0.0))
    return delays


class Emission(NamedTuple):
    preview: ContentNode
    markup: str


class DualEmitter:
    def __init__(self, settings: Optional[EmitterSettings] = None):
        self.settings = settings or EmitterSettings()
        self.restart_key = 0

    def bump_restart_key(self) -> int:
        """Force the preview to remount (restarts indefinite animations)."""
        self.restart_key += 1
        return self.restart_key

    # ------------------------------------------------------------------

    def render_clips(self, elements, animations, definitions, geometry, delays, restart_key=None) -> List[RenderableClip]:
        records = animations.list_records()
        return [
            instantiate_clip(
                inst.template, inst.bounds, inst.instance_id, records, delays, restart_key,
                default_begin=self.settings.default_begin,
            )
            for inst in collect_instances(elements, definitions, geometry)
        ]

    def _tree(self, elements, animations, definitions, geometry, delays, restart_key) -> ContentNode:
        def key(base):
            return f"{base}-{restart_key}" if restart_key is not None else None

        clips = self.render_clips(elements, animations, definitions, geometry, delays, restart_key)
        defs = ContentNode(tag="defs", children=tuple(c.node for c in clips))

        by_target: Dict[str, List[ContentNode]] = {}
        for record in animations.list_records():
            if record.targets_clip or record.target_element_id is None:
                continue
            begin = begin_value(record.track, delays.get(record.id), self.settings.default_begin)
            node = animation_node(record.track, begin, key=key(record.id))
            by_target.setdefault(record.target_element_id, []).append(node)

        targets = tuple(
            ContentNode(tag="g", attributes={"data-target": target_id}, children=tuple(nodes), key=key(target_id))
            for target_id, nodes in by_target.items()
        )
        return ContentNode(tag="g", attributes={"class": "vectormotion"}, children=(defs,) + targets)

    def emit(self, elements, animations, definitions, geometry, restart_key: Optional[int] = None) -> Emission:
        delays = compute_chain_delays(animations.list_records(), animations.list_chains())
        return Emission(
            preview=self._preview(elements, animations, definitions, geometry, delays, restart_key),
            markup=self._markup(elements, animations, definitions, geometry, delays),
        )

    def render_preview(self, elements, animations, definitions, geometry, restart_key: Optional[int] = None) -> ContentNode:
        """Keyed preview tree only; no export markup is built."""
        delays = compute_chain_delays(animations.list_records(), animations.list_chains())
        return self._preview(elements, animations, definitions, geometry, delays, restart_key)

    def render_markup(self, elements, animations, definitions, geometry) -> str:
        delays = compute_chain_delays(animations.list_records(), animations.list_chains())
        return self._markup(elements, animations, definitions, geometry, delays)

    def _preview(self, elements, animations, definitions, geometry, delays, restart_key) -> ContentNode:
        if restart_key is None:
            restart_key = self.restart_key
        return self._tree(elements, animations, definitions, geometry, delays, restart_key)

    def _markup(self, elements, animations, definitions, geometry, delays) -> str:
        return serialize(self._tree(elements, animations, definitions, geometry, delays, None))
