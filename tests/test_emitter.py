"""Dual emission: chain delays, preview keys and markup stability."""

import pytest

from vectormotion.instancing import (
    AnimationChain,
    AnimationRecord,
    AttributeAnimateTrack,
    ChainEntry,
    DualEmitter,
    compute_chain_delays,
    serialize,
)
from vectormotion.instancing.emitter import parse_clock_ms


def record(record_id, dur="1s", repeat=1, target="box-a"):
    return AnimationRecord(
        id=record_id,
        track=AttributeAnimateTrack(attribute_name="opacity", values="0;1", dur=dur, repeat_count=repeat),
        target_element_id=target,
    )


@pytest.mark.parametrize(
    "clock,expected",
    [("2s", 2000), ("500ms", 500), ("1.5", 1500), ("0.1min", 6000), ("indefinite", None), ("soon", None)],
)
def test_parse_clock_ms(clock, expected):
    if expected is None:
        assert parse_clock_ms(clock) is None
    else:
        assert parse_clock_ms(clock) == pytest.approx(expected)


def test_chain_delays_follow_end_and_start_triggers():
    records = [record("a", dur="2s"), record("b", dur="1s", repeat=2), record("c", repeat="indefinite")]
    chain = AnimationChain(
        id="seq",
        entries=[
            ChainEntry(animation_id="a"),
            ChainEntry(animation_id="b", delay=0.5),
            ChainEntry(animation_id="c", delay=1, trigger="start"),
        ],
    )
    assert compute_chain_delays(records, [chain]) == {"a": 0, "b": 2500, "c": 1000}


def test_indefinite_entry_does_not_advance_cursor():
    records = [record("loop", repeat="indefinite"), record("next")]
    chain = AnimationChain(id="seq", entries=[ChainEntry(animation_id="loop"), ChainEntry(animation_id="next")])
    assert compute_chain_delays(records, [chain]) == {"loop": 0, "next": 0}


def test_negative_entry_delay_counts_as_zero():
    records = [record("a", dur="1s"), record("b")]
    chain = AnimationChain(id="seq", entries=[ChainEntry(animation_id="a", delay=-5), ChainEntry(animation_id="b")])
    assert compute_chain_delays(records, [chain]) == {"a": 0, "b": 1000}


def test_chain_skips_missing_records():
    chain = AnimationChain(id="seq", entries=[ChainEntry(animation_id="ghost"), ChainEntry(animation_id="a", delay=1)])
    assert compute_chain_delays([record("a")], [chain]) == {"a": 1000}


def emit_fixture(elements, animations, definitions, geometry, builder):
    builder.apply_template("preset-fade-in", ["box-a"])
    builder.apply_template("preset-text-typewriter", ["title"])
    first, _ = [r.id for r in animations.list_records()]
    animations.add_chain(
        AnimationChain(id="seq", entries=[ChainEntry(animation_id=first), ChainEntry(animation_id="rec-3", delay=0.25)])
    )


def test_markup_matches_preview_and_shares_delays(elements, animations, definitions, geometry, builder):
    emit_fixture(elements, animations, definitions, geometry, builder)
    emission = DualEmitter().emit(elements, animations, definitions, geometry)

    assert serialize(emission.preview) == emission.markup
    assert 'begin="1.250s"' in emission.markup  # fade-in lasts 1s, then 0.25s gap
    assert '<clipPath id="clip-reveal-rec-2-title" clipPathUnits="userSpaceOnUse">' in emission.markup
    assert '<g data-target="box-a"><animate attributeName="opacity"' in emission.markup


def test_reveal_animation_nested_in_clip_shape(elements, animations, definitions, geometry, builder):
    builder.apply_template("preset-text-typewriter", ["title"])
    preview = DualEmitter().render_preview(elements, animations, definitions, geometry)
    defs = preview.children[0]
    (clip,) = defs.children
    (rect,) = clip.children
    assert rect.tag == "rect"
    assert rect.children[0].attributes["attributeName"] == "width"
    # clip-owned records are not repeated on the element itself
    assert len(preview.children) == 1


def test_restart_key_changes_preview_keys_only(elements, animations, definitions, geometry, builder):
    (rec,) = builder.apply_template("preset-fade-in", ["box-a"])
    emitter = DualEmitter()

    before = emitter.emit(elements, animations, definitions, geometry)
    assert emitter.bump_restart_key() == 1
    after = emitter.emit(elements, animations, definitions, geometry)

    assert before.markup == after.markup
    assert before.markup == emitter.render_markup(elements, animations, definitions, geometry)
    target_before = before.preview.children[1]
    target_after = after.preview.children[1]
    assert target_before.children[0].key == f"{rec.id}-0"
    assert target_after.children[0].key == f"{rec.id}-1"
    assert target_before.key != target_after.key


def test_restart_key_is_monotonic():
    emitter = DualEmitter()
    keys = [emitter.bump_restart_key() for _ in range(3)]
    assert keys == [1, 2, 3]


def test_emission_reads_without_writing(elements, animations, definitions, geometry, builder):
    builder.apply_template("preset-text-typewriter", ["title"])
    snapshot = (
        animations.list_records(),
        definitions.list_clip_definitions(),
        [e.model_dump() for e in elements.list_elements()],
    )
    DualEmitter().emit(elements, animations, definitions, geometry)
    assert snapshot == (
        animations.list_records(),
        definitions.list_clip_definitions(),
        [e.model_dump() for e in elements.list_elements()],
    )


def test_render_preview_builds_no_markup(monkeypatch, elements, animations, definitions, geometry, builder):
    builder.apply_template("preset-fade-in", ["box-a"])

    def fail(node):
        raise AssertionError("preview render serialized markup")

    monkeypatch.setattr("vectormotion.instancing.emitter.serialize", fail)
    emitter = DualEmitter()
    emitter.bump_restart_key()
    preview = emitter.render_preview(elements, animations, definitions, geometry)
    assert preview.children[1].key == "box-a-1"
