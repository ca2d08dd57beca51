#!/usr/bin/env python3
"""
In-memory element, animation and definition stores.

These are the collaborators the engine reads from and appends to. The
animation store is an append-only log of immutable records; nothing is ever
updated in place.
"""

from typing import Dict, Iterable, List, Optional

from vectormotion.core import get_logger

from .sdk import AnimationChain, AnimationRecord, ClipTemplate, Element

log = get_logger("stores")


class ElementStore:
    def __init__(self, elements: Iterable[Element] = (), selected: Iterable[str] = ()):
        self._elements: Dict[str, Element] = {}
        for el in elements:
            self._elements[el.id] = el
        self._selected: List[str] = list(selected)

    def add_element(self, element: Element) -> Element:
        self._elements[element.id] = element
        return element

    def get_element(self, element_id: str) -> Optional[Element]:
        return self._elements.get(element_id)

    def list_elements(self) -> List[Element]:
        return list(self._elements.values())

    def select(self, element_ids: Iterable[str]):
        self._selected = [i for i in element_ids if i in self._elements]

    def list_selected(self) -> List[str]:
        return list(self._selected)

    def update_element_data(self, element_id: str, patch: dict) -> Optional[Element]:
        element = self._elements.get(element_id)
        if element is None:
            log.warning(f"update_element_data: unknown element {element_id}")
            return None
        updated = element.model_copy(update=patch)
        self._elements[element_id] = updated
        return updated


class AnimationStore:
    def __init__(self):
        self._records: List[AnimationRecord] = []
        self._chains: List[AnimationChain] = []

    def add_animation_record(self, record: AnimationRecord) -> AnimationRecord:
        self._records.append(record)
        return record

    def list_records(self) -> List[AnimationRecord]:
        return list(self._records)

    def remove_records_for_targets(self, element_ids: Iterable[str]) -> int:
        targets = set(element_ids)
        before = len(self._records)
        self._records = [r for r in self._records if r.target_element_id not in targets]
        removed = before - len(self._records)
        log.info(f"Removed {removed} animation record(s) for {len(targets)} target(s)")
        return removed

    def remove_records_for_clip(self, clip_id: str) -> int:
        before = len(self._records)
        self._records = [r for r in self._records if r.clip_template_id != clip_id]
        return before - len(self._records)

    def add_chain(self, chain: AnimationChain) -> AnimationChain:
        self._chains.append(chain)
        return chain

    def list_chains(self) -> List[AnimationChain]:
        return list(self._chains)


class DefinitionStore:
    def __init__(self):
        self._clips: Dict[str, ClipTemplate] = {}

    def add_clip_definition(self, clip: ClipTemplate) -> ClipTemplate:
        self._clips[clip.id] = clip
        return clip

    def get_clip_definition(self, clip_id: str) -> Optional[ClipTemplate]:
        return self._clips.get(clip_id)

    def list_clip_definitions(self) -> List[ClipTemplate]:
        return list(self._clips.values())

    def remove_clip_definition(
        self,
        clip_id: str,
        *,
        animations: Optional[AnimationStore] = None,
        elements: Optional[ElementStore] = None,
    ) -> bool:
        """Delete a clip and everything that depends on it.

        Records owned by the clip are removed from ``animations`` and every
        element referencing it (by template id or instance id) is detached.
        """
        if self._clips.pop(clip_id, None) is None:
            return False
        removed = animations.remove_records_for_clip(clip_id) if animations is not None else 0
        detached = 0
        if elements is not None:
            for el in elements.list_elements():
                if el.clip_template_id == clip_id or el.clip_path_id == clip_id:
                    elements.update_element_data(el.id, {"clip_path_id": None, "clip_template_id": None})
                    detached += 1
        log.info(f"Removed clip {clip_id}: {removed} record(s), {detached} element(s) detached")
        return True

    def assign_clip_to_selection(self, clip_id: str, elements: ElementStore) -> List[str]:
        if clip_id not in self._clips:
            log.warning(f"assign_clip_to_selection: unknown clip {clip_id}")
            return []
        assigned = []
        for element_id in elements.list_selected():
            elements.update_element_data(
                element_id, {"clip_path_id": f"{clip_id}-{element_id}", "clip_template_id": clip_id}
            )
            assigned.append(element_id)
        return assigned

    def clear_clip_from_selection(self, elements: ElementStore) -> List[str]:
        cleared = []
        for element_id in elements.list_selected():
            el = elements.get_element(element_id)
            if el is not None and (el.clip_path_id or el.clip_template_id):
                elements.update_element_data(element_id, {"clip_path_id": None, "clip_template_id": None})
                cleared.append(element_id)
        return cleared
