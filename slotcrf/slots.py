# slotcrf/slots.py
"""
Turn a predicted tag sequence into a SlotCollection.

    tokens: book  a  flight          -> {"destination": Slot("destination", "flight")}
    tags:   o     o  B-destination

    tokens: Kanye    West            -> {"artist": Slot("artist", "Kanye West")}
    tags:   B-artist I-artist

Two spans beginning under the same slot name give a list of slots, in
utterance order.
"""
import logging
from typing import List, Optional

from slotcrf.schema import BIO, Entity, IntentDefinition, Slot, SlotCollection, Token

logger = logging.getLogger(__name__)


def slot_name(tag: str) -> str:
    return tag[2:]


def make_slot(name: str, token: Token, intent_def: IntentDefinition, entities: List[Entity]) -> Slot:
    """Slot valued by the covering entity of the slot's type if there is one, by the token text otherwise."""
    slot_def = intent_def.find_slot(name)
    entity = None
    if slot_def is not None:
        entity = next((e for e in entities if e.name == slot_def.entity and e.covers(token)), None)
    value = token.value
    if entity is not None and entity.value is not None:
        value = entity.value
    return Slot(name=name, value=value, source=token.value, entity=entity)


def extend_slot(slot: Slot, token: Token):
    slot.source = f"{slot.source} {token.value}"
    # an entity spanning the whole slot already holds the normalized value
    if slot.entity is not None and slot.entity.value is not None and slot.entity.covers(token):
        return
    slot.value = f"{slot.value} {token.value}"


class _SlotSpans:
    """Spans collected under one slot name; multi once a second span begins."""

    def __init__(self, slot: Slot):
        self.spans = [slot]
        self.multi = False

    def add(self, slot: Slot):
        self.spans.append(slot)
        self.multi = True

    @property
    def last(self) -> Slot:
        return self.spans[-1]

    def resolve(self):
        return list(self.spans) if self.multi else self.spans[0]


def assemble_slots(
    tokens: List[Token],
    tags: List[str],
    intent_def: IntentDefinition,
    entities: Optional[List[Entity]] = None,
) -> SlotCollection:
    entities = entities or []
    collected = {}

    # zip truncates to the shorter of the two
    for token, tag in zip(tokens, tags):
        if not token or not tag or tag == BIO.OUT.value:
            continue
        name = slot_name(tag)
        if intent_def.find_slot(name) is None:
            logger.debug("Dropping predicted slot %r, not declared on intent %r", name, intent_def.name)
            continue

        existing = collected.get(name)
        if tag[0] == BIO.INSIDE.value and existing is not None:
            extend_slot(existing.last, token)
        elif tag[0] == BIO.BEGINNING.value and existing is not None:
            existing.add(make_slot(name, token, intent_def, entities))
        else:
            collected[name] = _SlotSpans(make_slot(name, token, intent_def, entities))

    return {name: spans.resolve() for name, spans in collected.items()}
