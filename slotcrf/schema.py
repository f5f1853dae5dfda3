# slotcrf/schema.py
"""
Data types shared by the extractor pipeline.

Token / Sequence come out of the tokenizer (see preprocess.py), SlotDefinition,
IntentDefinition and Entity are supplied by the caller, Slot is what comes out.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


class BIO(str, Enum):
    INSIDE = "I"
    BEGINNING = "B"
    OUT = "o"


@dataclass(frozen=True)
class Token:
    value: str
    start: int
    end: int
    tag: BIO = BIO.OUT
    slot: Optional[str] = None
    matched_entities: FrozenSet[str] = frozenset()

    @property
    def cannonical(self) -> str:
        """Slot name for tokens inside a slot, surface text otherwise."""
        if self.tag == BIO.OUT or not self.slot:
            return self.value
        return self.slot

    @property
    def label(self) -> str:
        """Composite CRF label: 'o', 'B-artist', 'I-artist'..."""
        if self.tag == BIO.OUT or not self.slot:
            return BIO.OUT.value
        return f"{self.tag.value}-{self.slot}"


@dataclass(frozen=True)
class Sequence:
    tokens: Tuple[Token, ...]
    intent: str
    text: str = ""

    def __post_init__(self):
        object.__setattr__(self, "tokens", tuple(self.tokens))

    def __len__(self):
        return len(self.tokens)


@dataclass(frozen=True)
class SlotDefinition:
    name: str
    entity: str


@dataclass(frozen=True)
class IntentDefinition:
    name: str
    slots: Tuple[SlotDefinition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "slots", tuple(self.slots))

    def find_slot(self, name: str) -> Optional[SlotDefinition]:
        for slot_def in self.slots:
            if slot_def.name == name:
                return slot_def
        return None


@dataclass(frozen=True)
class Entity:
    """Entity recognized over character offsets [start, end) of the raw utterance."""
    name: str
    start: int
    end: int
    value: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entity":
        """Accepts the nested {name, meta: {start, end}, data: {value}} shape."""
        meta = data.get("meta") or {}
        payload = data.get("data") or {}
        return cls(
            name=data["name"],
            start=int(meta.get("start", data.get("start", 0))),
            end=int(meta.get("end", data.get("end", 0))),
            value=payload.get("value", data.get("value")),
        )

    def covers(self, token: Token) -> bool:
        return self.start <= token.start and self.end >= token.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "meta": {"start": self.start, "end": self.end},
            "data": {"value": self.value},
        }


@dataclass
class Slot:
    name: str
    value: Any
    source: str = ""
    entity: Optional[Entity] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {"name": self.name, "value": self.value}
        if self.entity is not None:
            out["entity"] = self.entity.to_dict()
        return out


# a slot name maps to a list only when several spans begin under that name
SlotValue = Union[Slot, List[Slot]]
SlotCollection = Dict[str, SlotValue]


def collection_to_dict(slots: SlotCollection) -> Dict[str, Any]:
    out = {}
    for name, value in slots.items():
        if isinstance(value, list):
            out[name] = [s.to_dict() for s in value]
        else:
            out[name] = value.to_dict()
    return out
