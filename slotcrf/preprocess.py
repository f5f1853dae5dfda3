# slotcrf/preprocess.py
"""
Turn raw utterances into token Sequences.

Training utterances carry slot markup, e.g.
    "play [Thriller](song) by [Michael Jackson](artist)"
which is stripped and converted to BIO tags aligned on the spaCy tokens.
"""
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

import spacy

from slotcrf.schema import BIO, Entity, Sequence, Token

SLOT_MARKUP_RE = re.compile(r"\[(.+?)\]\(([\w.-]+)\)")


@lru_cache(maxsize=1)
def load_nlp():
    # tokenizer only, no statistical model needed
    return spacy.blank("en")


def tokenize(text: str) -> List[Tuple[str, int, int]]:
    doc = load_nlp()(text)
    return [(t.text, t.idx, t.idx + len(t.text)) for t in doc if not t.is_space]


def strip_slot_markup(utterance: str) -> Tuple[str, List[Tuple[int, int, str]]]:
    """
    Remove [text](slot) markup.
    Returns the clean text and (start_char, end_char, slot) spans over it.
    """
    parts = []
    spans = []
    cursor = 0
    length = 0
    for m in SLOT_MARKUP_RE.finditer(utterance):
        before = utterance[cursor:m.start()]
        parts.append(before)
        length += len(before)
        value = m.group(1)
        spans.append((length, length + len(value), m.group(2)))
        parts.append(value)
        length += len(value)
        cursor = m.end()
    parts.append(utterance[cursor:])
    return "".join(parts), spans


def spans_to_bio(token_ranges, spans):
    """
    token_ranges: list of (start_char, end_char)
    spans: list of (start_char, end_char, slot)
    returns a list of (BIO, slot) aligned to the tokens
    """
    tags = [(BIO.OUT, None)] * len(token_ranges)
    for start_char, end_char, slot in spans:
        token_idxs = [
            i for i, (tstart, tend) in enumerate(token_ranges)
            if not (tend <= start_char or tstart >= end_char)
        ]
        if not token_idxs:
            continue
        tags[token_idxs[0]] = (BIO.BEGINNING, slot)
        for ti in token_idxs[1:]:
            tags[ti] = (BIO.INSIDE, slot)
    return tags


def _matched_entities(start: int, end: int, entities: Iterable[Entity]):
    return frozenset(e.name for e in entities if e.start <= start and e.end >= end)


def generate_prediction_sequence(text: str, intent: str, entities: Optional[List[Entity]] = None) -> Sequence:
    entities = entities or []
    tokens = [
        Token(value=value, start=start, end=end, matched_entities=_matched_entities(start, end, entities))
        for value, start, end in tokenize(text)
    ]
    return Sequence(tokens=tokens, intent=intent, text=text)


def generate_training_sequence(utterance: str, intent: str, entities: Optional[List[Entity]] = None) -> Sequence:
    """
    Build a tagged Sequence from an utterance with slot markup.
    Entity offsets, when given, are relative to the clean (markup stripped) text.
    """
    entities = entities or []
    text, spans = strip_slot_markup(utterance)
    raw = tokenize(text)
    tags = spans_to_bio([(start, end) for _, start, end in raw], spans)
    tokens = [
        Token(
            value=value,
            start=start,
            end=end,
            tag=tag,
            slot=slot,
            matched_entities=_matched_entities(start, end, entities),
        )
        for (value, start, end), (tag, slot) in zip(raw, tags)
    ]
    return Sequence(tokens=tokens, intent=intent, text=text)
