# slotcrf/evaluate.py
"""Held-out evaluation of a slot tagger."""
import random
from typing import Dict, List, Tuple

from sklearn_crfsuite import metrics

from slotcrf.features import sent2labels
from slotcrf.schema import BIO, Sequence
from slotcrf.tagger import Tagger


def train_test_split(sequences: List[Sequence], ratio: float = 0.8, seed: int = 42) -> Tuple[List[Sequence], List[Sequence]]:
    data = list(sequences)
    random.Random(seed).shuffle(data)
    split = int(ratio * len(data))
    return data[:split], data[split:]


def evaluate(tagger: Tagger, sequences: List[Sequence]) -> Dict:
    y_true = [sent2labels(seq) for seq in sequences]
    y_pred = [tagger.tag(seq) for seq in sequences]
    # remove 'o' for metrics
    labels = sorted({l for seq in y_true + y_pred for l in seq if l != BIO.OUT.value})
    if not labels:
        return {"labels": [], "flat_f1": 0.0, "report": ""}
    return {
        "labels": labels,
        "flat_f1": metrics.flat_f1_score(y_true, y_pred, average="weighted", labels=labels, zero_division=0),
        "report": metrics.flat_classification_report(y_true, y_pred, labels=labels, digits=3, zero_division=0),
    }
