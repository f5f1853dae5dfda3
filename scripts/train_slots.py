# scripts/train_slots.py
"""
Train a slot extractor on a JSONL file of annotated utterances and print a
per-label report on a held-out split.

Each line: {"text": "play [Thriller](song) by [Michael Jackson](artist)", "intent": "play_song"}

    python scripts/train_slots.py data/slot_training.jsonl --ratio 0.8
"""
import argparse
import json
import logging
from pathlib import Path

from slotcrf.config import ExtractorConfig
from slotcrf.evaluate import evaluate, train_test_split
from slotcrf.extractor import CRFExtractor
from slotcrf.preprocess import generate_training_sequence
from slotcrf.schema import IntentDefinition, SlotDefinition, collection_to_dict


def load_sequences(path):
    sequences = []
    with open(path, "r", encoding="utf8") as fh:
        for ln in fh:
            if not ln.strip():
                continue
            obj = json.loads(ln)
            sequences.append(generate_training_sequence(obj["text"], obj.get("intent", "unknown")))
    return sequences


def intent_definitions(sequences):
    """One IntentDefinition per intent, declaring every slot seen in its utterances."""
    slots = {}
    for seq in sequences:
        names = slots.setdefault(seq.intent, {})
        for t in seq.tokens:
            if t.slot:
                names.setdefault(t.slot, None)
    return {
        intent: IntentDefinition(name=intent, slots=[SlotDefinition(name=n, entity=n) for n in names])
        for intent, names in slots.items()
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("data", type=Path)
    parser.add_argument("--ratio", type=float, default=0.8, help="share of utterances used for training")
    parser.add_argument("--clusters", type=int, default=None, help="override the number of word clusters")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--show", type=int, default=5, help="print the slots extracted from the first N held-out utterances")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    sequences = load_sequences(args.data)
    train, test = train_test_split(sequences, args.ratio, args.seed)
    print(f"Loaded {len(sequences)} utterances ({len(train)} train / {len(test)} test)")

    config = ExtractorConfig(random_state=args.seed)
    if args.clusters:
        config = config.replace(n_clusters=args.clusters)

    with CRFExtractor(config) as extractor:
        print("Training slot extractor... (this may take a minute)")
        extractor.train(train)
        if not test:
            print("No held-out utterances, skipping evaluation")
            return 0
        result = evaluate(extractor, test)
        print(f"\nweighted F1: {result['flat_f1']:.3f}")
        print("\nClassification report (by label):")
        print(result["report"])

        intents = intent_definitions(sequences)
        for seq in test[:args.show]:
            slots = extractor.extract(seq.text, intents[seq.intent], [])
            print(seq.text, "->", json.dumps(collection_to_dict(slots), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
