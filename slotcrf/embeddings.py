# slotcrf/embeddings.py
"""
Unsupervised word vectors trained on a canonicalized corpus.

Tokens inside a slot are replaced by their slot name before training so the
vectors capture the context slots appear in rather than the slot values.
Training writes the corpus and the model into the extractor's temp dir.
"""
import logging
from pathlib import Path
from typing import List

import numpy as np
from gensim.models import FastText
from gensim.models.word2vec import LineSentence

from slotcrf.config import EmbeddingParams
from slotcrf.errors import TrainingError
from slotcrf.schema import Sequence

logger = logging.getLogger(__name__)

CORPUS_FILE = "embeddings_corpus.txt"
MODEL_FILE = "embeddings.bin"


def canonical_sentence(seq: Sequence) -> str:
    return " ".join(t.cannonical for t in seq.tokens).lower()


def canonical_corpus(sequences: List[Sequence]) -> str:
    return "".join(canonical_sentence(seq) + "\n" for seq in sequences)


class WordEmbeddings:
    """word -> vector lookup over a trained FastText model."""

    def __init__(self, model: FastText, model_path: Path = None):
        self.model = model
        self.model_path = model_path

    @property
    def dim(self) -> int:
        return self.model.wv.vector_size

    def vector(self, word: str) -> np.ndarray:
        # subword n-grams give unseen words a vector too
        return self.model.wv[word.lower()]

    def vectors(self, words: List[str]) -> np.ndarray:
        return np.vstack([self.vector(w) for w in words])


class EmbeddingTrainer:
    def __init__(self, params: EmbeddingParams, workdir, seed: int = 42):
        self.params = params
        self.workdir = Path(workdir)
        self.seed = seed

    def train(self, sequences: List[Sequence]) -> WordEmbeddings:
        if not sequences:
            raise TrainingError("cannot train word embeddings on an empty corpus")

        corpus_path = self.workdir / CORPUS_FILE
        model_path = self.workdir / MODEL_FILE
        corpus_path.write_text(canonical_corpus(sequences), encoding="utf8")

        logger.info("Training word embeddings on %d sentences", len(sequences))
        # single worker, otherwise the seed does not make training reproducible
        model = FastText(
            sentences=LineSentence(str(corpus_path)),
            seed=self.seed,
            workers=1,
            **self.params.as_kwargs()
        )
        model.save(str(model_path))
        logger.debug("Saved word embeddings to %s (vocab=%d)", model_path, len(model.wv))
        return WordEmbeddings(model, model_path)
