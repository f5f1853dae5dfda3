# slotcrf/tagger.py
"""
CRF sequence tagger over the string features from features.py.
Saves the crfsuite model into the extractor's temp dir and tags from that file.
"""
import logging
from pathlib import Path
from typing import List, Protocol

import sklearn_crfsuite

from slotcrf.config import CRFParams
from slotcrf.errors import ModelNotTrainedError, TrainingError
from slotcrf.features import FeatureVectorizer, sent2labels
from slotcrf.schema import Sequence

logger = logging.getLogger(__name__)

MODEL_FILE = "crf.bin"


class Tagger(Protocol):
    """Anything able to label a Sequence, one label per token."""

    def tag(self, seq: Sequence) -> List[str]:
        ...


class CRFTagger:
    def __init__(self, params: CRFParams, workdir, vectorizer: FeatureVectorizer):
        self.params = params
        self.workdir = Path(workdir)
        self.vectorizer = vectorizer
        self.model_path = self.workdir / MODEL_FILE
        self._crf = None

    @property
    def is_trained(self) -> bool:
        return self._crf is not None

    @property
    def labels(self) -> List[str]:
        if self._crf is None:
            raise ModelNotTrainedError()
        return list(self._crf.classes_)

    def train(self, sequences: List[Sequence]) -> "CRFTagger":
        X, y = [], []
        for seq in sequences:
            if not seq.tokens:
                continue
            X.append(self.vectorizer.sent2features(seq))
            y.append(sent2labels(seq))
        if not X:
            raise TrainingError("no non-empty sequence to train the CRF on")

        crf = sklearn_crfsuite.CRF(model_filename=str(self.model_path), **self.params.as_kwargs())
        logger.info("Training CRF on %d sequences", len(X))
        crf.fit(X, y)
        logger.debug("Saved CRF model to %s", self.model_path)
        self._crf = crf
        return self

    def tag(self, seq: Sequence) -> List[str]:
        if self._crf is None:
            raise ModelNotTrainedError()
        if not seq.tokens:
            return []
        return list(self._crf.predict_single(self.vectorizer.sent2features(seq)))
