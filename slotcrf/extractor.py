# slotcrf/extractor.py
"""
CRF slot extractor.

Training runs three stages in order, each needing the previous one:

    UNTRAINED -> EMBEDDINGS_READY -> CLUSTERS_READY -> TRAINED

The trained models are only published once the last stage succeeds; if any
stage raises, the extractor goes back to UNTRAINED and the error propagates.

    with CRFExtractor() as extractor:
        extractor.train(sequences)
        slots = extractor.extract("play Thriller", intent_def, entities)
"""
import logging
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from slotcrf.clustering import WordClusters
from slotcrf.config import ExtractorConfig
from slotcrf.embeddings import EmbeddingTrainer, WordEmbeddings
from slotcrf.errors import ModelNotTrainedError
from slotcrf.features import FeatureVectorizer
from slotcrf.preprocess import generate_prediction_sequence
from slotcrf.schema import Entity, IntentDefinition, Sequence, SlotCollection
from slotcrf.slots import assemble_slots
from slotcrf.tagger import CRFTagger, Tagger

logger = logging.getLogger(__name__)


class TrainingState(str, Enum):
    UNTRAINED = "untrained"
    EMBEDDINGS_READY = "embeddings_ready"
    CLUSTERS_READY = "clusters_ready"
    TRAINED = "trained"


@dataclass(frozen=True)
class TrainedPipeline:
    embeddings: WordEmbeddings
    clusters: WordClusters
    tagger: CRFTagger


def extract_slots(
    tagger: Tagger,
    text: str,
    intent_def: IntentDefinition,
    entities: Optional[List[Entity]] = None,
) -> SlotCollection:
    entities = entities or []
    seq = generate_prediction_sequence(text, intent_def.name, entities)
    tags = tagger.tag(seq)
    return assemble_slots(seq.tokens, tags, intent_def, entities)


class CRFExtractor:
    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self._workdir = Path(tempfile.mkdtemp(prefix="slotcrf-", dir=self.config.tmp_dir))
        self._state = TrainingState.UNTRAINED
        self._pipeline: Optional[TrainedPipeline] = None

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def is_trained(self) -> bool:
        return self._state == TrainingState.TRAINED

    @property
    def workdir(self) -> Path:
        return self._workdir

    @property
    def pipeline(self) -> TrainedPipeline:
        if self._pipeline is None:
            raise ModelNotTrainedError()
        return self._pipeline

    def train(self, sequences: List[Sequence]) -> "CRFExtractor":
        sequences = list(sequences)
        self._state = TrainingState.UNTRAINED
        self._pipeline = None
        self._workdir.mkdir(parents=True, exist_ok=True)
        try:
            embeddings = EmbeddingTrainer(
                self.config.embedding, self._workdir, seed=self.config.random_state
            ).train(sequences)
            self._state = TrainingState.EMBEDDINGS_READY

            clusters = WordClusters.fit(
                embeddings, sequences, self.config.n_clusters, random_state=self.config.random_state
            )
            self._state = TrainingState.CLUSTERS_READY

            tagger = CRFTagger(self.config.crf, self._workdir, FeatureVectorizer(clusters.cluster_of))
            tagger.train(sequences)
        except Exception as exc:
            logger.error("Slot extractor training failed at %s: %s", self._state.value, exc)
            self._state = TrainingState.UNTRAINED
            raise

        self._pipeline = TrainedPipeline(embeddings=embeddings, clusters=clusters, tagger=tagger)
        self._state = TrainingState.TRAINED
        logger.info("Slot extractor trained on %d sequences", len(sequences))
        return self

    def tag(self, seq: Sequence) -> List[str]:
        return self.pipeline.tagger.tag(seq)

    def extract(
        self,
        text: str,
        intent_def: IntentDefinition,
        entities: Optional[List[Entity]] = None,
    ) -> SlotCollection:
        """
        Returns the extracted slots keyed by slot name, e.g.
            {"artist": Slot(name="artist", value="Kanye West", entity=...),
             "song": [Slot(...), Slot(...)]}
        """
        return extract_slots(self.pipeline.tagger, text, intent_def, entities)

    def close(self):
        """Remove the temp corpus and model files. The extractor is untrained afterwards."""
        self._pipeline = None
        self._state = TrainingState.UNTRAINED
        shutil.rmtree(self._workdir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
