# slotcrf/clustering.py
import logging
from typing import Dict, List

import numpy as np
from sklearn.cluster import KMeans

from slotcrf.errors import TrainingError
from slotcrf.schema import Sequence

logger = logging.getLogger(__name__)


def vocabulary(sequences: List[Sequence]) -> List[str]:
    """Distinct lowercase token values, in first-seen order."""
    seen = {}
    for seq in sequences:
        for t in seq.tokens:
            seen.setdefault(t.value.lower(), None)
    return list(seen)


class WordClusters:
    """
    K-means partition of the word vector space.
    cluster_of() is memoized per word since it is called for every
    neighbouring token during feature extraction.
    """

    def __init__(self, embeddings, kmeans: KMeans):
        self.embeddings = embeddings
        self.kmeans = kmeans
        self._cache: Dict[str, int] = {}

    @property
    def n_clusters(self) -> int:
        return self.kmeans.n_clusters

    @classmethod
    def fit(cls, embeddings, sequences: List[Sequence], n_clusters: int, random_state: int = 42) -> "WordClusters":
        words = vocabulary(sequences)
        if len(words) < n_clusters:
            raise TrainingError(
                f"need at least {n_clusters} distinct words to build {n_clusters} clusters, got {len(words)}"
            )
        data = embeddings.vectors(words)
        logger.info("Clustering %d words into %d clusters", len(words), n_clusters)
        km = KMeans(n_clusters=n_clusters, random_state=random_state, n_init="auto")
        km.fit(data)
        return cls(embeddings, km)

    def nearest(self, vector) -> int:
        vector = np.asarray(vector, dtype=self.kmeans.cluster_centers_.dtype).reshape(1, -1)
        return int(self.kmeans.predict(vector)[0])

    def cluster_of(self, word: str) -> int:
        key = word.lower()
        if key not in self._cache:
            self._cache[key] = self.nearest(self.embeddings.vector(key))
        return self._cache[key]
