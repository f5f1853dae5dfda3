# slotcrf/config.py
"""
Hyperparameters for the slot extractor.

The module level constants are the documented defaults; ExtractorConfig bundles
them so an extractor can be built with overrides, e.g.

    ExtractorConfig(n_clusters=8)
    ExtractorConfig.from_dict({"crf": {"c2": 0.1}})
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

# TODO grid search c1/c2 and the embedding dims against a held-out split
K_CLUSTERS = 15
CRF_TRAINER_PARAMS = {
    "algorithm": "lbfgs",
    "c1": 0.0001,
    "c2": 0.01,
    "max_iterations": 500,
    "all_possible_transitions": True,
    "all_possible_states": True,
}
FT_PARAMS = {
    "sg": 1,  # skipgram
    "min_count": 2,
    "bucket": 25000,
    "vector_size": 15,
    "alpha": 0.05,
    "window": 3,
    "min_n": 2,
    "max_n": 6,
    "epochs": 50,
}


@dataclass(frozen=True)
class CRFParams:
    algorithm: str = CRF_TRAINER_PARAMS["algorithm"]
    c1: float = CRF_TRAINER_PARAMS["c1"]
    c2: float = CRF_TRAINER_PARAMS["c2"]
    max_iterations: int = CRF_TRAINER_PARAMS["max_iterations"]
    all_possible_transitions: bool = CRF_TRAINER_PARAMS["all_possible_transitions"]
    all_possible_states: bool = CRF_TRAINER_PARAMS["all_possible_states"]

    def as_kwargs(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class EmbeddingParams:
    sg: int = FT_PARAMS["sg"]
    min_count: int = FT_PARAMS["min_count"]
    bucket: int = FT_PARAMS["bucket"]
    vector_size: int = FT_PARAMS["vector_size"]
    alpha: float = FT_PARAMS["alpha"]
    window: int = FT_PARAMS["window"]
    min_n: int = FT_PARAMS["min_n"]
    max_n: int = FT_PARAMS["max_n"]
    epochs: int = FT_PARAMS["epochs"]

    def as_kwargs(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ExtractorConfig:
    n_clusters: int = K_CLUSTERS
    crf: CRFParams = field(default_factory=CRFParams)
    embedding: EmbeddingParams = field(default_factory=EmbeddingParams)
    # seeds kmeans and the embedding trainer so a retrain gives the same clusters
    random_state: int = 42
    # parent dir for the per-extractor temp dir, None means the system default
    tmp_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractorConfig":
        data = dict(data or {})
        crf = CRFParams(**data.pop("crf", {}))
        embedding = EmbeddingParams(**data.pop("embedding", {}))
        return cls(crf=crf, embedding=embedding, **data)

    def replace(self, **changes) -> "ExtractorConfig":
        return replace(self, **changes)
