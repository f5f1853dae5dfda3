# slotcrf/errors.py
"""Exceptions raised by the slot extractor."""


class SlotExtractorError(Exception):
    """Base class for slot extractor errors."""


class ModelNotTrainedError(SlotExtractorError, RuntimeError):
    """Inference was requested before train() completed successfully."""

    def __init__(self, message="Model not trained, please call train() before"):
        super().__init__(message)


class TrainingError(SlotExtractorError, ValueError):
    """The training data cannot produce a model (empty corpus, too few words to cluster...)."""
