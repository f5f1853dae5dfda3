# tests/conftest.py
import pytest

from slotcrf.config import ExtractorConfig
from slotcrf.preprocess import generate_training_sequence
from slotcrf.schema import IntentDefinition, SlotDefinition

UTTERANCES = [
    "play [Thriller](song) by [Michael Jackson](artist)",
    "I want to hear [Bad](song) from [Michael Jackson](artist)",
    "put on [Kanye West](artist)",
    "can you play some [Daft Punk](artist) please",
    "play [Thriller](song) and [Bad](song)",
    "I would like to listen to [Stronger](song) by [Kanye West](artist)",
    "start the song [Get Lucky](song)",
    "queue [Around the World](song) from [Daft Punk](artist) next",
    "please play [Billie Jean](song)",
    "something by [Adele](artist) would be nice",
]


@pytest.fixture
def play_song():
    return IntentDefinition(
        name="play_song",
        slots=[SlotDefinition(name="song", entity="song"), SlotDefinition(name="artist", entity="artist")],
    )


@pytest.fixture
def training_sequences():
    # each utterance twice so every word clears the embedding min_count
    return [generate_training_sequence(u, "play_song") for u in UTTERANCES * 2]


@pytest.fixture
def fast_config(tmp_path):
    return ExtractorConfig.from_dict({
        "crf": {"max_iterations": 50},
        "embedding": {"epochs": 5},
        "tmp_dir": str(tmp_path),
    })
