# tests/test_preprocess.py
from slotcrf.preprocess import (
    generate_prediction_sequence,
    generate_training_sequence,
    strip_slot_markup,
    tokenize,
)
from slotcrf.schema import BIO, Entity


def test_tokenize_keeps_char_offsets():
    text = "play Thriller by Michael Jackson"
    tokens = tokenize(text)
    assert [t[0] for t in tokens] == ["play", "Thriller", "by", "Michael", "Jackson"]
    for value, start, end in tokens:
        assert text[start:end] == value


def test_strip_slot_markup():
    text, spans = strip_slot_markup("play [Thriller](song) by [Michael Jackson](artist)")
    assert text == "play Thriller by Michael Jackson"
    assert spans == [(5, 13, "song"), (17, 32, "artist")]
    assert text[17:32] == "Michael Jackson"


def test_training_sequence_is_bio_tagged():
    seq = generate_training_sequence("put on [Kanye West](artist) now", "play_song")
    assert seq.intent == "play_song"
    assert seq.text == "put on Kanye West now"
    assert [t.value for t in seq.tokens] == ["put", "on", "Kanye", "West", "now"]
    assert [t.tag for t in seq.tokens] == [BIO.OUT, BIO.OUT, BIO.BEGINNING, BIO.INSIDE, BIO.OUT]
    assert [t.label for t in seq.tokens] == ["o", "o", "B-artist", "I-artist", "o"]
    assert [t.cannonical for t in seq.tokens] == ["put", "on", "artist", "artist", "now"]


def test_training_sequence_offsets_increase():
    seq = generate_training_sequence("play [Thriller](song) and [Bad](song)", "play_song")
    ends = [-1] + [t.end for t in seq.tokens]
    for prev_end, token in zip(ends, seq.tokens):
        assert token.start > prev_end
        assert token.end > token.start


def test_prediction_sequence_matches_covering_entities():
    text = "play Billie Jean"
    entities = [Entity(name="song", start=5, end=16, value="Billie Jean")]
    seq = generate_prediction_sequence(text, "play_song", entities)
    assert [t.matched_entities for t in seq.tokens] == [frozenset(), {"song"}, {"song"}]
    assert all(t.tag == BIO.OUT for t in seq.tokens)


def test_prediction_sequence_of_empty_text():
    seq = generate_prediction_sequence("", "play_song")
    assert len(seq) == 0
