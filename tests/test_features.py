# tests/test_features.py
from slotcrf.features import BOS, EOS, FeatureVectorizer, is_title, sent2labels, token_features
from slotcrf.preprocess import generate_training_sequence
from slotcrf.schema import Sequence, Token


def _tokens(*words):
    out, pos = [], 0
    for w in words:
        out.append(Token(value=w, start=pos, end=pos + len(w)))
        pos += len(w) + 1
    return out


def test_case_flags():
    assert token_features(Token("play", 0, 4), "i", "w[0]") == ["w[0]intent=i", "w[0]low", "w[0]entity=none"]
    assert token_features(Token("USA", 0, 3), "i", "w[0]") == ["w[0]intent=i", "w[0]up", "w[0]entity=none"]
    assert token_features(Token("Kanye", 0, 5), "i", "w[0]") == ["w[0]intent=i", "w[0]title", "w[0]entity=none"]
    # digits are both lower and upper case
    assert token_features(Token("3", 0, 1), "i", "w[0]") == ["w[0]intent=i", "w[0]low", "w[0]up", "w[0]entity=none"]


def test_single_upper_char_is_not_title():
    assert not is_title("A")
    assert is_title("Ab")
    assert not is_title("AB")


def test_entity_features_one_per_matched_entity():
    token = Token("Jean", 0, 4, matched_entities=frozenset({"song", "person"}))
    feats = token_features(token, "i", "w[1]", cluster=2)
    assert feats == ["w[1]intent=i", "w[1]title", "w[1]cluster=2", "w[1]entity=person", "w[1]entity=song"]


def test_window_in_middle_of_sequence():
    vec = FeatureVectorizer(lambda word: 7)
    tokens = _tokens("play", "Kanye", "West")
    assert vec.word2features(tokens, "play_song", 1) == [
        "w[-1]intent=play_song", "w[-1]low", "w[-1]cluster=7", "w[-1]entity=none",
        "w[0]intent=play_song", "w[0]title", "w[0]entity=none",
        "w[1]intent=play_song", "w[1]title", "w[1]cluster=7", "w[1]entity=none",
    ]


def test_first_and_last_tokens_get_sequence_markers():
    vec = FeatureVectorizer(lambda word: 1)
    tokens = _tokens("play", "Thriller")
    first = vec.word2features(tokens, "p", 0)
    last = vec.word2features(tokens, "p", 1)
    assert first[0] == BOS
    assert not any(f.startswith("w[-1]") for f in first)
    assert last[-1] == EOS
    assert not any(f.startswith("w[1]") for f in last)


def test_single_token_sequence():
    vec = FeatureVectorizer(lambda word: 0)
    assert vec.word2features(_tokens("hello"), "greet", 0) == [
        BOS, "w[0]intent=greet", "w[0]low", "w[0]entity=none", EOS,
    ]


def test_center_token_never_clustered():
    looked_up = []

    def lookup(word):
        looked_up.append(word)
        return 0

    vec = FeatureVectorizer(lookup)
    feats = vec.word2features(_tokens("play", "Thriller", "now"), "p", 1)
    assert looked_up == ["play", "now"]
    assert not any(f.startswith("w[0]cluster") for f in feats)


def test_sent2features_keeps_token_order():
    vec = FeatureVectorizer(lambda word: len(word))
    seq = Sequence(tokens=_tokens("a", "bb", "ccc"), intent="x")
    feats = vec.sent2features(seq)
    assert len(feats) == 3
    assert "w[1]cluster=2" in feats[0]
    assert "w[-1]cluster=2" in feats[2]


def test_sent2labels():
    seq = generate_training_sequence("play [Kanye West](artist)", "play_song")
    assert sent2labels(seq) == ["o", "B-artist", "I-artist"]
