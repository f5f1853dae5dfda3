# slotcrf/features.py
"""
Per-token CRF features over a 3 token window.

Features are plain strings (crfsuite treats each one as a binary attribute):

    w[-1]intent=play_song  w[-1]low  w[-1]cluster=3  w[-1]entity=none
    w[0]intent=play_song   w[0]title  w[0]entity=artist
    w[1]intent=play_song   w[1]title  w[1]cluster=7  w[1]entity=artist

The current token never gets a cluster feature so the tagger cannot key on
the clustered identity of the word it is labelling.
"""
from typing import Callable, List, Optional

from slotcrf.schema import Sequence, Token

BOS = "w[0]bos"
EOS = "w[0]eos"
PREV, CURRENT, NEXT = "w[-1]", "w[0]", "w[1]"


def is_title(word: str) -> bool:
    return len(word) > 1 and word[0] == word[0].upper() and word[1] == word[1].lower()


def token_features(token: Token, intent: str, prefix: str, cluster: Optional[int] = None) -> List[str]:
    word = token.value
    feats = [f"{prefix}intent={intent}"]
    if word == word.lower():
        feats.append(f"{prefix}low")
    if word == word.upper():
        feats.append(f"{prefix}up")
    if is_title(word):
        feats.append(f"{prefix}title")
    if cluster is not None:
        feats.append(f"{prefix}cluster={cluster}")
    entities = sorted(token.matched_entities) or ["none"]
    feats.extend(f"{prefix}entity={ent}" for ent in entities)
    return feats


class FeatureVectorizer:
    """
    cluster_lookup maps a word to its cluster id, normally WordClusters.cluster_of.
    """

    def __init__(self, cluster_lookup: Callable[[str], int]):
        self.cluster_lookup = cluster_lookup

    def _neighbour(self, token: Token, intent: str, prefix: str) -> List[str]:
        return token_features(token, intent, prefix, self.cluster_lookup(token.value))

    def word2features(self, tokens, intent: str, i: int) -> List[str]:
        if i == 0:
            prev = [BOS]
        else:
            prev = self._neighbour(tokens[i - 1], intent, PREV)
        current = token_features(tokens[i], intent, CURRENT)
        if i == len(tokens) - 1:
            nxt = [EOS]
        else:
            nxt = self._neighbour(tokens[i + 1], intent, NEXT)
        return prev + current + nxt

    def sent2features(self, seq: Sequence) -> List[List[str]]:
        return [self.word2features(seq.tokens, seq.intent, i) for i in range(len(seq.tokens))]


def sent2labels(seq: Sequence) -> List[str]:
    return [t.label for t in seq.tokens]
