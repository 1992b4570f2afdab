import numpy as np


class Vocabulary:
    """
    A bidirectional map between words and integers.

    Ids are handed out in the order words are first seen, starting from 0.
    The vocabulary only ever grows: words are never removed and ids are never reused,
    thus the ids of a vocabulary of size n are always exactly 0..n-1.
    """

    def __init__(self, words=None):
        """
        :param words: optional sequence of words to be added in order (duplicates are ignored)
        """
        self._stoi = {}
        self._itos = []
        if words is not None:
            for word in words:
                self.get_or_create_id(word)

    def get_or_create_id(self, word: str) -> int:
        """
        Return the id of a word, adding it to the vocabulary if necessary.

        :param word: a string
        :return: its integer id
        """
        i = self._stoi.get(word)
        if i is None:
            i = len(self._itos)
            self._stoi[word] = i
            self._itos.append(word)
        return i

    def lookup(self, word: str) -> int:
        """Return the id of a known word (raises KeyError otherwise)"""
        return self._stoi[word]

    def translate(self, i: int) -> str:
        """
        Translate an integer back to a string.
        :param i: index representing the word
        :return: original string
        """
        return self._itos[i]

    def encode(self, words) -> np.array:
        """Map a sequence of words to an array of ids, adding new words as they come"""
        return np.array([self.get_or_create_id(word) for word in words], dtype=int)

    def decode(self, ids) -> list:
        return [self._itos[i] for i in ids]

    def size(self) -> int:
        """Number of unique words"""
        return len(self._itos)

    def __len__(self):
        return len(self._itos)

    def __contains__(self, word):
        return word in self._stoi

    def __iter__(self):
        """Iterates over words in ascending id order"""
        return iter(self._itos)

    def __repr__(self):
        return 'Vocabulary(size=%d)' % len(self._itos)
