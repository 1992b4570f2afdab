import re
from collections import namedtuple

from walign.vocabulary import Vocabulary


SEPARATOR = '|||'

# characters with the Unicode White_Space property (str.split would also break on \x1c-\x1f)
WHITESPACE = re.compile('[\t\n\x0b\x0c\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+')


class CorpusFormatError(ValueError):
    """A line of a parallel corpus that cannot be split into a source and a target side"""

    def __init__(self, line_number: int, line: str = ''):
        super(CorpusFormatError, self).__init__('Separator "%s" not found in line %d' % (SEPARATOR, line_number))
        self.line_number = line_number
        self.line = line


# A pair of sentences, each one a numpy array of word ids.
# The source side is what we condition on, the target side is what we generate.
SentencePair = namedtuple('SentencePair', ['source', 'target'])


def tokenize(line: str, line_number: int) -> (list, list):
    """
    Split a line of a fast-align corpus into source and target tokens.

    Tokens are separated by Unicode whitespace and the sides are separated by the first '|||' token.

    :param line: a line of text
    :param line_number: 1-based position of the line (used in error messages)
    :return: source tokens, target tokens
    """
    words = [word for word in WHITESPACE.split(line) if word]
    try:
        sep = words.index(SEPARATOR)
    except ValueError:
        raise CorpusFormatError(line_number, line)
    return words[:sep], words[sep + 1:]


class Corpus:
    """
    A parallel corpus is a collection of sentence pairs.

    Internally, words are represented as integers for compactness and quick indexing using numpy arrays.
    Each side has its own vocabulary.
    The position of a pair in the corpus is its sentence id, which is preserved end to end.
    """

    def __init__(self, source_vocab: Vocabulary = None, target_vocab: Vocabulary = None):
        self.source_vocab = source_vocab if source_vocab is not None else Vocabulary()
        self.target_vocab = target_vocab if target_vocab is not None else Vocabulary()
        self._pairs = []

    @classmethod
    def from_lines(cls, lines) -> 'Corpus':
        """
        Creates a corpus from lines in fast-align format, e.g.

            the cat ||| le chat

        :param lines: an iterable of strings (an open file will do)
        :return: Corpus
        """
        corpus = cls()
        for n, line in enumerate(lines, 1):
            source_words, target_words = tokenize(line, n)
            corpus.add(source_words, target_words)
        return corpus

    def add(self, source_words, target_words) -> SentencePair:
        """Encode and append a sentence pair"""
        pair = SentencePair(self.source_vocab.encode(source_words),
                            self.target_vocab.encode(target_words))
        self._pairs.append(pair)
        return pair

    def pair(self, s: int) -> SentencePair:
        return self._pairs[s]

    def itersentences(self):
        """Iterates over sentence pairs"""
        return iter(self._pairs)

    def decode(self, pair: SentencePair) -> (list, list):
        """Translate a sentence pair back to strings"""
        return self.source_vocab.decode(pair.source), self.target_vocab.decode(pair.target)

    def n_sentences(self) -> int:
        return len(self._pairs)

    def corpus_size(self) -> int:
        """Number of target tokens in the corpus"""
        return sum(pair.target.size for pair in self._pairs)

    def __len__(self):
        return len(self._pairs)

    def __iter__(self):
        return iter(self._pairs)
