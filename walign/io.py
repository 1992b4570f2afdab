"""
Reading corpora and saving/loading vocabularies, models and alignments.

Model binary format (little-endian):

    f_size: u32
    e_size: u32
    t_fe:   f64[f_size * e_size]  (row-major, t_fe[f, e] is at f * e_size + e)
    t_0e:   f64[e_size]

Vocabulary text format:

    line 1:     number of words N
    line k + 2: the word whose id is k, for k = 0..N-1
"""
import numpy as np

from walign.alignment import Alignment
from walign.corpus import Corpus
from walign.ibm1 import IBM1
from walign.vocabulary import Vocabulary


_SIZE = np.dtype('<u4')
_REAL = np.dtype('<f8')
_CHUNK = 1 << 20


def read_corpus(path: str) -> Corpus:
    """
    Read a parallel corpus in fast-align format.

    :param path: path to a UTF-8 text file with one 'source ||| target' pair per line
    :return: Corpus
    """
    # lines end at '\n' only, a stray '\r' is whitespace within the line
    with open(path, 'r', encoding='utf-8', newline='\n') as fi:
        return Corpus.from_lines(fi)


def save_vocabulary(vocab: Vocabulary, ostream):
    """
    Save a vocabulary in id order.
    :param vocab: Vocabulary
    :param ostream: a text stream
    """
    print(vocab.size(), file=ostream)
    for word in vocab:
        print(word, file=ostream)


def load_vocabulary(istream) -> Vocabulary:
    """
    Load a vocabulary saved with save_vocabulary, words get their ids back in the same order.
    :param istream: a text stream
    :return: Vocabulary
    """
    header = istream.readline()
    try:
        size = int(header)
    except ValueError:
        raise ValueError('Expected the vocabulary size in the first line, got %r' % header)
    vocab = Vocabulary()
    for k, line in enumerate(istream):
        word = line.rstrip('\n')
        if vocab.get_or_create_id(word) != k:
            raise ValueError('Duplicate word in vocabulary (line %d): %s' % (k + 2, word))
    if vocab.size() != size:
        raise ValueError('Expected %d words, found %d' % (size, vocab.size()))
    return vocab


def save_model(model: IBM1, ostream):
    """
    Save IBM1 parameters in binary format.
    :param model: IBM1
    :param ostream: a binary stream
    """
    ostream.write(np.array(model.t_fe.shape, dtype=_SIZE).tobytes())
    ostream.write(np.ascontiguousarray(model.t_fe, dtype=_REAL).tobytes())
    ostream.write(np.ascontiguousarray(model.t_0e, dtype=_REAL).tobytes())


def _read_at_most(istream, n_bytes: int) -> bytes:
    """Read up to n_bytes in bounded chunks (the size header of a corrupt file may be arbitrarily large)"""
    chunks = []
    while n_bytes > 0:
        chunk = istream.read(min(n_bytes, _CHUNK))
        if not chunk:
            break
        chunks.append(chunk)
        n_bytes -= len(chunk)
    return b''.join(chunks)


def load_model(istream) -> IBM1:
    """
    Load IBM1 parameters saved with save_model.
    :param istream: a binary stream
    :return: IBM1
    """
    header = istream.read(2 * _SIZE.itemsize)
    if len(header) != 2 * _SIZE.itemsize:
        raise ValueError('Truncated model header')
    f_size, e_size = (int(x) for x in np.frombuffer(header, dtype=_SIZE))
    n_values = f_size * e_size + e_size
    payload = _read_at_most(istream, n_values * _REAL.itemsize)
    if len(payload) != n_values * _REAL.itemsize:
        raise ValueError('Expected %d parameters for a %dx%d model, found %d bytes' % (n_values, f_size, e_size,
                                                                                      len(payload)))
    if istream.read(1):
        raise ValueError('Trailing data after a %dx%d model' % (f_size, e_size))
    values = np.frombuffer(payload, dtype=_REAL).astype(np.float64)
    t_fe = values[:f_size * e_size].reshape(f_size, e_size)
    t_0e = values[f_size * e_size:]
    return IBM1(t_fe, t_0e)


def print_moses_format(alignment: Alignment, ostream):
    """
    Print alignment links for a sentence, e.g. '0-0 1-2', where each link is source-target (0-based).
    A sentence whose target words are all aligned to NULL gets an empty line.
    :param alignment: Alignment
    :param ostream: where we print alignments to
    """
    print(str(alignment), file=ostream)
