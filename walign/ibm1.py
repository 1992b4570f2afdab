"""
IBM model 1 with a NULL word on the source side.

Generative story, for a source sentence f_1^m and a target sentence e_1^n:

    a_i ~ Uniform(0..m) for i=1..n         (0 stands for NULL)
    e_i ~ t(E | f_{a_i})  for i=1..n

Parameters are two dense tables:

    t_fe[f, e] = P(e|f)     shape (|V_F|, |V_E|)
    t_0e[e]    = P(e|NULL)  shape (|V_E|,)
"""
import logging

import numpy as np

from walign.alignment import Alignment
from walign.corpus import Corpus, SentencePair
from walign.dist import uniform_lexical, uniform_null, counts_lexical, counts_null


# smoothing added to every normaliser so that words that never receive mass do not divide by zero
EPSILON = 1e-30


class IBM1:

    def __init__(self, t_fe: np.array, t_0e: np.array):
        if t_fe.ndim != 2 or t_0e.ndim != 1 or t_fe.shape[1] != t_0e.shape[0]:
            raise ValueError('Incompatible shapes: t_fe %s and t_0e %s' % (t_fe.shape, t_0e.shape))
        self.t_fe = t_fe
        self.t_0e = t_0e

    @classmethod
    def uniform(cls, f_vocab_size: int, e_vocab_size: int) -> 'IBM1':
        """All parameters set to 1/(|V_E| + 1)"""
        return cls(uniform_lexical(f_vocab_size, e_vocab_size), uniform_null(e_vocab_size))

    def f_size(self) -> int:
        return self.t_fe.shape[0]

    def e_size(self) -> int:
        return self.t_fe.shape[1]

    def __repr__(self):
        return 'IBM1(f_size=%d, e_size=%d)' % self.t_fe.shape


class SufficientStatistics:
    """
    Expected counts gathered in the E-step.

        c_fe[f, e] = count(f, e)
        c_0e[e]    = count(NULL, e)
        c_f[f]     = count(f)     = sum_e count(f, e)
        c_0        = count(NULL)  = sum_e count(NULL, e)

    Statistics of disjoint parts of a corpus can be merged by summation,
    which is what allows the E-step to be sharded.
    """

    def __init__(self, f_vocab_size: int, e_vocab_size: int, smoothing=EPSILON):
        self.c_fe = counts_lexical(f_vocab_size, e_vocab_size)
        self.c_0e = counts_null(e_vocab_size)
        self.c_f = np.full(f_vocab_size, smoothing, dtype=np.float64)
        self.c_0 = smoothing
        # negative log-likelihood (base 2), for diagnostics only
        self.nll = 0.0

    def observe(self, pair: SentencePair, model: IBM1):
        """
        Gather expected counts for one sentence pair under the current parameters.

        :param pair: source and target word ids
        :param model: current parameters (not modified)
        """
        f_snt, e_snt = pair.source, pair.target
        m, n = f_snt.size, e_snt.size
        if n == 0:
            return
        # t[j, i] = t(e_i|f_j) for every source occurrence j and target occurrence i
        t = model.t_fe[np.ix_(f_snt, e_snt)]  # shape: (m, n)
        t0 = model.t_0e[e_snt]  # shape: (n,)
        # Z_i = \sum_j t(e_i|f_j) + t(e_i|NULL)
        z = t.sum(0) + t0 + EPSILON  # shape: (n,)

        # log2 \prod_i Z_i minus the uniform prior over the m + 1 candidate positions
        self.nll -= np.log2(z).sum() - n * np.log2(m + 1)

        # posterior P(a_i=j|f,e) = t(e_i|f_j) / Z_i
        posterior = t / z  # shape: (m, n)
        posterior0 = t0 / z  # shape: (n,)
        np.add.at(self.c_fe, (f_snt[:, np.newaxis], e_snt[np.newaxis, :]), posterior)
        np.add.at(self.c_f, f_snt, posterior.sum(1))
        np.add.at(self.c_0e, e_snt, posterior0)
        self.c_0 += posterior0.sum()

    def merge(self, other: 'SufficientStatistics'):
        """Element-wise sum of two sets of statistics (in place)"""
        self.c_fe += other.c_fe
        self.c_0e += other.c_0e
        self.c_f += other.c_f
        self.c_0 += other.c_0
        self.nll += other.nll
        return self


def e_step(pairs, model: IBM1, smoothing=0.0) -> SufficientStatistics:
    """
    The E-step gathers expected counts of lexical events.

    :param pairs: an iterable of sentence pairs (a whole corpus or a shard of it)
    :param model: current parameters
    :param smoothing: initial value of the normalisers c_f and c_0
    :return: SufficientStatistics
    """
    stats = SufficientStatistics(model.f_size(), model.e_size(), smoothing)
    for pair in pairs:
        stats.observe(pair, model)
    return stats


def m_step(stats: SufficientStatistics) -> IBM1:
    """
    The M-step simply renormalises expected counts.

    :param stats: expected counts
    :return: locally optimum parameters
    """
    c_f = stats.c_f[:, np.newaxis]
    t_fe = np.divide(stats.c_fe, c_f, out=np.zeros_like(stats.c_fe), where=c_f > 0)
    if stats.c_0 > 0:
        t_0e = stats.c_0e / stats.c_0
    else:
        t_0e = np.zeros_like(stats.c_0e)
    return IBM1(t_fe, t_0e)


def make_shards(pairs: list, n_shards: int) -> list:
    """Split a list of sentence pairs into at most n_shards contiguous non-empty chunks"""
    if n_shards < 1:
        raise ValueError('Expected a positive number of shards, got %d' % n_shards)
    size = max(1, -(-len(pairs) // n_shards))
    return [pairs[a:a + size] for a in range(0, len(pairs), size)]


def log_nll(epoch: int, nll: float):
    logging.info('Epoch %d NLL %f', epoch, nll)


def EM(corpus: Corpus, iterations: int, model: IBM1 = None, callback=log_nll, shards=1) -> IBM1:
    """
    Estimate IBM1 parameters via EM for a number of iterations starting from uniform parameters.

    :param corpus: parallel corpus
    :param iterations: number of EM iterations (0 returns the initial model)
    :param model: initial parameters (defaults to uniform ones sized from the corpus vocabularies)
    :param callback: called after each iteration as callback(epoch, nll), with 1-based epochs
    :param shards: number of chunks the E-step is split into, their counts are summed before the M-step
    :return: IBM1
    """
    if model is None:
        model = IBM1.uniform(corpus.source_vocab.size(), corpus.target_vocab.size())
    chunks = make_shards(list(corpus.itersentences()), shards)
    logging.debug('E-step over %d shard(s)', len(chunks))

    for epoch in range(1, iterations + 1):
        stats = SufficientStatistics(model.f_size(), model.e_size())
        for chunk in chunks:
            stats.merge(e_step(chunk, model))
        model = m_step(stats)
        if callback is not None:
            callback(epoch, stats.nll)

    return model


def viterbi_alignment(pair: SentencePair, model: IBM1) -> Alignment:
    """
    Best alignment link for each target word.

    Under IBM1 alignment links are independent of one another, so picking the best source position
    for each target position independently gives the best alignment.
    Ties go to the leftmost source position and to NULL over any source position.

    :param pair: source and target word ids
    :param model: parameters
    :return: Alignment (edges in target order, NULL links are omitted)
    """
    alignment = Alignment()
    f_snt = pair.source
    if f_snt.size == 0:
        return alignment
    for i, e in enumerate(pair.target):
        scores = model.t_fe[f_snt, e]
        j = int(scores.argmax())  # first occurrence of the maximum
        if scores[j] > model.t_0e[e]:
            alignment.add(j, i)
    return alignment


def viterbi_alignments(corpus: Corpus, model: IBM1, callback):
    """
    Decode every sentence pair.

    :param corpus: parallel corpus
    :param model: parameters
    :param callback: called for each sentence pair in corpus order as callback(s, alignment)
    """
    for s, pair in enumerate(corpus.itersentences()):
        callback(s, viterbi_alignment(pair, model))
