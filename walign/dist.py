import numpy as np


def uniform_lexical(f_vocab_size, e_vocab_size, value=None):
    """
    This returns a collection of |V_F| categorical distributions,
        each of which defined over the entire vocabulary of target words.
    The distribution is initialised uniformly unless a certain value is given.

    :param f_vocab_size: size of source vocabulary, i.e. |V_F|
    :param e_vocab_size: size of target vocabulary, i.e. |V_E|
    :param value: constant value for t(e|f) which defaults to 1/(|V_E| + 1)
    :return: |V_F| x |V_E| numpy array
    """
    # the extra outcome accounts for the NULL alternative
    if value is None:
        value = 1.0 / (e_vocab_size + 1)
    return np.full((f_vocab_size, e_vocab_size), value, dtype=np.float64)


def uniform_null(e_vocab_size, value=None):
    """
    A single categorical t(e|NULL) over target words, uniform unless a value is given.

    :param e_vocab_size: size of target vocabulary, i.e. |V_E|
    :param value: constant value which defaults to 1/(|V_E| + 1)
    :return: |V_E| numpy array
    """
    if value is None:
        value = 1.0 / (e_vocab_size + 1)
    return np.full(e_vocab_size, value, dtype=np.float64)


def counts_lexical(f_vocab_size, e_vocab_size):
    """
    This returns a 0-initialised matrix of partial counts.
    It is just wraper around uniform_lexical.
    """
    return uniform_lexical(f_vocab_size, e_vocab_size, 0.0)


def counts_null(e_vocab_size):
    return uniform_null(e_vocab_size, 0.0)
