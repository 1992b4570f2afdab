import argparse
import logging
import os

import walign.ibm1 as ibm1
from walign.io import read_corpus
from walign.io import save_vocabulary
from walign.io import save_model
from walign.io import print_moses_format


def argparser():
    """parse command line arguments"""

    parser = argparse.ArgumentParser(prog='walign')

    parser.description = 'Word alignment with IBM model 1'
    parser.formatter_class = argparse.ArgumentDefaultsHelpFormatter

    parser.add_argument('--input', metavar='FILE', required=True,
                        type=str,
                        help='Parallel corpus in fast-align format (source ||| target)')
    parser.add_argument('--output', metavar='PREFIX', required=True,
                        type=str,
                        help='Prefix of output files: PREFIX.source.vocab, PREFIX.target.vocab, '
                             'PREFIX.ibm1 and PREFIX.viterbi')

    cmd_training(parser.add_argument_group('Training'))
    cmd_logging(parser.add_argument_group('Logging'))

    return parser


def non_negative(value):
    """argparse type for counts that may be 0"""
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError('expected a non-negative integer, got %s' % value)
    return n


def cmd_training(group):
    """Command line options for EM"""
    group.add_argument('--iteration', type=non_negative, default=10,
                       help='Number of EM iterations')
    group.add_argument('--shards', type=int, default=1,
                       help='Number of chunks the E-step is split into')


def cmd_logging(group):
    """Command line options for output level"""
    group.add_argument('--save-entropy', default=False, action='store_true',
                       help='Save the negative log-likelihood of each EM iteration to PREFIX.nll')
    group.add_argument('-v', '--verbose', default=0,
                       action='count',
                       help='Verbosity level')


def output_path(prefix, ext):
    return '{0}.{1}'.format(prefix, ext)


def save_nll(history, path):
    with open(path, 'w') as fo:
        for epoch, nll in history:
            print(epoch, nll, file=fo)


def save_viterbi(corpus, model, path):
    """Saves the Viterbi decisions, one line per sentence pair in corpus order"""
    with open(path, 'w', encoding='utf-8') as fo:
        ibm1.viterbi_alignments(corpus, model,
                                callback=lambda s, alignment: print_moses_format(alignment, fo))


def train_and_apply(corpus, args):
    """
    Trains IBM1 on a corpus and saves vocabularies, parameters and Viterbi alignments.

    :param corpus: parallel corpus
    :param args: parsed command line arguments
    :return: trained model
    """
    history = []

    def observe(epoch, nll):
        ibm1.log_nll(epoch, nll)
        history.append((epoch, nll))

    logging.info('Starting %d iterations of IBM1', args.iteration)
    model = ibm1.EM(corpus, args.iteration, callback=observe, shards=args.shards)

    if args.save_entropy:
        save_nll(history, output_path(args.output, 'nll'))

    logging.info('Saving vocabularies')
    with open(output_path(args.output, 'source.vocab'), 'w', encoding='utf-8') as fo:
        save_vocabulary(corpus.source_vocab, fo)
    with open(output_path(args.output, 'target.vocab'), 'w', encoding='utf-8') as fo:
        save_vocabulary(corpus.target_vocab, fo)

    logging.info('Saving parameters')
    with open(output_path(args.output, 'ibm1'), 'wb') as fo:
        save_model(model, fo)

    logging.info('Saving Viterbi decisions')
    save_viterbi(corpus, model, output_path(args.output, 'viterbi'))

    return model


def main(argv=None):
    args = argparser().parse_args(argv)

    if args.verbose == 1:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s', datefmt='%H:%M:%S')
    elif args.verbose > 1:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(levelname)s %(message)s', datefmt='%H:%M:%S')

    directory = os.path.dirname(args.output)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    logging.info('Reading data')
    corpus = read_corpus(args.input)
    logging.info('Vocabulary size: source %d x target %d', corpus.source_vocab.size(), corpus.target_vocab.size())

    return train_and_apply(corpus, args)


if __name__ == '__main__':
    main()
