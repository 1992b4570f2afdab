import os
import shutil
import tempfile
import unittest

import numpy as np

from walign.aligner import main
from walign.corpus import CorpusFormatError
from walign.io import load_model, load_vocabulary


class AlignerTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.input = os.path.join(self.tmp, 'corpus.txt')
        with open(self.input, 'w', encoding='utf-8') as fo:
            fo.write('the cat ||| le chat\nthe dog ||| le chien\n')
        self.prefix = os.path.join(self.tmp, 'out', 'model')

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def run_main(self, *args):
        return main(['--input', self.input, '--output', self.prefix] + list(args))

    def read(self, ext):
        with open('{0}.{1}'.format(self.prefix, ext), 'r', encoding='utf-8') as fi:
            return fi.read()

    def test_untrained(self):
        self.run_main('--iteration', '0')
        self.assertEqual('3\nthe\ncat\ndog\n', self.read('source.vocab'))
        self.assertEqual('3\nle\nchat\nchien\n', self.read('target.vocab'))
        # no target word beats NULL under uniform parameters
        self.assertEqual('\n\n', self.read('viterbi'))
        with open('{0}.ibm1'.format(self.prefix), 'rb') as fi:
            model = load_model(fi)
        self.assertTrue(np.all(model.t_fe == 0.25))
        self.assertTrue(np.all(model.t_0e == 0.25))

    def test_trained(self):
        model = self.run_main('--iteration', '5')
        with open('{0}.ibm1'.format(self.prefix), 'rb') as fi:
            loaded = load_model(fi)
        self.assertTrue(np.array_equal(model.t_fe, loaded.t_fe))
        with open('{0}.source.vocab'.format(self.prefix), 'r', encoding='utf-8') as fi:
            source_vocab = load_vocabulary(fi)
        with open('{0}.target.vocab'.format(self.prefix), 'r', encoding='utf-8') as fi:
            target_vocab = load_vocabulary(fi)
        self.assertGreater(loaded.t_fe[source_vocab.lookup('the'), target_vocab.lookup('le')], 0.25)
        lines = self.read('viterbi').split('\n')
        self.assertEqual(3, len(lines))  # two sentences and the final newline
        for line in lines[:2]:
            self.assertIn('1-1', line.split())

    def test_default_iterations(self):
        history = []
        self.run_main('--save-entropy')
        for line in self.read('nll').splitlines():
            epoch, nll = line.split()
            history.append(int(epoch))
        self.assertEqual(list(range(1, 11)), history)

    def test_shards(self):
        a = self.run_main('--iteration', '3')
        b = self.run_main('--iteration', '3', '--shards', '2')
        np.testing.assert_allclose(a.t_fe, b.t_fe, rtol=1e-12)

    def test_missing_separator(self):
        with open(self.input, 'a', encoding='utf-8') as fo:
            fo.write('no separator\n')
        with self.assertRaises(CorpusFormatError) as cm:
            self.run_main()
        self.assertEqual(3, cm.exception.line_number)
        # nothing was trained or written
        self.assertFalse(os.path.exists('{0}.ibm1'.format(self.prefix)))

    def test_missing_input(self):
        self.assertRaises(OSError, main, ['--input', os.path.join(self.tmp, 'nope'), '--output', self.prefix])

    def test_required_arguments(self):
        with self.assertRaises(SystemExit):
            main(['--input', self.input])

    def test_negative_iterations(self):
        with self.assertRaises(SystemExit) as cm:
            self.run_main('--iteration', '-1')
        self.assertEqual(2, cm.exception.code)
        # rejected before the output directory is created
        self.assertFalse(os.path.exists(os.path.dirname(self.prefix)))


if __name__ == '__main__':
    unittest.main()
