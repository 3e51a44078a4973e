"""
Tests for the TF-IDF indexer.
"""
import math
import unittest

from rfsee.common.models import RfcEntry
from rfsee.indexer.indexer_node import TfIdfIndex, quantize_score


def make_entry(number, content, title=None):
    return RfcEntry(
        number=number,
        url=f"https://rfsee.com/{number}",
        title=title or f"Test {number}",
        content=content,
    )


class TestTermFrequencies(unittest.TestCase):
    def setUp(self):
        self.tf_idf = TfIdfIndex()

    def test_tokenize_word_runs(self):
        self.assertEqual(
            self.tf_idf.tokenize("GET /rfc/rfc1.txt HTTP/1.1"),
            ['GET', 'rfc', 'rfc1', 'txt', 'HTTP', '1', '1'],
        )

    def test_case_is_preserved(self):
        term_freqs = self.tf_idf.term_frequencies("Hello hello!")
        self.assertEqual(term_freqs, {'Hello': 0.5, 'hello': 0.5})

    def test_frequencies_sum_to_one(self):
        text = "the quick brown fox jumps over the lazy dog the end"
        term_freqs = self.tf_idf.term_frequencies(text)
        self.assertAlmostEqual(sum(term_freqs.values()), 1.0, delta=1e-9)
        self.assertAlmostEqual(term_freqs['the'], 3 / 11)

    def test_no_words(self):
        self.assertEqual(self.tf_idf.term_frequencies("!!! ..."), {})


class TestQuantizeScore(unittest.TestCase):
    def test_scales_and_rounds(self):
        self.assertEqual(quantize_score(0.25), 250000000)
        self.assertEqual(quantize_score(0.1234567894), 123456789)
        self.assertEqual(quantize_score(0.1234567896), 123456790)

    def test_negative_scores(self):
        self.assertEqual(quantize_score(-0.25), -250000000)
        self.assertEqual(quantize_score(-0.1234567896), -123456790)

    def test_saturates_to_int32(self):
        self.assertEqual(quantize_score(10.0), 2 ** 31 - 1)
        self.assertEqual(quantize_score(-10.0), -2 ** 31)


class TestTfIdfIndex(unittest.TestCase):
    def test_single_document(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "Hello world!"))
        index = tf_idf.finish()

        self.assertEqual(len(index.rfc_details), 1)
        self.assertEqual(set(index.term_scores), {'Hello', 'world'})
        self.assertIn(1, index.term_scores['Hello'])

    def test_duplicate_words_are_distinct_terms(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "Hello hello!"))
        index = tf_idf.finish()

        self.assertEqual(len(index.term_scores), 2)
        processed = tf_idf.processed_rfcs["https://rfsee.com/1"]
        self.assertEqual(processed.term_freqs, {'Hello': 0.5, 'hello': 0.5})

    def test_entry_without_content_is_ignored(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, None))
        index = tf_idf.finish()

        self.assertEqual(index.rfc_details, {})
        self.assertEqual(index.term_scores, {})

    def test_reingesting_url_replaces_document(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "old words", title="Old"))
        tf_idf.add_rfc_entry(make_entry(1, "new text", title="New"))
        index = tf_idf.finish()

        self.assertEqual(len(tf_idf.processed_rfcs), 1)
        self.assertEqual(index.rfc_details[1].title, "New")
        self.assertEqual(set(index.term_scores), {'new', 'text'})

    def test_scores_follow_tf_idf(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "HTTP request HTTP response"))
        tf_idf.add_rfc_entry(make_entry(2, "HTTP over TLS"))
        tf_idf.add_rfc_entry(make_entry(3, "Host software"))
        index = tf_idf.finish()

        self.assertEqual(tf_idf.doc_freqs['HTTP'], 2)
        self.assertEqual(tf_idf.doc_freqs['TLS'], 1)
        for term, docs_with_term in tf_idf.doc_freqs.items():
            self.assertAlmostEqual(tf_idf.idfs[term], math.log10(3 / (docs_with_term + 1e-4)))

        for processed in tf_idf.processed_rfcs.values():
            for term, freq in processed.term_freqs.items():
                expected = quantize_score(freq * tf_idf.idfs[term])
                self.assertEqual(index.term_scores[term][processed.number], expected)

        # 'HTTP' is half of RFC 1 but a third of RFC 2
        self.assertGreater(index.term_scores['HTTP'][1], index.term_scores['HTTP'][2])

    def test_every_posted_rfc_has_details(self):
        tf_idf = TfIdfIndex()
        for number, content in enumerate(["alpha beta", "beta gamma", "gamma delta alpha"], 1):
            tf_idf.add_rfc_entry(make_entry(number, content))
        index = tf_idf.finish()

        for scores in index.term_scores.values():
            for number in scores:
                self.assertIn(number, index.rfc_details)

    def test_term_in_every_document_keeps_nonzero_score(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "HTTP one"))
        tf_idf.add_rfc_entry(make_entry(2, "HTTP two"))
        index = tf_idf.finish()

        # log10(N / (N + epsilon)) is slightly negative rather than zero
        self.assertLess(index.term_scores['HTTP'][1], 0)
        self.assertLess(tf_idf.idfs['HTTP'], 0)

    def test_finish_reports_progress(self):
        tf_idf = TfIdfIndex()
        for number in range(1, 5):
            tf_idf.add_rfc_entry(make_entry(number, f"document {number}"))
        progress = []
        tf_idf.finish(progress.append)

        self.assertEqual(progress, [25, 50, 75, 100])

    def test_finish_on_empty_index(self):
        tf_idf = TfIdfIndex()
        progress = []
        index = tf_idf.finish(progress.append)

        self.assertEqual(index.term_scores, {})
        self.assertEqual(progress, [100])

    def test_finish_twice_gives_same_index(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(make_entry(1, "Hello world"))
        tf_idf.add_rfc_entry(make_entry(2, "Goodbye world"))
        first = dict(tf_idf.finish().term_scores)
        second = tf_idf.finish().term_scores

        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
