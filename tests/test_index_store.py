"""
Tests for reading and writing the index file.
"""
import json
import os
import shutil
import tempfile
import unittest

from rfsee.common.errors import ParseError, RfseeIOError
from rfsee.common.models import Index, RfcDetails, RfcEntry
from rfsee.indexer.index_store import load_index, save_index
from rfsee.indexer.indexer_node import TfIdfIndex


class TestIndexStore(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, 'index.json')

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_raw(self, text):
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(text)

    def test_round_trip_built_index(self):
        tf_idf = TfIdfIndex()
        tf_idf.add_rfc_entry(RfcEntry(1, "https://rfsee.com/1", "Test 1", "Hello world"))
        tf_idf.add_rfc_entry(RfcEntry(2, "https://rfsee.com/2", "Test 2", "Goodbye car été"))
        index = tf_idf.finish()

        save_index(index, self.path)
        self.assertEqual(load_index(self.path), index)

    def test_rfc_numbers_are_written_as_strings(self):
        index = Index(
            rfc_details={8446: RfcDetails(title="TLS 1.3")},
            term_scores={'TLS': {8446: -42}},
        )
        save_index(index, self.path)

        with open(self.path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data, {
            'rfc_details': {'8446': {'title': "TLS 1.3"}},
            'term_scores': {'TLS': {'8446': -42}},
        })

    def test_creates_parent_directories(self):
        path = os.path.join(self.temp_dir, 'nested', 'dir', 'index.json')
        save_index(Index(), path)
        self.assertEqual(load_index(path), Index())

    def test_missing_file(self):
        with self.assertRaises(RfseeIOError):
            load_index(os.path.join(self.temp_dir, 'missing.json'))

    def test_invalid_json(self):
        self.write_raw('{"rfc_details": ')
        with self.assertRaises(ParseError):
            load_index(self.path)

    def test_score_range_bounds_are_accepted(self):
        self.write_raw('{"rfc_details": {}, "term_scores": {"TLS": {"1": 2147483647, "-2": -2147483648}}}')
        self.assertEqual(load_index(self.path).term_scores, {'TLS': {1: 2147483647, -2: -2147483648}})

    def test_index_from_dict_round_trip(self):
        index = Index(
            rfc_details={8446: RfcDetails(title="TLS 1.3"), 9110: RfcDetails(title="HTTP Semantics")},
            term_scores={'TLS': {8446: 17}, 'HTTP': {9110: -3, 8446: 0}},
        )
        self.assertEqual(Index.from_dict(index.to_dict()), index)

    def test_index_from_dict_rejects_non_string_keys(self):
        with self.assertRaises(ParseError):
            Index.from_dict({'rfc_details': {1: {'title': "a"}}, 'term_scores': {}})

    def test_wrong_shape(self):
        for document in (
            '[]',
            '{"rfc_details": {}}',
            '{"rfc_details": {"1": "title"}, "term_scores": {}}',
            '{"rfc_details": {"one": {"title": "x"}}, "term_scores": {}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": "high"}}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": 1.5}}}',
            '{"rfc_details": {}, "term_scores": {"TLS": [1, 2]}}',
            '{"rfc_details": {"1": {"title": "a"}, "01": {"title": "b"}}, "term_scores": {}}',
            '{"rfc_details": {" 1": {"title": "a"}}, "term_scores": {}}',
            '{"rfc_details": {"+1": {"title": "a"}}, "term_scores": {}}',
            '{"rfc_details": {"-0": {"title": "a"}}, "term_scores": {}}',
            '{"rfc_details": {"1": {"title": "a"}, "1": {"title": "b"}}, "term_scores": {}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": 1, "01": 2}}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": 1, "1": 2}}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": 3000000000}}}',
            '{"rfc_details": {}, "term_scores": {"TLS": {"1": -2147483649}}}',
        ):
            with self.subTest(document=document):
                self.write_raw(document)
                with self.assertRaises(ParseError):
                    load_index(self.path)


if __name__ == '__main__':
    unittest.main()
