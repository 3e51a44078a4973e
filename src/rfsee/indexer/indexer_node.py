"""
TF-IDF indexer for RFC documents.

Documents are added one at a time; each is tokenized into word runs and
reduced to per-term relative frequencies. ``finish`` then computes the
inverse document frequency of every term across the corpus and stores,
for each term, the quantized tf-idf score of that term in every RFC that
contains it.
"""
import logging
import math
from collections import Counter, defaultdict

from nltk.tokenize import RegexpTokenizer

from rfsee.common.config import (
    EPSILON, SCORE_MAX, SCORE_MIN, SCORE_SCALE, WORD_MATCH_REGEX
)
from rfsee.common.models import Index, ProcessedRfc, RfcDetails
from rfsee.indexer.index_store import save_index

logger = logging.getLogger(__name__)


def quantize_score(value):
    """Scale a tf-idf score to an int32, rounding half away from zero."""
    scaled = value * SCORE_SCALE
    rounded = int(math.copysign(math.floor(abs(scaled) + 0.5), scaled))
    return max(SCORE_MIN, min(SCORE_MAX, rounded))


class TfIdfIndex:
    """Builds the search index from fetched RFCs."""
    def __init__(self):
        # Case is preserved: "Hello" and "hello" are distinct terms
        self.tokenizer = RegexpTokenizer(WORD_MATCH_REGEX)
        # url -> processed rfc
        self.processed_rfcs = {}
        # term -> number of documents containing it
        self.doc_freqs = {}
        # term -> inverse document frequency
        self.idfs = {}
        self.index = Index()

    def tokenize(self, text):
        return self.tokenizer.tokenize(text)

    def term_frequencies(self, text):
        """Relative frequency of each term in ``text``."""
        term_counts = Counter(self.tokenize(text))
        total = sum(term_counts.values())
        return {term: count / total for term, count in term_counts.items()}

    def add_rfc_entry(self, rfc):
        """Compute the term frequencies of an RFC and add it to the index."""
        if rfc.content is None:
            logger.debug(f"Skipping RFC {rfc.number}: no content")
            return

        term_freqs = self.term_frequencies(rfc.content)
        self.index.rfc_details[rfc.number] = RfcDetails(title=rfc.title)
        self.processed_rfcs[rfc.url] = ProcessedRfc(
            number=rfc.number, term_freqs=term_freqs
        )
        logger.debug(f"Indexed RFC {rfc.number}: {len(term_freqs)} distinct terms")

    def finish(self, progress_callback=None):
        """Compute the final term scores from all processed RFCs."""
        total_docs = len(self.processed_rfcs)
        logger.info(f"Computing term scores for {total_docs} RFCs")

        doc_freqs = defaultdict(int)
        for processed in self.processed_rfcs.values():
            for term in processed.term_freqs:
                doc_freqs[term] += 1
        self.doc_freqs = dict(doc_freqs)

        self.idfs = {
            term: math.log10(total_docs / (docs_with_term + EPSILON))
            for term, docs_with_term in self.doc_freqs.items()
        }

        term_scores = {}
        last_percent = -1
        for done, processed in enumerate(self.processed_rfcs.values(), 1):
            for term, freq in processed.term_freqs.items():
                idf = self.idfs.get(term)
                if idf is None:
                    continue
                term_scores.setdefault(term, {})[processed.number] = quantize_score(freq * idf)

            if progress_callback is not None:
                percent = done * 100 // total_docs
                if percent != last_percent:
                    progress_callback(percent)
                    last_percent = percent

        if progress_callback is not None and last_percent != 100:
            progress_callback(100)

        self.index.term_scores = term_scores
        logger.info(f"Index complete: {len(term_scores)} terms across {total_docs} RFCs")
        return self.index

    def save(self, path):
        save_index(self.index, path)
