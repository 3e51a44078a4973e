"""
Data model shared by the crawler, the indexer and the search interface.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from rfsee.common.config import SCORE_MAX, SCORE_MIN
from rfsee.common.errors import ParseError

# term -> relative frequency within one RFC
TermFreqs = Dict[str, float]
# term -> {rfc number -> quantized score}
TermScores = Dict[str, Dict[int, int]]


@dataclass
class RfcEntry:
    """An RFC whose body has been fetched."""
    number: int
    url: str
    title: str
    content: Optional[str] = None


@dataclass
class ProcessedRfc:
    number: int
    term_freqs: TermFreqs


@dataclass
class RfcDetails:
    title: str

    def to_dict(self):
        return {'title': self.title}


@dataclass
class Index:
    """
    The persisted search index: RFC titles plus, for every term, the
    score of that term in each RFC containing it.
    """
    rfc_details: Dict[int, RfcDetails] = field(default_factory=dict)
    term_scores: TermScores = field(default_factory=dict)

    def to_dict(self):
        return {
            'rfc_details': {
                str(number): details.to_dict()
                for number, details in self.rfc_details.items()
            },
            'term_scores': {
                term: {str(number): score for number, score in scores.items()}
                for term, scores in self.term_scores.items()
            },
        }

    @classmethod
    def from_dict(cls, data):
        """Validate a decoded JSON document and build an ``Index`` from it."""
        if not isinstance(data, dict):
            raise ParseError("Index document must be an object")
        rfc_details = data.get('rfc_details')
        term_scores = data.get('term_scores')
        if not isinstance(rfc_details, dict) or not isinstance(term_scores, dict):
            raise ParseError("Index document must contain 'rfc_details' and 'term_scores' objects")

        index = cls()
        for key, details in rfc_details.items():
            if not isinstance(details, dict) or not isinstance(details.get('title'), str):
                raise ParseError(f"Invalid details for RFC {key!r}")
            index.rfc_details[_rfc_number(key)] = RfcDetails(title=details['title'])

        for term, scores in term_scores.items():
            if not isinstance(scores, dict):
                raise ParseError(f"Invalid scores for term {term!r}")
            postings = {}
            for key, score in scores.items():
                # bool is an int subclass but never a valid score
                if not isinstance(score, int) or isinstance(score, bool):
                    raise ParseError(f"Invalid score for term {term!r} in RFC {key!r}")
                if not SCORE_MIN <= score <= SCORE_MAX:
                    raise ParseError(f"Score {score} for term {term!r} in RFC {key!r} is out of range")
                postings[_rfc_number(key)] = score
            index.term_scores[term] = postings

        return index


RFC_NUMBER_KEY_REGEX = re.compile(r'-?[0-9]+')


def _rfc_number(key):
    # keys must be exactly what to_dict writes, so distinct keys never
    # collapse onto the same RFC number
    if not isinstance(key, str) or not RFC_NUMBER_KEY_REGEX.fullmatch(key):
        raise ParseError(f"Invalid RFC number key {key!r}")
    number = int(key)
    if key != str(number):
        raise ParseError(f"Non-canonical RFC number key {key!r}")
    return number


@dataclass
class RfcSearchResult:
    url: str
    title: str

    def to_dict(self):
        return {'url': self.url, 'title': self.title}
