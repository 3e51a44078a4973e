"""
Search for the RFC index.
Ranks RFCs for a query by summing the scores of every query term, and
exposes the same search over a small JSON web API.
"""
import logging
from datetime import datetime

from flask import Flask, jsonify, request

from rfsee.common.config import MISSING_TITLE, SEARCH_TERMS_DELIMITER
from rfsee.common.errors import RfseeError
from rfsee.common.models import RfcSearchResult
from rfsee.common.utils import rfc_url
from rfsee.indexer.index_store import load_index

logger = logging.getLogger(__name__)


def combine_scores(score_maps):
    """
    Merge per-term score maps into a single ranking where each RFC shows
    up once with the sum of its scores. Returns RFC numbers, best first;
    equal scores are ordered by RFC number.
    """
    combined = {}
    for scores in score_maps:
        for number, score in scores.items():
            combined[number] = combined.get(number, 0) + score

    ranked = sorted(combined.items(), key=lambda item: (-item[1], item[0]))
    return [number for number, _ in ranked]


def search_index(query, index, max_results=None):
    """Search ``index`` for the space separated terms in ``query``."""
    terms = query.split(SEARCH_TERMS_DELIMITER)
    score_maps = [index.term_scores[term] for term in terms if term in index.term_scores]
    logger.debug(f"Query {query!r}: {len(score_maps)} of {len(terms)} terms indexed")

    ranked = combine_scores(score_maps)
    if max_results is not None:
        ranked = ranked[:max_results]

    results = []
    for number in ranked:
        details = index.rfc_details.get(number)
        title = details.title if details is not None else MISSING_TITLE
        results.append(RfcSearchResult(url=rfc_url(number), title=title))
    return results


def format_results_for_cli(results, query):
    """Format search results for command-line display."""
    if not results:
        return f"No results found for '{query}'"

    output = [f"Search results for '{query}':"]
    output.append("-" * 80)
    for i, result in enumerate(results, 1):
        output.append(f"{i}. {result.title}")
        output.append(f"   URL: {result.url}")
    output.append("-" * 80)
    return "\n".join(output)


def create_app(index_path):
    """Create the web search application for the index at ``index_path``."""
    app = Flask(__name__)
    app.config['INDEX_PATH'] = str(index_path)
    state = {'index': None}

    def get_index():
        if state['index'] is None:
            state['index'] = load_index(app.config['INDEX_PATH'])
        return state['index']

    @app.route('/api/search', methods=['GET', 'POST'])
    def search_api():
        """API endpoint for search."""
        if request.method == 'POST':
            data = request.get_json(silent=True) or {}
        else:
            data = request.args
        query = data.get('query') or data.get('terms') or ''
        max_results = data.get('max_results')

        if not query:
            return jsonify({'error': 'No query provided'}), 400
        if max_results is not None:
            try:
                max_results = int(max_results)
            except (TypeError, ValueError):
                return jsonify({'error': 'max_results must be an integer'}), 400

        try:
            index = get_index()
        except RfseeError as e:
            logger.error(f"Failed to load index: {e}")
            return jsonify({'error': f"Failed to load index: {e}"}), 500

        results = search_index(query, index, max_results)
        return jsonify({
            'query': query,
            'results': [result.to_dict() for result in results],
            'result_count': len(results),
            'timestamp': datetime.now().isoformat(),
        })

    return app
