"""
Command-line interface for the RFC search index.
"""
import argparse
import logging
import sys

from rfsee.common.config import (
    LOG_FILE, LOG_FORMAT, RFSEE_VERSION, WEB_HOST, WEB_PORT, WORKER_COUNT
)
from rfsee.common.errors import RfseeError
from rfsee.common.utils import get_index_path
from rfsee.indexer.index_store import load_index
from rfsee.master.master_node import MasterNode
from rfsee.search.search import create_app, format_results_for_cli, search_index

logger = logging.getLogger(__name__)


def configure_logging(verbose=False, log_file=LOG_FILE):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def run_index(args):
    """Crawl all RFCs and write the index."""
    path = get_index_path(args.path)
    logger.info(f"Building index at {path}")

    def on_finish_progress(percent):
        logger.debug(f"Computing term scores: {percent}%")

    master = MasterNode(worker_count=args.workers)
    index = master.build_index(
        path,
        progress_callback=logger.debug,
        finish_callback=on_finish_progress,
        parallel=not args.sequential,
    )
    print(f"Indexed {len(index.rfc_details)} RFCs ({len(index.term_scores)} terms) into {path}")


def run_search(args):
    """Search the index and print ranked results."""
    index = load_index(get_index_path(args.index_path))
    results = search_index(args.terms, index, args.max_results)
    print(format_results_for_cli(results, args.terms))


def run_inspect(args):
    """Print a term's scores or the list of indexed terms."""
    index = load_index(get_index_path(args.index_path))
    if args.term is not None:
        scores = index.term_scores.get(args.term)
        if scores is None:
            print(f"Term '{args.term}' is not in the index")
            return
        for number, score in sorted(scores.items(), key=lambda item: -item[1]):
            print(f"{number}\t{score}")
    else:
        for term in sorted(index.term_scores):
            print(term)


def run_serve(args):
    """Start the web search interface."""
    app = create_app(get_index_path(args.index_path))
    print(f"Starting web interface on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port)


def build_parser():
    parser = argparse.ArgumentParser(prog='rfsee', description='Search the IETF RFCs')
    parser.add_argument('--version', action='version', version=f"rfsee {RFSEE_VERSION}")
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', default=LOG_FILE, help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    index_parser = subparsers.add_parser('index', help='Fetch all RFCs and build the index')
    index_parser.add_argument('--path', help='Where to write the index')
    index_parser.add_argument('--workers', type=int, default=WORKER_COUNT, help='Number of fetch workers')
    index_parser.add_argument('--sequential', action='store_true', help='Fetch RFCs one at a time')
    index_parser.set_defaults(func=run_index)

    search_parser = subparsers.add_parser('search', help='Search the index')
    search_parser.add_argument('--terms', required=True, help='Space separated search terms')
    search_parser.add_argument('--index-path', help='Index to search')
    search_parser.add_argument('--max-results', type=int,
                               help='Maximum number of results to show (all when omitted)')
    search_parser.set_defaults(func=run_search)

    inspect_parser = subparsers.add_parser('inspect', help='Show the contents of the index')
    inspect_parser.add_argument('--index-path', help='Index to inspect')
    group = inspect_parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--term', help='Show the RFC scores for this term')
    group.add_argument('--keys', action='store_true', help='List all indexed terms')
    inspect_parser.set_defaults(func=run_inspect)

    serve_parser = subparsers.add_parser('serve', help='Start the web search interface')
    serve_parser.add_argument('--index-path', help='Index to search')
    serve_parser.add_argument('--host', default=WEB_HOST, help='Interface to bind')
    serve_parser.add_argument('--port', type=int, default=WEB_PORT, help='Port for web interface')
    serve_parser.set_defaults(func=run_serve)

    return parser


def main(argv=None):
    """Main function to run the command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    try:
        args.func(args)
    except RfseeError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"rfsee: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"rfsee: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
