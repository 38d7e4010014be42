"""
Command-line interface for Docucast.

Usage:
    docucast ingest-pdf paper.pdf
    docucast ingest-video https://www.youtube.com/watch?v=<id>
    docucast ask paper.pdf "What is the main finding?"
    docucast podcast paper.pdf --type document --output script.txt
    docucast chat paper.pdf "Why did Sarah disagree?" --script script.txt
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .logging_setup import configure_logging
from .rag.exceptions import DocucastError
from .rag.types import ContentType
from .study_podcast import StudyPodcastService

CONTENT_TYPES = [content_type.value for content_type in ContentType]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='docucast',
        description='Chat with PDFs and YouTube videos, and turn them into podcast scripts',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    ingest_pdf = subparsers.add_parser('ingest-pdf', help='Index a PDF document')
    ingest_pdf.add_argument('path', help='Path to the PDF file')
    ingest_pdf.add_argument('--name', help='Source name to index under (default: file name)')

    ingest_video = subparsers.add_parser('ingest-video', help='Index a YouTube video transcript')
    ingest_video.add_argument('url', help='YouTube URL')

    ask = subparsers.add_parser('ask', help='Ask a question about an indexed source')
    ask.add_argument('source', help='PDF file name or YouTube video ID')
    ask.add_argument('question', help='Question to answer')
    ask.add_argument('--type', '-t', choices=CONTENT_TYPES, default=ContentType.DOCUMENT.value,
                     help='Source type (default: document)')
    ask.add_argument('--json', action='store_true', help='Print the answer and context as JSON')

    podcast = subparsers.add_parser('podcast', help='Generate a podcast script for an indexed source')
    podcast.add_argument('source', help='PDF file name or YouTube video ID')
    podcast.add_argument('--type', '-t', choices=CONTENT_TYPES, help='Source type (default: generic document)')
    podcast.add_argument('--output', '-o', help='Write the script to this file')

    chat = subparsers.add_parser('chat', help='Ask about a source and its podcast script')
    chat.add_argument('source', help='PDF file name or YouTube video ID')
    chat.add_argument('question', help='Question to answer')
    chat.add_argument('--script', '-s', required=True, help='Path to the podcast script')
    chat.add_argument('--type', '-t', choices=CONTENT_TYPES,
                      help='Source type; omit to answer across the whole document in segments')
    chat.add_argument('--json', action='store_true', help='Print the answer and context as JSON')

    return parser


def run(args: argparse.Namespace, service: StudyPodcastService) -> int:
    """Execute one parsed command against the service."""
    if args.command == 'ingest-pdf':
        path = Path(args.path)
        result = service.ingest_pdf(path.read_bytes(), args.name or path.name)
        print(result.message or f"Indexed {result.chunks} chunks")
    elif args.command == 'ingest-video':
        result = service.ingest_video(args.url)
        print(result.message or f"Indexed {result.chunks} chunks")
    elif args.command == 'ask':
        result = service.ask(args.question, [], args.source, ContentType(args.type))
        print(json.dumps(result.to_dict(), indent=2) if args.json else result.response)
    elif args.command == 'podcast':
        content_type = ContentType(args.type) if args.type else None
        script = service.generate_podcast(args.source, content_type)
        if args.output:
            Path(args.output).write_text(script, encoding='utf-8')
            logger.success(f"Script saved to {args.output}")
        else:
            print(script)
    elif args.command == 'chat':
        script = Path(args.script).read_text(encoding='utf-8')
        content_type = ContentType(args.type) if args.type else None
        result = service.podcast_chat(args.question, [], args.source, script, content_type)
        print(json.dumps(result.to_dict(), indent=2) if args.json else result.response)
    return 0


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        service = StudyPodcastService.from_config()
        sys.exit(run(args, service))
    except DocucastError as e:
        logger.error(str(e))
        sys.exit(1)
    except OSError as e:
        logger.error(f"File error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
