#!/usr/bin/env python3
"""
wsconfig - Build wikitext parser configuration from siteinfo.

Reads a saved siteinfo API response and writes the site's parser
configuration (namespace names, extension tags, protocols, magic words and
link trail characters) as JSON.

The siteinfo response can be saved with:
    curl 'https://en.wikipedia.org/w/api.php?action=query&meta=siteinfo&siprop=general|namespaces|namespacealiases|extensiontags|protocols|magicwords&format=json&formatversion=2' \\
        -o siteinfo.json

Usage:
    wsconfig siteinfo.json                      # Print configuration to stdout
    wsconfig siteinfo.json -o config.json       # Write to file
    wsconfig siteinfo.json --settings wsconfig.yaml --verbose
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import orjson

from wikisite.configuration import build_configuration
from wikisite.settings import SettingsError, load_settings
from wikisite.siteinfo import SiteInfoError, load_siteinfo

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for wsconfig CLI."""
    parser = argparse.ArgumentParser(
        description="Build wikitext parser configuration from a siteinfo response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("siteinfo", type=Path, help="Saved siteinfo JSON response")
    parser.add_argument(
        "--output", "-o", type=Path, help="Output JSON file (default: stdout)"
    )
    parser.add_argument(
        "--settings", "-s", type=Path, help="YAML settings file"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.siteinfo.exists():
        logger.error(f"Siteinfo file not found: {args.siteinfo}")
        return 1

    try:
        settings = load_settings(args.settings)
        query = load_siteinfo(args.siteinfo)
        config = build_configuration(query, settings)
    except (SiteInfoError, SettingsError) as e:
        logger.error(f"{args.siteinfo}: {e}")
        return 1

    option = orjson.OPT_SORT_KEYS
    if settings.indent:
        option |= orjson.OPT_INDENT_2
    data = orjson.dumps(config.to_dict(), option=option) + b'\n'

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, 'wb') as f:
            f.write(data)
        logger.info(f"Wrote configuration to {args.output}")
    else:
        sys.stdout.buffer.write(data)

    return 0


if __name__ == "__main__":
    sys.exit(main())
