#!/usr/bin/env python3
"""
ISS Next Passes - Main Script
Looks up your location from your public IP and prints the next ISS passes.

Just run: python next_passes.py
"""

import argparse
import json
import logging
import sys

import pytz
import requests

from iss_flyover import FlyoverError, FlyoverLookup, load_config
from pass_display import print_pass_times

logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description='Find the next ISS passes over your location.')
    parser.add_argument('--config', default='config.ini', help='Path to config.ini (default: config.ini).')
    parser.add_argument('--timezone', help='IANA timezone for displayed times, overrides config.')
    parser.add_argument('--json', action='store_true', help='Print the raw pass list as JSON.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    return parser.parse_args(argv)


def main(argv=None):
    """Main function"""
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    config = load_config(args.config)
    timezone_str = args.timezone or config.timezone_str
    try:
        local_tz = pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError:
        print(f"Error: unknown timezone {timezone_str!r}")
        return 1

    try:
        with FlyoverLookup(config) as lookup:
            passes = lookup.next_iss_times_for_my_location()
    except FlyoverError as e:
        logger.error(f"Lookup failed at stage '{e.stage}': {e}")
        print(f"It didn't work! {e}")
        return 1
    except requests.RequestException as e:
        logger.error(f"Network error: {e}")
        print(f"It didn't work! {e}")
        return 1

    if args.json:
        print(json.dumps(passes, indent=2))
    else:
        print_pass_times(passes, local_tz)
    return 0


if __name__ == "__main__":
    sys.exit(main())
