#!/usr/bin/env python3
"""
gnss-stochastic: inspect stochastic model configuration

Loads a TOML configuration, builds the stochastic models it describes and
prints their parameters as JSON. Useful to check what the estimator will
actually run with before starting a processing job.

Usage:
    gnss-stochastic --config /etc/gnss/stochastic.toml
    gnss-stochastic --config stochastic.toml --model iono
"""

import argparse
import json
import logging
import sys

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger('gnss-stochastic')

from .config import build_models, load_config


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='gnss-stochastic: inspect configured process-noise models',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Show the built-in default model set
    gnss-stochastic

    # Show one model from a config file
    gnss-stochastic --config stochastic.toml --model tropo
        """
    )
    parser.add_argument(
        '--config', '-c',
        help='Path to TOML configuration file'
    )
    parser.add_argument(
        '--model', '-m',
        help='Only show this model (name of a [models.<name>] table)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        models = build_models(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.model:
        if args.model not in models:
            logger.error(f"No model named {args.model!r} (available: {', '.join(models)})")
            return 1
        models = {args.model: models[args.model]}

    print(json.dumps({name: m.to_dict() for name, m in models.items()}, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
