#!/usr/bin/env python

import argparse
import logging
import os

from .generator import Generator
from .registry import Registry

# Define default paths relative to the current working directory
DEFAULT_CONFIG = os.path.join("inputs", "generator_config.yaml")
DEFAULT_OUTPUT_DIR = "outputs"


def main(argv=None):
    """
    Main function to parse command-line arguments and render the Ansible modules.
    """
    # 1. Initialize the ArgumentParser
    parser = argparse.ArgumentParser(
        prog="edgegrid-generate",
        description="Renders Ansible modules for the EdgeGrid resources and data sources.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,  # Shows default values in help
    )

    # 2. Define the command-line arguments
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG,
        help="Path to the generator config file.",
    )
    parser.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to save the generated modules.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the registered resource and data source types and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )

    # 3. Parse the arguments from the command line
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    registry = Registry()
    if args.list:
        for type_name in registry.type_names():
            print(type_name)
        return

    if not os.path.exists(args.output_dir):
        os.makedirs(args.output_dir)

    generator = Generator.from_file(config_path=args.config, registry=registry)
    generator.generate(output_dir=args.output_dir)
    print("\nGeneration complete.")


if __name__ == "__main__":
    main()
