"""
Module entry point for: python -m fruit_parser

Allows running the parser directly as a module:
    python -m fruit_parser parse <yaml_path> [options]
    python -m fruit_parser scan <yaml_path>
    python -m fruit_parser emit [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
