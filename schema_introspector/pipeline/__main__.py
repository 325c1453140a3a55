"""
Command line entry point for the graph schema introspector.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from schema_introspector.config import IntrospectionConfig, load_settings
from schema_introspector.graph import Neo4jSchemaSource, dumps
from schema_introspector.pipeline import Introspector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Describe the schema of a Neo4j database as graph schema JSON."
    )
    parser.add_argument(
        "--pretty-print",
        action="store_true",
        help="Indent the emitted JSON.",
    )
    parser.add_argument(
        "--ephemeral-ids",
        action="store_true",
        help="Generate random, time ordered ids instead of ids derived from label and type names.",
    )
    parser.add_argument(
        "--no-quote-tokens",
        action="store_true",
        help="Emit label and type names as stored instead of as Cypher identifiers.",
    )
    parser.add_argument(
        "--no-sample",
        action="store_true",
        help="Scan all relationships when looking for their endpoints instead of a sample.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the document to this file instead of stdout.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> IntrospectionConfig:
    return IntrospectionConfig(
        pretty_print=args.pretty_print,
        use_constant_ids=not args.ephemeral_ids,
        quote_tokens=not args.no_quote_tokens,
        sample_only=not args.no_sample,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = config_from_args(args)
    source = Neo4jSchemaSource(settings=load_settings())

    try:
        schema = Introspector(source, config).build_schema()
    finally:
        source.close()

    document = dumps(schema, pretty_print=config.pretty_print)
    if args.output:
        args.output.write_text(document + "\n", encoding="utf-8")
        print(
            f"Wrote {len(schema.node_object_types)} node object types and "
            f"{len(schema.relationship_object_types)} relationship object types to {args.output}."
        )
    else:
        print(document)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
