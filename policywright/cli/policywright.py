#!/usr/bin/env python3
"""
policywright CLI - Compile, review and reopen ABAC policies from files

Commands:
  policywright compile <selection>           Compile selections to a policy document
  policywright render <selection>            Print the review sentence for selections
  policywright explain <document> <rule_id>  Explain one rule of a document
  policywright hydrate <document>            Rebuild selections from a document
  policywright summary <document>            Summarize a persisted document
  policywright config                        Show configuration

Every command that needs attribute definitions or display names takes
--catalog <file>.
"""

import argparse
import json
import logging
import sys
from typing import Optional

import yaml

from policywright.config import get_config
from policywright.core import AttributeCatalog, ReferenceDirectory
from policywright.policy import (
    IncompleteSelectionError,
    PolicyCompilationError,
    PolicyCompiler,
    PolicyHydrator,
    PolicyLoadError,
    PolicyRenderer,
    load_catalog,
    load_document,
    load_references,
    load_selection,
)

logger = logging.getLogger("policywright.cli")


class PolicywrightCLI:
    """policywright command-line interface"""

    def __init__(self, catalog_path: Optional[str] = None):
        self.catalog_path = catalog_path
        if catalog_path:
            self.catalog = load_catalog(catalog_path)
            self.references = load_references(catalog_path)
        else:
            self.catalog = AttributeCatalog()
            self.references = ReferenceDirectory()

    def cmd_compile(self, args):
        """Compile a selection file to a policy document"""
        selection = load_selection(args.selection_file)
        compiler = PolicyCompiler(self.catalog, self.references)

        try:
            document = compiler.compile(selection)
        except IncompleteSelectionError as e:
            print(f"✗ Cannot compile: {e}")
            return 1

        output = document.to_json()
        if args.output:
            with open(args.output, "w") as f:
                f.write(output + "\n")
            print(f"✓ Wrote {len(document.rules)} rules to {args.output}")
        else:
            print(output)

    def cmd_render(self, args):
        """Print the review sentence for a selection file"""
        selection = load_selection(args.selection_file)
        renderer = PolicyRenderer(self.catalog, self.references)
        print(renderer.render(selection))

    def cmd_explain(self, args):
        """Explain a specific rule of a policy document"""
        document = load_document(args.document_file)
        compiler = PolicyCompiler(self.catalog, self.references)

        explanation = compiler.explain(document, args.rule_id)
        if explanation:
            print(explanation)
            return 0

        print(f"✗ Rule not found: {args.rule_id}")
        print(f"\nAvailable rules:")
        for rule in document.rules:
            print(f"  - {rule.id}")
        return 1

    def cmd_hydrate(self, args):
        """Rebuild a selection file from a policy document"""
        document = load_document(args.document_file)
        selection = PolicyHydrator(self.catalog).hydrate(document)

        if args.json:
            print(json.dumps(selection.to_dict(), indent=2))
        else:
            print(yaml.safe_dump(selection.to_dict(), sort_keys=False), end="")

    def cmd_summary(self, args):
        """Summarize a persisted policy document"""
        document = load_document(args.document_file)
        renderer = PolicyRenderer(self.catalog, self.references)

        if args.short:
            print(renderer.render_short_summary(document, args.max_length))
        else:
            print(renderer.render_document(document))

    def cmd_config(self, args) -> int:
        """Show configuration"""
        config = get_config()

        print("\npolicywright Configuration")
        print("=" * 80)
        print(f"\n  POLICYWRIGHT_VERBOSE = {config.verbose}")
        print(f"  POLICYWRIGHT_RULE_IDS = {config.rule_id_strategy}")
        print(f"  POLICYWRIGHT_SUMMARY_MAX_LENGTH = {config.summary_max_length}")
        if self.catalog_path:
            print(f"\n  Catalog: {self.catalog_path} ({len(self.catalog)} attributes)")
        print("\n" + "=" * 80 + "\n")

        return 0


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="policywright",
        description="policywright - ABAC policy compiler and renderer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--catalog",
        help="Catalog file with attributes and subject/action/resource display names",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug logs (same as POLICYWRIGHT_VERBOSE=1)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # policywright compile <selection_file>
    compile_parser = subparsers.add_parser(
        "compile", help="Compile selections to a policy document"
    )
    compile_parser.add_argument("selection_file", help="Path to YAML/JSON selection file")
    compile_parser.add_argument("-o", "--output", help="Write the document to this file")

    # policywright render <selection_file>
    render_parser = subparsers.add_parser(
        "render", help="Print the review sentence for selections"
    )
    render_parser.add_argument("selection_file", help="Path to YAML/JSON selection file")

    # policywright explain <document_file> <rule_id>
    explain_parser = subparsers.add_parser("explain", help="Explain a specific policy rule")
    explain_parser.add_argument("document_file", help="Path to policy document")
    explain_parser.add_argument("rule_id", help="Rule ID to explain")

    # policywright hydrate <document_file>
    hydrate_parser = subparsers.add_parser(
        "hydrate", help="Rebuild selections from a policy document"
    )
    hydrate_parser.add_argument("document_file", help="Path to policy document")
    hydrate_parser.add_argument(
        "--json", action="store_true", help="Print JSON instead of YAML"
    )

    # policywright summary <document_file>
    summary_parser = subparsers.add_parser("summary", help="Summarize a policy document")
    summary_parser.add_argument("document_file", help="Path to policy document")
    summary_parser.add_argument(
        "--short", action="store_true", help="Truncate for table display"
    )
    summary_parser.add_argument(
        "--max-length",
        type=int,
        help="Maximum short summary length (default: POLICYWRIGHT_SUMMARY_MAX_LENGTH)",
    )

    # policywright config
    subparsers.add_parser("config", help="Show configuration")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = get_config()
    if args.verbose:
        config.enable_verbose()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cli = PolicywrightCLI(catalog_path=args.catalog)

        # Dispatch command
        if args.command == "compile":
            return cli.cmd_compile(args) or 0
        elif args.command == "render":
            return cli.cmd_render(args) or 0
        elif args.command == "explain":
            return cli.cmd_explain(args) or 0
        elif args.command == "hydrate":
            return cli.cmd_hydrate(args) or 0
        elif args.command == "summary":
            return cli.cmd_summary(args) or 0
        elif args.command == "config":
            return cli.cmd_config(args) or 0
        else:
            print(f"Unknown command: {args.command}")
            return 1
    except PolicyLoadError as e:
        print(f"✗ {e}")
        return 1
    except PolicyCompilationError as e:
        print(f"✗ Compilation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
