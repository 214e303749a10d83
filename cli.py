#!/usr/bin/env python3
"""
DocForge CLI - Command Line Interface
=====================================

Commands:
  docforge headers <docx>                    Show detected section headers
  docforge inject <src> <out> --content F    Inject a ContentMap JSON file
  docforge generate <project> [options]      Generate a whole document set
"""

import sys
import os
import argparse
import asyncio
import json

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rich.console import Console
from rich.table import Table
from rich import box

from agents.content_writer import parse_content_map
from core.config import get_config
from core.log_setup import setup_logging
from core.orchestrator import create_document_generator
from core.state import ProjectData
from injection.content_injector import create_content_injector
from injection.exceptions import MalformedInputError
from tools.document_tools import create_template_reader

console = Console()


def print_output(message, style=None):
    """Print output with optional styling"""
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def cmd_headers(args):
    """Show detected header candidates"""
    if not os.path.exists(args.file):
        print_output(f"Error: File not found: {args.file}", "red")
        return 1

    reader = create_template_reader()
    try:
        info = reader.read_template(args.file)
    except Exception as e:
        print_output(f"Error: cannot read {args.file}: {e}", "red")
        return 1

    if not info.headers:
        print_output("No section headers detected; injection would be skipped.", "yellow")
        return 0

    table = Table(title=os.path.basename(args.file), box=box.ROUNDED)
    table.add_column("#", style="cyan")
    table.add_column("Header", style="white")
    for i, header in enumerate(info.headers, 1):
        table.add_row(str(i), header)
    console.print(table)
    return 0


def cmd_inject(args):
    """Inject a ContentMap JSON file into a template"""
    for path in (args.source, args.content):
        if not os.path.exists(path):
            print_output(f"Error: File not found: {path}", "red")
            return 1

    with open(args.content, "r", encoding="utf-8") as f:
        content_map = parse_content_map(f.read())

    if not content_map:
        print_output(f"Error: {args.content} holds no header -> content mapping", "red")
        return 1

    config = get_config()
    if args.consume_keys:
        config.injection.consume_keys = True
    injector = create_content_injector(config=config.injection)

    try:
        report = injector.inject_file(args.source, args.output, content_map)
    except MalformedInputError as e:
        print_output(f"Error: {e}", "red")
        return 1

    print_output(f"✓ Injected: {report.output}", "green")
    print_output(f"  Matched headers: {len(report.matched_headers)}/{len(content_map)}")
    print_output(f"  Paragraphs dropped: {report.paragraphs_dropped}")
    print_output(f"  Paragraphs inserted: {report.paragraphs_injected}")
    for key in report.unused_keys:
        print_output(f"  ⚠️  Unused key: {key}", "yellow")
    return 0


def cmd_generate(args):
    """Generate a project's document set"""
    config = get_config()
    if args.templates:
        config.paths.templates = args.templates
    if args.output:
        config.paths.output = args.output
    if args.concurrency:
        config.generator.concurrency = args.concurrency

    project = ProjectData(
        project_name=args.project,
        project_code=args.code or "",
        project_manager=args.manager or "",
        project_description=args.description,
    )

    generator = create_document_generator(content_file=args.content, config=config)
    try:
        result = asyncio.run(generator.generate_all(project))
    except FileNotFoundError as e:
        print_output(f"Error: {e}", "red")
        return 1

    table = Table(title=f"Project: {project.project_name}", box=box.ROUNDED)
    table.add_column("Output", style="cyan")
    table.add_column("Outcome", style="green")
    table.add_column("Sections", style="yellow")
    for f in result.files:
        table.add_row(
            os.path.relpath(f.output_path, result.output_root),
            f.outcome.value,
            str(len(f.matched_headers)) if f.matched_headers else "",
        )
    console.print(table)

    for path, error in result.errors.items():
        print_output(f"  ✗ {path}: {error}", "red")

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

    return 0 if result.success else 1


def build_parser():
    parser = argparse.ArgumentParser(
        prog="docforge",
        description="DocForge - project document generation from Word templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docforge headers templates/01立项/xx项目建议书.docx
  docforge inject xx项目建议书.docx out/建议书.docx --content content.json
  docforge generate "智慧园区项目" --templates ./templates --output ./output
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # headers command
    headers_parser = subparsers.add_parser("headers", help="Show detected section headers")
    headers_parser.add_argument("file", help="Path to .docx template")

    # inject command
    inject_parser = subparsers.add_parser("inject", help="Inject content into a template")
    inject_parser.add_argument("source", help="Source .docx template")
    inject_parser.add_argument("output", help="Output .docx path")
    inject_parser.add_argument("--content", "-c", required=True, help="JSON file: header -> content")
    inject_parser.add_argument("--consume-keys", action="store_true",
                               help="Inject each header's content only at its first occurrence")

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a document set")
    generate_parser.add_argument("project", help="Project name")
    generate_parser.add_argument("--templates", "-t", help="Template directory")
    generate_parser.add_argument("--output", "-o", help="Output directory")
    generate_parser.add_argument("--content", "-c", help="Static ContentMap JSON (skips the AI writer)")
    generate_parser.add_argument("--code", help="Project code")
    generate_parser.add_argument("--manager", help="Project manager")
    generate_parser.add_argument("--description", "-d", help="Project background")
    generate_parser.add_argument("--concurrency", type=int, help="Files processed in parallel")
    generate_parser.add_argument("--json", action="store_true", help="Also print the result as JSON")

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level="DEBUG" if args.verbose else None)

    commands = {
        "headers": cmd_headers,
        "inject": cmd_inject,
        "generate": cmd_generate,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
