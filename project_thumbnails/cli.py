"""
Project Thumbnails — command line

Usage:
  python -m project_thumbnails.cli prompt   --title "Directory Logger" --description "..." --tech Python
  python -m project_thumbnails.cli generate --project project.json --output thumb.png
  python -m project_thumbnails.cli batch    projects.json --output results.json
  python -m project_thumbnails.cli github-import --username octocat --output projects.json
  python -m project_thumbnails.cli models
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from .batch import BatchItem, regenerate_images, summarize
from .concepts import visuals_for
from .config import Settings, load_settings
from .data_uri import decode_data_uri, describe_image, extension_for
from .gemini import list_image_models, make_client
from .github import fetch_public_repos, repo_to_project
from .models import ImageSource, ProjectDescriptor
from .pipeline import generate_project_image
from .prompt import build_project_prompt

console = Console()

_SOURCE_STYLE = {
    ImageSource.GENERATED: "green",
    ImageSource.REPO_PREVIEW: "cyan",
    ImageSource.PLACEHOLDER: "yellow",
}


# ── CLI ───────────────────────────────────────────────────────────────────────

def _add_project_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--project", help="JSON file holding one project object")
    parser.add_argument("--title", help="Project title")
    parser.add_argument("--description", help="Project description")
    parser.add_argument("--tech", action="append", default=[], help="Technology (repeatable)")
    parser.add_argument("--github", help="Repository URL")
    parser.add_argument("--seed", type=int, default=None, help="Seed visual-concept selection")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-thumbnails",
        description="Portfolio project thumbnails — Gemini image, GitHub preview, or SVG placeholder",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_prompt = sub.add_parser("prompt", help="Print the image prompt for a project")
    _add_project_args(p_prompt)

    p_gen = sub.add_parser("generate", help="Generate a thumbnail for one project")
    _add_project_args(p_gen)
    p_gen.add_argument("--output", help="Write the image here (extension taken from the MIME type if omitted)")

    p_batch = sub.add_parser("batch", help="Regenerate thumbnails for a JSON list of projects")
    p_batch.add_argument("projects", help="JSON file holding a list of project objects")
    p_batch.add_argument("--output", default="thumbnails.json", help="Results JSON (default: thumbnails.json)")
    p_batch.add_argument("--delay", type=float, default=None, help="Seconds between projects")
    p_batch.add_argument("--no-retry", action="store_true", help="Don't retry rate-limited projects")
    p_batch.add_argument("--seed", type=int, default=None)

    p_gh = sub.add_parser("github-import", help="Turn a user's public repos into project JSON")
    p_gh.add_argument("--username", help="GitHub user (default: GITHUB_USERNAME)")
    p_gh.add_argument("--output", default="projects.json")

    sub.add_parser("models", help="List image-capable Gemini models")
    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────

def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
        level=getattr(logging, settings.log_level, logging.INFO),
    )


def _load_project(args: argparse.Namespace) -> ProjectDescriptor:
    if args.project:
        data = json.loads(Path(args.project).read_text(encoding="utf-8"))
        return ProjectDescriptor.model_validate(data)
    if not args.title:
        raise ValueError("either --project or --title is required")
    return ProjectDescriptor(
        title=args.title,
        description=args.description,
        technologies=args.tech,
        github_link=args.github,
    )


def _load_projects(path: str) -> List[ProjectDescriptor]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of projects")
    return [ProjectDescriptor.model_validate(item) for item in data]


def _rng(seed: Optional[int]) -> Optional[random.Random]:
    return random.Random(seed) if seed is not None else None


def _source_label(source: ImageSource) -> str:
    style = _SOURCE_STYLE[source]
    return f"[{style}]{source.value}[/{style}]"


def _write_image(image: str, output: str) -> Path:
    mime_type, payload = decode_data_uri(image)
    path = Path(output)
    if not path.suffix:
        path = path.with_suffix(extension_for(mime_type))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_prompt(args: argparse.Namespace, settings: Settings) -> int:
    project = _load_project(args)
    matched = visuals_for(project.effective_description())
    console.print(Rule(f"[bold magenta]{project.title}[/bold magenta]"))
    console.print(f"  [dim]{len(matched)} vocabulary group(s) matched[/dim]\n")
    console.print(build_project_prompt(project, rng=_rng(args.seed)), markup=False, highlight=False)
    return 0


def cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    project = _load_project(args)
    client = make_client(settings.gemini_api_key)
    if client is None:
        console.print("  [dim]GEMINI_API_KEY not set — AI tier will be skipped[/dim]")

    t0 = time.time()
    result = asyncio.run(
        generate_project_image(project, client, settings=settings, rng=_rng(args.seed))
    )
    console.print(
        f"  [green]✓[/green] {project.title} → {_source_label(result.source)} "
        f"[dim]({time.time() - t0:.1f}s)[/dim]"
    )
    for reason in result.fallback_reasons:
        console.print(f"    [dim]skipped: {reason.value}[/dim]")

    if result.source is ImageSource.REPO_PREVIEW:
        console.print(f"  {result.image}")
        return 0

    if args.output:
        path = _write_image(result.image, args.output)
        info = describe_image(path.read_bytes())
        size_kb = path.stat().st_size / 1024
        detail = f"{info[0]} {info[1]}×{info[2]}, " if info else ""
        console.print(f"  [dim]Saved → {path} ({detail}{size_kb:.0f} KB)[/dim]")
    else:
        console.print(f"  [dim]{result.image[:80]}…[/dim]")
    return 0


def cmd_batch(args: argparse.Namespace, settings: Settings) -> int:
    projects = _load_projects(args.projects)
    if args.delay is not None:
        settings = settings.model_copy(update={"batch_delay_seconds": max(args.delay, 0.0)})
    client = make_client(settings.gemini_api_key)

    console.print(Rule("[bold magenta]Regenerating project thumbnails[/bold magenta]"))
    console.print(
        f"  Projects: [bold]{len(projects)}[/bold]  |  "
        f"Model: [bold]{settings.image_model if client else '— (no API key)'}[/bold]  |  "
        f"Delay: [bold]{settings.batch_delay_seconds:g}s[/bold]"
    )

    def _progress(index: int, total: int, item: BatchItem) -> None:
        retried = " [dim](retried)[/dim]" if item.attempts > 1 else ""
        console.print(f"  [{index}/{total}] {item.title} → {_source_label(item.result.source)}{retried}")

    t0 = time.time()
    items = asyncio.run(
        regenerate_images(
            projects,
            client,
            settings=settings,
            rng=_rng(args.seed),
            retry_on_rate_limit=not args.no_retry,
            on_progress=_progress,
        )
    )

    out_path = Path(args.output)
    out_path.write_text(json.dumps([i.to_dict() for i in items], indent=2), encoding="utf-8")

    counts = summarize(items)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Source")
    table.add_column("Count", justify="right")
    for source, count in counts.items():
        table.add_row(source, str(count))
    console.print(table)
    console.print(
        Panel(
            f"{len(items)} project(s) in [bold]{time.time() - t0:.0f}s[/bold]\n"
            f"Results saved to: [bold]{out_path}[/bold]",
            title="[bold green]Batch complete[/bold green]",
            border_style="green",
        )
    )
    return 0


def cmd_github_import(args: argparse.Namespace, settings: Settings) -> int:
    username = args.username or settings.github_username
    if not username:
        console.print("[bold red]Error:[/bold red] pass --username or set GITHUB_USERNAME.")
        return 1

    repos = fetch_public_repos(username, token=settings.github_token)
    projects = [repo_to_project(r) for r in repos]
    out_path = Path(args.output)
    out_path.write_text(
        json.dumps([p.model_dump(mode="json") for p in projects], indent=2),
        encoding="utf-8",
    )
    console.print(f"  [green]✓[/green] {len(projects)} project(s) from {username} → {out_path}")
    return 0


def cmd_models(args: argparse.Namespace, settings: Settings) -> int:
    client = make_client(settings.gemini_api_key)
    if client is None:
        console.print("[bold red]Error:[/bold red] GEMINI_API_KEY not set.")
        return 1
    for name in list_image_models(client):
        console.print(f"  {name}")
    return 0


COMMANDS = {
    "prompt": cmd_prompt,
    "generate": cmd_generate,
    "batch": cmd_batch,
    "github-import": cmd_github_import,
    "models": cmd_models,
}


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
        _configure_logging(settings)
        return COMMANDS[args.command](args, settings)
    except (ValueError, FileNotFoundError) as e:   # ValidationError, JSONDecodeError are ValueErrors
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
