"""Terminal survey player and CLI entry point.

Runs one survey document through :class:`SurveyPlayer`, one question at a
time.  Answers are typed as plain text (comma-separated for multi-select
questions); a few commands control navigation:

    :back      previous question
    :restart   start over from the first question
    :quit      leave (the draft is kept, so the next run resumes)

Usage::

    survey-player surveys/feedback.yaml
    survey-player surveys/feedback.yaml --url "https://app.example.com/s/abc?nps=9"
    survey-player surveys/feedback.yaml --preview --lang de

The ``cli()`` function is the ``survey-player`` console-script entry point.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any

from rich.console import Console
from rich.table import Table

from survey_runtime.client import HttpResponseBackend
from survey_runtime.drafts import DraftStore, InMemoryDraftStorage
from survey_runtime.i18n import resolve
from survey_runtime.interfaces import DraftStorage
from survey_runtime.loader import load_survey
from survey_runtime.models.session import FinishedStep, PlayerContext, QuestionStep
from survey_runtime.models.survey import Survey
from survey_runtime.player import SurveyPlayer
from survey_runtime_cli.config import PlayerSettings, load_settings
from survey_runtime_db.engine import dispose_engine, get_session_factory, init_models
from survey_runtime_db.storage import SqlDraftStorage

logger = logging.getLogger(__name__)

COMMANDS = (":back", ":restart", ":quit")


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def render_question(console: Console, step: QuestionStep) -> None:
    """Print one question with its options and constraints."""
    q = step.question
    console.print()
    console.rule(f"[bold]{q.headline}[/] [dim]({step.progress:.0%})[/]")
    if q.subheader:
        console.print(f"[dim]{q.subheader}[/]")

    if q.options:
        table = Table(show_header=False, box=None, padding=(0, 2))
        for opt in q.options:
            table.add_row(f"[cyan]{opt['id']}[/]", opt.get("label") or opt.get("image_url", ""))
        console.print(table)

    constraints = q.constraints or {}
    if q.type in ("nps", "rating"):
        low = (q.labels or {}).get("lower_label", "")
        high = (q.labels or {}).get("upper_label", "")
        console.print(f"  {constraints['min']}..{constraints['max']}  [dim]{low} / {high}[/]")
    elif q.type == "cta":
        console.print("  [dim]answer 'clicked' or 'dismissed'[/]")
    elif q.type == "consent":
        label = (q.labels or {}).get("label")
        if label:
            console.print(f"  {label}")
        console.print("  [dim]answer 'accepted' or 'dismissed'[/]")
    elif q.type == "pictureSelection":
        console.print("  [dim]answer with choice ids, comma-separated[/]")
    elif constraints.get("allow_multi"):
        console.print("  [dim]comma-separated labels[/]")

    if step.draft_value is not None:
        console.print(f"  [dim]previous answer: {step.draft_value}[/]")
    if not q.required:
        console.print("  [dim](optional, press enter to skip)[/]")


def render_finished(console: Console, survey: Survey, step: FinishedStep, language: str) -> None:
    console.print()
    card = survey.thank_you_card
    headline = "Thank you!"
    subheader = ""
    if card is not None and card.enabled:
        headline = resolve(card.headline, language, survey.default_language) or headline
        subheader = resolve(card.subheader, language, survey.default_language)
    console.rule(f"[bold green]{headline}")
    if subheader:
        console.print(subheader)
    if step.response_id:
        console.print(f"[dim]response id: {step.response_id}[/]")
    if step.redirect_url:
        console.print(f"Redirecting to [link={step.redirect_url}]{step.redirect_url}[/link] ...")


# ------------------------------------------------------------------
# Session loop
# ------------------------------------------------------------------

async def _answer(player: SurveyPlayer, step: QuestionStep, line: str):
    """Submit one line of terminal input for the current question."""
    q = step.question
    if line == "" and not q.required:
        return await player.submit_answer(None)
    if q.type == "pictureSelection":
        ids = [part.strip() for part in line.split(",") if part.strip()]
        return await player.submit_answer(ids)
    return await player.submit_raw(line)


async def run_session(
    console: Console,
    survey: Survey,
    context: PlayerContext,
    storage: DraftStorage,
    settings: PlayerSettings,
) -> None:
    backend = None if context.preview else HttpResponseBackend(timeout=settings.http_timeout)
    redirected = asyncio.Event()

    def on_redirect(url: str) -> None:
        console.print(f"[bold]-> {url}[/]")
        redirected.set()

    player = SurveyPlayer(
        survey,
        DraftStore(storage),
        backend,
        context=context,
        on_redirect=on_redirect,
        redirect_delay=settings.redirect_delay,
    )
    try:
        step: Any = await player.start()
        while isinstance(step, QuestionStep):
            if step.error:
                console.print("[red]Invalid answer, try again.[/]")
            render_question(console, step)
            line = (await asyncio.to_thread(console.input, "[bold]> [/]")).strip()

            if line == ":quit":
                console.print("[yellow]Left the survey; your answers are kept as a draft.[/]")
                return
            if line == ":restart":
                step = player.restart()
                continue
            if line == ":back":
                try:
                    step = await player.go_back()
                except ValueError as exc:
                    console.print(f"[yellow]{exc}[/]")
                continue
            step = await _answer(player, step, line)

        render_finished(console, survey, step, player.language)
        if step.redirect_url:
            await redirected.wait()
    finally:
        await player.aclose()
        if backend is not None:
            await backend.aclose()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="survey-player",
        description="Take a survey in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Commands while answering: " + ", ".join(COMMANDS),
    )
    parser.add_argument("survey_file", help="Survey document (YAML or JSON)")
    parser.add_argument(
        "--url",
        help="Survey URL; its query string sets preview, userId, lang and first-question prefill",
    )
    parser.add_argument("--preview", action="store_true", help="Preview mode: no backend writes")
    parser.add_argument("--lang", help="Language code to display")
    parser.add_argument("--user-id", help="Identify the respondent")
    parser.add_argument(
        "--memory-drafts",
        action="store_true",
        help="Keep drafts in memory only instead of the drafts database",
    )
    parser.add_argument("--log-level", help="Logging level (overrides SURVEY_LOG_LEVEL)")
    return parser.parse_args(argv)


def build_context(args: argparse.Namespace, survey: Survey, settings: PlayerSettings) -> PlayerContext:
    """Session context from --url plus explicit flag overrides."""
    if args.url:
        context = PlayerContext.from_url(args.url)
    else:
        url = f"{settings.api_host}/s/{survey.id}"
        context = PlayerContext.from_url(url, api_host=settings.api_host)

    update: dict[str, Any] = {}
    if args.preview:
        update["preview"] = True
        update["user_id"] = None
    if args.lang:
        update["language"] = args.lang
    if args.user_id and not (args.preview or context.preview):
        update["user_id"] = args.user_id
    return context.model_copy(update=update)


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = load_settings()

    # --- Configure logging ---
    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    console = Console()
    survey = load_survey(args.survey_file)
    context = build_context(args, survey, settings)

    if args.memory_drafts:
        await run_session(console, survey, context, InMemoryDraftStorage(), settings)
        return

    await init_models()
    try:
        storage = SqlDraftStorage(get_session_factory())
        await run_session(console, survey, context, storage, settings)
    finally:
        await dispose_engine()
        logger.info("Database engine disposed")


def cli() -> None:
    """Console-script entry point: ``survey-player``."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
