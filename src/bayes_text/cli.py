"""Command-line interface for the Bayes text classifier.

Provides ``classify``, ``evaluate`` and ``demo`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    bayes-text classify corpus.json "i love parrots"
    bayes-text evaluate -k 3 corpus.tsv
    bayes-text demo "Собака мой лучший друг"
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .classifier import BayesClassifier, Classification
from .config import Settings
from .corpus import feed, load_corpus
from .evaluation import EvaluationReport, cross_validate
from .exceptions import BayesTextError, NotTrainedError
from .samples import SENTIMENT_SAMPLES, VERDICTS

console = Console()

_HANDLED_ERRORS = (BayesTextError, FileNotFoundError, ValueError)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="bayes-text-classifier")
@click.option("--language", "-l", default=None,
              help="Stemmer language (default: $BAYES_TEXT_LANGUAGE or english).")
@click.option("--smoothing", type=float, default=None,
              help="Additive smoothing constant (default: $BAYES_TEXT_SMOOTHING or 1).")
@click.option("--keep-stops/--drop-stops", default=None,
              help="Keep stop words when tokenizing.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    language: Optional[str],
    smoothing: Optional[float],
    keep_stops: Optional[bool],
    verbose: bool,
) -> None:
    """Naive Bayes text classifier.

    Train on a labeled corpus and rank the classes of new documents.
    """
    _configure_logging(verbose)
    try:
        env = Settings.from_env()
        settings = Settings(
            language=(language or env.language).lower(),
            smoothing=env.smoothing if smoothing is None else smoothing,
            keep_stops=env.keep_stops if keep_stops is None else keep_stops,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    ctx.obj = settings


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("texts", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def classify(settings: Settings, corpus: Path, texts: tuple[str, ...], output: str) -> None:
    """Train on CORPUS and classify each TEXT.

    Example: bayes-text classify reviews.json "great phone, love it"
    """
    try:
        classifier = settings.build_classifier()
        feed(classifier, load_corpus(corpus))
        classifier.train()
        results = _rank(classifier, texts)
    except _HANDLED_ERRORS as e:
        _fail(e)
        return

    if output == "json":
        click.echo(json.dumps([
            {
                "text": text,
                "label": ranking[0].label,
                "classifications": [c.to_dict() for c in ranking],
            }
            for text, ranking in results
        ], indent=2, ensure_ascii=False))
    else:
        for text, ranking in results:
            _render_ranking(text, ranking)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folds", "-k", type=int, default=5, show_default=True,
              help="Number of cross-validation folds.")
@click.option("--seed", type=int, default=42, show_default=True,
              help="Random seed for fold assignment.")
@click.option("--top-k", type=click.IntRange(min=1), default=2, show_default=True,
              help="Count a document as a top-k hit if its class ranks within K.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def evaluate(
    settings: Settings,
    corpus: Path,
    folds: int,
    seed: int,
    top_k: int,
    output: str,
) -> None:
    """Cross-validate the classifier on CORPUS.

    Example: bayes-text evaluate -k 3 reviews.tsv
    """
    try:
        data = load_corpus(corpus)
        with console.status("[bold blue]Cross-validating...", spinner="dots"):
            results = cross_validate(
                data.documents,
                data.labels,
                k=folds,
                classifier_kwargs=settings.classifier_kwargs(),
                seed=seed,
                top_k=top_k,
            )
    except _HANDLED_ERRORS as e:
        _fail(e)
        return

    if output == "json":
        click.echo(json.dumps([m.to_dict() for m in results], indent=2, ensure_ascii=False))
    else:
        _render_folds(results)


@main.command()
@click.argument("texts", nargs=-1)
@click.pass_obj
def demo(settings: Settings, texts: tuple[str, ...]) -> None:
    """Classify TEXTS with a model trained on built-in Russian samples.

    Without TEXTS the sample sentences themselves are classified.
    """
    demo_settings = Settings(
        language="russian",
        smoothing=settings.smoothing,
        keep_stops=settings.keep_stops,
    )
    classifier = demo_settings.build_classifier()
    for label, docs in SENTIMENT_SAMPLES.items():
        classifier.add_documents(docs, label)
    classifier.train()

    if not texts:
        texts = tuple(doc for docs in SENTIMENT_SAMPLES.values() for doc in docs)

    table = Table(title="Sentiment demo", show_lines=False)
    table.add_column("Sentence", style="white")
    table.add_column("Class", style="cyan")
    table.add_column("Verdict")

    for text in texts:
        label = classifier.classify(text)
        table.add_row(text, label, VERDICTS.get(label, label))

    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _rank(
    classifier: BayesClassifier,
    texts: tuple[str, ...],
) -> list[tuple[str, list[Classification]]]:
    if not classifier.is_trained:
        raise NotTrainedError()
    return [(text, classifier.get_classifications(text)) for text in texts]


def _render_ranking(text: str, ranking: list[Classification]) -> None:
    """Render the ranked classes for one document."""
    console.print(Panel(text, title=f"Predicted: [bold]{ranking[0].label}[/]", border_style="blue"))

    table = Table(show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Class", style="cyan")
    table.add_column("Score", justify="right")

    for i, c in enumerate(ranking, 1):
        table.add_row(str(i), c.label, f"{c.value:.6g}")

    console.print(table)
    console.print()


def _render_folds(results: list[EvaluationReport]) -> None:
    """Render per-fold cross-validation reports."""
    top_k = results[0].top_k if results else 2
    table = Table(title="Cross-validation", show_lines=False)
    table.add_column("Fold", justify="right", width=6)
    table.add_column("Docs", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column(f"Top-{top_k}", justify="right")
    table.add_column("Mean margin", justify="right")

    for i, r in enumerate(results, 1):
        table.add_row(
            str(i),
            str(len(r)),
            f"{r.accuracy:.2%}",
            f"{r.top_k_accuracy:.2%}",
            f"{r.mean_margin:.4f}",
        )

    console.print(table)
    if results:
        mean_acc = sum(r.accuracy for r in results) / len(results)
        console.print(f"Mean accuracy: [bold]{mean_acc:.2%}[/]")
    console.print()


if __name__ == "__main__":
    main()
