import argparse
import random
import sys
from datetime import date
from pathlib import Path

from retrying import Retrying

from config import load_config
from core.completion_client import AnthropicClient
from core.corpus import read_corpus, sample_related
from core.errors import ArticleBotError, IndexUpdateSkipped, ServiceCallError
from core.generator import generate_article_text
from core.index_updater import update_index
from core.logger import log_event, set_log_file
from core.renderer import load_template, read_article_metadata, render_article
from core.validator import FALLBACK_FIELDS, HEX_COLOR, Fallback, normalize_response
from utils.file_handler import save_article, write_run_artifacts
from utils.text_cleaner import slugify, unique_slug


def _is_service_error(exc: Exception) -> bool:
    return isinstance(exc, ServiceCallError)


def request_article_text(client, config: dict, existing_titles, today: date) -> str:
    """Call the generator, retrying service failures when more than one attempt is configured."""
    retryer = Retrying(
        stop_max_attempt_number=max(1, config["generation_attempts"]),
        wait_fixed=config["retry_wait_seconds"] * 1000,
        retry_on_exception=_is_service_error,
        wrap_exception=False,
    )
    return retryer.call(generate_article_text, client, config, existing_titles, today)


def run_index_update(index_path, record, container_selector: str) -> bool:
    try:
        update_index(index_path, record, container_selector)
        return True
    except IndexUpdateSkipped as err:
        log_event("WARNING", f"Index update skipped: {err}")
        return False


def generate(config: dict, client=None, today: date = None, rng: random.Random = None) -> Path:
    """
    Run the whole pipeline once and return the path of the new article.

    Raises ArticleBotError (or any unexpected exception) tagged with the
    failing stage in `exc.stage`.
    """
    today = today or date.today()
    rng = rng or random.Random()
    client = client or AnthropicClient(
        config["anthropic_api_key"],
        config["anthropic_base_url"],
        config["request_timeout"]
    )
    articles_dir = Path(config["articles_dir"])

    stage = "corpus"
    try:
        corpus = read_corpus(articles_dir)
        log_event("INFO", f"Found {len(corpus.entries)} existing articles")

        stage = "generation"
        text = request_article_text(client, config, corpus.titles, today)

        stage = "validation"
        outcome = normalize_response(text, config["categories"])
        record = outcome.record
        record.slug = unique_slug(slugify(record.title), corpus.keys)
        if record.slug != slugify(record.title):
            log_event("WARNING", f"Slug already taken, using {record.slug}")
        log_event("INFO", f'Generated article: "{record.title}"', {
            "filename": record.filename,
            "category": record.category,
            "fallback": isinstance(outcome, Fallback),
        })

        stage = "render"
        template_html = load_template(config["template_path"])
        related = sample_related(corpus.entries, record.slug, rng, config["related_count"])
        article_html = render_article(template_html, record, today, related, config)

        stage = "write"
        article_path = save_article(articles_dir, record.filename, article_html)
        log_event("SUCCESS", "Article saved", {"path": str(article_path)})

        stage = "index"
        run_index_update(config["index_path"], record, config["index_container"])

        stage = "report"
        write_run_artifacts(config["output_dir"], record)
        return article_path
    except Exception as exc:
        exc.stage = stage
        raise


def reindex(config: dict, article_path) -> bool:
    """Re-run only the index update for an article that is already on disk."""
    path = Path(article_path)
    record = read_article_metadata(path.read_text(encoding="utf-8"), path.stem)
    if not HEX_COLOR.match(record.image_color):
        record.image_color = FALLBACK_FIELDS["image_color"]
    if not record.emoji:
        record.emoji = FALLBACK_FIELDS["emoji"]
    if not record.title:
        log_event("ERROR", f"No title found in {path}")
        return False
    return run_index_update(config["index_path"], record, config["index_container"])


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate one blog article with the completion service.")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--articles-dir", help="directory holding the article HTML files")
    parser.add_argument("--template", help="article HTML template")
    parser.add_argument("--index", help="listing page that receives the article card")
    parser.add_argument("--output-dir", help="where the title marker and run report are written")
    parser.add_argument("--seed", type=int, help="seed for related-article sampling")
    parser.add_argument("--reindex", metavar="ARTICLE", help="only add the card for an existing article file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as err:
        log_event("ERROR", f"Configuration error: {err}")
        return 1

    overrides = {
        "articles_dir": args.articles_dir,
        "template_path": args.template,
        "index_path": args.index,
        "output_dir": args.output_dir,
    }
    config.update({k: v for k, v in overrides.items() if v})
    set_log_file(config["log_file"])

    if args.reindex:
        try:
            return 0 if reindex(config, args.reindex) else 1
        except (OSError, UnicodeDecodeError) as err:
            log_event("ERROR", f"Cannot read article {args.reindex}: {err}")
            return 1

    rng = random.Random(args.seed) if args.seed is not None else random.Random()
    try:
        article_path = generate(config, rng=rng)
    except ArticleBotError as err:
        log_event("ERROR", f"Article generation failed: {err}", {
            "stage": getattr(err, "stage", None),
            "error_type": type(err).__name__,
        })
        return 1
    except Exception as err:
        log_event("ERROR", f"Unexpected failure: {err!r}", {"stage": getattr(err, "stage", None)})
        return 1

    print(f"Article published: {article_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
