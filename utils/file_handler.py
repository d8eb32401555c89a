import json
from pathlib import Path

from core.errors import NamingCollisionError

TITLE_MARKER_FILE = ".article-title"
REPORT_FILE = "article-report.txt"
SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"


def one_line(text: str) -> str:
    return " ".join(text.split())


def save_article(articles_dir, filename: str, html: str) -> Path:
    """Write a rendered article. Never replaces an existing file."""
    path = Path(articles_dir)
    path.mkdir(parents=True, exist_ok=True)
    file_path = path / filename
    try:
        with file_path.open("x", encoding="utf-8") as f:
            f.write(html)
    except FileExistsError:
        raise NamingCollisionError(f"Article already exists: {file_path}")
    return file_path


def write_run_artifacts(output_dir, record) -> tuple:
    """
    Write the title marker (one line) and the human readable run report
    picked up by the commit step.
    """
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)

    marker_path = path / TITLE_MARKER_FILE
    marker_path.write_text(one_line(record.title) + "\n", encoding="utf-8")

    report_path = path / REPORT_FILE
    report = (
        f"Title: {one_line(record.title)}\n"
        f"Category: {one_line(record.category)}\n"
        f"Filename: {record.filename}\n"
        f"Summary: {one_line(record.summary)}\n"
    )
    report_path.write_text(report, encoding="utf-8")
    return marker_path, report_path


def load_schema(schema_name: str, schema_dir=SCHEMA_DIR) -> dict:
    """Load the JSON schema file containing both example and schema."""
    path = Path(schema_dir) / f"{schema_name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_name}")
    return json.loads(path.read_text(encoding="utf-8"))
