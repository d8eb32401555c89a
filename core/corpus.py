import random
from pathlib import Path
from typing import List, Optional

from bs4 import BeautifulSoup

from models.article import Corpus, CorpusEntry
from .logger import log_event


def extract_title(html: str) -> str:
    """Text of the first <h1>, or an empty string."""
    soup = BeautifulSoup(html, "html.parser")
    h1 = soup.find("h1")
    if h1 is None:
        return ""
    return h1.get_text(" ", strip=True)


def read_corpus(articles_dir) -> Corpus:
    """
    Scan the article directory.

    Every *.html stem goes into `keys`; only files with a readable <h1> become
    entries. Entries are ordered most recently modified first. A missing
    directory is an empty corpus.
    """
    path = Path(articles_dir)
    corpus = Corpus()
    if not path.is_dir():
        return corpus

    for file_path in path.glob("*.html"):
        if not file_path.is_file():
            continue
        corpus.keys.add(file_path.stem)
        try:
            title = extract_title(file_path.read_text(encoding="utf-8"))
            modified = file_path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as err:
            log_event("WARNING", f"Skipping unreadable article {file_path.name}: {err}")
            continue
        if not title:
            log_event("WARNING", f"Skipping article without <h1>: {file_path.name}")
            continue
        corpus.entries.append(
            CorpusEntry(file=file_path.name, name=file_path.stem, title=title, modified=modified)
        )

    corpus.entries.sort(key=lambda e: (-e.modified, e.name))
    return corpus


def sample_related(
    entries: List[CorpusEntry],
    exclude: str,
    rng: Optional[random.Random] = None,
    k: int = 3,
) -> List[CorpusEntry]:
    """Pick up to k distinct entries uniformly at random, never the current slug."""
    rng = rng or random.Random()
    candidates = sorted((e for e in entries if e.name != exclude), key=lambda e: e.name)
    return rng.sample(candidates, min(k, len(candidates)))
