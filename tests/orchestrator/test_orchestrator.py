from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from conftest import article_payload, write_dataset
from news_aggregator.config import RunConfig
from news_aggregator.errors import ConfigError
from news_aggregator.orchestrator import Orchestrator

DOCUMENTS = [
    [
        article_payload(
            "a1",
            author="Bob",
            language="english",
            text="The market rallies and the market cheers",
            categories=["Economy, Finance", "World,  News"],
            published="2024-04-02T08:00:00",
        ),
        article_payload("a2", "Shared headline", author="Alice", language="french"),
        article_payload("a3", author="Alice", language="english", text="Rain again", categories=["Sport", "Sport"]),
    ],
    [
        article_payload("b1", "Shared headline", author="Carol"),
        article_payload("b2", author="Bob", language="german", categories=["Tech"], published="2024-04-03T09:00:00"),
        article_payload("dup", "first dup", language="english", text="gone gone"),
    ],
    [
        article_payload("c1", author="Alice", language="english", text="Market news", categories=["Sport"]),
        article_payload("dup", "second dup", author="Bob"),
        article_payload("c2", author="Bob", language="spanish", categories=["Unknown"]),
    ],
]


def _outputs(directory: Path) -> dict[str, bytes]:
    return {path.name: path.read_bytes() for path in sorted(directory.glob("*.txt"))}


def _run(root: Path, workers: int, order=None) -> dict[str, bytes]:
    articles_file, auxiliary_file = write_dataset(root, DOCUMENTS, order=order)
    output_dir = root / "out"
    config = RunConfig(
        workers=workers,
        articles_file=articles_file,
        auxiliary_file=auxiliary_file,
        output_dir=output_dir,
    )
    Orchestrator().run(config)
    return _outputs(output_dir)


def test_end_to_end_artifacts(tmp_path: Path) -> None:
    outputs = _run(tmp_path, workers=2)

    assert set(outputs) == {
        "all_articles.txt",
        "keywords_count.txt",
        "reports.txt",
        "Economy_Finance.txt",
        "World_News.txt",
        "Sport.txt",
        "Tech.txt",
        "english.txt",
        "german.txt",
    }
    lines = outputs["all_articles.txt"].decode().splitlines()
    assert lines == [
        "a3 2024-05-01T10:00:00",
        "c1 2024-05-01T10:00:00",
        "c2 2024-05-01T10:00:00",
        "b2 2024-04-03T09:00:00",
        "a1 2024-04-02T08:00:00",
    ]
    assert outputs["Sport.txt"] == b"a3\nc1\n"
    assert outputs["english.txt"] == b"a1\na3\nc1\n"
    assert outputs["keywords_count.txt"].decode().splitlines() == [
        "market 2",
        "again 1",
        "cheers 1",
        "news 1",
        "rain 1",
        "rallies 1",
    ]
    assert outputs["reports.txt"].decode().splitlines() == [
        "duplicates_found - 4",
        "unique_articles - 5",
        "best_author - Bob 3",
        "top_language - english 3",
        "top_category - Sport 2",
        "most_recent_article - 2024-05-01T10:00:00 https://news.example/a3",
        "top_keyword_en - market 2",
    ]


@pytest.mark.parametrize("workers", [1, 2, 3, 8])
def test_outputs_do_not_depend_on_file_order_or_workers(tmp_path: Path, workers: int) -> None:
    baseline = _run(tmp_path / "baseline", workers=1)
    for index, order in enumerate(itertools.permutations(range(len(DOCUMENTS)))):
        assert _run(tmp_path / f"{workers}-{index}", workers=workers, order=order) == baseline


def test_empty_input_writes_sentinel_report(tmp_path: Path) -> None:
    articles_file, auxiliary_file = write_dataset(tmp_path, [[]])
    config = RunConfig(
        workers=2, articles_file=articles_file, auxiliary_file=auxiliary_file, output_dir=tmp_path / "out"
    )
    result = Orchestrator().run(config)

    assert result.report.unique_articles == 0
    outputs = _outputs(tmp_path / "out")
    assert set(outputs) == {"all_articles.txt", "keywords_count.txt", "reports.txt"}
    assert outputs["reports.txt"].decode().splitlines() == [
        "duplicates_found - 0",
        "unique_articles - 0",
        "best_author - - 0",
        "top_language - - 0",
        "top_category - - 0",
        "most_recent_article - - -",
        "top_keyword_en - - 0",
    ]


def test_broken_file_is_skipped(tmp_path: Path) -> None:
    documents = [DOCUMENTS[0], "[{broken"]
    articles_file, auxiliary_file = write_dataset(tmp_path, documents)
    config = RunConfig(
        workers=2, articles_file=articles_file, auxiliary_file=auxiliary_file, output_dir=tmp_path / "out"
    )
    result = Orchestrator().run(config)

    assert result.summary.files_failed == 1
    assert result.report.unique_articles == 3
    assert (tmp_path / "out" / "reports.txt").exists()


def test_config_error_aborts_before_output(tmp_path: Path) -> None:
    articles_file, _ = write_dataset(tmp_path, [DOCUMENTS[0]])
    config = RunConfig(
        workers=2,
        articles_file=articles_file,
        auxiliary_file=tmp_path / "missing.txt",
        output_dir=tmp_path / "out",
    )
    with pytest.raises(ConfigError):
        Orchestrator().run(config)
    assert not (tmp_path / "out").exists()


def test_bad_record_does_not_discard_its_neighbours(tmp_path: Path) -> None:
    documents = [[article_payload("u5"), {"uuid": "u6"}, article_payload("u7")]]
    articles_file, auxiliary_file = write_dataset(tmp_path, documents)
    config = RunConfig(
        workers=1, articles_file=articles_file, auxiliary_file=auxiliary_file, output_dir=tmp_path / "out"
    )
    result = Orchestrator().run(config)

    assert result.summary.files_failed == 0
    assert result.summary.records_skipped == 1
    assert [article.uuid for article in result.report.articles] == ["u5", "u7"]
