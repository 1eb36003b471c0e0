from pathlib import Path

import pytest

from select2text.exclusion_rules import DEFAULT_NOISE_PATTERNS, GitIgnoreExclusionRules, default_noise_rules


@pytest.fixture
def ignore_file(tmp_path):
    path = tmp_path / ".gitignore"
    path.write_text("*.txt\n!important.txt\ngenerated/\n# comment\n")
    return path


@pytest.mark.parametrize(
    "path,expected",
    [
        # Directories are probed with a trailing slash
        ("node_modules/", True),
        ("web/node_modules/", True),
        (".git/", True),
        ("dist/", True),
        ("build/", True),
        ("out/", True),
        ("app.log", True),
        ("logs/server.log", True),
        (".DS_Store", True),
        ("assets/Thumbs.db", True),
        # Directory-only patterns do not hide files of the same name
        ("build", False),
        ("src/", False),
        ("src/main.py", False),
        ("README.md", False),
        ("catalog.json", False),
        (".gitignore", False),
    ],
)
def test_default_noise_rules(path, expected):
    assert default_noise_rules().exclude(path) is expected, f"Failed for path: {path}"


def test_default_noise_patterns_are_gitignore_rules():
    rules = default_noise_rules()
    assert rules.has_rules()
    assert len(rules.spec.patterns) == len(DEFAULT_NOISE_PATTERNS)


def test_load_rules_from_file(ignore_file):
    rules = GitIgnoreExclusionRules(ignore_file)
    assert rules.exclude("notes.txt")
    assert not rules.exclude("important.txt")
    assert rules.exclude("generated/")
    assert not rules.exclude("main.py")


def test_load_rules_accepts_str_and_sequence(ignore_file):
    assert GitIgnoreExclusionRules(str(ignore_file)).exclude("a.txt")
    assert GitIgnoreExclusionRules([ignore_file]).exclude("a.txt")


def test_missing_rules_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        GitIgnoreExclusionRules(tmp_path / "missing")


def test_empty_rules_exclude_nothing():
    rules = GitIgnoreExclusionRules()
    assert not rules.has_rules()
    assert not rules.exclude("anything.txt")


def test_patterns_after_files_can_override(ignore_file):
    rules = GitIgnoreExclusionRules(ignore_file, patterns=["important.txt"])
    assert rules.exclude("important.txt")
    rules.add_rule("!important.txt")
    assert not rules.exclude("important.txt")


def test_noise_rules_extend_in_order(tmp_path):
    rules = default_noise_rules()
    extra = tmp_path / "extra-ignore"
    extra.write_text("!keep.log\n")
    rules.load_rules(Path(extra))
    assert rules.exclude("debug.log")
    assert not rules.exclude("keep.log")
