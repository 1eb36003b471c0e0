import asyncio
from datetime import datetime, timezone

import pytest

from select2text.configuration import ExportConfiguration, get_preset
from select2text.exceptions import ConfigurationError
from select2text.export import BATCH_SIZE, TRUNCATION_MARKER, ExportPipeline, truncate_content
from select2text.file_tree import TreeModel
from select2text.types import OutputFormat, SinkKind

FIXED_TIME = datetime(2024, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def markdown(**kwargs):
    return ExportConfiguration(OutputFormat.MARKDOWN, SinkKind.FILE, **kwargs)


def plain_text(**kwargs):
    return ExportConfiguration(OutputFormat.PLAIN_TEXT, SinkKind.FILE, **kwargs)


def run_export(host, paths, config, **kwargs):
    progress = []
    pipeline = ExportPipeline(host, clock=lambda: FIXED_TIME, **kwargs)
    result = asyncio.run(pipeline.generate_export(paths, config, lambda p, m: progress.append((p, m))))
    return result, progress


def test_two_files_with_structure(project_host):
    result, _ = run_export(project_host, ["src/main.ts", "README.md"], markdown())
    content = result.content
    assert result.total_files == 2
    assert content.startswith("# LLM Context Export\n\nGenerated on: 2024-03-04T05:06:07.000Z\n\n---\n\n")
    assert "## Directory Structure\n\n```\n├── src/\n│   └── main.ts\n└── README.md\n```\n\n" in content
    assert "## File: src/main.ts\n\n```typescript\nconsole.log('hi');\n\n```\n\n" in content
    assert "## File: README.md\n\n```markdown\n# Project\n\n```\n\n" in content
    # Files follow the selection order
    assert content.index("## File: src/main.ts") < content.index("## File: README.md")
    assert "- **Total Files**: 2\n" in content
    assert result.total_bytes == len("console.log('hi');\n") + len("# Project\n")
    assert result.generated_at == FIXED_TIME


def test_read_failure_becomes_inline_error(fake_host):
    host = fake_host({"ok.txt": "fine", "secret.txt": "hidden"}, unreadable=["secret.txt"])
    result, _ = run_export(host, ["secret.txt", "ok.txt"], markdown())
    assert "## File: secret.txt\n\n**Error**: Failed to read file secret.txt: Permission denied\n\n" in result.content
    assert "## File: ok.txt" in result.content
    assert result.total_files == 1
    assert result.total_bytes == 4


def test_binary_files_never_appear(fake_host):
    host = fake_host({"a.png": b"\x89PNG", "b.ts": "let b;"})
    result, _ = run_export(host, ["a.png", "b.ts"], markdown())
    assert result.total_files == 1
    assert "a.png" not in result.content
    assert host.read == ["b.ts"]


def test_directories_and_missing_paths_are_skipped(project_host):
    result, _ = run_export(project_host, ["src", "gone.ts", "../escape.ts", "src/util.ts"], markdown())
    assert result.total_files == 1
    assert project_host.read == ["src/util.ts"]
    assert "gone.ts" not in result.content


def test_repeated_and_unnormalized_paths_are_exported_once(project_host):
    result, _ = run_export(project_host, ["./README.md", "README.md", "src\\main.ts"], markdown())
    assert result.total_files == 2
    assert project_host.read == ["README.md", "src/main.ts"]


def test_include_and_exclude_patterns(project_host):
    config = markdown(include_patterns=("**/*.ts",), exclude_patterns=("src/lib/**",))
    paths = ["README.md", "src/main.ts", "src/lib/deep.ts", "docs/guide.md"]
    result, _ = run_export(project_host, paths, config)
    assert project_host.read == ["src/main.ts"]
    assert result.total_files == 1


def test_presets_match_nested_files(fake_host):
    files = {
        "setup.py": "x = 1",
        "src/main.py": "main()",
        "src/app.ts": "app();",
        "src/notes.md": "# Notes",
        "docs/guide.md": "# Guide",
        "web/node_modules/pkg/index.js": "module.exports = 1;",
        "web/debug.log": "trace",
    }

    host = fake_host(files)
    result, _ = run_export(host, sorted(files), get_preset("source-only"))
    assert host.read == ["setup.py", "src/app.ts", "src/main.py"]
    assert result.total_files == 3

    host = fake_host(files)
    result, _ = run_export(host, sorted(files), get_preset("minimal"))
    assert host.read == ["docs/guide.md", "src/app.ts", "src/notes.md"]

    host = fake_host(files)
    run_export(host, sorted(files), get_preset("documentation"))
    assert host.read == ["docs/guide.md"]


def test_nothing_eligible_still_produces_document(project_host):
    result, progress = run_export(project_host, ["assets/logo.png"], markdown(include_structure=False))
    assert result.total_files == 0
    assert "## Directory Structure" not in result.content
    assert result.content.endswith("- **Total Files**: 0\n- **Total Size**: 0 KB\n")
    assert progress[-1] == (100.0, "Export complete!")


def test_large_file_is_truncated(fake_host):
    host = fake_host({"big.txt": "x" * 100, "small.txt": "y" * 10})
    result, _ = run_export(host, ["big.txt", "small.txt"], markdown(max_file_bytes=50))
    assert result.truncated_files == ["big.txt"]
    assert "```\n" + "x" * 40 + TRUNCATION_MARKER + "\n```" in result.content
    assert "- **Truncated Files**: 1\n\n### Truncated Files:\n- big.txt\n" in result.content
    # Totals count the original size
    assert result.total_bytes == 110


def test_file_at_limit_is_not_truncated(fake_host):
    host = fake_host({"exact.txt": "z" * 50})
    result, _ = run_export(host, ["exact.txt"], markdown(max_file_bytes=50))
    assert result.truncated_files == []
    assert TRUNCATION_MARKER not in result.content


def test_truncate_content_drops_split_character():
    # "é" is two bytes; the cut at 4 bytes lands inside the third one
    assert truncate_content("ééé", 5) == "éé" + TRUNCATION_MARKER
    assert truncate_content("ééé", 6) == "éé" + TRUNCATION_MARKER


def test_plain_text_format(project_host):
    result, _ = run_export(project_host, ["README.md"], plain_text())
    content = result.content
    assert content.startswith("LLM Context Export\nGenerated on: 2024-03-04T05:06:07.000Z\n")
    assert "Directory Structure:\n\n└── README.md\n\n" in content
    assert "=" * 19 + "\nFile: README.md\n" + "=" * 19 + "\n\n# Project\n\n\n" in content
    assert "Export Summary:\n- Total Files: 1\n" in content


def test_invalid_configuration_fails_before_io(project_host):
    pipeline = ExportPipeline(project_host)
    with pytest.raises(ConfigurationError):
        asyncio.run(pipeline.generate_export(["README.md"], {"format": "pdf", "sink": "file"}))
    assert project_host.read == []
    assert project_host.stat_calls == []


def test_configuration_mapping_is_accepted(project_host):
    config = {"format": "txt", "outputMethod": "file", "includeDirectoryStructure": False}
    result, _ = run_export(project_host, ["README.md"], config)
    assert "Directory Structure" not in result.content
    assert "File: README.md" in result.content


def test_output_is_deterministic(project_host):
    paths = ["src/util.ts", "README.md", "src/main.ts"]
    first, _ = run_export(project_host, paths, markdown())
    second, _ = run_export(project_host, paths, markdown())
    assert first.content == second.content


def test_progress_is_monotonic_and_ends_at_100(fake_host):
    files = {f"f{i:02d}.txt": str(i) for i in range(25)}
    host = fake_host(files)
    _, progress = run_export(host, sorted(files), markdown())
    values = [p for p, _ in progress]
    assert values == sorted(values)
    assert values[0] == 10
    assert values[-1] == 100
    assert all(0 <= v <= 100 for v in values)
    assert progress[1] == (20.0, "Processing f00.txt...")
    assert (95.0, "Finalizing export...") in progress


def test_progress_callback_errors_are_ignored(project_host):
    def explode(percent, message):
        raise RuntimeError("listener broke")

    pipeline = ExportPipeline(project_host)
    result = asyncio.run(pipeline.generate_export(["README.md"], markdown(), explode))
    assert result.total_files == 1


def test_files_are_read_in_batches_in_order(fake_host):
    files = {f"f{i:02d}.txt": "x" for i in range(BATCH_SIZE * 2 + 3)}
    host = fake_host(files)
    result, _ = run_export(host, sorted(files), plain_text(include_structure=False))
    assert host.read == sorted(files)
    assert result.total_files == len(files)


def test_tree_model_supplies_node_kinds(project_host):
    model = TreeModel()
    model.build_root("project", asyncio.run(project_host.list_children(".")))
    result, _ = run_export(project_host, ["src", "README.md"], markdown(), tree_model=model)
    assert project_host.stat_calls == []
    assert result.total_files == 1


def test_token_count_is_none_without_tokenizer(project_host):
    result, _ = run_export(project_host, ["README.md"], markdown())
    assert result.token_count is None
