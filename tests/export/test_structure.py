from select2text.export.structure import StructureNode, build_structure, render_structure, stream_structure


def test_build_structure_shares_directories():
    root = build_structure(["src/a.ts", "src/b.ts", "src/lib/c.ts"])
    assert [node.name for node in root.children] == ["src"]
    src = root.child("src")
    assert src.is_dir
    assert sorted(node.name for node in src.children) == ["a.ts", "b.ts", "lib"]
    assert not src.child("a.ts").is_dir
    assert src.child("missing") is None


def test_build_structure_ignores_dot_and_empty_segments():
    root = build_structure(["./README.md"])
    assert [node.name for node in root.children] == ["README.md"]


def test_render_structure_orders_directories_first():
    rendered = render_structure(["z.md", "a.md", "src/main.ts", "docs/guide.md"])
    assert rendered.split("\n") == [
        "├── docs/",
        "│   └── guide.md",
        "├── src/",
        "│   └── main.ts",
        "├── a.md",
        "└── z.md",
    ]


def test_render_structure_nested_prefixes():
    rendered = render_structure(["a/b/c/d.txt", "a/e.txt"])
    assert rendered == "└── a/\n    ├── b/\n    │   └── c/\n    │       └── d.txt\n    └── e.txt"


def test_render_structure_empty():
    assert render_structure([]) == ""


def test_stream_structure_skips_root():
    root = StructureNode("project", is_dir=True)
    StructureNode("only.txt", parent=root)
    assert list(stream_structure(root)) == ["└── only.txt"]
