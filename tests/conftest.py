import os

import pytest


def build_tree(root, layout):
    """Create files and directories under root.

    layout maps relative paths to a size in bytes; a path ending in "/"
    is created as an (empty) directory.
    """
    for rel, size in layout.items():
        path = os.path.join(root, *rel.rstrip("/").split("/"))
        if rel.endswith("/"):
            os.makedirs(path, exist_ok=True)
            continue
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(b"x" * size)
    return str(root)


@pytest.fixture
def make_tree(tmp_path):
    def _make(layout, name="root"):
        root = tmp_path / name
        root.mkdir()
        return build_tree(root, layout)
    return _make


@pytest.fixture
def medium_layout():
    # root/
    # ├── config.txt        20
    # ├── docs/
    # │   └── guide.txt     300
    # ├── empty/
    # └── src/
    #     ├── main.py       150
    #     └── utils/
    #         ├── helper.py 4000
    #         ├── parser.py 150
    #         └── zero.bin  0
    return {
        "config.txt": 20,
        "docs/guide.txt": 300,
        "empty/": None,
        "src/main.py": 150,
        "src/utils/helper.py": 4000,
        "src/utils/parser.py": 150,
        "src/utils/zero.bin": 0,
    }
