import pytest

from debtradar.imports import build_import_graph, extract_imports, normalize_import_path


@pytest.mark.parametrize(
    "from_file,target,expected",
    [
        ("src/app.ts", "./util", "src/util.ts"),
        ("src/app.ts", "./util.js", "src/util.js"),
        ("src/deep/app.ts", "../lib/x", "src/lib/x.ts"),
        ("src/a/b/c.tsx", "../../shared/./y.jsx", "src/shared/y.jsx"),
        ("main.js", "./helpers/index", "helpers/index.ts"),
        ("src/app.ts", "./styles.css", "src/styles.css.ts"),
    ],
)
def test_normalize_import_path(from_file, target, expected):
    assert normalize_import_path(from_file, target) == expected


def test_extract_import_forms():
    src = """
    import './side-effect';
    import { a } from "./a";
    export * from './b';
    const c = require('./c');
    const d = await import('./d');
    import React from 'react';
    """
    assert list(extract_imports(src)) == ["./side-effect", "./a", "./b", "./c", "./d", "react"]


def test_fan_in_counts_distinct_importing_files(workspace):
    root = workspace(
        {
            "src/util.ts": "export const x = 1;\n",
            "src/a.ts": "import { x } from './util';\nimport { x as y } from './util';\n",
            "src/b.ts": "const u = require('./util');\n",
            "src/nested/c.ts": "import { x } from '../util';\nimport lodash from 'lodash';\n",
            "src/d.py": "from .util import x\n",
        }
    )
    files = ["src/util.ts", "src/a.ts", "src/b.ts", "src/nested/c.ts", "src/d.py", "src/missing.ts"]

    graph = build_import_graph(str(root), files)

    assert graph == {"src/util.ts": 3}
