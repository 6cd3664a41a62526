"""Shared fixtures for generated files and their source maps."""

import base64
import json
from pathlib import Path

import pytest

from tests.helpers import SOURCE_MAP, GeneratedTree, inline_comment


@pytest.fixture
def tree(tmp_path: Path) -> GeneratedTree:
    """Write generated files covering each way a map can be found or fail.

    - ``app.js``: external map ``app.js.map``
    - ``inline.js``: the same map inlined
    - ``plain.js``: no mapping comment
    - ``missing.js``: references a map file that does not exist
    - ``broken.js``: references a map file holding invalid JSON
    - ``broken-inline.js``: inline map holding invalid JSON
    """
    generated = GeneratedTree(root=tmp_path)
    generated.write("app.js.map", json.dumps(SOURCE_MAP))
    generated.generated("app.js", "//# sourceMappingURL=app.js.map")
    generated.generated("inline.js", inline_comment(SOURCE_MAP))
    generated.generated("plain.js", "// no map here")
    generated.generated("missing.js", "//# sourceMappingURL=missing.js.map")
    generated.write("broken.js.map", "{not json")
    generated.generated("broken.js", "//# sourceMappingURL=broken.js.map")
    generated.generated(
        "broken-inline.js",
        "//# sourceMappingURL=data:application/json;base64,"
        + base64.b64encode(b"{not json").decode("ascii"),
    )
    return generated
