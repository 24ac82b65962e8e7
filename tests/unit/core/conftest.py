"""Shared sample documents for core unit tests"""

import pytest


SAMPLE_MD = """\
# Getting Started

This guide walks through **installing** the tool and [configuring](https://example.com/config) it.

```bash
pip install postdraft
```

Use `postdraft init` to create the database.
"""

SAMPLE_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Page Title</title><style>h1 { color: red; }</style></head>
<body>
<h1>Release <em>Notes</em></h1>
<p>Version 2 ships <strong>faster</strong> imports &amp; a new editor.</p>
<ul><li>One</li><li>Two</li></ul>
</body>
</html>
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture() -> str:
    return SAMPLE_MD


@pytest.fixture(name="sample_html")
def sample_html_fixture() -> str:
    return SAMPLE_HTML
