import textwrap

import pytest


@pytest.fixture
def publication_dir(tmp_path, monkeypatch):
    """A minimal publication: publication.yaml + index.adoc under docs/."""
    monkeypatch.delenv("KINDLEGEN", raising=False)
    pub = tmp_path / "docs"
    pub.mkdir()
    (pub / "index.adoc").write_text("= Reactive Spring\n\ninclude::chapter1.adoc[]\n")
    (pub / "publication.yaml").write_text(
        textwrap.dedent(
            """\
            book_name: Reactive Spring
            code: https://github.com/reactive-spring-book
            mobi:
              isbn: 978-1-7329104-1-8
              kindlegen:
                binary_location: bin/kindlegen/kindlegen
            """
        )
    )
    return pub
