import pytest

import publish


class FakeBuilder:
    built = []

    def __init__(self, config, verbose=False):
        self.config = config

    def build(self, engine):
        FakeBuilder.built.append((self.config.book_name, engine.executable))
        return True


def test_bare_publication_argument_runs_build(publication_dir, monkeypatch, capsys):
    FakeBuilder.built = []
    monkeypatch.setitem(publish.BUILDERS, "mobi", FakeBuilder)

    publish.main([str(publication_dir)])

    assert FakeBuilder.built == [("Reactive Spring", "asciidoctor-epub3")]
    assert "built successfully" in capsys.readouterr().out


def test_build_exits_nonzero_when_builder_fails(publication_dir, monkeypatch):
    class FailingBuilder(FakeBuilder):
        def build(self, engine):
            return False

    monkeypatch.setitem(publish.BUILDERS, "mobi", FailingBuilder)

    with pytest.raises(SystemExit) as excinfo:
        publish.main(["build", str(publication_dir)])
    assert excinfo.value.code == 1


def test_unknown_publication_exits(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        publish.main(["build", "nowhere"])

    assert excinfo.value.code == 1
    assert "Could not find publication" in capsys.readouterr().out


def test_invalid_config_exits(publication_dir, capsys):
    (publication_dir / "publication.yaml").write_text("book_name: Book\n")

    with pytest.raises(SystemExit):
        publish.main(["build", str(publication_dir)])
    assert "mobi.isbn" in capsys.readouterr().out


def test_fetch_ensures_kindlegen(publication_dir, monkeypatch, capsys):
    def fake_ensure(kindlegen, mac, nix, verbose=False):
        binary = kindlegen["binary_location"]
        publication_dir.joinpath("bin", "kindlegen").mkdir(parents=True)
        with open(binary, "w") as f:
            f.write("")
        return binary

    monkeypatch.setattr(publish, "detect_platform", lambda: (False, True))
    monkeypatch.setattr(publish, "ensure_kindlegen", fake_ensure)

    publish.main(["fetch", str(publication_dir)])

    assert "✓" in capsys.readouterr().out


def test_fetch_rejects_unsupported_platform(publication_dir, monkeypatch, capsys):
    monkeypatch.setattr(publish, "detect_platform", lambda: (False, False))

    with pytest.raises(SystemExit):
        publish.main(["fetch", str(publication_dir)])
    assert "Error:" in capsys.readouterr().out


def test_find_publication_by_keyword(tmp_path, publication_dir, monkeypatch):
    publications = tmp_path / "publications"
    publications.mkdir()
    publication_dir.rename(publications / "rsb")
    monkeypatch.chdir(tmp_path)

    assert publish.find_publication_dir("reactive", str(tmp_path)) == str(publications / "rsb")
    assert publish.find_publication_dir("rsb", str(tmp_path)) == str(publications / "rsb")
    assert publish.find_publication_dir("missing", str(tmp_path)) is None


def test_require_flag_reaches_engine(publication_dir, monkeypatch):
    FakeBuilder.built = []
    seen = []

    class RequiresBuilder(FakeBuilder):
        def build(self, engine):
            seen.append(engine.requires)
            return True

    monkeypatch.setitem(publish.BUILDERS, "mobi", RequiresBuilder)

    publish.main(["build", str(publication_dir), "-r", "asciidoctor-diagram", "-r", "rouge"])

    assert seen == [["asciidoctor-diagram", "rouge"]]


def test_run_writes_traceback_on_unexpected_error(tmp_path, monkeypatch, capsys):
    def broken(argv=None):
        raise RuntimeError("disk on fire")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(publish, "main", broken)

    with pytest.raises(SystemExit) as excinfo:
        publish.run()

    assert excinfo.value.code == 1
    assert "disk on fire" in capsys.readouterr().out
    log = (tmp_path / "build_error.log").read_text()
    assert "RuntimeError: disk on fire" in log


def test_run_reports_cancel_on_ctrl_c(tmp_path, monkeypatch, capsys):
    def interrupted(argv=None):
        raise KeyboardInterrupt

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(publish, "main", interrupted)

    with pytest.raises(SystemExit) as excinfo:
        publish.run()

    assert excinfo.value.code == 1
    assert "Cancelled." in capsys.readouterr().out
    assert not (tmp_path / "build_error.log").exists()
