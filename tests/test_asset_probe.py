from gamex.asset_probe import AssetProbe, file_exists


def test_file_exists(tmp_path):
    f = tmp_path / "a.txt"
    f.write_text("x")
    assert file_exists(str(f)) is True
    assert file_exists(str(tmp_path)) is True
    assert file_exists(str(tmp_path / "missing")) is False


def test_probe_in_added_path(tmp_path, monkeypatch):
    monkeypatch.delenv("GAMEX_ASSETS_DIR", raising=False)
    (tmp_path / "a.txt").write_text("x")
    probe = AssetProbe()
    prefix = str(tmp_path) + "/"
    probe.add_search_path(prefix)
    assert probe.probe_asset("a.txt") == prefix + "a.txt"


def test_missing_asset_returns_none(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    probe = AssetProbe(assets_dir=str(tmp_path) + "/")
    assert probe.probe_asset("nothing_here.bin") is None


def test_first_search_path_wins(tmp_path, monkeypatch):
    other = tmp_path / "other"
    other.mkdir()
    (other / "a.txt").write_text("x")
    (tmp_path / "a.txt").write_text("y")
    monkeypatch.chdir(tmp_path)
    probe = AssetProbe(assets_dir=str(other) + "/")
    assert probe.probe_asset("a.txt") == "a.txt"


def test_assets_subdirectory_is_searched(tmp_path, monkeypatch):
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "m.obj").write_text("x")
    monkeypatch.chdir(tmp_path)
    assert AssetProbe().probe_asset("m.obj") == "assets/m.obj"


def test_assets_dir_argument(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    d = tmp_path / "data"
    d.mkdir()
    (d / "t.png").write_text("x")
    probe = AssetProbe(assets_dir=str(d) + "/")
    assert probe.search_paths[-1] == str(d) + "/"
    assert probe.probe_asset("t.png") == str(d) + "/t.png"


def test_public_instance_is_shared():
    probe = AssetProbe.public_instance()
    assert AssetProbe.public_instance() is probe
    assert list(probe.search_paths[:3]) == ["", "assets/", "../assets/"]