from __future__ import annotations

import pytest
import vdf

from faugus import steam
from faugus.errors import LaunchBinaryMissing, ShortcutFormatError
from faugus.models import Game
from faugus.paths import Paths
from faugus.shortcuts import (
    ShortcutCollection,
    ShortcutRecord,
    ShortcutSynchronizer,
    is_owned,
    owned_game_id,
    shortcut_appid,
    to_signed32,
)

FAUGUS_RUN = "/usr/bin/faugus-run"

FOREIGN = {
    "appid": -1234567890,
    "AppName": "Other Launcher",
    "Exe": '"/usr/bin/other"',
    "StartDir": '"/usr/bin/"',
    "icon": "",
    "ShortcutPath": "",
    "LaunchOptions": "--fullscreen",
    "IsHidden": 0,
    "AllowOverlay": 1,
    "LastPlayTime": 1700000000,
    "tags": {"0": "favorite"},
}


def make_game(gameid="g1", title="Game One", **kwargs) -> Game:
    return Game(gameid=gameid, title=title, path=f"/games/{gameid}/game.exe", steam_shortcut=True, **kwargs)


@pytest.fixture
def shortcuts_path(tmp_path):
    path = tmp_path / "userdata" / "1234" / "config" / "shortcuts.vdf"
    path.parent.mkdir(parents=True)
    return path


@pytest.fixture
def synchronizer(shortcuts_path, tmp_path):
    return ShortcutSynchronizer(path=shortcuts_path, faugus_run=FAUGUS_RUN, icons_dir=tmp_path / "icons")


def write_foreign(path):
    path.write_bytes(vdf.binary_dumps({"shortcuts": {"0": FOREIGN}}))


def test_appid_has_high_bit_and_is_stable():
    appid = shortcut_appid(f'"{FAUGUS_RUN}"', "Game One")
    assert appid & 0x80000000
    assert appid == shortcut_appid(f'"{FAUGUS_RUN}"', "Game One")
    assert appid != shortcut_appid(f'"{FAUGUS_RUN}"', "Game Two")
    assert to_signed32(appid) < 0
    assert to_signed32(appid) & 0xFFFFFFFF == appid


def test_record_for_game(tmp_path):
    icons = tmp_path / "icons"
    icons.mkdir()
    (icons / "g1.png").write_bytes(b"png")
    record = ShortcutRecord.for_game(make_game(), FAUGUS_RUN, icons)
    assert record.exe == f'"{FAUGUS_RUN}"'
    assert record.launch_options == "--game g1"
    assert record.start_dir == "/games/g1"
    assert record.icon == str(icons / "g1.png")
    entry = record.new_entry()
    assert is_owned(entry)
    assert owned_game_id(entry) == "g1"
    assert list(entry)[:7] == ["appid", "AppName", "Exe", "StartDir", "icon", "ShortcutPath", "LaunchOptions"]


def test_sync_adds_entry_and_keeps_foreign(synchronizer, shortcuts_path):
    write_foreign(shortcuts_path)
    assert synchronizer.sync([make_game()]) is True

    collection = ShortcutCollection.load(shortcuts_path)
    assert collection.entries[0] == FOREIGN
    assert collection.owned_ids() == ["g1"]
    assert len(collection.entries) == 2


def test_sync_is_idempotent(synchronizer, shortcuts_path):
    write_foreign(shortcuts_path)
    games = [make_game(), make_game("g2", "Game Two")]
    assert synchronizer.sync(games) is True
    first = shortcuts_path.read_bytes()
    assert synchronizer.sync(games) is False
    assert shortcuts_path.read_bytes() == first


def test_foreign_only_file_is_untouched(synchronizer, shortcuts_path):
    write_foreign(shortcuts_path)
    before = shortcuts_path.read_bytes()
    assert synchronizer.sync([Game(gameid="g1", title="No Shortcut")]) is False
    assert shortcuts_path.read_bytes() == before


def test_disabled_shortcut_is_removed(synchronizer, shortcuts_path):
    write_foreign(shortcuts_path)
    synchronizer.sync([make_game(), make_game("g2", "Game Two")])
    synchronizer.sync([make_game(), make_game("g2", "Game Two", hidden=True).clone(steam_shortcut=False)])

    collection = ShortcutCollection.load(shortcuts_path)
    assert collection.owned_ids() == ["g1"]
    assert collection.entries[0] == FOREIGN


def test_renamed_title_replaces_its_entry(synchronizer, shortcuts_path):
    synchronizer.sync([make_game()])
    synchronizer.sync([make_game(title="Game One: Remastered")])

    records = ShortcutCollection.load(shortcuts_path).records()
    assert [r.app_name for r in records] == ["Game One: Remastered"]


def test_update_keeps_steam_managed_fields(synchronizer, shortcuts_path):
    synchronizer.sync([make_game()])
    collection = ShortcutCollection.load(shortcuts_path)
    collection.entries[0]["LastPlayTime"] = 1710000000
    collection.entries[0]["tags"] = {"0": "rpg"}
    collection.save(shortcuts_path)

    synchronizer.sync([make_game(game_arguments="-windowed").clone(path="/elsewhere/game.exe")])
    [entry] = ShortcutCollection.load(shortcuts_path).entries
    assert entry["StartDir"] == "/elsewhere"
    assert entry["LastPlayTime"] == 1710000000
    assert entry["tags"] == {"0": "rpg"}


def test_missing_file_starts_empty(synchronizer, shortcuts_path):
    assert synchronizer.sync([]) is False
    assert not shortcuts_path.exists()
    assert synchronizer.sync([make_game()]) is True
    assert shortcuts_path.exists()


@pytest.mark.parametrize(
    "document",
    [
        {"other": {"a": "b"}},
        {"shortcuts": {"0": "not an object"}},
    ],
)
def test_malformed_collection(document):
    with pytest.raises(ShortcutFormatError):
        ShortcutCollection.loads(vdf.binary_dumps(document))


def test_missing_faugus_run(shortcuts_path, tmp_path, monkeypatch):
    monkeypatch.setattr(Paths, "find_binary", staticmethod(lambda name: None))
    synchronizer = ShortcutSynchronizer(path=shortcuts_path, icons_dir=tmp_path)
    with pytest.raises(LaunchBinaryMissing):
        synchronizer.sync([make_game()])
    assert synchronizer.sync([Game(gameid="g1", title="No Shortcut")]) is False


def test_no_steam_install(home, tmp_path):
    synchronizer = ShortcutSynchronizer(faugus_run=FAUGUS_RUN, icons_dir=tmp_path)
    assert synchronizer.path is None
    assert synchronizer.sync([make_game()]) is False


def test_steam_user_discovery(home, monkeypatch):
    root = home / "steam-root"
    (root / "userdata" / "0").mkdir(parents=True)
    (root / "userdata" / "111").mkdir()
    (root / "userdata" / "12345").mkdir()
    (root / "config").mkdir()
    (root / "config" / "loginusers.vdf").write_text(
        vdf.dumps(
            {
                "users": {
                    str(steam.STEAMID64_BASE + 111): {"AccountName": "old", "MostRecent": "0"},
                    str(steam.STEAMID64_BASE + 12345): {"AccountName": "player", "MostRecent": "1"},
                }
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("STEAM_ROOT", str(root))

    assert steam.find_steam_root() == root
    assert steam.find_user_id(root) == "12345"
    assert steam.shortcuts_vdf_path() == root / "userdata" / "12345" / "config" / "shortcuts.vdf"


def test_steam_user_without_login_file(tmp_path):
    (tmp_path / "userdata" / "0").mkdir(parents=True)
    (tmp_path / "userdata" / "42").mkdir()
    assert steam.find_user_id(tmp_path) == "42"


@pytest.mark.parametrize(
    "data",
    [
        b"\x00shortcuts\x00\x02appid\x00\x01",
        b"\x00shortcuts\x00\x02appid\x00\x01\x00\x00\x00",
    ],
)
def test_truncated_collection(data, tmp_path):
    path = tmp_path / "shortcuts.vdf"
    path.write_bytes(data)
    with pytest.raises(ShortcutFormatError):
        ShortcutCollection.load(path)
