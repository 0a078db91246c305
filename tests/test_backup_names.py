import sys
import os
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from backup_names import (
    BackupNamer,
    get_original_from_backup,
    group_backups,
    next_backup_name,
    select_backups_to_prune,
)
from config import ConfigManager
from grammar import ParseFailure

SAVE_FOLDER_LISTING = [
    "user1.dat",
    "user1.dat.bak2",
    "user1.dat.bak",
    "user1.dat.bak10",
    "user2_1.0.28891.dat",
    "user2_1.0.28891.dat.bak1",
    "__pin__user3.dat.bak5",
    "shared.dat",
    "readme.txt",
]


def test_get_original_from_numbered_backup():
    """Tests that a numbered backup maps back to its live save."""
    assert get_original_from_backup("user2.dat.bak13") == "user2.dat"

def test_get_original_keeps_version_and_internal_tag():
    """Tests that the version and internal tag survive the mapping."""
    assert get_original_from_backup("__pin__user4_1.0.28650.dat.bak") == "__pin__user4_1.0.28650.dat"

def test_get_original_returns_none_for_live_save():
    """Tests that a live save is not treated as a backup."""
    assert get_original_from_backup("user2.dat") is None

def test_get_original_returns_none_for_invalid_format():
    """Tests that a name outside the naming scheme returns None."""
    assert get_original_from_backup("NotAValidBackup.txt") is None

def test_get_original_handles_none_and_empty_string():
    """Tests that the function handles None and empty string inputs gracefully."""
    assert get_original_from_backup(None) is None
    assert get_original_from_backup("") is None


def test_group_backups_orders_by_number():
    """Tests that backups are grouped per save, oldest first, and other files are skipped."""
    grouped = group_backups(SAVE_FOLDER_LISTING)
    assert grouped == {
        "user1.dat": ["user1.dat.bak", "user1.dat.bak2", "user1.dat.bak10"],
        "user2_1.0.28891.dat": ["user2_1.0.28891.dat.bak1"],
        "__pin__user3.dat": ["__pin__user3.dat.bak5"],
    }

def test_group_backups_empty():
    """Tests that an empty listing gives no groups."""
    assert group_backups([]) == {}


def test_next_backup_name_continues_numbering():
    """Tests that the next backup is numbered past the highest existing one."""
    assert next_backup_name("user1.dat", SAVE_FOLDER_LISTING) == "user1.dat.bak11"

def test_next_backup_name_after_unnumbered_backup():
    """Tests that an unnumbered backup counts as number 0."""
    assert next_backup_name("user1.dat", ["user1.dat.bak"]) == "user1.dat.bak1"

def test_next_backup_name_first_backup():
    """Tests that the first backup of a save gets the default first id."""
    assert next_backup_name("user2.dat", SAVE_FOLDER_LISTING) == "user2.dat.bak1"

def test_next_backup_name_first_backup_without_number():
    """Tests that an empty first id gives an unnumbered backup."""
    assert next_backup_name("user2.dat", [], first_backup_id="") == "user2.dat.bak"

def test_next_backup_name_never_goes_below_first_id():
    """Tests that existing low-numbered backups do not undercut the configured first id."""
    assert next_backup_name("user1.dat", ["user1.dat.bak"], first_backup_id="5") == "user1.dat.bak5"
    assert next_backup_name("user1.dat", ["user1.dat.bak7"], first_backup_id="5") == "user1.dat.bak8"

def test_next_backup_name_ignores_other_saves():
    """Tests that backups of a different save do not affect the numbering."""
    assert next_backup_name("user2_1.0.28891.dat", SAVE_FOLDER_LISTING) == "user2_1.0.28891.dat.bak2"

def test_next_backup_name_rejects_backup():
    """Tests that a backup cannot be backed up again."""
    with pytest.raises(ValueError, match="already a backup"):
        next_backup_name("user1.dat.bak2", [])

def test_next_backup_name_rejects_unknown_name():
    """Tests that a name outside the scheme cannot be backed up."""
    with pytest.raises(ParseFailure):
        next_backup_name("readme.txt", [])


def test_prune_keeps_newest_backups():
    """Tests that only the backups beyond the limit are selected, oldest first."""
    assert select_backups_to_prune(SAVE_FOLDER_LISTING, 1) == ["user1.dat.bak", "user1.dat.bak2"]

def test_prune_nothing_under_limit():
    """Tests that nothing is pruned while every save is within the limit."""
    assert select_backups_to_prune(SAVE_FOLDER_LISTING, 3) == []

def test_prune_zero_keeps_nothing():
    """Tests that a limit of zero selects every backup but no live save."""
    to_prune = select_backups_to_prune(SAVE_FOLDER_LISTING, 0)
    assert len(to_prune) == 5
    assert "user1.dat" not in to_prune

def test_prune_rejects_negative_count():
    """Tests that a negative limit is rejected."""
    with pytest.raises(ValueError):
        select_backups_to_prune(SAVE_FOLDER_LISTING, -1)

def test_prune_logs_each_save_over_limit(mocker):
    """Tests that one debug message is logged per save that has too many backups."""
    mock_logger = mocker.patch("backup_names.logger")
    select_backups_to_prune(SAVE_FOLDER_LISTING, 0)
    assert mock_logger.debug.call_count == 3


@pytest.fixture
def config_path(tmp_path):
    """A fixture that provides a path to a temporary config file."""
    return tmp_path / "config.json"

def test_namer_uses_defaults_without_config_file(config_path):
    """Tests that a namer built from default settings keeps 10 backups starting at 1."""
    settings = ConfigManager(config_file=str(config_path)).load_settings()
    namer = BackupNamer.from_settings(settings)

    assert namer.backup_count == 10
    assert namer.next_backup_name("user2.dat", []) == "user2.dat.bak1"

def test_namer_uses_saved_settings(config_path):
    """Tests that saved settings drive numbering and pruning."""
    manager = ConfigManager(config_file=str(config_path))
    manager.save_settings({"backup_count": 1, "first_backup_id": ""})

    namer = BackupNamer.from_settings(ConfigManager(config_file=str(config_path)).load_settings())

    assert namer.next_backup_name("user2.dat", SAVE_FOLDER_LISTING) == "user2.dat.bak"
    assert namer.backups_to_prune(SAVE_FOLDER_LISTING) == ["user1.dat.bak", "user1.dat.bak2"]

@pytest.mark.parametrize("settings", [
    {"backup_count": -1},
    {"first_backup_id": "one"},
    {"first_backup_id": 1},
])
def test_namer_rejects_bad_settings(settings):
    """Tests that invalid settings are rejected when the namer is built."""
    with pytest.raises(ValueError):
        BackupNamer.from_settings(settings)
