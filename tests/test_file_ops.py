import pytest

from conftest import make_tree
from jumper.core.errors import AlreadyExistsError, JumperError, NoUniqueDestinationError, NotFoundError
from jumper.core.file_ops import (
    FileOperationEngine,
    disambiguated_name,
    unique_destination,
)


def test_disambiguated_name_inserts_counter_before_extension():
    assert disambiguated_name("a.txt", 1, is_directory=False) == "a (1).txt"
    assert disambiguated_name("archive.tar.gz", 2, is_directory=False) == "archive.tar (2).gz"
    assert disambiguated_name("Makefile", 3, is_directory=False) == "Makefile (3)"
    assert disambiguated_name(".bashrc", 1, is_directory=False) == ".bashrc (1)"
    assert disambiguated_name("photos.d", 1, is_directory=True) == "photos.d (1)"


def test_unique_destination_returns_original_name_when_free(tmp_path):
    assert unique_destination(tmp_path, "a.txt", is_directory=False) == tmp_path / "a.txt"


def test_unique_destination_raises_after_bound(tmp_path):
    make_tree(tmp_path, "a.txt", "a (1).txt", "a (2).txt")
    with pytest.raises(NoUniqueDestinationError):
        unique_destination(tmp_path, "a.txt", is_directory=False, max_attempts=2)
    assert unique_destination(tmp_path, "a.txt", is_directory=False, max_attempts=3) == tmp_path / "a (3).txt"


def test_copy_into_same_directory_picks_next_free_suffix(tmp_path):
    make_tree(tmp_path, "a.txt")
    engine = FileOperationEngine()
    first = engine.copy([tmp_path / "a.txt"], tmp_path)
    second = engine.copy([tmp_path / "a.txt"], tmp_path)
    assert first.completed == [(tmp_path / "a.txt", tmp_path / "a (1).txt")]
    assert second.completed == [(tmp_path / "a.txt", tmp_path / "a (2).txt")]
    assert (tmp_path / "a (2).txt").read_text(encoding="utf-8") == "a.txt"


def test_copy_directory_recursively(tmp_path):
    make_tree(tmp_path, "src/docs/readme.md", "dest/")
    engine = FileOperationEngine()
    result = engine.copy([tmp_path / "src"], tmp_path / "dest")
    assert result.ok
    assert (tmp_path / "dest" / "src" / "docs" / "readme.md").exists()
    assert (tmp_path / "src" / "docs" / "readme.md").exists()


def test_copy_directory_into_itself_is_rejected(tmp_path):
    make_tree(tmp_path, "src/inner/")
    result = FileOperationEngine().copy([tmp_path / "src"], tmp_path / "src" / "inner")
    assert not result.ok
    assert result.failures[0][1].code == "copy_into_self"


def test_batch_continues_after_failure(tmp_path):
    make_tree(tmp_path, "a.txt", "b.txt", "dest/")
    engine = FileOperationEngine()
    result = engine.copy(
        [tmp_path / "missing.txt", tmp_path / "a.txt", tmp_path / "b.txt"],
        tmp_path / "dest",
    )
    assert [source.name for source, _ in result.completed] == ["a.txt", "b.txt"]
    assert len(result.failures) == 1
    failed_path, error = result.failures[0]
    assert failed_path.name == "missing.txt"
    assert isinstance(error, NotFoundError)
    assert result.attempted == 3
    assert "1 failed" in result.summary()


def test_batch_ignores_duplicate_sources(tmp_path):
    make_tree(tmp_path, "a.txt", "dest/")
    result = FileOperationEngine().copy([tmp_path / "a.txt", tmp_path / "a.txt"], tmp_path / "dest")
    assert len(result.completed) == 1


def test_move_relocates_and_disambiguates(tmp_path):
    make_tree(tmp_path, "a.txt", "dest/a.txt")
    result = FileOperationEngine().move([tmp_path / "a.txt"], tmp_path / "dest")
    assert result.completed == [(tmp_path / "a.txt", tmp_path / "dest" / "a (1).txt")]
    assert not (tmp_path / "a.txt").exists()


def test_move_within_same_directory_is_a_no_op(tmp_path):
    make_tree(tmp_path, "a.txt")
    result = FileOperationEngine().move([tmp_path / "a.txt"], tmp_path)
    assert result.completed == [(tmp_path / "a.txt", tmp_path / "a.txt")]
    assert sorted(path.name for path in tmp_path.iterdir()) == ["a.txt"]


def test_delete_removes_files_and_trees_and_reports_missing(tmp_path):
    make_tree(tmp_path, "a.txt", "tree/nested/file.txt")
    result = FileOperationEngine().delete(
        [tmp_path / "a.txt", tmp_path / "tree", tmp_path / "ghost"]
    )
    assert not (tmp_path / "a.txt").exists()
    assert not (tmp_path / "tree").exists()
    assert [path.name for path, _ in result.failures] == ["ghost"]
    assert result.failures[0][1].code == "not_found"


def test_create_file_and_directory(tmp_path):
    engine = FileOperationEngine()
    created = engine.create_file(tmp_path / "nested" / "new.txt")
    assert created.is_file()
    folder = engine.create_directory(tmp_path / "folder")
    assert folder.is_dir()


def test_create_existing_raises_already_exists(tmp_path):
    make_tree(tmp_path, "a.txt", "folder/")
    engine = FileOperationEngine()
    with pytest.raises(AlreadyExistsError):
        engine.create_file(tmp_path / "a.txt")
    with pytest.raises(AlreadyExistsError):
        engine.create_directory(tmp_path / "folder")


def test_rename_rules(tmp_path):
    make_tree(tmp_path, "a.txt", "b.txt")
    engine = FileOperationEngine()
    assert engine.rename(tmp_path / "a.txt", "c.txt") == tmp_path / "c.txt"
    with pytest.raises(AlreadyExistsError):
        engine.rename(tmp_path / "c.txt", "b.txt")
    with pytest.raises(NotFoundError):
        engine.rename(tmp_path / "a.txt", "d.txt")
    with pytest.raises(JumperError) as excinfo:
        engine.rename(tmp_path / "b.txt", "sub/dir.txt")
    assert excinfo.value.code == "invalid_name"
