"""Tests for the flat-file codec — field parsing, load, save."""

from pathlib import Path

import pytest

from tests.conftest import write_records
from vetclinic.domain.owners import Owner
from vetclinic.domain.sample import seed_sample_data
from vetclinic.domain.types import AnimalKind
from vetclinic.infrastructure.flatfile import (
    AGE_MAX,
    AGE_MIN,
    LoadReport,
    MalformedAgeError,
    RecordReadError,
    RecordWriteError,
    StoragePaths,
    decode_trait,
    encode_animal,
    encode_owner,
    load_records,
    parse_age,
    parse_flag,
    read_lines,
    save_records,
    unsafe_fields,
)
from vetclinic.infrastructure.repository import ClinicRepository


def _paths(data_dir: Path) -> StoragePaths:
    return StoragePaths(
        animals=data_dir / "animals.txt",
        owners=data_dir / "owners.txt",
        relations=data_dir / "relations.txt",
    )


def _snapshot(repo: ClinicRepository) -> tuple[list, list]:
    animals = [(str(a.kind), a.name, a.age, a.trait) for a in repo.animals]
    owners = [
        (o.name, o.id, o.phone_number, [a.name for a in repo.pets_of(o)]) for o in repo.owners
    ]
    return animals, owners


class TestParseAge:
    @pytest.mark.parametrize(("text", "expected"), [("3", 3), ("0", 0), ("-2", -2), ("+7", 7)])
    def test_integers(self, text: str, expected: int) -> None:
        assert parse_age(text) == expected

    @pytest.mark.parametrize("text", ["", "three", "3.5", " 3", "3a"])
    def test_rejects_non_integers(self, text: str) -> None:
        with pytest.raises(ValueError, match="invalid age"):
            parse_age(text)

    def test_accepts_32_bit_bounds(self) -> None:
        assert parse_age(str(AGE_MAX)) == 2_147_483_647
        assert parse_age(str(AGE_MIN)) == -2_147_483_648

    @pytest.mark.parametrize("text", ["2147483648", "-2147483649", "9999999999"])
    def test_rejects_out_of_range(self, text: str) -> None:
        with pytest.raises(ValueError, match="invalid age"):
            parse_age(text)


class TestParseFlag:
    @pytest.mark.parametrize("text", ["true", "TRUE", "True"])
    def test_true(self, text: str) -> None:
        assert parse_flag(text) is True

    @pytest.mark.parametrize("text", ["false", "yes", "1", ""])
    def test_anything_else_is_false(self, text: str) -> None:
        assert parse_flag(text) is False


class TestFieldCodecs:
    def test_encode_animal_lowercases_flags(self, repo: ClinicRepository) -> None:
        cat = repo.create_animal(AnimalKind.CAT, "Miso", 2, True)
        bird = repo.create_animal(AnimalKind.BIRD, "Kiwi", 1, False)
        assert encode_animal(cat) == "Cat,Miso,2,true"
        assert encode_animal(bird) == "Bird,Kiwi,1,false"

    def test_encode_dog(self, repo: ClinicRepository) -> None:
        dog = repo.create_animal(AnimalKind.DOG, "Buddy", 3, "Golden Retriever")
        assert encode_animal(dog) == "Dog,Buddy,3,Golden Retriever"

    def test_decode_trait(self) -> None:
        assert decode_trait(AnimalKind.DOG, "true") == "true"
        assert decode_trait(AnimalKind.CAT, "true") is True
        assert decode_trait(AnimalKind.BIRD, "nope") is False

    def test_unsafe_fields(self) -> None:
        assert unsafe_fields(name="A,B", id="1", phone_number="05\n1") == ["name", "phone_number"]
        assert unsafe_fields(name="Plain") == []


class TestReadLines:
    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert read_lines(tmp_path / "nope.txt") is None

    def test_splits_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "f.txt"
        path.write_text("a\r\nb\nc", encoding="utf-8")
        assert read_lines(path) == ["a", "b", "c"]

    def test_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "owners.txt"
        path.write_bytes(b"Jos\xe9,1,050\n")
        with pytest.raises(RecordReadError, match="Cannot read owners.txt") as exc_info:
            read_lines(path)
        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_unknown_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "owners.txt"
        path.write_text("Maya,3,050\n", encoding="utf-8")
        with pytest.raises(RecordReadError):
            read_lines(path, encoding="no-such-codec")


class TestLoadRecords:
    def test_all_files_missing(self, data_dir: Path, repo: ClinicRepository) -> None:
        report = load_records(repo, _paths(data_dir))
        assert repo.is_empty()
        assert report.files_missing == ["owners.txt", "animals.txt", "relations.txt"]

    def test_loads_and_links(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(
            data_dir,
            animals=["Dog,Rex,4,Beagle", "Cat,Luna,2,true", "Bird,Kiwi,1,false"],
            owners=["Maya,3,0503333333"],
            relations=["Maya,Rex", "Maya,Kiwi"],
        )
        report = load_records(repo, _paths(data_dir))

        assert (report.owners, report.animals, report.relations) == (1, 3, 2)
        animals, owners = _snapshot(repo)
        assert animals == [
            ("Dog", "Rex", 4, "Beagle"),
            ("Cat", "Luna", 2, True),
            ("Bird", "Kiwi", 1, False),
        ]
        assert owners == [("Maya", "3", "0503333333", ["Rex", "Kiwi"])]

    def test_skips_malformed_lines(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(
            data_dir,
            animals=["Dog,Rex,4,Beagle", "Dog,Short,4", "", "Fish,Nemo,1,true"],
            owners=["Maya,3", "Ali,4,0504444444"],
            relations=["Ali", "Ali,Rex", "Ghost,Rex", "Ali,Ghost"],
        )
        report = load_records(repo, _paths(data_dir))

        assert report.skipped == {"owners": 1, "animals": 3, "relations": 3}
        animals, owners = _snapshot(repo)
        assert animals == [("Dog", "Rex", 4, "Beagle")]
        assert owners == [("Ali", "4", "0504444444", ["Rex"])]

    def test_extra_fields_ignored(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(data_dir, animals=["Dog,Rex,4,Beagle,extra"], owners=["Ali,4,05,x"])
        load_records(repo, _paths(data_dir))
        animals, owners = _snapshot(repo)
        assert animals == [("Dog", "Rex", 4, "Beagle")]
        assert owners == [("Ali", "4", "05", [])]

    def test_kind_tag_is_case_sensitive(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(data_dir, animals=["dog,Rex,4,Beagle"])
        report = load_records(repo, _paths(data_dir))
        assert repo.animals == []
        assert report.skipped["animals"] == 1

    def test_malformed_age_raises(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(data_dir, animals=["Dog,Rex,4,Beagle", "Cat,Luna,two,true"])
        with pytest.raises(MalformedAgeError) as exc_info:
            load_records(repo, _paths(data_dir))
        assert exc_info.value.line_number == 2
        assert exc_info.value.value == "two"
        assert "animals.txt line 2" in str(exc_info.value)

    def test_relation_last_one_wins(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(
            data_dir,
            animals=["Dog,Rex,4,Beagle"],
            owners=["Ali,4,05", "Maya,3,05"],
            relations=["Ali,Rex", "Maya,Rex"],
        )
        load_records(repo, _paths(data_dir))
        _, owners = _snapshot(repo)
        assert owners == [("Ali", "4", "05", []), ("Maya", "3", "05", ["Rex"])]

    def test_relation_resolves_first_name_match(
        self, data_dir: Path, repo: ClinicRepository
    ) -> None:
        write_records(
            data_dir,
            animals=["Dog,Rex,4,Beagle", "Cat,Rex,2,false"],
            owners=["Ali,4,05"],
            relations=["Ali,Rex"],
        )
        load_records(repo, _paths(data_dir))
        pets = repo.pets_of(repo.owners[0])
        assert [a.kind for a in pets] == [AnimalKind.DOG]

    def test_clears_existing_state(self, data_dir: Path, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        write_records(data_dir, owners=["Ali,4,05"])
        load_records(repo, _paths(data_dir))
        assert repo.animals == []
        assert [o.name for o in repo.owners] == ["Ali"]

    def test_report_to_dict(self) -> None:
        report = LoadReport(owners=1, files_missing=["animals.txt"])
        data = report.to_dict()
        assert data["owners"] == 1
        assert data["files_missing"] == ["animals.txt"]
        assert data["skipped"] == {"owners": 0, "animals": 0, "relations": 0}


class TestSaveRecords:
    def test_writes_three_files(self, data_dir: Path, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        counts = save_records(repo, _paths(data_dir))

        assert counts == {"animals": 3, "owners": 2, "relations": 3}
        assert (data_dir / "animals.txt").read_text(encoding="utf-8") == (
            "Dog,Buddy,3,Golden Retriever\nCat,Miso,2,true\nBird,Twitter,1,false\n"
        )
        assert (data_dir / "owners.txt").read_text(encoding="utf-8") == (
            "John,1,0501111111\nSarah,2,0502222222\n"
        )
        assert (data_dir / "relations.txt").read_text(encoding="utf-8") == (
            "John,Buddy\nSarah,Miso\nSarah,Twitter\n"
        )

    def test_empty_repo_truncates(self, data_dir: Path, repo: ClinicRepository) -> None:
        write_records(data_dir, animals=["Dog,Rex,4,Beagle"])
        save_records(repo, _paths(data_dir))
        assert (data_dir / "animals.txt").read_text(encoding="utf-8") == ""

    def test_creates_missing_directory(self, tmp_path: Path, repo: ClinicRepository) -> None:
        target = tmp_path / "nested" / "dir"
        seed_sample_data(repo)
        save_records(repo, _paths(target))
        assert (target / "owners.txt").is_file()

    def test_round_trip(self, data_dir: Path) -> None:
        original = ClinicRepository()
        seed_sample_data(original)
        rex = original.create_animal(AnimalKind.DOG, "Rex", -1, "")
        original.assign_owner(rex.id, original.owners[1])
        original.create_animal(AnimalKind.CAT, "Stray", 5, False)

        save_records(original, _paths(data_dir))
        reloaded = ClinicRepository()
        load_records(reloaded, _paths(data_dir))

        assert _snapshot(reloaded) == _snapshot(original)

    def test_write_failure_reports_progress(self, data_dir: Path, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        (data_dir / "owners.txt").mkdir()
        with pytest.raises(RecordWriteError) as exc_info:
            save_records(repo, _paths(data_dir))
        assert exc_info.value.path == data_dir / "owners.txt"
        assert exc_info.value.written == [data_dir / "animals.txt"]
        assert (data_dir / "animals.txt").is_file()
        assert not (data_dir / "relations.txt").exists()

    def test_encode_failure_is_write_error(self, data_dir: Path, repo: ClinicRepository) -> None:
        repo.add_owner(Owner(name="Jos\u00e9", id="1", phone_number="050"))
        paths = StoragePaths(
            animals=data_dir / "animals.txt",
            owners=data_dir / "owners.txt",
            relations=data_dir / "relations.txt",
            encoding="ascii",
        )
        with pytest.raises(RecordWriteError, match="owners.txt") as exc_info:
            save_records(repo, paths)
        assert exc_info.value.path == data_dir / "owners.txt"
        assert exc_info.value.written == [data_dir / "animals.txt"]
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


class TestStoragePaths:
    def test_from_settings(self, data_dir: Path) -> None:
        from vetclinic.config.settings import ClinicSettings

        paths = StoragePaths.from_settings(ClinicSettings.from_cli(data_dir=data_dir))
        assert paths.all() == [
            data_dir / "animals.txt",
            data_dir / "owners.txt",
            data_dir / "relations.txt",
        ]
        assert paths.encoding == "utf-8"
