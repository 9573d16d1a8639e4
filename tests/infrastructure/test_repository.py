"""Tests for ClinicRepository: lookups, relinking, and cascade delete."""

from __future__ import annotations

from vetclinic.domain.owners import Owner
from vetclinic.domain.sample import seed_sample_data
from vetclinic.domain.types import AnimalKind
from vetclinic.infrastructure.repository import ClinicRepository


def _owners_holding(repo: ClinicRepository, animal_id: str) -> list[str]:
    return [o.name for o in repo.owners if animal_id in o.pet_ids]


def _with_owner(repo: ClinicRepository, name: str) -> Owner:
    owner = Owner(name=name, id=name.lower(), phone_number="050")
    repo.add_owner(owner)
    return owner


class TestCreateAnimal:
    def test_assigns_sequential_ids(self, repo: ClinicRepository) -> None:
        a = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        b = repo.create_animal(AnimalKind.CAT, "Tom", 4, False)
        assert (a.id, b.id) == ("ANM-0001", "ANM-0002")
        assert repo.animals == [a, b]

    def test_ids_not_reused_after_clear(self, repo: ClinicRepository) -> None:
        repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        repo.clear()
        assert repo.create_animal(AnimalKind.DOG, "Max", 1, "Pug").id == "ANM-0002"


class TestLookup:
    def test_find_by_name_returns_first_match(self, repo: ClinicRepository) -> None:
        first = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        repo.create_animal(AnimalKind.CAT, "Rex", 4, True)
        assert repo.find_animal_by_name("Rex") is first

    def test_find_missing_returns_none(self, repo: ClinicRepository) -> None:
        assert repo.find_animal_by_name("Ghost") is None
        assert repo.find_owner_by_name("Ghost") is None
        assert repo.get_animal("ANM-0404") is None

    def test_find_owner_of(self, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        miso = repo.find_animal_by_name("Miso")
        assert miso is not None
        owner = repo.find_owner_of(miso.id)
        assert owner is not None and owner.name == "Sarah"

    def test_find_owner_of_unowned(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        assert repo.find_owner_of(rex.id) is None

    def test_reverse_lookup_sees_later_mutations(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        owner = _with_owner(repo, "Ana")
        assert repo.find_owner_of(rex.id) is None
        owner.add_pet(rex.id)
        assert repo.find_owner_of(rex.id) is owner

    def test_pets_of_preserves_order(self, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        sarah = repo.find_owner_by_name("Sarah")
        assert sarah is not None
        assert [a.name for a in repo.pets_of(sarah)] == ["Miso", "Twitter"]


class TestAssignOwner:
    def test_detach_then_attach(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        o1 = _with_owner(repo, "One")
        o2 = _with_owner(repo, "Two")
        _with_owner(repo, "Three")
        repo.assign_owner(rex.id, o1)

        previous = repo.assign_owner(rex.id, o2)

        assert previous is o1
        assert rex.id not in o1.pet_ids
        assert rex.id in o2.pet_ids
        assert _owners_holding(repo, rex.id) == ["Two"]

    def test_unowned_animal(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        owner = _with_owner(repo, "One")
        assert repo.assign_owner(rex.id, owner) is None
        assert owner.pet_ids == [rex.id]

    def test_reassign_to_same_owner_keeps_single_entry(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        owner = _with_owner(repo, "One")
        repo.assign_owner(rex.id, owner)
        repo.assign_owner(rex.id, owner)
        assert owner.pet_ids == [rex.id]


class TestDeleteAnimal:
    def test_detaches_and_removes(self, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        buddy = repo.find_animal_by_name("Buddy")
        assert buddy is not None

        owner = repo.delete_animal(buddy.id)

        assert owner is not None and owner.name == "John"
        assert owner.pet_ids == []
        assert repo.get_animal(buddy.id) is None
        assert len(repo.animals) == 2

    def test_unowned(self, repo: ClinicRepository) -> None:
        rex = repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        assert repo.delete_animal(rex.id) is None
        assert repo.animals == []


class TestDeleteOwner:
    def test_cascade_removes_exactly_its_pets(self, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        sarah = repo.find_owner_by_name("Sarah")
        assert sarah is not None
        pets = list(sarah.pet_ids)

        removed, animal_ids = repo.delete_owner(sarah)

        assert removed is True
        assert animal_ids == pets
        assert [a.name for a in repo.animals] == ["Buddy"]
        assert [o.name for o in repo.owners] == ["John"]
        john = repo.owners[0]
        assert len(repo.pets_of(john)) == 1

    def test_owner_without_pets(self, repo: ClinicRepository) -> None:
        owner = _with_owner(repo, "Lonely")
        repo.create_animal(AnimalKind.DOG, "Rex", 2, "Beagle")
        removed, animal_ids = repo.delete_owner(owner)
        assert removed is True
        assert animal_ids == []
        assert len(repo.animals) == 1

    def test_owner_not_in_collection(self, repo: ClinicRepository) -> None:
        stray = Owner(name="Stray", id="0", phone_number="0")
        removed, _ = repo.delete_owner(stray)
        assert removed is False

    def test_removes_by_identity(self, repo: ClinicRepository) -> None:
        first = _with_owner(repo, "Twin")
        second = _with_owner(repo, "Twin")
        repo.delete_owner(second)
        assert repo.owners == [first]
        assert repo.owners[0] is first


class TestSampleData:
    def test_seed(self, repo: ClinicRepository) -> None:
        seed_sample_data(repo)
        assert [(o.name, o.id, o.phone_number) for o in repo.owners] == [
            ("John", "1", "0501111111"),
            ("Sarah", "2", "0502222222"),
        ]
        assert [(str(a.kind), a.name, a.age, a.trait) for a in repo.animals] == [
            ("Dog", "Buddy", 3, "Golden Retriever"),
            ("Cat", "Miso", 2, True),
            ("Bird", "Twitter", 1, False),
        ]
        john, sarah = repo.owners
        assert [a.name for a in repo.pets_of(john)] == ["Buddy"]
        assert [a.name for a in repo.pets_of(sarah)] == ["Miso", "Twitter"]
