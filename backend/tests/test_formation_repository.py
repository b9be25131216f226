"""Tests for the formation template repository."""
import json

import pytest

from pitchside.repositories.formation_repository import FormationRepository


@pytest.fixture
def repository():
    return FormationRepository()


def test_bundled_templates(repository):
    ids = [t["id"] for t in repository.list_templates()]
    assert ids == ["4-4-2", "4-3-3", "4-2-3-1", "3-5-2", "5-3-2"]
    assert all(t["slot_count"] == 11 for t in repository.list_templates())


@pytest.mark.parametrize("template_id", ["4-4-2", "4-3-3", "4-2-3-1", "3-5-2", "5-3-2"])
def test_templates_have_one_keeper(repository, template_id):
    formation = repository.get_template(template_id)
    assert len(formation.slots) == 11
    assert [s.category for s in formation.slots].count("GK") == 1
    assert formation.bound_player_ids == []
    assert all(0 <= s.position.x <= 100 and 0 <= s.position.y <= 100 for s in formation.slots)


def test_get_template_returns_fresh_copies(repository):
    first = repository.get_template("4-4-2")
    second = repository.get_template("4-4-2")
    assert first.id != second.id
    assert repository.get_template("4-4-2", formation_id="mine").id == "mine"


def test_unknown_template(repository):
    assert repository.get_template("2-3-5") is None
    assert not repository.has_template("2-3-5")


def test_missing_file(tmp_path):
    repository = FormationRepository(tmp_path)
    assert repository.list_templates() == []


def test_templates_with_unknown_roles_are_skipped(tmp_path):
    data = {
        "formations": [
            {"id": "ok", "slots": [{"id": "s1", "role": "gk", "x": 50, "y": 5}]},
            {"id": "bad", "slots": [{"id": "s1", "role": "libero", "x": 50, "y": 5}]},
        ]
    }
    (tmp_path / "formations.json").write_text(json.dumps(data))
    repository = FormationRepository(tmp_path)
    assert repository.has_template("ok")
    assert not repository.has_template("bad")
    assert repository.get_template("ok").name == "ok"
