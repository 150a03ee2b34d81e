"""Tests for building, querying and persisting ConservationScoreMap."""
import json

import pytest

from conservation.errors import ScoreParseError
from conservation.keys import ResidueKey
from conservation.score_map import ConservationScoreMap, align_chain
from conservation.score_parser import ScoreRecord
from utils.pdb_handler import ChainView, ResidueView, StructureView

from conftest import write_jsd


def chain(chain_id, seq, start=1):
    return ChainView(chain_id, tuple(
        ResidueView(letter, ResidueKey(chain_id, start + i)) for i, letter in enumerate(seq)
    ))


def records(pairs):
    return [ScoreRecord(letter, score, i) for i, (letter, score) in enumerate(pairs)]


def test_exact_match_assigns_positionally():
    c = chain("A", "MKVL")
    pairs = align_chain(c.residues, records([("M", 0.1), ("K", 0.2), ("V", 0.3), ("L", 0.4)]))
    scores = ConservationScoreMap.from_pairs(pairs)
    assert scores.score(c.residues[2].key) == 0.3
    assert scores.size() == 4


def test_gapped_match_leaves_unmatched_residues_unscored():
    c = chain("A", "MKVLG")
    scores = ConservationScoreMap.from_pairs(
        align_chain(c.residues, records([("M", 0.1), ("K", 0.2), ("L", 0.4)]))
    )
    keys = [r.key for r in c.residues]
    assert [scores.score(k) for k in keys] == [0.1, 0.2, 0.0, 0.4, 0.0]
    assert keys[2] not in scores
    assert keys[4] not in scores
    assert scores.size() == 3


def test_absent_key_scores_zero():
    assert ConservationScoreMap().score(ResidueKey("Z", 99)) == 0.0


def test_map_is_read_only():
    scores = ConservationScoreMap.from_pairs([(ResidueKey("A", 1), 0.5)])
    with pytest.raises(TypeError):
        scores.score_map[ResidueKey("A", 2)] = 1.0  # type: ignore[index]


def _structure(tmp_path, *chains):
    return StructureView(tmp_path / "1abc.pdb", tuple(chains))


def test_from_files_builds_all_chains(tmp_path):
    write_jsd(tmp_path / "a.scores", [("M", 0.1), ("K", 0.2), ("V", 0.3)])
    write_jsd(tmp_path / "b.scores", [("G", 0.9), ("W", -2.0)])
    files = {"A": tmp_path / "a.scores", "B": tmp_path / "b.scores"}
    structure = _structure(tmp_path, chain("A", "MKV"), chain("B", "GW"), ChainView("W", ()))
    scores = ConservationScoreMap.from_files(structure, files.get)
    assert scores.size() == 5
    assert scores.score(ResidueKey("A", 3)) == 0.3
    assert scores.score(ResidueKey("B", 1)) == 0.9
    assert scores.score(ResidueKey("B", 2)) == 0.0


def test_from_files_skips_missing_files(tmp_path):
    structure = _structure(tmp_path, chain("A", "MKV"), chain("B", "GW"))
    files = {"A": tmp_path / "missing.scores"}
    assert ConservationScoreMap.from_files(structure, files.get).size() == 0


def test_from_files_blank_chain_is_requested_as_default(tmp_path):
    write_jsd(tmp_path / "a.scores", [("M", 0.1), ("K", 0.2)])
    requested = []

    def resolve(chain_id):
        requested.append(chain_id)
        return tmp_path / "a.scores"

    structure = _structure(tmp_path, chain(" ", "MK"))
    scores = ConservationScoreMap.from_files(structure, resolve)
    assert requested == ["A"]
    # keys keep the chain id the structure reported
    assert scores.score(ResidueKey(" ", 2)) == 0.2


def test_from_files_propagates_parse_errors(tmp_path):
    (tmp_path / "a.scores").write_text("0\t?\tM\n", encoding="utf-8")
    structure = _structure(tmp_path, chain("A", "M"))
    with pytest.raises(ScoreParseError):
        ConservationScoreMap.from_files(structure, lambda _: tmp_path / "a.scores")


def test_json_round_trip(tmp_path):
    original = ConservationScoreMap.from_pairs([
        (ResidueKey("A", 1), 0.1),
        (ResidueKey("A", 27, "A"), 1 / 3),
        (ResidueKey(" ", -4), 0.0),
        (ResidueKey("AB", 1000), 123456.789012345),
    ])
    path = tmp_path / "out" / "scores.json"
    original.to_json(path)
    restored = ConservationScoreMap.from_json(path)
    assert restored == original
    for key in original.score_map:
        assert restored.score(key) == original.score(key)


def test_json_is_a_flat_object(tmp_path):
    path = tmp_path / "scores.json"
    ConservationScoreMap.from_pairs([(ResidueKey("A", 5, "B"), 0.25)]).to_json(path)
    assert json.loads(path.read_text(encoding="utf-8")) == {"A:5:B": 0.25}


def test_from_json_rejects_non_object(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        ConservationScoreMap.from_json(path)


def test_negative_scores_are_never_stored(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"A:1:": -2.5, "A:2:": 0.75}), encoding="utf-8")
    scores = ConservationScoreMap.from_json(path)
    assert scores.score(ResidueKey("A", 1)) == 0.0
    assert scores.score(ResidueKey("A", 2)) == 0.75
    assert ConservationScoreMap({ResidueKey("B", 1): -1}).score(ResidueKey("B", 1)) == 0.0
    assert all(v >= 0 for v in ConservationScoreMap.from_pairs([(ResidueKey("C", 1), -0.1)]).score_map.values())


def test_from_files_reuses_parsed_records(tmp_path, monkeypatch):
    import conservation.score_map as score_map_module

    def fail(*args, **kwargs):
        raise AssertionError("score file read twice")

    monkeypatch.setattr(score_map_module, "parse_score_file", fail)
    path = tmp_path / "a.scores"
    path.write_text("", encoding="utf-8")
    parsed = {path: records([("M", 0.1), ("K", 0.2)])}
    structure = _structure(tmp_path, chain("A", "MK"))
    scores = ConservationScoreMap.from_files(structure, lambda _: path, parsed=parsed)
    assert scores.score(ResidueKey("A", 2)) == 0.2
